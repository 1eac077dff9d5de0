import asyncio
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from classhub.core import config
from classhub.core.errors import ClassHubError
from classhub.core.logging_middleware import LoggingMiddleware
from classhub.db.init_db import init_db
from classhub.routers.assignments import router as assignments_router
from classhub.routers.auth import router as auth_router
from classhub.routers.classrooms import router as classrooms_router
from classhub.routers.submissions import router as submissions_router
from classhub.tasks.reminders import run_reminder_loop

logging.basicConfig(level=logging.DEBUG if config.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="ClassHub")

# Middleware
app.add_middleware(LoggingMiddleware)


# Error envelope: {"success": false, "message": ...}
@app.exception_handler(ClassHubError)
async def classhub_error_handler(request: Request, exc: ClassHubError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": f"{field}: {message}" if field else message},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    content = {"success": False, "message": "Internal server error"}
    if config.DEBUG:
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
async def on_startup():
    init_db()
    config.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    if config.REMINDERS_ENABLED:
        app.state.reminder_task = asyncio.create_task(run_reminder_loop())
        logger.info("due-date reminder sweep scheduled daily at %02d:00 UTC", config.REMINDER_HOUR)


@app.on_event("shutdown")
async def on_shutdown():
    task = getattr(app.state, "reminder_task", None)
    if task is not None:
        task.cancel()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(classrooms_router, prefix="/classrooms", tags=["classrooms"])
app.include_router(assignments_router, prefix="/assignments", tags=["assignments"])
app.include_router(submissions_router, prefix="/assignments", tags=["submissions"])

# Stored attachments
app.mount(
    config.UPLOAD_URL_PREFIX,
    StaticFiles(directory=str(config.UPLOAD_DIR), check_dir=False),
    name="uploads",
)
