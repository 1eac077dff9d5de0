from datetime import timedelta
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Runtime settings, read from ``CLASSHUB_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="CLASSHUB_",
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DEBUG: bool = False

    # DEV default secret. Set CLASSHUB_SECRET_KEY in any real deployment.
    SECRET_KEY: str = "change-me-in-production"
    TOKEN_MINUTES: int = Field(default=1440, gt=0)

    DATABASE_URL: str = f"sqlite:///{BASE_DIR}/classhub.db"
    UPLOAD_DIR: Path = BASE_DIR / "uploads"

    # email is disabled unless SMTP credentials are present
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    MAIL_FROM: Optional[str] = None

    REMINDERS_ENABLED: bool = False
    REMINDER_HOUR: int = Field(default=8, ge=0, le=23)


settings = Settings()

DEBUG = settings.DEBUG

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE = timedelta(minutes=settings.TOKEN_MINUTES)

DATABASE_URL = settings.DATABASE_URL

# Attachment store
UPLOAD_DIR = settings.UPLOAD_DIR
UPLOAD_URL_PREFIX = "/uploads"
MAX_UPLOAD_FILES = 5
MAX_ASSIGNMENT_FILE_BYTES = 10 * 1024 * 1024
ALLOWED_UPLOAD_EXTENSIONS = {".pdf", ".zip", ".doc", ".docx", ".png", ".jpg", ".jpeg"}
ALLOWED_UPLOAD_CONTENT_TYPES = {
    "application/pdf",
    "application/zip",
    "application/x-zip-compressed",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/png",
    "image/jpeg",
}

# Notifier
SMTP_HOST = settings.SMTP_HOST
SMTP_PORT = settings.SMTP_PORT
SMTP_USER = settings.SMTP_USER
SMTP_PASSWORD = settings.SMTP_PASSWORD
MAIL_FROM = settings.MAIL_FROM or SMTP_USER

# Daily due-date reminder sweep
REMINDERS_ENABLED = settings.REMINDERS_ENABLED
REMINDER_HOUR = settings.REMINDER_HOUR

DEFAULT_POINTS = 100
