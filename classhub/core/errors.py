from fastapi import status


class ClassHubError(Exception):
    """Base class for expected, caller-recoverable failures.

    Each subclass carries the HTTP status it is rendered with by the
    exception handlers in ``classhub.main``.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(ClassHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class AuthorizationDenied(ClassHubError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(ClassHubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationFailed(ClassHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class UpstreamFailure(ClassHubError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service failed"
