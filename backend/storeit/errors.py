# storeit/errors.py
import logging
from typing import NoReturn

logger = logging.getLogger(__name__)


class StoreItError(Exception):
    """Base class for every error an action can raise."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Something went wrong"):
        super().__init__(message)
        self.message = message


class InvalidInputError(StoreItError):
    """A required field is missing or malformed. Raised before any side effect."""

    status_code = 400
    code = "INVALID_INPUT"


class UnauthenticatedError(StoreItError):
    """No session, or the session does not resolve to a user."""

    status_code = 401
    code = "UNAUTHENTICATED"


class PermissionDeniedError(StoreItError):
    status_code = 403
    code = "PERMISSION_DENIED"


class OtpDispatchError(StoreItError):
    """The platform did not hand back a user id for the email token."""

    status_code = 502
    code = "OTP_DISPATCH_FAILED"


class SessionCreationError(StoreItError):
    """The platform did not hand back a session secret."""

    status_code = 502
    code = "SESSION_CREATION_FAILED"


class PlatformError(StoreItError):
    """Lower level failure from the document store, object store or accounts."""

    status_code = 500
    code = "PLATFORM_ERROR"


class NotFoundError(PlatformError):
    status_code = 404
    code = "NOT_FOUND"


class InvalidQueryError(PlatformError):
    status_code = 400
    code = "INVALID_QUERY"


def handle_error(error: Exception, message: str) -> NoReturn:
    """Log ``error`` and raise a fresh error of the same kind carrying only ``message``.

    Errors outside the taxonomy surface as ``PlatformError``. The original
    error stays reachable through ``__cause__`` but its text never reaches
    the caller.
    """
    logger.error("%s: %s", message, error, exc_info=error)
    kind = type(error) if isinstance(error, StoreItError) else PlatformError
    raise kind(message) from error
