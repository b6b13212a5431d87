"""Client-side errors, one class per failure the server can report"""

from typing import Optional


class ApiError(Exception):
    """The server answered with ``success: false`` or a non-2xx status"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class UnauthenticatedError(ApiError):
    """401. The stored credential has been purged; log in again."""


class ForbiddenError(ApiError):
    """403"""


class NotFoundError(ApiError):
    """404"""


class RequestRejectedError(ApiError):
    """400: validation or business-rule failure"""


class ConflictError(ApiError):
    """409: concurrent modification, safe to retry"""


class ServerError(ApiError):
    """5xx"""


class NetworkError(ApiError):
    """Server unreachable or timed out"""


class MalformedResponseError(ApiError):
    """Body did not match the expected envelope or payload shape"""


_STATUS_ERRORS = {
    400: RequestRejectedError,
    401: UnauthenticatedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def error_for_status(status_code: int, message: str) -> ApiError:
    if status_code >= 500:
        return ServerError(message, status_code)
    return _STATUS_ERRORS.get(status_code, ApiError)(message, status_code)
