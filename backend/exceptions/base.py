from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None):
        if detail:
            self.detail = detail
        super().__init__(self.detail)


class NotAuthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Not allowed"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class AlreadyExists(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Already exists"


class InvalidTransition(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Invalid state transition"


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid input"


class RemoteError(AppError):
    """A call to the API failed: network error or a rejected request."""

    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "Remote call failed"

    def __init__(self, detail: str | None = None, remote_status: int | None = None):
        self.remote_status = remote_status
        super().__init__(detail)
