from .base import (
    AlreadyExists,
    AppError,
    InvalidTransition,
    NotAuthenticated,
    NotFound,
    PermissionDenied,
    RemoteError,
    ValidationError,
)
from .handlers import register_exception_handlers

__all__ = [
    "AlreadyExists",
    "AppError",
    "InvalidTransition",
    "NotAuthenticated",
    "NotFound",
    "PermissionDenied",
    "RemoteError",
    "ValidationError",
    "register_exception_handlers",
]
