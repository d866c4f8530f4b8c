"""Twoogle Core Module - Service, auth, composer and feeds."""

from .errors import (
    TwoogleError,
    ValidationError,
    StorageError,
    InvalidCredentials,
    UnknownUser,
    UsernameTaken,
    MessageTooLong,
    EmptyMessage,
    ProfileHidden,
    AuthenticationRequired,
    RegistrationClosed,
)
from .service import MessageService
from .session import Session

__all__ = [
    "MessageService",
    "Session",
    "TwoogleError",
    "ValidationError",
    "StorageError",
    "InvalidCredentials",
    "UnknownUser",
    "UsernameTaken",
    "MessageTooLong",
    "EmptyMessage",
    "ProfileHidden",
    "AuthenticationRequired",
    "RegistrationClosed",
]
