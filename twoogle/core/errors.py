"""
Twoogle Error Types

ValidationError is reported to the user and the session continues.
StorageError wraps a backing-store failure; it is logged where it is raised.
"""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Generator

logger = logging.getLogger(__name__)


class TwoogleError(Exception):
    """Base class for all service errors."""


class ValidationError(TwoogleError):
    """Request rejected; nothing was written."""


class InvalidCredentials(ValidationError):
    def __init__(self):
        super().__init__("Incorrect username and/or password.")


class UnknownUser(ValidationError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User '{username}' does not exist.")


class UsernameTaken(ValidationError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username '{username}' already exists.")


class MessageTooLong(ValidationError):
    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(
            f"Message is {length} characters; the limit is {limit}. "
            "Please shorten your message."
        )


class EmptyMessage(ValidationError):
    def __init__(self):
        super().__init__("Message cannot be empty.")


class ProfileHidden(ValidationError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Sorry, {username}'s profile is set to private.")


class AuthenticationRequired(ValidationError):
    def __init__(self, action: str = "do that"):
        super().__init__(f"Please login or register to {action}.")


class RegistrationClosed(ValidationError):
    def __init__(self):
        super().__init__("Registration is disabled.")


class StorageError(TwoogleError):
    """Backing store failure; the operation was aborted."""


@contextmanager
def storage_errors(action: str) -> Generator[None, None, None]:
    """Translate sqlite3 failures inside the block into StorageError."""
    try:
        yield
    except sqlite3.Error as e:
        logger.error(f"Storage error while trying to {action}: {e}")
        raise StorageError(f"Could not {action}; please try again later.") from e
