"""
Twoogle Data Models

Dataclasses representing database entities.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    """Registered user (or the shared guest account)."""
    username: str = ""
    password_hash: Optional[str] = None
    message_count: int = 0
    has_profile: bool = False
    profile_visible: bool = True
    gender: Optional[str] = None
    birth_date: Optional[str] = None
    email: Optional[str] = None
    about_me: Optional[str] = None
    created_at_us: int = 0


@dataclass
class Profile:
    """Editable profile fields of a user."""
    gender: Optional[str] = None
    birth_date: Optional[str] = None
    email: Optional[str] = None
    about_me: Optional[str] = None
    visible: bool = True


@dataclass
class Message:
    """Posted message or reply."""
    id: Optional[int] = None
    message_id: str = ""  # <username>_<counter>
    created_at_us: int = 0
    username: str = ""
    tag: Optional[str] = None
    is_reply: bool = False
    replied_to_username: Optional[str] = None
    contents: str = ""
    is_private: bool = False

    @property
    def counter(self) -> int:
        """Numeric suffix of the message id."""
        return int(self.message_id.rsplit("_", 1)[1])


@dataclass
class Subscription:
    """Directed follow relation."""
    id: Optional[int] = None
    username: str = ""
    subscribed_to_username: str = ""


@dataclass
class TagCount:
    """A tag and the number of public messages carrying it."""
    tag: str
    count: int
