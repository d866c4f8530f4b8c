"""
Twoogle User Database Operations

CRUD operations for users, profiles and per-user message counters.
"""

import time
import logging
from typing import Optional

from .connection import Database
from .models import User, Profile

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user-related database operations."""

    def __init__(self, db: Database):
        self.db = db

    def create_user(
        self,
        username: str,
        password_hash: Optional[str],
        profile: Optional[Profile] = None
    ) -> User:
        """Create a new user with a zero message count."""
        now_us = int(time.time() * 1_000_000)
        has_profile = profile is not None
        profile = profile or Profile()

        self.db.execute("""
            INSERT INTO users (
                username, password_hash, message_count, has_profile,
                profile_visible, gender, birth_date, email, about_me,
                created_at_us
            ) VALUES (?, ?, 0, ?, ?, ?, ?, ?, ?, ?)
        """, (
            username.lower(),
            password_hash,
            1 if has_profile else 0,
            1 if profile.visible else 0,
            profile.gender,
            profile.birth_date,
            profile.email,
            profile.about_me,
            now_us
        ))

        return User(
            username=username.lower(),
            password_hash=password_hash,
            has_profile=has_profile,
            profile_visible=profile.visible,
            gender=profile.gender,
            birth_date=profile.birth_date,
            email=profile.email,
            about_me=profile.about_me,
            created_at_us=now_us
        )

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username (case-insensitive)."""
        row = self.db.fetchone(
            "SELECT * FROM users WHERE username = ?",
            (username.lower(),)
        )
        return self._row_to_user(row) if row else None

    def user_exists(self, username: str) -> bool:
        row = self.db.fetchone(
            "SELECT 1 FROM users WHERE username = ?",
            (username.lower(),)
        )
        return row is not None

    def get_message_count(self, username: str) -> Optional[int]:
        """Get a user's current message counter, None if no such user."""
        row = self.db.fetchone(
            "SELECT message_count FROM users WHERE username = ?",
            (username.lower(),)
        )
        return row["message_count"] if row else None

    def set_message_count(self, username: str, count: int):
        """Write back a user's message counter."""
        self.db.execute(
            "UPDATE users SET message_count = ? WHERE username = ?",
            (count, username.lower())
        )

    def update_profile(self, username: str, profile: Profile) -> bool:
        """Create or replace a user's profile."""
        cursor = self.db.execute("""
            UPDATE users
            SET has_profile = 1, profile_visible = ?, gender = ?,
                birth_date = ?, email = ?, about_me = ?
            WHERE username = ?
        """, (
            1 if profile.visible else 0,
            profile.gender,
            profile.birth_date,
            profile.email,
            profile.about_me,
            username.lower()
        ))
        return cursor.rowcount > 0

    def clear_profile(self, username: str) -> bool:
        """Remove a user's profile; visibility resets to public."""
        cursor = self.db.execute("""
            UPDATE users
            SET has_profile = 0, profile_visible = 1, gender = NULL,
                birth_date = NULL, email = NULL, about_me = NULL
            WHERE username = ?
        """, (username.lower(),))
        return cursor.rowcount > 0

    def list_usernames(self) -> list[str]:
        """List all usernames in registration order."""
        rows = self.db.fetchall(
            "SELECT username FROM users ORDER BY created_at_us, username"
        )
        return [row["username"] for row in rows]

    def _row_to_user(self, row) -> User:
        """Convert database row to User object."""
        return User(
            username=row["username"],
            password_hash=row["password_hash"],
            message_count=row["message_count"],
            has_profile=bool(row["has_profile"]),
            profile_visible=bool(row["profile_visible"]),
            gender=row["gender"],
            birth_date=row["birth_date"],
            email=row["email"],
            about_me=row["about_me"],
            created_at_us=row["created_at_us"]
        )
