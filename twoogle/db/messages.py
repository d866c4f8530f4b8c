"""
Twoogle Message Database Operations

Insert and query operations for messages. Limited queries return rows
newest-first; a message-id thread comes back oldest-first. Callers apply
their own display ordering.
"""

import time
import logging
from typing import Optional

from .connection import Database
from .models import Message, TagCount

logger = logging.getLogger(__name__)

NEWEST_FIRST = "ORDER BY created_at_us DESC, id DESC"
OLDEST_FIRST = "ORDER BY created_at_us ASC, id ASC"


class MessageRepository:
    """Repository for message-related database operations."""

    def __init__(self, db: Database):
        self.db = db

    def create_message(
        self,
        message_id: str,
        username: str,
        contents: str,
        tag: Optional[str] = None,
        replied_to_username: Optional[str] = None,
        is_private: bool = False,
        created_at_us: Optional[int] = None
    ) -> Message:
        """Insert a new message row."""
        now_us = created_at_us or int(time.time() * 1_000_000)
        is_reply = replied_to_username is not None

        cursor = self.db.execute("""
            INSERT INTO messages (
                message_id, created_at_us, username, tag, is_reply,
                replied_to_username, contents, is_private
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            message_id,
            now_us,
            username,
            tag,
            1 if is_reply else 0,
            replied_to_username,
            contents,
            1 if is_private else 0
        ))

        return Message(
            id=cursor.lastrowid,
            message_id=message_id,
            created_at_us=now_us,
            username=username,
            tag=tag,
            is_reply=is_reply,
            replied_to_username=replied_to_username,
            contents=contents,
            is_private=is_private
        )

    def get_by_message_id(self, message_id: str, viewer: Optional[str] = None) -> list[Message]:
        """
        Get every row sharing a message id (a message and its replies).

        Private rows are included only when authored by viewer.
        """
        rows = self.db.fetchall(f"""
            SELECT * FROM messages
            WHERE message_id = ? AND (is_private = 0 OR username = ?)
            {OLDEST_FIRST}
        """, (message_id.lower(), viewer or ""))
        return [self._row_to_message(row) for row in rows]

    def get_user_messages(
        self,
        username: str,
        limit: int,
        include_private: bool = False
    ) -> list[Message]:
        """Get a user's most recent messages."""
        private_clause = "" if include_private else "AND is_private = 0"
        rows = self.db.fetchall(f"""
            SELECT * FROM messages
            WHERE username = ? {private_clause}
            {NEWEST_FIRST}
            LIMIT ?
        """, (username.lower(), limit))
        return [self._row_to_message(row) for row in rows]

    def get_tag_messages(self, tag: str) -> list[Message]:
        """Get all public messages carrying a tag."""
        rows = self.db.fetchall(f"""
            SELECT * FROM messages
            WHERE tag = ? AND is_private = 0
            {NEWEST_FIRST}
        """, (tag.lower(),))
        return [self._row_to_message(row) for row in rows]

    def get_replies_to(self, username: str, limit: int) -> list[Message]:
        """Get the most recent replies addressed to a user."""
        rows = self.db.fetchall(f"""
            SELECT * FROM messages
            WHERE is_reply = 1 AND replied_to_username = ?
            {NEWEST_FIRST}
            LIMIT ?
        """, (username.lower(), limit))
        return [self._row_to_message(row) for row in rows]

    def get_tag_counts(self) -> list[TagCount]:
        """Count public tagged messages per tag, in order of first use."""
        rows = self.db.fetchall("""
            SELECT tag, COUNT(*) AS uses FROM messages
            WHERE tag IS NOT NULL AND is_private = 0
            GROUP BY tag
            ORDER BY MIN(id)
        """)
        return [TagCount(tag=row["tag"], count=row["uses"]) for row in rows]

    def _row_to_message(self, row) -> Message:
        """Convert database row to Message object."""
        return Message(
            id=row["id"],
            message_id=row["message_id"],
            created_at_us=row["created_at_us"],
            username=row["username"],
            tag=row["tag"],
            is_reply=bool(row["is_reply"]),
            replied_to_username=row["replied_to_username"],
            contents=row["contents"],
            is_private=bool(row["is_private"])
        )
