"""
Twoogle Feed Assembler

Builds the message views. Each formatted line is placed in front of the
lines already collected. Limited views query newest-first, so they read
oldest-first; a message-id thread is queried oldest-first, so its latest
reply is listed above the message it answers.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, TYPE_CHECKING

from ..db.models import Message, TagCount
from ..utils.formatting import format_message_line, format_tag_listing
from .errors import storage_errors
from .session import Session

if TYPE_CHECKING:
    from .service import MessageService

logger = logging.getLogger(__name__)


@dataclass
class FeedSection:
    """A titled group of message lines in the recent view."""
    title: str
    lines: list[str] = field(default_factory=list)

    def render(self) -> str:
        return f"{self.title}:\n" + "".join(self.lines)


def collect_lines(messages: Iterable[Message]) -> list[str]:
    """Format newest-first rows into oldest-first display lines."""
    lines: list[str] = []
    for message in messages:
        lines.insert(0, format_message_line(message))
    return lines


def render_lines(lines: list[str]) -> str:
    return "".join(lines)


def render_sections(sections: list[FeedSection]) -> str:
    return "\n".join(section.render() for section in sections)


class FeedAssembler:
    """Read-side views over messages, tags and users."""

    def __init__(self, service: "MessageService"):
        self.service = service
        self.auth = service.auth
        self.messages = service.messages
        self.users = service.users
        self.subscriptions = service.subscriptions
        self.default_limit = service.config.service.feed_limit

    def _limit(self, limit: Optional[int]) -> int:
        return self.default_limit if limit is None else max(0, limit)

    def message(self, session: Session, message_id: str) -> list[str]:
        """A message and the replies that share its id, latest reply first."""
        with storage_errors("load the message"):
            rows = self.messages.get_by_message_id(message_id.strip(), viewer=session.username)
        return collect_lines(rows)

    def user_messages(
        self,
        session: Session,
        username: str,
        limit: Optional[int] = None
    ) -> list[str]:
        """
        Most recent messages by one user.

        Private messages are shown only when users view their own feed;
        subscribers see them through subscribed_messages() instead.
        """
        user = self.auth.require_user(username)
        include_private = user.username == session.username
        with storage_errors("load the user's messages"):
            rows = self.messages.get_user_messages(
                user.username,
                self._limit(limit),
                include_private=include_private
            )
        return collect_lines(rows)

    def tag_messages(self, tag: str) -> list[str]:
        """All public messages carrying a tag ('#funny' or 'funny')."""
        tag = tag.strip().lstrip("#").lower()
        if not tag:
            return []
        with storage_errors("load tagged messages"):
            rows = self.messages.get_tag_messages(tag)
        return collect_lines(rows)

    def replies(self, session: Session, limit: Optional[int] = None) -> list[str]:
        """Replies addressed to the session user."""
        self.auth.require_member(session, "view replies")
        with storage_errors("load replies"):
            rows = self.messages.get_replies_to(session.username, self._limit(limit))
        return collect_lines(rows)

    def subscribed_messages(self, session: Session, limit: Optional[int] = None) -> list[str]:
        """
        Messages of every subscribed-to user, private ones included.

        Each user is capped at limit independently.
        """
        self.auth.require_member(session, "view subscribed messages")
        limit = self._limit(limit)
        lines: list[str] = []
        with storage_errors("load subscribed messages"):
            for username in self.subscriptions.get_subscribed_usernames(session.username):
                rows = self.messages.get_user_messages(username, limit, include_private=True)
                for message in rows:
                    lines.insert(0, format_message_line(message))
        return lines

    def recent(self, session: Session, limit: Optional[int] = None) -> list[FeedSection]:
        """The landing view: own, subscribed, replies, then guest messages."""
        sections = []
        if session.is_authenticated:
            sections.append(FeedSection(
                "My Recent Messages",
                self.user_messages(session, session.username, limit)
            ))
            sections.append(FeedSection(
                "Subscribed To Messages",
                self.subscribed_messages(session, limit)
            ))
            sections.append(FeedSection(
                "Replies to Me",
                self.replies(session, limit)
            ))
        sections.append(FeedSection(
            "Guest Messages",
            self.user_messages(session, self.auth.guest_username, limit)
        ))
        return sections

    def tags(self) -> list[TagCount]:
        """Public tag usage counts in first-use order."""
        with storage_errors("list tags"):
            return self.messages.get_tag_counts()

    def tag_listing(self) -> str:
        return format_tag_listing(self.tags())

    def usernames(self) -> list[str]:
        with storage_errors("list users"):
            return self.users.list_usernames()
