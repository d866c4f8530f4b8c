"""
Twoogle Message Composer

Parses `[@user] [#tag] [*private] text` input and posts it.

Message ids are `<username>_<counter>`. A normal post increments the
author's counter and uses the new value. A reply borrows the target
user's current counter, so it shares an id with that user's latest
message and shows up alongside it when viewed by id.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from ..db.models import Message
from .errors import EmptyMessage, MessageTooLong, UnknownUser, storage_errors
from .session import Session

if TYPE_CHECKING:
    from .service import MessageService

logger = logging.getLogger(__name__)


POST_FORMAT_HELP = "Format: [@someuser] [#sometag] [*private] message contents"
POST_EXAMPLES = [
    "Example: @david #movies *private I saw the greatest movie yesterday!",
    "Example: @david *private I saw the greatest movie yesterday!",
    "Example: *private I saw the greatest movie yesterday!",
    "Example: #movies I saw the greatest movie yesterday!",
    "Example: I saw the greatest movie yesterday!",
]

_REPLY_RE = re.compile(r"^@(\S+)$")
_TAG_RE = re.compile(r"^#(\S+)$")
_PRIVATE_RE = re.compile(r"^\*private$", re.IGNORECASE)


@dataclass
class ParsedMessage:
    """Markers and body extracted from raw input."""
    body: str
    reply_to: Optional[str] = None
    tag: Optional[str] = None
    is_private: bool = False


def _take_marker(text: str, pattern: re.Pattern) -> tuple[Optional[re.Match], str]:
    """Match the first token against pattern; return (match, remainder)."""
    parts = text.split(maxsplit=1)
    if not parts:
        return None, text
    match = pattern.match(parts[0])
    if not match:
        return None, text
    return match, parts[1] if len(parts) > 1 else ""


def parse_message(text: str) -> ParsedMessage:
    """
    Split input into reply target, tag, privacy flag and body.

    Markers are only recognized in the order @user, #tag, *private; a
    marker out of that order is part of the body.
    """
    remainder = text.strip()

    match, remainder = _take_marker(remainder, _REPLY_RE)
    reply_to = match.group(1).lower() if match else None

    match, remainder = _take_marker(remainder, _TAG_RE)
    tag = match.group(1).lower() if match else None

    match, remainder = _take_marker(remainder, _PRIVATE_RE)
    is_private = match is not None

    return ParsedMessage(
        body=remainder.strip(),
        reply_to=reply_to,
        tag=tag,
        is_private=is_private
    )


class MessageComposer:
    """Validates, numbers and stores new messages."""

    def __init__(self, service: "MessageService"):
        self.service = service
        self.db = service.db
        self.users = service.users
        self.messages = service.messages
        self.max_length = service.config.service.max_message_length

    def post(self, session: Session, text: str) -> Message:
        """
        Post a message as the session user.

        Raises:
            MessageTooLong: body exceeds the configured limit
            EmptyMessage: nothing left after the markers
            UnknownUser: reply target is not registered
            StorageError: the database failed; nothing was written
        """
        parsed = parse_message(text)

        if not parsed.body:
            raise EmptyMessage()
        if len(parsed.body) > self.max_length:
            raise MessageTooLong(len(parsed.body), self.max_length)

        author = session.username

        # Counter read, insert and counter write happen under one write lock
        with storage_errors("post the message"):
            with self.db.transaction(immediate=True):
                if parsed.reply_to:
                    count = self.users.get_message_count(parsed.reply_to)
                    if count is None:
                        raise UnknownUser(parsed.reply_to)
                    message_id = f"{parsed.reply_to}_{count}"
                else:
                    count = self.users.get_message_count(author)
                    if count is None:
                        raise UnknownUser(author)
                    count += 1
                    message_id = f"{author}_{count}"

                message = self.messages.create_message(
                    message_id=message_id,
                    username=author,
                    contents=parsed.body,
                    tag=parsed.tag,
                    replied_to_username=parsed.reply_to,
                    is_private=parsed.is_private
                )

                if not parsed.reply_to:
                    self.users.set_message_count(author, count)

        if not parsed.reply_to:
            session.user.message_count = count

        logger.info(f"Message {message.message_id} posted by {author}")
        return message
