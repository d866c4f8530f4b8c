"""
Twoogle Formatting Utilities

Helper functions for rendering messages, tags and profiles as text.
"""

from datetime import datetime
from typing import Iterable

from ..db.models import Message, TagCount, User

AUTHOR_WIDTH = 30
CONTENTS_WIDTH = 70
TAG_WIDTH = 10

TAG_LISTING_HEADER = "Format: #tag (number of times used)"


def format_timestamp(timestamp_us: int) -> str:
    """
    Format microsecond timestamp to human-readable string.

    Args:
        timestamp_us: Microseconds since epoch

    Returns:
        Formatted string like "2025-12-10 14:32:05"
    """
    if not timestamp_us:
        return "Never"

    dt = datetime.fromtimestamp(timestamp_us / 1_000_000)
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def pad_right(text: str, width: int) -> str:
    """Pad text to at least width with spaces on the right."""
    return text.ljust(width)


def format_message_line(message: Message) -> str:
    """
    Render one message as a fixed-width, newline-terminated line.

    <author @replied-to> "contents" [tag] (message_id) @timestamp
    """
    replied_to = message.replied_to_username or "nobody"
    tag = message.tag or "no tag"

    line = pad_right(f"<{message.username} @{replied_to}> ", AUTHOR_WIDTH)
    line += pad_right(f'"{message.contents}" ', CONTENTS_WIDTH)
    line += pad_right(f"[{tag}] ", TAG_WIDTH)
    line += f"({message.message_id}) "
    line += f"@{format_timestamp(message.created_at_us)}\n"
    return line


def format_tag_listing(tags: Iterable[TagCount]) -> str:
    """Render tag usage counts under the listing header."""
    lines = [TAG_LISTING_HEADER]
    lines.extend(f"#{t.tag} ({t.count})" for t in tags)
    return "\n".join(lines) + "\n"


def format_profile(user: User) -> str:
    """Render a user's public profile."""
    if not user.has_profile:
        return f"{user.username} has no profile.\n"

    return (
        f"{user.username}'s profile:\n"
        f"Gender: {user.gender or ''}\n"
        f"Birthday: {user.birth_date or ''}\n"
        f"Email: {user.email or ''}\n"
        f"About Me: {user.about_me or ''}\n"
    )

