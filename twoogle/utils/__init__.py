"""Twoogle Utilities Module."""

from .formatting import format_message_line, format_tag_listing, format_profile, format_timestamp

__all__ = ["format_message_line", "format_tag_listing", "format_profile", "format_timestamp"]
