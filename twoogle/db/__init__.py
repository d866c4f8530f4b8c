"""Twoogle Database Module - SQLite database operations."""

from .connection import Database
from .models import User, Profile, Message, Subscription, TagCount

__all__ = ["Database", "User", "Profile", "Message", "Subscription", "TagCount"]
