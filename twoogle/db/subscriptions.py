"""
Twoogle Subscription Database Operations
"""

import logging

from .connection import Database
from .models import Subscription

logger = logging.getLogger(__name__)


class SubscriptionRepository:
    """Repository for follower -> followed edges."""

    def __init__(self, db: Database):
        self.db = db

    def subscribe(self, username: str, subscribed_to_username: str) -> bool:
        """
        Record a subscription.

        Returns False if the edge already existed.
        """
        cursor = self.db.execute("""
            INSERT OR IGNORE INTO subscriptions (username, subscribed_to_username)
            VALUES (?, ?)
        """, (username.lower(), subscribed_to_username.lower()))
        return cursor.rowcount > 0

    def get_subscriptions(self, username: str) -> list[Subscription]:
        """Get a user's subscriptions in the order they were made."""
        rows = self.db.fetchall("""
            SELECT * FROM subscriptions
            WHERE username = ?
            ORDER BY id
        """, (username.lower(),))
        return [
            Subscription(
                id=row["id"],
                username=row["username"],
                subscribed_to_username=row["subscribed_to_username"]
            )
            for row in rows
        ]

    def get_subscribed_usernames(self, username: str) -> list[str]:
        return [s.subscribed_to_username for s in self.get_subscriptions(username)]
