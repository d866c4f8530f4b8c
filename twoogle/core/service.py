"""
Twoogle Message Service

Central object shared by the console and GUI front ends.
"""

import logging
import sqlite3
from typing import Optional

from ..config import Config
from ..db.connection import Database
from ..db.messages import MessageRepository
from ..db.subscriptions import SubscriptionRepository
from ..db.users import UserRepository
from .crypto import PasswordManager
from .errors import StorageError

logger = logging.getLogger(__name__)


class MessageService:
    """
    Owns the database connection and all business logic.

    Responsibilities:
    - Open the database and run migrations
    - Make sure the shared guest account exists
    - Expose auth, composer and feeds to the front ends
    - Close the database on shutdown

    Front ends hold their own Session and pass it into every call.
    """

    def __init__(self, config: Config, db: Optional[Database] = None):
        """
        Args:
            config: Loaded configuration object
            db: Pre-built database (tests); opened from config otherwise
        """
        self.config = config

        self.passwords = PasswordManager(
            time_cost=config.crypto.argon2_time_cost,
            memory_cost_kb=config.crypto.argon2_memory_kb,
            parallelism=config.crypto.argon2_parallelism
        )

        self.db = db or Database(
            config.database.path,
            busy_timeout_ms=config.database.busy_timeout_ms
        )

        # These will be initialized in setup()
        self.users = None
        self.messages = None
        self.subscriptions = None
        self.auth = None
        self.composer = None
        self.feeds = None

        logger.info(f"MessageService created: {config.service.name}")

    def setup(self):
        """
        Initialize all components.

        Raises StorageError if the database cannot be opened; that is the
        only fatal error.
        """
        logger.info("Setting up message service...")

        if not self.db.initialized:
            try:
                self.db.initialize()
            except (sqlite3.Error, OSError) as e:
                logger.error(f"Cannot open database {self.db.path}: {e}")
                raise StorageError(f"Cannot open database {self.db.path}") from e

        self.users = UserRepository(self.db)
        self.messages = MessageRepository(self.db)
        self.subscriptions = SubscriptionRepository(self.db)

        from .session import AuthService
        from .composer import MessageComposer
        from .feeds import FeedAssembler

        self.auth = AuthService(self)
        self.composer = MessageComposer(self)
        self.feeds = FeedAssembler(self)

        self.auth.ensure_guest_account()

        logger.info("Message service setup complete")
        return self

    def new_session(self):
        """A fresh guest session for a front end."""
        return self.auth.guest_session()

    def shutdown(self):
        """Close the database."""
        logger.info("Shutting down message service...")
        self.db.close()

    def __enter__(self):
        return self.setup()

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()

