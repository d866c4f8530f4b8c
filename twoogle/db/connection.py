"""
Twoogle Database Connection Manager

SQLite database with WAL mode so several front ends can share one file.
"""

import sqlite3
import logging
import time
from pathlib import Path
from contextlib import contextmanager
from typing import Optional, Generator

logger = logging.getLogger(__name__)


class Database:
    """
    SQLite database manager for Twoogle.

    Runs in autocommit mode; multi-statement writes go through transaction().
    """

    def __init__(self, path: str, busy_timeout_ms: int = 5000):
        """
        Initialize database connection.

        Args:
            path: Path to SQLite database file (":memory:" for tests)
            busy_timeout_ms: How long to wait on a locked database
        """
        self.path = Path(path)
        self.busy_timeout_ms = busy_timeout_ms
        self._conn: Optional[sqlite3.Connection] = None
        self._initialized = False

    def initialize(self):
        """Initialize database connection and schema."""
        # Ensure directory exists
        self.path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(
            str(self.path),
            timeout=self.busy_timeout_ms / 1000,
            isolation_level=None  # Autocommit mode
        )

        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout_ms)}")

        # Use Row factory for dict-like access
        self._conn.row_factory = sqlite3.Row

        self._run_migrations()

        self._initialized = True
        logger.info(f"Database initialized: {self.path}")

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _run_migrations(self):
        """Run database migrations."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY,
                name TEXT UNIQUE NOT NULL,
                applied_at INTEGER NOT NULL
            )
        """)

        applied = {
            row[0] for row in
            self._conn.execute("SELECT name FROM _migrations").fetchall()
        }

        migrations = [
            ("001_initial", self._migration_001_initial),
        ]

        for name, func in migrations:
            if name not in applied:
                logger.info(f"Running migration: {name}")
                func()
                self._conn.execute(
                    "INSERT INTO _migrations (name, applied_at) VALUES (?, ?)",
                    (name, int(time.time() * 1_000_000))
                )

    def _migration_001_initial(self):
        """Initial database schema."""
        self._conn.executescript("""
            -- Registered users and the shared guest account
            CREATE TABLE IF NOT EXISTS users (
                username        TEXT PRIMARY KEY,
                password_hash   TEXT,
                message_count   INTEGER NOT NULL DEFAULT 0,
                has_profile     INTEGER NOT NULL DEFAULT 0,
                profile_visible INTEGER NOT NULL DEFAULT 1,
                gender          TEXT,
                birth_date      TEXT,
                email           TEXT,
                about_me        TEXT,
                created_at_us   INTEGER NOT NULL
            );

            -- Messages; message_id is shared between a message and its replies
            CREATE TABLE IF NOT EXISTS messages (
                id              INTEGER PRIMARY KEY AUTOINCREMENT,
                message_id      TEXT NOT NULL,
                created_at_us   INTEGER NOT NULL,
                username        TEXT NOT NULL REFERENCES users(username),
                tag             TEXT,
                is_reply        INTEGER NOT NULL DEFAULT 0,
                replied_to_username TEXT,
                contents        TEXT NOT NULL,
                is_private      INTEGER NOT NULL DEFAULT 0
            );
            CREATE INDEX IF NOT EXISTS idx_messages_message_id ON messages(message_id);
            CREATE INDEX IF NOT EXISTS idx_messages_username ON messages(username);
            CREATE INDEX IF NOT EXISTS idx_messages_tag ON messages(tag);
            CREATE INDEX IF NOT EXISTS idx_messages_replied_to ON messages(replied_to_username);
            CREATE INDEX IF NOT EXISTS idx_messages_created ON messages(created_at_us);

            -- Subscriptions (follower -> followed)
            CREATE TABLE IF NOT EXISTS subscriptions (
                id              INTEGER PRIMARY KEY AUTOINCREMENT,
                username        TEXT NOT NULL REFERENCES users(username),
                subscribed_to_username TEXT NOT NULL REFERENCES users(username),
                UNIQUE(username, subscribed_to_username)
            );
            CREATE INDEX IF NOT EXISTS idx_subscriptions_username ON subscriptions(username);
        """)

    @contextmanager
    def transaction(self, immediate: bool = False) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database transactions.

        With immediate=True the write lock is taken at BEGIN, which
        serializes read-modify-write sequences across processes.
        """
        self._conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
        try:
            yield self._conn
            self._conn.execute("COMMIT")
        except Exception:
            self._conn.execute("ROLLBACK")
            raise

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL query."""
        return self._conn.execute(sql, params)

    def fetchone(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Execute query and fetch one result."""
        return self._conn.execute(sql, params).fetchone()

    def fetchall(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute query and fetch all results."""
        return self._conn.execute(sql, params).fetchall()

    def close(self):
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
            self._initialized = False
            logger.info("Database connection closed")

    # === Utility Methods ===

    def count_users(self) -> int:
        """Count registered users, guest account included."""
        row = self.fetchone("SELECT COUNT(*) FROM users")
        return row[0] if row else 0

    def count_messages(self) -> int:
        """Count total messages."""
        row = self.fetchone("SELECT COUNT(*) FROM messages")
        return row[0] if row else 0
