"""
Twoogle Password Hashing

Passwords are stored as Argon2id hash strings, never in plaintext.
"""

import logging
from typing import Optional

from argon2 import PasswordHasher, Type
from argon2.exceptions import VerifyMismatchError, InvalidHashError, VerificationError

logger = logging.getLogger(__name__)


class PasswordManager:
    """
    Hashes and verifies user passwords with Argon2id.

    The hash string embeds its own salt and parameters, so changing the
    cost settings does not invalidate stored passwords.
    """

    SALT_LENGTH = 16
    HASH_LENGTH = 32

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost_kb: int = 32768,
        parallelism: int = 1
    ):
        """
        Args:
            time_cost: Number of iterations
            memory_cost_kb: Memory usage in KB
            parallelism: Number of parallel lanes
        """
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost_kb,
            parallelism=parallelism,
            hash_len=self.HASH_LENGTH,
            salt_len=self.SALT_LENGTH,
            type=Type.ID
        )

        logger.debug(
            f"PasswordManager initialized: time={time_cost}, "
            f"memory={memory_cost_kb}KB, parallelism={parallelism}"
        )

    def hash_password(self, password: str) -> str:
        """Hash a password; returns the full Argon2 hash string."""
        return self._hasher.hash(password)

    def verify_password(self, password: str, hash_str: Optional[str]) -> bool:
        """
        Verify a password against a stored hash.

        Accounts without a hash (the guest account) never verify.
        """
        if not hash_str:
            return False
        try:
            self._hasher.verify(hash_str, password)
            return True
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as e:
            logger.warning(f"Unverifiable password hash: {e}")
            return False
