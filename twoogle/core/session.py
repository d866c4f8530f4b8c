"""
Twoogle Sessions and Authentication

Login, logout, registration, profiles and subscriptions. Every operation
takes the caller's Session explicitly; the service holds no current user.
"""

import logging
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from ..db.models import User, Profile
from .errors import (
    AuthenticationRequired,
    InvalidCredentials,
    ProfileHidden,
    RegistrationClosed,
    UnknownUser,
    UsernameTaken,
    ValidationError,
    storage_errors,
)

if TYPE_CHECKING:
    from .service import MessageService

logger = logging.getLogger(__name__)


MAX_USERNAME_LENGTH = 20


@dataclass
class Session:
    """The acting user of one front end."""
    user: User
    is_guest: bool = True

    @property
    def username(self) -> str:
        return self.user.username

    @property
    def is_authenticated(self) -> bool:
        return not self.is_guest


class AuthService:
    """
    Session state transitions and account management.

    Guest -> Authenticated on login or registration, back to Guest on logout.
    """

    def __init__(self, service: "MessageService"):
        self.service = service
        self.users = service.users
        self.subscriptions = service.subscriptions
        self.passwords = service.passwords
        self.guest_username = service.config.service.guest_username

    # === Guest account ===

    def ensure_guest_account(self) -> User:
        """Create the shared guest account if it does not exist yet."""
        with storage_errors("create the guest account"):
            user = self.users.get_user_by_username(self.guest_username)
            if user:
                return user
            logger.info(f"Creating guest account: {self.guest_username}")
            return self.users.create_user(self.guest_username, password_hash=None)

    def guest_session(self) -> Session:
        with storage_errors("load the guest account"):
            user = self.users.get_user_by_username(self.guest_username)
        if user is None:
            user = self.ensure_guest_account()
        return Session(user=user, is_guest=True)

    def require_member(self, session: Session, action: str):
        """Raise AuthenticationRequired for guest sessions."""
        if session.is_guest:
            raise AuthenticationRequired(action)

    # === Login / logout / register ===

    def login(self, session: Session, username: str, password: str) -> User:
        """
        Authenticate and load the full user record into the session.

        Raises InvalidCredentials on unknown user or wrong password; the
        session is left unchanged in that case.
        """
        username = username.strip().lower()
        with storage_errors("log in"):
            user = self.users.get_user_by_username(username) if username else None

        if not user or not self.passwords.verify_password(password, user.password_hash):
            logger.info(f"Failed login for '{username}'")
            raise InvalidCredentials()

        session.user = user
        session.is_guest = False
        logger.info(f"User logged in: {user.username}")
        return user

    def logout(self, session: Session):
        """Revert the session to the guest account."""
        if session.is_authenticated:
            logger.info(f"User logged out: {session.username}")
        guest = self.guest_session()
        session.user = guest.user
        session.is_guest = True

    def register(
        self,
        session: Session,
        username: str,
        password: str,
        profile: Optional[Profile] = None
    ) -> User:
        """
        Register a new user and log the session in as that user.

        Usernames are normalized to lowercase; no character-set rules apply.
        """
        if not self.service.config.features.registration_enabled:
            raise RegistrationClosed()

        username = username.strip().lower()
        self.validate_username(username)

        if self.username_exists(username):
            raise UsernameTaken(username)

        password_hash = self.passwords.hash_password(password)
        with storage_errors("register"):
            user = self.users.create_user(username, password_hash, profile)

        session.user = user
        session.is_guest = False
        logger.info(f"New user registered: {username}")
        return user

    def validate_username(self, username: str):
        if not username:
            raise ValidationError("Username cannot be empty.")
        if len(username) > MAX_USERNAME_LENGTH:
            raise ValidationError(
                f"Username cannot be longer than {MAX_USERNAME_LENGTH} characters."
            )

    def username_exists(self, username: str) -> bool:
        with storage_errors("look up a user"):
            return self.users.user_exists(username.strip())

    def require_user(self, username: str) -> User:
        """Fetch a registered user or raise UnknownUser."""
        username = username.strip().lower()
        with storage_errors("look up a user"):
            user = self.users.get_user_by_username(username) if username else None
        if user is None:
            raise UnknownUser(username)
        return user

    # === Profiles ===

    def update_profile(self, session: Session, profile: Profile) -> User:
        """Create or edit the session user's profile."""
        self.require_member(session, "edit a profile")
        with storage_errors("update the profile"):
            self.users.update_profile(session.username, profile)
            user = self.users.get_user_by_username(session.username)
        session.user = user
        logger.info(f"Profile updated: {session.username}")
        return user

    def delete_profile(self, session: Session) -> User:
        self.require_member(session, "delete a profile")
        with storage_errors("delete the profile"):
            self.users.clear_profile(session.username)
            user = self.users.get_user_by_username(session.username)
        session.user = user
        logger.info(f"Profile deleted: {session.username}")
        return user

    def get_profile(self, session: Session, username: str) -> User:
        """
        Get a user for profile display.

        Private profiles are visible only to their owner.
        """
        user = self.require_user(username)
        if user.has_profile and not user.profile_visible and user.username != session.username:
            raise ProfileHidden(user.username)
        return user

    # === Subscriptions ===

    def subscribe(self, session: Session, username: str) -> bool:
        """
        Subscribe the session user to another user.

        Returns False if the subscription already existed.
        """
        self.require_member(session, "subscribe to users")
        target = self.require_user(username)
        if target.username == session.username:
            raise ValidationError("You cannot subscribe to yourself.")

        with storage_errors("subscribe"):
            added = self.subscriptions.subscribe(session.username, target.username)

        if added:
            logger.info(f"{session.username} subscribed to {target.username}")
        return added

    def list_subscriptions(self, session: Session) -> list[str]:
        self.require_member(session, "view subscriptions")
        with storage_errors("list subscriptions"):
            return self.subscriptions.get_subscribed_usernames(session.username)
