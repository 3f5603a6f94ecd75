"""Username/password authentication with an optional TOTP second factor."""
from __future__ import annotations

import logging
import secrets
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from snippetbin.core import security
from snippetbin.core.errors import (
    InvalidCredentials,
    InvalidInput,
    NotFound,
    SecondFactorInvalid,
    SecondFactorRequired,
    StorageFailure,
    UsernameTaken,
    WeakPassword,
)
from snippetbin.core.roles import Role, parse_role
from snippetbin.core.settings import settings
from snippetbin.db.session import begin_write
from snippetbin.db.time import utcnow_iso
from snippetbin.models.user import DEFAULT_THEME, User, UserProfile

__all__ = ["AuthService", "AuthenticatedUser", "ProfileData"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity handed back to callers after signup or login."""

    id: str
    username: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> AuthenticatedUser:
        return cls(id=user.id, username=user.username, role=user.role)


@dataclass(frozen=True)
class ProfileData:
    """Profile fields with defaults applied for accounts that never saved one."""

    user_id: str
    bio: str | None = None
    avatar_url: str | None = None
    theme: str = DEFAULT_THEME
    last_seen: str | None = None


class AuthService:
    """Registers accounts and checks credentials against stored bcrypt hashes."""

    def __init__(self, session: Session, min_password_length: int | None = None) -> None:
        self.session = session
        self.min_password_length = min_password_length or settings.min_password_length

    def _find_by_username(self, username: str) -> User | None:
        return self.session.scalars(
            select(User).where(User.username_lower == username.strip().lower())
        ).first()

    def _begin_write(self, action: str) -> None:
        try:
            begin_write(self.session)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Storage failure while trying to %s: %s", action, exc)
            raise StorageFailure(f"Failed to {action}") from exc

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Storage failure while trying to %s: %s", action, exc)
            raise StorageFailure(f"Failed to {action}") from exc

    def _check_password(self, username: str, password: str) -> User:
        user = self._find_by_username(username) if username and username.strip() else None
        if user is None:
            # Same bcrypt cost whether or not the account exists.
            security.verify_password(password or "", security.DUMMY_HASH)
            raise InvalidCredentials()
        if not security.verify_password(password or "", user.password_hash):
            raise InvalidCredentials()
        return user

    def register(
        self,
        username: str,
        password: str,
        role: Role | str = Role.USER,
    ) -> AuthenticatedUser:
        """Create an account.

        Raises:
            InvalidInput: If the username is blank or the role is unknown.
            WeakPassword: If the password is shorter than the configured minimum.
            UsernameTaken: If the username exists in any letter case.
        """
        if not username or not username.strip():
            raise InvalidInput("Username and password are required")
        if not password:
            raise InvalidInput("Username and password are required")
        if len(password) < self.min_password_length:
            raise WeakPassword(
                f"Password must be at least {self.min_password_length} characters"
            )
        parsed_role = parse_role(role)
        if parsed_role is None:
            raise InvalidInput(f"Unknown role {role!r}")

        username = username.strip()
        password_hash = security.hash_password(password)
        self._begin_write("create user")
        if self._find_by_username(username) is not None:
            self.session.rollback()
            raise UsernameTaken()

        user = User(
            id=secrets.token_hex(16),
            username=username,
            username_lower=username.lower(),
            password_hash=password_hash,
            role=parsed_role.value,
            created_at=utcnow_iso(),
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise UsernameTaken() from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Storage failure while registering %s: %s", username, exc)
            raise StorageFailure("Failed to create user") from exc

        logger.info("Registered user %s with role %s", user.username, user.role)
        return AuthenticatedUser.from_user(user)

    def authenticate(
        self,
        username: str,
        password: str,
        code: str | None = None,
    ) -> AuthenticatedUser:
        """Check credentials and, when enabled, the TOTP code.

        Raises:
            InvalidCredentials: Unknown username or wrong password.
            SecondFactorRequired: The account has TOTP enabled and no code was sent.
            SecondFactorInvalid: The code did not verify.
        """
        try:
            user = self._check_password(username, password)
        except InvalidCredentials:
            logger.info("Failed login for %r", username)
            raise

        if user.second_factor_enabled:
            if not code or not code.strip():
                raise SecondFactorRequired()
            if not security.verify_totp(user.totp_secret, code):
                logger.info("Rejected second factor for %s", user.username)
                raise SecondFactorInvalid()

        self._begin_write("record login")
        if user.profile is None:
            user.profile = UserProfile(user_id=user.id)
        user.profile.last_seen = utcnow_iso()
        self._commit("record login")
        return AuthenticatedUser.from_user(user)

    def enable_second_factor(self, username: str, password: str) -> tuple[str, str]:
        """Generate and store a new TOTP secret for the account.

        Calling it again rotates the secret.

        Returns:
            ``(secret, provisioning_uri)`` for the user's authenticator app.
        """
        user = self._check_password(username, password)
        self._begin_write("enable second factor")
        secret = security.new_totp_secret()
        user.totp_secret = secret
        self._commit("enable second factor")
        logger.info("Enabled second factor for %s", user.username)
        return secret, security.totp_uri(secret, user.username, settings.totp_issuer)

    def seed_default_users(self, accounts: Iterable[tuple[str, str, Role | str]]) -> list[str]:
        """Create any of ``accounts`` that do not exist yet.

        Returns:
            Usernames that were created; existing ones are skipped.
        """
        created: list[str] = []
        for username, password, role in accounts:
            try:
                self.register(username, password, role)
            except UsernameTaken:
                logger.info("User %s already exists, skipping", username)
                continue
            created.append(username)
        return created

    def list_users(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.created_at.asc())))

    def get_profile(self, user_id: str) -> ProfileData:
        """Return the user's profile, or defaults when none was ever saved.

        Raises:
            NotFound: If the user does not exist.
        """
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        profile = user.profile
        if profile is None:
            return ProfileData(user_id=user.id)
        return ProfileData(
            user_id=user.id,
            bio=profile.bio,
            avatar_url=profile.avatar_url,
            theme=profile.theme or DEFAULT_THEME,
            last_seen=profile.last_seen,
        )

    def update_profile(
        self,
        user_id: str,
        *,
        bio: str | None = None,
        avatar_url: str | None = None,
        theme: str | None = None,
    ) -> ProfileData:
        """Apply the given profile fields, creating the profile row if needed."""
        self._begin_write("update profile")
        user = self.session.get(User, user_id)
        if user is None:
            self.session.rollback()
            raise NotFound("User not found")
        if user.profile is None:
            user.profile = UserProfile(user_id=user.id)
        if bio is not None:
            user.profile.bio = bio
        if avatar_url is not None:
            user.profile.avatar_url = avatar_url
        if theme:
            user.profile.theme = theme
        self._commit("update profile")
        return self.get_profile(user_id)
