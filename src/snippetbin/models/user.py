# src/snippetbin/models/user.py
"""SQLAlchemy models for accounts and their optional profiles."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from snippetbin.db.session import Base
from snippetbin.db.time import utcnow_iso

DEFAULT_THEME = "dark"


class User(Base):
    """Registered account with a role tier."""

    __tablename__ = "user_account"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    # Lower-cased copy backing case-insensitive uniqueness; ``username`` keeps display case.
    username_lower: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(Text, nullable=False, default="user")
    # Non-null secret means logins require a TOTP code.
    totp_secret: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[str] = mapped_column(Text, nullable=False, default=utcnow_iso)

    profile: Mapped[UserProfile | None] = relationship(
        "UserProfile",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )

    @property
    def second_factor_enabled(self) -> bool:
        return bool(self.totp_secret)


class UserProfile(Base):
    """Optional presentation settings kept separate from identity metadata."""

    __tablename__ = "user_profile"

    user_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    theme: Mapped[str] = mapped_column(Text, nullable=False, default=DEFAULT_THEME)
    last_seen: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped[User] = relationship("User", back_populates="profile")
