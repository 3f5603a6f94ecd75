"""Password hashing and one-time-code helpers."""
from __future__ import annotations

import bcrypt
import pyotp


def hash_password(password: str) -> str:
    """Return a bcrypt hash of the provided password."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash.

    Returns:
        True if the password matches; False otherwise, including malformed hashes.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# Pre-computed hash so unknown usernames cost the same as wrong passwords.
DUMMY_HASH = hash_password("snippetbin-dummy-password")


def new_totp_secret() -> str:
    """Return a fresh base32 TOTP secret."""
    return pyotp.random_base32()


def totp_uri(secret: str, username: str, issuer: str) -> str:
    """Return the provisioning URI an authenticator app can scan."""
    return pyotp.TOTP(secret).provisioning_uri(name=username, issuer_name=issuer)


def verify_totp(secret: str, code: str) -> bool:
    """Verify a TOTP code, tolerating one step of clock drift."""
    return pyotp.TOTP(secret).verify(code.strip(), valid_window=1)
