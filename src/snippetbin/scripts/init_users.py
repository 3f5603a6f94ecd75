# src/snippetbin/scripts/init_users.py
"""Seed the privileged accounts a fresh deployment needs.

Creates ``founder``, ``staff1`` and ``manager1`` unless an account with the
same name (in any letter case) already exists. Passwords come from the
environment; any that are unset are generated and printed once.
"""
from __future__ import annotations

import argparse
import os
import secrets
from collections.abc import Mapping

from snippetbin.core.roles import Role
from snippetbin.db.session import SessionLocal, create_tables
from snippetbin.services.auth_service import AuthService

DEFAULT_ACCOUNTS: tuple[tuple[str, Role, str], ...] = (
    ("founder", Role.FOUNDER, "SNIPPETBIN_FOUNDER_PASSWORD"),
    ("staff1", Role.STAFF, "SNIPPETBIN_STAFF_PASSWORD"),
    ("manager1", Role.MANAGER, "SNIPPETBIN_MANAGER_PASSWORD"),
)


def resolve_accounts(
    env: Mapping[str, str] | None = None,
) -> tuple[list[tuple[str, str, Role]], dict[str, str]]:
    """Return the accounts to seed and the passwords that had to be generated."""
    env = os.environ if env is None else env
    accounts: list[tuple[str, str, Role]] = []
    generated: dict[str, str] = {}
    for username, role, env_key in DEFAULT_ACCOUNTS:
        password = env.get(env_key)
        if not password:
            password = secrets.token_urlsafe(18)
            generated[username] = password
        accounts.append((username, password, role))
    return accounts, generated


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding (skip when using migrations)",
    )
    args = parser.parse_args(argv)

    if args.create_tables:
        create_tables()

    accounts, generated = resolve_accounts()
    db = SessionLocal()
    try:
        created = AuthService(db).seed_default_users(accounts)
    finally:
        db.close()

    for username, _password, role in accounts:
        state = "created" if username in created else "exists, skipped"
        print(f"{username} ({role.value}): {state}")

    new_generated = {name: pw for name, pw in generated.items() if name in created}
    if new_generated:
        print("\nGenerated credentials (change after first login):")
        for username, password in new_generated.items():
            print(f"  {username}: {password}")


if __name__ == "__main__":
    main()
