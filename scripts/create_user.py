#!/usr/bin/env python3
"""
Create User Script

Users are seeded from the command line; the API only reads them.
Usage: python scripts/create_user.py admin admin@example.com --role admin
"""
import argparse
import getpass
import sys
sys.path.insert(0, '.')

from app.core.auth import hash_password
from app.core.config import get_settings
from app.core.exceptions import AppError
from app.core.logging_config import setup_logging
from app.models.domain import UserRole
from app.repositories import build_repositories


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create an API user")
    parser.add_argument("username")
    parser.add_argument("email")
    parser.add_argument("--role", choices=[r.value for r in UserRole], default=UserRole.user.value)
    parser.add_argument("--password", help="Prompted for when omitted")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, settings.json_logs)

    password = args.password or getpass.getpass("Password: ")
    if len(password) < 6:
        print("Password must be at least 6 characters", file=sys.stderr)
        return 1

    try:
        repos = build_repositories(settings)
        user = repos.users.create(args.username, args.email, hash_password(password), args.role)
    except AppError as exc:
        print(f"Could not create user: {exc.message}", file=sys.stderr)
        return 1

    print(f"Created {user.role.value} '{user.username}' (id={user.id}) in {repos.backend}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
