#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the configured record store is reachable.
Usage: python scripts/check_connection.py
"""
import sys
sys.path.insert(0, '.')

from app.core.config import get_settings
from app.core.exceptions import AppError
from app.repositories import build_repositories


def main() -> int:
    settings = get_settings()
    print("=" * 50)
    print("ALUMNI RECORDS - CONNECTION CHECK")
    print("=" * 50)

    print(f"\nBackend: {settings.storage_backend}")
    if settings.storage_backend == "mongodb":
        print(f"    URI: {settings.mongodb_uri}")
        print(f"    Database: {settings.mongodb_db}")
    else:
        print(f"    Host: {settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    print(f"    Timeout: {settings.store_timeout_seconds}s")

    try:
        repos = build_repositories(settings, init_schema=False)
    except AppError as exc:
        print(f"    FAILED: {exc.message}")
        return 1

    if repos.ping():
        print("    CONNECTED")
        return 0
    print("    FAILED")
    return 1


if __name__ == "__main__":
    sys.exit(main())
