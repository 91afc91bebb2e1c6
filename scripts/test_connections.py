#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify all database connections are working.
Usage: python scripts/test_connections.py
"""
import sys
sys.path.insert(0, '.')

from placenet.core.config import get_settings
from placenet.db.mongodb import test_mongo_connection
from placenet.db.postgres import test_postgres_connection


def main():
    settings = get_settings()
    print("=" * 50)
    print("PLACENET - CONNECTION TEST")
    print("=" * 50)

    ok = True

    # Test PostgreSQL
    print("\n[1] Testing PostgreSQL...")
    if settings.database_url:
        print(f"    URL: {settings.database_url.split('@')[-1]}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_postgres_connection():
        print("    ✅ PostgreSQL: CONNECTED")
    else:
        print("    ❌ PostgreSQL: FAILED")
        ok = False

    # Test MongoDB
    print("\n[2] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
    else:
        print("    ❌ MongoDB: FAILED")
        ok = False

    print(f"\n[3] Demo mode: {'on' if settings.demo_mode else 'off'}")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
