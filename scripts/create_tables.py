#!/usr/bin/env python3
"""
Create Tables Script

Creates all six tables (users, student_profiles, employer_profiles, jobs,
applications, saved_jobs) in the configured database if missing.
Usage: python scripts/create_tables.py [--reset]

--reset drops every table first (all data is lost).
"""
import sys
sys.path.insert(0, '.')

from jobboard.core.config import get_settings
from jobboard.db.postgres import engine, test_postgres_connection
from jobboard.db.schema import create_tables, drop_tables, metadata


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB BOARD - CREATE TABLES")
    print("=" * 50)
    print(f"\nDatabase: {settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")

    if not test_postgres_connection():
        print("    ❌ Database: NOT REACHABLE")
        sys.exit(1)

    if "--reset" in sys.argv[1:]:
        drop_tables(engine)
        print("    🗑️  Dropped existing tables")

    create_tables(engine)
    for table in metadata.sorted_tables:
        print(f"    ✅ {table.name}")

    print("\nDone.")


if __name__ == "__main__":
    main()
