"""
Database module - SQLAlchemy engine, sessions and table definitions.
"""
from jobboard.db.postgres import engine, get_db_session, test_postgres_connection
from jobboard.db.schema import metadata, create_tables

__all__ = [
    "engine",
    "get_db_session",
    "test_postgres_connection",
    "metadata",
    "create_tables"
]
