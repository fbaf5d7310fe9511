"""
Database module - connection pool, sessions and table definitions.
"""
from app.db.postgres import get_db_session, execute_raw_sql, test_postgres_connection
from app.db.schema import metadata, init_db

__all__ = [
    "get_db_session",
    "execute_raw_sql",
    "test_postgres_connection",
    "metadata",
    "init_db",
]
