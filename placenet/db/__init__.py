"""
Database module - PostgreSQL and MongoDB connections.
"""
from placenet.db.postgres import Database, get_database, set_database, test_postgres_connection
from placenet.db.mongodb import get_mongo_db, test_mongo_connection

__all__ = [
    "Database",
    "get_database",
    "set_database",
    "test_postgres_connection",
    "get_mongo_db",
    "test_mongo_connection"
]
