"""
Database module - PostgreSQL and MongoDB connections.
"""
from app.db.postgres import create_sql_engine, create_schema, test_sql_connection
from app.db.mongodb import get_mongo_db, init_mongo_indexes, test_mongo_connection

__all__ = [
    "create_sql_engine",
    "create_schema",
    "test_sql_connection",
    "get_mongo_db",
    "init_mongo_indexes",
    "test_mongo_connection",
]
