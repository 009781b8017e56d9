"""
Repositories - the Record Store Interface and its two implementations.

Usage:
    repos = build_repositories(get_settings())
    repos.jobs.get_by_id(1)
"""

import logging

from app.core.config import Settings
from app.repositories.base import Repositories

logger = logging.getLogger(__name__)


def build_repositories(settings: Settings, init_schema: bool = True) -> Repositories:
    """Select the backing store once at startup; nothing downstream branches on it."""
    if settings.storage_backend == "mongodb":
        from app.db.mongodb import get_mongo_db, init_mongo_indexes
        from app.repositories.mongo_repository import build_mongo_repositories

        db = get_mongo_db(settings)
        if init_schema:
            init_mongo_indexes(db)
        logger.info("Using MongoDB store (db=%s)", settings.mongodb_db)
        return build_mongo_repositories(db)

    from app.db.postgres import create_schema, create_sql_engine
    from app.repositories.sql_repository import build_sql_repositories

    engine = create_sql_engine(settings.sql_url, settings.store_timeout_seconds, echo=settings.debug)
    if init_schema:
        create_schema(engine)
    logger.info("Using SQL store (%s)", engine.url.render_as_string(hide_password=True))
    return build_sql_repositories(engine)


__all__ = ["Repositories", "build_repositories"]
