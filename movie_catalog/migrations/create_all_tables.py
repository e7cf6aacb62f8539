"""
Migration script to create all database tables

Run this script to create all database tables:
    python -m movie_catalog.migrations.create_all_tables
"""

import logging

from movie_catalog.database import engine, Base
# Import all models to ensure they're registered with Base
from movie_catalog.models import User, Movie, MovieVote  # noqa: F401

logger = logging.getLogger(__name__)


def create_tables():
    """Create all database tables"""
    logger.info("Creating all database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    create_tables()
