"""
Declarative base and schema creation.
"""

import logging
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger("nutrilog.database")

# Create SQLAlchemy Base
Base = declarative_base()


def init_database(engine: Engine) -> None:
    """Create every table known to the declarative base (idempotent)."""
    with engine.begin() as conn:
        Base.metadata.create_all(bind=conn)
    logger.info("Database tables created successfully")
