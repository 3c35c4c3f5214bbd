#!/usr/bin/env python3
"""
Standalone database initialization script
Creates the nutrilog tables (users, meal_entries, weight_history) if missing
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect

from adapters.sql_adapter import create_db_engine, dispose_engine
from domain.models import init_database

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("init_db")


def main() -> int:
    logger.info("=" * 60)
    logger.info("Initializing database...")
    logger.info("=" * 60)

    engine = create_db_engine()
    try:
        init_database(engine)
        tables = inspect(engine).get_table_names()
        logger.info(f"✓ {len(tables)} tables present: {', '.join(sorted(tables))}")
        return 0
    except Exception as e:
        logger.error(f"✗ Failed to initialize database: {e}")
        return 1
    finally:
        dispose_engine(engine)


if __name__ == "__main__":
    sys.exit(main())
