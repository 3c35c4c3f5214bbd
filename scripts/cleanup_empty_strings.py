#!/usr/bin/env python3
"""
Convert legacy empty-string values in ``users`` to NULL.

Older clients stored '' in numeric, date and tag columns. A stored '' is
never replaced by the merge-upsert (only NULL is), so such rows need a
one-off cleanup before new profile data can fill them.

Usage:
    python scripts/cleanup_empty_strings.py [--dry-run]
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import List

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import String, Text, case, cast, func, or_, select, update
from sqlalchemy.engine import Engine

from adapters.sql_adapter import create_db_engine, dispose_engine
from domain.models import UserRecord

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("cleanup_empty_strings")

CLEANED_COLUMNS = (
    "gender",
    "date_of_birth",
    "height",
    "weight",
    "goal",
    "photo_url",
    "daily_calories",
    "daily_protein",
    "daily_carbs",
    "daily_sugar",
)


def _is_empty(column):
    return cast(column, Text) == ""


def _cleared(column):
    if isinstance(column.type, (String, Text)):
        return func.nullif(column, "")
    return case((_is_empty(column), None), else_=column)


def find_affected_ids(engine: Engine) -> List[str]:
    """Ids of profiles holding at least one empty string"""
    table = UserRecord.__table__
    condition = or_(*(_is_empty(table.c[name]) for name in CLEANED_COLUMNS))
    with engine.connect() as conn:
        return list(conn.execute(select(table.c.id).where(condition).order_by(table.c.id)).scalars())


def cleanup_empty_strings(engine: Engine) -> List[str]:
    """Set every empty-string column to NULL and return the affected ids."""
    table = UserRecord.__table__
    affected = find_affected_ids(engine)
    if not affected:
        return affected

    assignments = {name: _cleared(table.c[name]) for name in CLEANED_COLUMNS}
    assignments["updated_at"] = func.now()
    with engine.begin() as conn:
        conn.execute(update(table).where(table.c.id.in_(affected)).values(**assignments))
    return affected


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--dry-run", action="store_true", help="only list affected profiles")
    args = parser.parse_args(argv)

    engine = create_db_engine()
    try:
        if args.dry_run:
            ids = find_affected_ids(engine)
            logger.info(f"{len(ids)} profile(s) would be cleaned")
        else:
            ids = cleanup_empty_strings(engine)
            logger.info(f"✓ Cleaned {len(ids)} profile(s)")
        for user_id in ids:
            print(user_id)
        return 0
    except Exception as e:
        logger.error(f"✗ Cleanup failed: {e}")
        return 1
    finally:
        dispose_engine(engine)


if __name__ == "__main__":
    sys.exit(main())
