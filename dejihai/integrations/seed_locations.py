"""Seed the storage platform locations."""

import logging
import os

from sqlalchemy.orm import Session

from dejihai.database.master_repository import LocationRepository
from dejihai.models.constants import DEFAULT_LOCATIONS

logger = logging.getLogger(__name__)


def seed_locations(db: Session) -> int:
    """Create the default locations. Existing codes are left untouched."""
    repo = LocationRepository(db)
    for code, name, display_order in DEFAULT_LOCATIONS:
        repo.upsert_by_code(code, name, display_order)
    logger.info(f"Seeded {len(DEFAULT_LOCATIONS)} locations")
    return len(DEFAULT_LOCATIONS)


def main() -> int:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    from dejihai.database.database import SessionLocal, init_db

    init_db()
    db = SessionLocal()
    try:
        seed_locations(db)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
