"""Repositories for read-mostly master data: locations, ships and blocks."""

import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc, func

from dejihai.models.location import Location
from dejihai.models.ship import Ship, Block
from dejihai.database.models import LocationDB, ShipDB, BlockDB

logger = logging.getLogger(__name__)


class LocationRepository:
    """Repository for storage platform locations."""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Location]:
        """All locations in display order."""
        rows = self.db.query(LocationDB).order_by(LocationDB.display_order).all()
        return [row.to_pydantic() for row in rows]

    def get(self, location_id: str) -> Optional[Location]:
        row = self.db.query(LocationDB).filter(LocationDB.id == location_id).first()
        return row.to_pydantic() if row else None

    def upsert_by_code(self, code: str, name: str, display_order: int) -> Location:
        """Create a location unless one with ``code`` exists (existing rows are left as-is)."""
        row = self.db.query(LocationDB).filter(LocationDB.code == code).first()
        if row:
            return row.to_pydantic()
        try:
            row = LocationDB(code=code, name=name, display_order=display_order)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Created location {code}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create location {code}: {type(e).__name__}: {str(e)}")
            raise


class ShipRepository:
    """Repository for ships."""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Ship]:
        """All ships, newest hull number first, with their block counts."""
        rows = (
            self.db.query(ShipDB, func.count(BlockDB.id))
            .outerjoin(BlockDB, BlockDB.ship_id == ShipDB.id)
            .group_by(ShipDB.id)
            .order_by(desc(ShipDB.ship_number))
            .all()
        )
        return [ship.to_pydantic(block_count=count) for ship, count in rows]

    def get(self, ship_id: str) -> Optional[Ship]:
        row = self.db.query(ShipDB).filter(ShipDB.id == ship_id).first()
        return row.to_pydantic() if row else None

    def get_or_create(self, ship_number: str, name: Optional[str] = None) -> Ship:
        """Return the ship with ``ship_number``, creating it if missing."""
        row = self.db.query(ShipDB).filter(ShipDB.ship_number == ship_number).first()
        if row:
            return row.to_pydantic()
        try:
            row = ShipDB(ship_number=ship_number, name=name)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Created ship {ship_number}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create ship {ship_number}: {type(e).__name__}: {str(e)}")
            raise


class BlockRepository:
    """Repository for a ship's block hierarchy."""

    def __init__(self, db: Session):
        self.db = db

    def list_for_ship(self, ship_id: str) -> List[Block]:
        rows = (
            self.db.query(BlockDB)
            .filter(BlockDB.ship_id == ship_id)
            .order_by(BlockDB.section, BlockDB.large_block, BlockDB.medium_block)
            .all()
        )
        return [row.to_pydantic() for row in rows]

    @staticmethod
    def grouped(blocks: List[Block]) -> Dict[str, Dict[str, List[str]]]:
        """Nest blocks as {section: {large block: [medium blocks]}}."""
        tree: Dict[str, Dict[str, List[str]]] = {}
        for block in blocks:
            tree.setdefault(block.section, {}).setdefault(block.large_block, []).append(block.medium_block)
        return tree

    def upsert(self, ship_id: str, section: str, large_block: str, medium_block: str) -> bool:
        """Insert a block unless the same path exists.

        Returns:
            True if a new row was inserted
        """
        exists = (
            self.db.query(BlockDB.id)
            .filter(
                BlockDB.ship_id == ship_id,
                BlockDB.section == section,
                BlockDB.large_block == large_block,
                BlockDB.medium_block == medium_block,
            )
            .first()
        )
        if exists:
            return False
        try:
            self.db.add(BlockDB(
                ship_id=ship_id,
                section=section,
                large_block=large_block,
                medium_block=medium_block,
            ))
            self.db.commit()
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(
                f"Failed to insert block {section}/{large_block}/{medium_block}: {type(e).__name__}: {str(e)}"
            )
            raise
