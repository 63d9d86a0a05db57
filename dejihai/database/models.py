"""SQLAlchemy database models for dejihai."""

from datetime import datetime
from typing import Union, TypeVar, Type
import uuid
from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from dejihai.database.database import Base
from dejihai.models.task import TaskStatus

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string)."""
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.upper())
    except (ValueError, AttributeError):
        return default


class LocationDB(Base):
    """Database model for Location."""

    __tablename__ = "locations"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    code = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    display_order = Column(Integer, nullable=False, default=0, index=True)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from dejihai.models.location import Location
        return Location(
            id=self.id,
            code=self.code,
            name=self.name,
            display_order=self.display_order,
        )


class ShipDB(Base):
    """Database model for Ship."""

    __tablename__ = "ships"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    ship_number = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    blocks = relationship("BlockDB", back_populates="ship", cascade="all, delete-orphan")

    def to_pydantic(self, block_count=None):
        """Convert database model to Pydantic model."""
        from dejihai.models.ship import Ship
        return Ship(
            id=self.id,
            ship_number=self.ship_number,
            name=self.name,
            block_count=block_count,
        )


class BlockDB(Base):
    """Database model for one medium block of a ship."""

    __tablename__ = "blocks"
    __table_args__ = (
        UniqueConstraint("ship_id", "section", "large_block", "medium_block", name="uq_block_path"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    ship_id = Column(String, ForeignKey("ships.id", ondelete="CASCADE"), nullable=False, index=True)
    section = Column(String, nullable=False)
    large_block = Column(String, nullable=False)
    medium_block = Column(String, nullable=False)

    ship = relationship("ShipDB", back_populates="blocks")

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from dejihai.models.ship import Block
        return Block(
            id=self.id,
            ship_id=self.ship_id,
            section=self.section,
            large_block=self.large_block,
            medium_block=self.medium_block,
        )


class TaskDB(Base):
    """Database model for a delivery task."""

    __tablename__ = "delivery_tasks"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Subject: ship/block path or free-form title
    ship_id = Column(String, ForeignKey("ships.id", ondelete="SET NULL"), nullable=True, index=True)
    block_info = Column(String, nullable=True)
    free_form_title = Column(String, nullable=True)

    location_id = Column(String, ForeignKey("locations.id"), nullable=False, index=True)

    # Request as submitted
    requested_date = Column(Date, nullable=False, index=True)
    requested_time = Column(String, nullable=False)

    # Scheduling fields
    scheduled_date = Column(Date, nullable=True, index=True)
    scheduled_start_time = Column(String, nullable=True)
    scheduled_end_time = Column(String, nullable=True)
    duration = Column(Integer, nullable=True)

    status = Column(String, nullable=False, default=TaskStatus.PENDING.value, index=True)
    special_status = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    person_in_charge = Column(String, nullable=True)
    created_by = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    ship = relationship("ShipDB")
    location = relationship("LocationDB")

    def to_pydantic(self):
        """Convert database model to Pydantic model, embedding ship and location."""
        from dejihai.models.task import Task

        return Task(
            id=self.id,
            ship_id=self.ship_id,
            block_info=self.block_info,
            free_form_title=self.free_form_title,
            location_id=self.location_id,
            requested_date=self.requested_date,
            requested_time=self.requested_time,
            scheduled_date=self.scheduled_date,
            scheduled_start_time=self.scheduled_start_time,
            scheduled_end_time=self.scheduled_end_time,
            duration=self.duration,
            status=value_to_enum(self.status, TaskStatus, TaskStatus.PENDING),
            special_status=self.special_status,
            notes=self.notes,
            person_in_charge=self.person_in_charge,
            created_by=self.created_by,
            created_at=self.created_at,
            updated_at=self.updated_at,
            ship=self.ship.to_pydantic() if self.ship else None,
            location=self.location.to_pydantic() if self.location else None,
        )
