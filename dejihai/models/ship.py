"""Ship and block master data models for dejihai."""

from typing import Optional
from pydantic import BaseModel, Field


class Ship(BaseModel):
    """A ship under construction, identified by its hull number."""

    id: str = Field(..., description="Unique ship identifier")
    ship_number: str = Field(..., description="Hull number (e.g. 'S6313')")
    name: Optional[str] = Field(None, description="Display name")
    block_count: Optional[int] = Field(None, description="Number of registered blocks (list views only)")


class Block(BaseModel):
    """One medium block in a ship's section -> large block -> medium block hierarchy."""

    id: str = Field(..., description="Unique block identifier")
    ship_id: str = Field(..., description="Owning ship")
    section: str = Field(..., description="Section (区画)")
    large_block: str = Field(..., description="Large block (大組)")
    medium_block: str = Field(..., description="Medium block (中組)")
