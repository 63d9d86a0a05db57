"""Location (storage platform) data model for dejihai."""

from pydantic import BaseModel, Field


class Location(BaseModel):
    """A named drop-off platform with a fixed display order."""

    id: str = Field(..., description="Unique location identifier")
    code: str = Field(..., description="Short location code (e.g. '1A1')")
    name: str = Field(..., description="Display name")
    display_order: int = Field(..., description="Fixed sort key for grid rows")
