"""
Coordinate Type Definitions

Pydantic models for the canonical parsed form of a location fragment
and for coordinates submitted by a member.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Coordinate(BaseModel):
    """
    A single map location: latitude, longitude and optional zoom and label.
    """

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in decimal degrees")
    lng: float = Field(..., ge=-180.0, le=180.0, description="Longitude in decimal degrees")
    zoom: Optional[int] = Field(None, ge=0, description="Map zoom level")
    name: Optional[str] = Field(None, description="Human-readable place name, e.g. '10178 Berlin'")

    def __str__(self) -> str:
        return f"({self.lat}, {self.lng})"


class LocationCreate(BaseModel):
    """
    Coordinates submitted by a member. Bounds are checked by the service
    so that out-of-range values answer with a single error message.
    """

    lat: float
    lng: float
    zoom: Optional[int] = Field(None, ge=0)
