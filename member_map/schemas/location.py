"""
Map Location Schema

Pydantic models for the member map and point-of-interest responses.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from member_map.schemas.geo import Coordinate


class MapUser(BaseModel):
    """Public profile data shown next to a map marker"""

    id: int
    username: str
    name: Optional[str] = None
    avatar_template: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class MemberLocation(BaseModel):
    """All parsed locations of one member"""

    user: MapUser
    coordinates: List[Coordinate]


class MemberLocationsResponse(BaseModel):
    locations: List[MemberLocation]


class CoordinatesResponse(BaseModel):
    coordinates: List[Coordinate]


class PointOfInterest(BaseModel):
    """A topic that carries a map location"""

    topic_id: int
    title: str
    slug: str
    coordinates: Coordinate
    user: MapUser


class PointsOfInterestResponse(BaseModel):
    pois: List[PointOfInterest]
