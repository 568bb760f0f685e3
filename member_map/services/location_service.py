"""
Location service for the member map: reading, adding and removing
member locations and collecting points of interest.
"""

import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from member_map.core.config import settings
from member_map.models.topic import Topic
from member_map.models.user import User
from member_map.schemas.geo import Coordinate
from member_map.schemas.location import MapUser, MemberLocation, PointOfInterest
from member_map.services.geo_parser import geo_parser
from member_map.services.user_service import user_service

logger = logging.getLogger(__name__)


class LocationService:
    """Service for member map operations."""

    @staticmethod
    def get_member_locations(db: Session) -> List[MemberLocation]:
        """
        Get the parsed locations of every member that has at least one.

        Args:
            db: Database session

        Returns:
            List of MemberLocation objects, ordered by user ID
        """
        locations: List[MemberLocation] = []
        for user in user_service.get_users_with_geoinformation(db):
            coordinates = geo_parser.parse(user.geoinformation)
            if not coordinates:
                continue
            locations.append(
                MemberLocation(user=MapUser.model_validate(user), coordinates=coordinates)
            )
        return locations

    @staticmethod
    def ensure_valid_coordinates(lat: float, lng: float) -> None:
        """
        Reject coordinates outside the geographic ranges.

        Raises:
            HTTPException: 422 if lat or lng is out of range
        """
        if not geo_parser.is_valid_coordinate(lat, lng):
            raise HTTPException(status_code=422, detail="Invalid coordinates")

    @staticmethod
    def get_user_coordinates(user: User) -> List[Coordinate]:
        return geo_parser.parse(user.geoinformation)

    @staticmethod
    def add_location(
        db: Session,
        user: User,
        lat: float,
        lng: float,
        zoom: Optional[int] = None,
        name: Optional[str] = None,
    ) -> List[Coordinate]:
        """
        Append a location to a member's location string.

        Args:
            db: Database session
            user: Member adding the location
            lat: Latitude in decimal degrees
            lng: Longitude in decimal degrees
            zoom: Optional map zoom level
            name: Optional place name

        Returns:
            All coordinates of the member after the change

        Raises:
            HTTPException: If the coordinates are out of range
        """
        LocationService.ensure_valid_coordinates(lat, lng)

        encoding = geo_parser.build_encoding(lat, lng, zoom=zoom, name=name)
        current = (user.geoinformation or "").strip()
        new_value = f"{current} {encoding}" if current else encoding

        user = user_service.set_geoinformation(db, user, new_value)
        logger.info("User %s added location %s", user.username, encoding)
        return geo_parser.parse(user.geoinformation)

    @staticmethod
    def delete_location(db: Session, user: User, index: int) -> List[Coordinate]:
        """
        Remove the location at a position of the member's parsed list.

        Fragments that do not parse are dropped from the stored string as
        part of the rewrite.

        Args:
            db: Database session
            user: Member removing the location
            index: 0-based position in the parsed coordinate list

        Returns:
            All coordinates of the member after the change

        Raises:
            HTTPException: If index does not refer to a location
        """
        valid_fragments = [
            fragment
            for fragment in geo_parser.split_fragments(user.geoinformation)
            if geo_parser.parse_fragment(fragment) is not None
        ]

        if index < 0 or index >= len(valid_fragments):
            raise HTTPException(
                status_code=422,
                detail="Invalid location index",
            )

        removed = valid_fragments.pop(index)
        user = user_service.set_geoinformation(db, user, " ".join(valid_fragments))
        logger.info("User %s removed location %s", user.username, removed)
        return geo_parser.parse(user.geoinformation)

    @staticmethod
    def get_pois(db: Session) -> List[PointOfInterest]:
        """
        Get all topics of the POI category that carry a parseable location.

        Returns an empty list when POIs are disabled or no category is set.
        """
        if not settings.POI_ENABLED or settings.POI_CATEGORY_ID is None:
            return []

        topics = (
            db.query(Topic)
            .filter(Topic.category_id == settings.POI_CATEGORY_ID, Topic.deleted_at.is_(None))
            .order_by(Topic.id)
            .all()
        )

        pois: List[PointOfInterest] = []
        for topic in topics:
            coordinates = geo_parser.parse(topic.coordinates)
            if not coordinates:
                continue
            pois.append(
                PointOfInterest(
                    topic_id=topic.id,
                    title=topic.title,
                    slug=topic.slug,
                    coordinates=coordinates[0],
                    user=MapUser.model_validate(topic.user),
                )
            )
        return pois


# Create a singleton instance
location_service = LocationService()
