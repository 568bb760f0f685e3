from datetime import datetime, timezone

import pytest
from fastapi import HTTPException
from sqlalchemy.orm import Session

from member_map.core.config import settings
from member_map.models.topic import Topic
from member_map.models.user import User
from member_map.schemas.geo import Coordinate
from member_map.services.location_service import location_service


def create_test_user(db: Session, username: str = "testuser", geoinformation=None) -> User:
    """Helper function to create a test user"""
    user = User(
        username=username,
        hashed_password="not-a-real-hash",
        name=username.title(),
        avatar_template=f"/avatars/{username}/{{size}}.png",
        geoinformation=geoinformation,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_test_topic(db: Session, user: User, category_id: int, coordinates, **kwargs) -> Topic:
    """Helper function to create a test topic"""
    topic = Topic(
        user_id=user.id,
        category_id=category_id,
        title=kwargs.get("title", "Museum"),
        slug=kwargs.get("slug", "museum"),
        coordinates=coordinates,
        deleted_at=kwargs.get("deleted_at"),
    )
    db.add(topic)
    db.commit()
    db.refresh(topic)
    return topic


@pytest.fixture
def poi_category(monkeypatch):
    monkeypatch.setattr(settings, "POI_ENABLED", True)
    monkeypatch.setattr(settings, "POI_CATEGORY_ID", 42)
    return 42


def test_get_member_locations_empty(db: Session):
    assert location_service.get_member_locations(db) == []


def test_get_member_locations(db: Session):
    """Test that only members with parseable locations are listed"""
    alice = create_test_user(db, "alice", "geo:52.520,13.405?z=15 geo:48.856,2.352")
    create_test_user(db, "bob", "invalid data")
    create_test_user(db, "carol", "")
    create_test_user(db, "dave")

    locations = location_service.get_member_locations(db)

    assert len(locations) == 1
    assert locations[0].user.id == alice.id
    assert locations[0].user.username == "alice"
    assert locations[0].user.name == "Alice"
    assert locations[0].user.avatar_template == "/avatars/alice/{size}.png"
    assert locations[0].coordinates == [
        Coordinate(lat=52.520, lng=13.405, zoom=15),
        Coordinate(lat=48.856, lng=2.352),
    ]


def test_get_user_coordinates(db: Session):
    user = create_test_user(db, geoinformation="50.554224,9.676251")

    assert location_service.get_user_coordinates(user) == [Coordinate(lat=50.554224, lng=9.676251)]


def test_add_location_first(db: Session):
    """Test adding a location to a member without one"""
    user = create_test_user(db)

    coordinates = location_service.add_location(db, user, 52.52, 13.405, zoom=15, name="10178 Berlin")

    assert coordinates == [Coordinate(lat=52.52, lng=13.405, zoom=15, name="10178 Berlin")]
    assert user.geoinformation == "geo:52.52,13.405?z=15&name=10178+Berlin"


def test_add_location_appends(db: Session):
    user = create_test_user(db, geoinformation="  50.554224,9.676251 ")

    coordinates = location_service.add_location(db, user, 48.85, 2.35)

    assert len(coordinates) == 2
    assert coordinates[1] == Coordinate(lat=48.85, lng=2.35)
    assert user.geoinformation == "50.554224,9.676251 geo:48.85,2.35"


def test_add_location_invalid_coordinates(db: Session):
    user = create_test_user(db, geoinformation="geo:1.0,2.0")

    with pytest.raises(HTTPException) as exc_info:
        location_service.add_location(db, user, 95.0, 13.0)

    assert exc_info.value.status_code == 422
    assert exc_info.value.detail == "Invalid coordinates"
    db.refresh(user)
    assert user.geoinformation == "geo:1.0,2.0"


def test_delete_location(db: Session):
    """Test deleting by index skips and drops unparseable fragments"""
    user = create_test_user(db, geoinformation="geo:52.52,13.40 invalid geo:48.85,2.35 50.1,8.6")

    coordinates = location_service.delete_location(db, user, 1)

    assert coordinates == [Coordinate(lat=52.52, lng=13.40), Coordinate(lat=50.1, lng=8.6)]
    assert user.geoinformation == "geo:52.52,13.40 50.1,8.6"


def test_delete_last_location(db: Session):
    user = create_test_user(db, geoinformation="geo: 52.52, 13.40")

    coordinates = location_service.delete_location(db, user, 0)

    assert coordinates == []
    assert user.geoinformation == ""


@pytest.mark.parametrize("index", [-1, 2, 99])
def test_delete_location_invalid_index(db: Session, index: int):
    user = create_test_user(db, geoinformation="geo:52.52,13.40 geo:48.85,2.35")

    with pytest.raises(HTTPException) as exc_info:
        location_service.delete_location(db, user, index)

    assert exc_info.value.status_code == 422
    assert "index" in exc_info.value.detail


def test_get_pois(db: Session, poi_category: int):
    """Test that only live topics of the category with coordinates are returned"""
    user = create_test_user(db, "poster")
    museum = create_test_topic(
        db, user, poi_category, "geo:52.129158,11.604304?z=19 geo:1,1", title="Museum", slug="museum"
    )
    create_test_topic(db, user, poi_category, None, title="No coords", slug="no-coords")
    create_test_topic(db, user, poi_category, "somewhere", title="Bad coords", slug="bad-coords")
    create_test_topic(db, user, 7, "geo:50.0,8.0", title="Other category", slug="other")
    create_test_topic(
        db,
        user,
        poi_category,
        "geo:50.0,8.0",
        title="Deleted",
        slug="deleted",
        deleted_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )

    pois = location_service.get_pois(db)

    assert len(pois) == 1
    assert pois[0].topic_id == museum.id
    assert pois[0].title == "Museum"
    assert pois[0].slug == "museum"
    assert pois[0].coordinates == Coordinate(lat=52.129158, lng=11.604304, zoom=19)
    assert pois[0].user.username == "poster"


def test_get_pois_disabled(db: Session, poi_category: int, monkeypatch):
    user = create_test_user(db)
    create_test_topic(db, user, poi_category, "geo:52.0,11.0")
    monkeypatch.setattr(settings, "POI_ENABLED", False)

    assert location_service.get_pois(db) == []


def test_get_pois_without_category(db: Session, monkeypatch):
    monkeypatch.setattr(settings, "POI_CATEGORY_ID", None)

    assert location_service.get_pois(db) == []
