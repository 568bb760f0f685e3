"""
Geo parser for member location strings.

A location string holds one or more whitespace-separated fragments that
members typed over the years, each describing a single place:

- geo:lat,lng?z=zoom&name=Name   geo:52.535150,13.394236?z=19&name=Berlin+%2810178%29
- geo:lat,lng                    geo:50.800411,6.914046
- geo: lat,lng                   geo: 49.536401,8.350006
- eo:lat,lng, GEO:lat,lng        dropped letter and case variants of the prefix
- lat,lng                        50.554224,9.676251
- OpenStreetMap permalink        https://www.openstreetmap.org/?#map=19/52.129158/11.604304

Fragments that match none of these, or whose coordinates are out of range,
are skipped without affecting the rest of the string. New locations are
always stored in the ``geo:`` form produced by ``build_encoding``.
"""

import logging
import re
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence
from urllib.parse import parse_qsl, quote_plus

from member_map.schemas.geo import Coordinate

logger = logging.getLogger(__name__)

GEO_URI_SCHEME = "geo"
MAP_URL_MARKER = "openstreetmap.org"

_NUMBER = r"-?\d+(?:\.\d+)?"

MAP_URL_RE = re.compile(rf"[#?&]map=(\d{1,9})/({_NUMBER})/({_NUMBER})", re.ASCII)
GEO_PREFIX_RE = re.compile(r"g?eo:\s*", re.IGNORECASE | re.ASCII)
COORDINATE_PAIR_RE = re.compile(rf"({_NUMBER}),\s*({_NUMBER})", re.ASCII)
# Longer digit runs are not a zoom level
ZOOM_RE = re.compile(r"\d{1,9}(?!\d)", re.ASCII)

# Whitespace that sits inside a single tagged fragment: between the prefix
# and the latitude, or after the comma of its coordinate pair. Bare pairs
# are never joined across whitespace, so "Haus 12, 13 Leute" stays text.
_PREFIX_GAP_RE = re.compile(r"(?<!\S)(g?eo:)\s+(?=-?\d)", re.IGNORECASE | re.ASCII)
_COMMA_GAP_RE = re.compile(rf"(?<!\S)(g?eo:{_NUMBER},)\s+(?=-?\d)", re.IGNORECASE | re.ASCII)

Matcher = Callable[[str], Optional[Coordinate]]


def _coordinate(
    lat: float, lng: float, zoom: Optional[int] = None, name: Optional[str] = None
) -> Optional[Coordinate]:
    if not GeoParser.is_valid_coordinate(lat, lng):
        return None
    return Coordinate(lat=lat, lng=lng, zoom=zoom, name=name)


def _query_params(query: str) -> Dict[str, str]:
    """First value of every key in a ``&``-separated query. Never raises."""
    params: Dict[str, str] = {}
    for key, value in parse_qsl(query):
        params.setdefault(key, value)
    return params


def match_map_url(fragment: str) -> Optional[Coordinate]:
    """OpenStreetMap permalink carrying ``map=zoom/lat/lng``."""
    if MAP_URL_MARKER not in fragment.lower():
        return None
    match = MAP_URL_RE.search(fragment)
    if not match:
        return None
    return _coordinate(float(match.group(2)), float(match.group(3)), zoom=int(match.group(1)))


def match_geo_uri(fragment: str) -> Optional[Coordinate]:
    """``geo:lat,lng`` with optional ``?z=..&name=..`` query."""
    prefix = GEO_PREFIX_RE.match(fragment)
    if not prefix:
        return None

    coords, _, query = fragment[prefix.end():].partition("?")
    match = COORDINATE_PAIR_RE.fullmatch(coords)
    if not match:
        return None

    params = _query_params(query)
    zoom = None
    zoom_match = ZOOM_RE.match(params.get("z", ""))
    if zoom_match:
        zoom = int(zoom_match.group())

    return _coordinate(
        float(match.group(1)),
        float(match.group(2)),
        zoom=zoom,
        name=params.get("name") or None,
    )


def match_coordinate_pair(fragment: str) -> Optional[Coordinate]:
    """Bare ``lat,lng``."""
    match = COORDINATE_PAIR_RE.fullmatch(fragment)
    if not match:
        return None
    return _coordinate(float(match.group(1)), float(match.group(2)))


# Tried in order, first match wins
MATCHERS: Sequence[Matcher] = (match_map_url, match_geo_uri, match_coordinate_pair)


def _format_degrees(value: float) -> str:
    # Shortest round-tripping digits, always in positional notation
    return format(Decimal(repr(float(value))), "f")


class GeoParser:
    """Stateless parser and builder for location strings."""

    @staticmethod
    def is_valid_coordinate(lat: float, lng: float) -> bool:
        """
        Check that latitude and longitude are inside their geographic ranges.

        Args:
            lat: Latitude in decimal degrees
            lng: Longitude in decimal degrees

        Returns:
            True if -90 <= lat <= 90 and -180 <= lng <= 180
        """
        return -90 <= lat <= 90 and -180 <= lng <= 180

    @staticmethod
    def split_fragments(text: Optional[str]) -> List[str]:
        """
        Split a location string into the fragments ``parse`` looks at.

        Args:
            text: Stored location string, may be None

        Returns:
            List of non-empty fragments in input order

        Raises:
            TypeError: If text is neither None nor a string
        """
        if text is None:
            return []
        if not isinstance(text, str):
            raise TypeError(f"Location string must be str, not {type(text).__name__}")

        text = _PREFIX_GAP_RE.sub(r"\1", text)
        text = _COMMA_GAP_RE.sub(r"\1", text)
        return text.split()

    @staticmethod
    def parse_fragment(fragment: str) -> Optional[Coordinate]:
        """Parse a single fragment, or return None if no format matches."""
        for matcher in MATCHERS:
            coordinate = matcher(fragment)
            if coordinate is not None:
                return coordinate
        return None

    @classmethod
    def parse(cls, text: Optional[str]) -> List[Coordinate]:
        """
        Parse a location string into coordinates.

        Args:
            text: Stored location string, may be None or blank

        Returns:
            Coordinates in input order; unparseable or out-of-range
            fragments are left out

        Raises:
            TypeError: If text is neither None nor a string
        """
        coordinates: List[Coordinate] = []
        for fragment in cls.split_fragments(text):
            coordinate = cls.parse_fragment(fragment)
            if coordinate is None:
                logger.debug("Skipping unparseable location fragment: %r", fragment)
                continue
            coordinates.append(coordinate)
        return coordinates

    @staticmethod
    def build_encoding(
        lat: float, lng: float, zoom: Optional[int] = None, name: Optional[str] = None
    ) -> str:
        """
        Build the canonical ``geo:`` encoding for a location.

        Bounds are not checked here; validate with ``is_valid_coordinate``
        before storing user input.

        Args:
            lat: Latitude in decimal degrees
            lng: Longitude in decimal degrees
            zoom: Optional map zoom level
            name: Optional place name, omitted when blank

        Returns:
            String like ``geo:52.52,13.405?z=15&name=10178+Berlin``
        """
        encoding = f"{GEO_URI_SCHEME}:{_format_degrees(lat)},{_format_degrees(lng)}"

        params = []
        if zoom is not None:
            params.append(f"z={int(zoom)}")
        if name and name.strip():
            params.append(f"name={quote_plus(name, safe='')}")
        if params:
            encoding += "?" + "&".join(params)
        return encoding


# Singleton instance for dependency injection
geo_parser = GeoParser()
