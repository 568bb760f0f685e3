"""
Geocoder Service

Reverse geocodes coordinates with the Nominatim API so that new member
locations can be stored together with a readable place name.

API Endpoint: https://nominatim.openstreetmap.org/reverse
Usage policy: https://operations.osmfoundation.org/policies/nominatim/
"""

import logging
from typing import Dict, Optional

import httpx
from pydantic import BaseModel

from member_map.core.config import settings
from member_map.schemas.health import ServiceHealth

logger = logging.getLogger(__name__)

# Address fields that may carry the locality, most specific first
CITY_FIELDS = ("city", "town", "village", "municipality")


class GeocodeResult(BaseModel):
    city: Optional[str] = None
    postcode: Optional[str] = None


class GeocoderService:
    """
    Service for reverse geocoding through Nominatim.
    """

    def __init__(self):
        """
        Initialize the geocoder with configuration.
        """
        self._api_url = settings.NOMINATIM_URL
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create the HTTP client for the Nominatim API.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=settings.GEOCODER_TIMEOUT,
                headers={
                    "User-Agent": settings.GEOCODER_USER_AGENT,
                    "Accept-Language": settings.GEOCODER_ACCEPT_LANGUAGE,
                },
            )
        return self._client

    async def health_check(self) -> ServiceHealth:
        """
        Perform a health check of the Nominatim API.

        Returns:
            ServiceHealth indicating the health status of the geocoder.
        """
        try:
            client = self._get_client()
            response = await client.get(
                self._api_url, params={"lat": 0, "lon": 0, "format": "json"}
            )

            if response.status_code == 200:
                return ServiceHealth(
                    healthy=True,
                    message="Nominatim API is responding",
                )
            return ServiceHealth(
                healthy=False,
                message=f"Nominatim API returned status code: {response.status_code}",
            )

        except httpx.TimeoutException:
            return ServiceHealth(
                healthy=False,
                message="Nominatim API request timed out",
            )
        except Exception as e:  # pylint: disable=broad-except
            return ServiceHealth(
                healthy=False,
                message=f"Nominatim API check failed: {str(e)}",
            )

    async def reverse_geocode(self, lat: float, lng: float) -> Optional[GeocodeResult]:
        """
        Look up city and postcode for a coordinate.

        Args:
            lat: Latitude in decimal degrees
            lng: Longitude in decimal degrees

        Returns:
            GeocodeResult with city and/or postcode, or None if the lookup
            failed or the address carried neither

        Raises:
            No exceptions - failures are logged and answered with None
        """
        params = {
            "lat": lat,
            "lon": lng,
            "format": "json",
            "addressdetails": 1,
        }

        try:
            client = self._get_client()
            response = await client.get(self._api_url, params=params)

            if response.status_code != 200:
                logger.warning(
                    "Nominatim returned status %s for %s,%s", response.status_code, lat, lng
                )
                return None

            return self._parse_address(response.json().get("address"))

        except httpx.TimeoutException:
            logger.warning("Nominatim request timed out for %s,%s", lat, lng)
        except Exception as e:  # pylint: disable=broad-except
            logger.warning("Geocoding failed for %s,%s: %s", lat, lng, str(e))
        return None

    @staticmethod
    def _parse_address(address: Optional[Dict]) -> Optional[GeocodeResult]:
        if not address:
            return None

        city = next((address[field] for field in CITY_FIELDS if address.get(field)), None)
        postcode = address.get("postcode")
        if not city and not postcode:
            return None
        return GeocodeResult(city=city, postcode=postcode)

    @staticmethod
    def format_location_name(city: Optional[str], postcode: Optional[str]) -> Optional[str]:
        """
        Format a place name like "10178 Berlin", "Berlin" or "10178".
        """
        if city and postcode:
            return f"{postcode} {city}"
        return city or postcode or None

    async def lookup_location_name(self, lat: float, lng: float) -> Optional[str]:
        """
        Reverse geocode and format the result as a place name.
        """
        result = await self.reverse_geocode(lat, lng)
        if result is None:
            return None
        return self.format_location_name(result.city, result.postcode)

    async def close(self):
        """
        Close the HTTP client.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton instance for dependency injection
geocoder_service = GeocoderService()
