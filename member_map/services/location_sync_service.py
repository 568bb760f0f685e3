"""
Location Sync Service

Pushes a member's location string to the second forum installation
whenever it changes on this side. Runs as a FastAPI background task.
"""

import logging
from typing import Optional

import httpx

from member_map.core.config import settings

logger = logging.getLogger(__name__)


class LocationSyncService:
    """
    Service for sending location updates to the external forum.
    """

    def __init__(self):
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def enabled(self) -> bool:
        """Sync only runs when switched on and both URL and secret are set."""
        return bool(
            settings.LOCATION_SYNC_ENABLED
            and settings.LOCATION_SYNC_URL
            and settings.LOCATION_SYNC_SECRET
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(30.0, connect=10.0))
        return self._client

    async def sync_location(self, username: str, geoinformation: str) -> bool:
        """
        Send the current location string of a user.

        Args:
            username: Username shared by both forums
            geoinformation: Complete location string of the user

        Returns:
            True if the remote side accepted the update

        Raises:
            No exceptions - transport errors are logged and retried up to
            LOCATION_SYNC_ATTEMPTS times
        """
        if not username or not self.enabled:
            return False

        payload = {"username": username, "geoinformation": geoinformation or ""}
        headers = {"X-Sync-Secret": settings.LOCATION_SYNC_SECRET}
        attempts = max(settings.LOCATION_SYNC_ATTEMPTS, 1)

        for attempt in range(1, attempts + 1):
            try:
                client = self._get_client()
                response = await client.post(
                    settings.LOCATION_SYNC_URL, json=payload, headers=headers
                )
                if response.is_success:
                    return True
                # The remote side answered; retrying would not change its mind
                logger.warning(
                    "Location sync failed for %s: HTTP %s - %s",
                    username,
                    response.status_code,
                    response.text,
                )
                return False
            except httpx.HTTPError as e:
                logger.error(
                    "Location sync error for %s (attempt %d/%d): %s",
                    username,
                    attempt,
                    attempts,
                    str(e),
                )
        return False

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton instance for dependency injection
location_sync_service = LocationSyncService()
