"""
Beacon feed client.

Beacon URLs are public share links; no authentication is needed, but
the endpoint only answers JSON to XHR-style requests.
"""

import logging

import httpx
from pydantic import ValidationError

from trailwatch.shared.errors import (
    BeaconError,
    BeaconNotFound,
    DeserializationError,
    TransientNetworkError,
)
from .schemas import BeaconSnapshot

logger = logging.getLogger(__name__)


class BeaconClient:
    """
    Fetches live-tracking snapshots.

    Usage:
        beacon = BeaconClient(httpx.AsyncClient(timeout=10.0))
        snapshot = await beacon.get_snapshot(beacon_url)
    """

    HEADERS = {"X-Requested-With": "XMLHttpRequest"}

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def get_snapshot(self, beacon_url: str) -> BeaconSnapshot:
        """
        Fetch and parse the current beacon reading.

        Raises:
            BeaconNotFound: If the share expired or was revoked (404)
            BeaconError: On any other non-success status
            TransientNetworkError: On connection, timeout or redirect-loop failures
            DeserializationError: If the payload is malformed
        """
        try:
            # Share links may redirect to the feed
            response = await self.client.get(
                beacon_url, headers=self.HEADERS, follow_redirects=True
            )
        except httpx.RequestError as e:
            raise TransientNetworkError(f"Beacon request failed: {e}") from e

        if response.status_code == httpx.codes.NOT_FOUND:
            raise BeaconNotFound(response.text)
        if not response.is_success:
            raise BeaconError(response.status_code, response.text)

        try:
            return BeaconSnapshot.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise DeserializationError(f"Malformed beacon data: {e}") from e
