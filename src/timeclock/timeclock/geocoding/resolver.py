from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from ..core.constants import DEFAULT_GEOCODER_TIMEOUT, GEOCODER_URL

logger = logging.getLogger(__name__)


class LocationResolver(Protocol):
    def resolve(self, latitude: float, longitude: float) -> Optional[str]:
        """Formatted address for the coordinates, or None. Never raises."""

        raise NotImplementedError


class NullLocationResolver:
    """Used when no geocoding key is configured."""

    def resolve(self, latitude: float, longitude: float) -> Optional[str]:
        return None


class OpenCageLocationResolver:
    """Reverse geocoding through the OpenCage HTTP API."""

    def __init__(
        self,
        api_key: str,
        *,
        url: str = GEOCODER_URL,
        language: str = "fr",
        timeout: float = DEFAULT_GEOCODER_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._api_key = api_key
        self._url = url
        self._language = language
        self._timeout = timeout
        self._session = session or requests.Session()

    def resolve(self, latitude: float, longitude: float) -> Optional[str]:
        params = {
            "q": f"{latitude},{longitude}",
            "key": self._api_key,
            "language": self._language,
            "no_annotations": 1,
        }
        try:
            response = self._session.get(self._url, params=params, timeout=self._timeout)
            response.raise_for_status()
            results = response.json().get("results") or []
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Reverse geocoding failed for (%s, %s): %s", latitude, longitude, exc)
            return None

        if not results:
            logger.info("No address found for (%s, %s)", latitude, longitude)
            return None
        return results[0].get("formatted")
