"""Place search via Nominatim, used to jump the map to a named location."""

import logging
from dataclasses import dataclass

import requests

from terrain_profile.errors import LookupFailure
from terrain_profile.models import GeoPoint

logger = logging.getLogger(__name__)

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
MIN_QUERY_CHARS = 3


@dataclass(frozen=True)
class Place:
    lat: float
    lon: float
    display_name: str

    @property
    def short_name(self) -> str:
        """First comma-separated part of the display name."""
        return self.display_name.split(",")[0].strip() or self.display_name

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)

    def to_dict(self) -> dict:
        return {
            "lat": self.lat,
            "lon": self.lon,
            "display_name": self.display_name,
            "short_name": self.short_name,
        }


def search_places(
    query: str,
    limit: int = 5,
    min_chars: int = MIN_QUERY_CHARS,
    url: str = NOMINATIM_SEARCH_URL,
    user_agent: str = "terrain-profile/1.0",
    timeout: float = 10.0,
) -> list[Place]:
    """Search for places matching a free-text query.

    Queries shorter than min_chars (after stripping) return an empty list
    without contacting the service.

    Raises:
        LookupFailure: If the request fails or the response is not a list.
    """
    query = query.strip()
    if len(query) < min_chars:
        return []

    try:
        response = requests.get(
            url,
            params={"format": "json", "q": query, "addressdetails": 1, "limit": limit},
            headers={"Accept": "application/json", "User-Agent": user_agent},
            timeout=timeout,
        )
        response.raise_for_status()
        data = response.json()
    except requests.RequestException as e:
        logger.warning("Place search for %r failed: %s", query, e)
        raise LookupFailure(f"Place search failed: {e}") from e
    except ValueError as e:
        raise LookupFailure(f"Place search returned invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise LookupFailure("Place search response is not a list")

    places = []
    for item in data:
        try:
            places.append(
                Place(
                    lat=float(item["lat"]),
                    lon=float(item["lon"]),
                    display_name=item.get("display_name", ""),
                )
            )
        except (KeyError, TypeError, ValueError):
            logger.debug("Skipping malformed search result: %r", item)
    return places
