import logging
import math
from dataclasses import dataclass
from math import radians, sin, cos, atan2, sqrt
from typing import List, Optional, Union

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3959.0
METERS_PER_MILE = 1609.344


def haversine_miles(lat1, lng1, lat2, lng2):
    """Haversine formula → great-circle distance in miles."""
    d_lat = radians(lat2 - lat1)
    d_lng = radians(lng2 - lng1)

    a = sin(d_lat / 2) * sin(d_lat / 2) + cos(radians(lat1)) * cos(
        radians(lat2)
    ) * sin(d_lng / 2) * sin(d_lng / 2)
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_MILES * c


def miles_to_meters(miles: float) -> float:
    return miles * METERS_PER_MILE


def meters_to_miles(meters: float) -> float:
    return meters / METERS_PER_MILE


def is_valid_coordinates(lat, lng) -> bool:
    if isinstance(lat, bool) or isinstance(lng, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180


@dataclass
class GeocodeResult:
    latitude: float
    longitude: float
    formatted_address: Optional[str] = None


@dataclass
class GeocodeError:
    error: str
    code: str


class Geocoder:
    """
    Thin wrapper over geopy's Nominatim client.

    Lookups never raise: failures come back as a GeocodeError so callers
    can decide whether a missing coordinate is fatal.
    """

    def __init__(self, user_agent: str = "locallens", timeout: float = 5, geolocator=None):
        self.geolocator = geolocator or Nominatim(user_agent=user_agent, timeout=timeout)

    def geocode(self, address: str) -> Union[GeocodeResult, GeocodeError]:
        if not address or not address.strip():
            return GeocodeError(error="Address is required", code="INVALID_INPUT")

        try:
            result = self.geolocator.geocode(address.strip())
        except GeopyError as e:
            logger.warning("Geocoding failed for %r: %s", address, e)
            return GeocodeError(error="Failed to geocode address", code="NETWORK_ERROR")

        if not result:
            return GeocodeError(error="No results found for this address", code="ZERO_RESULTS")

        return GeocodeResult(
            latitude=float(result.latitude),
            longitude=float(result.longitude),
            formatted_address=result.address,
        )

    def reverse(self, lat: float, lng: float) -> Union[GeocodeResult, GeocodeError]:
        if not is_valid_coordinates(lat, lng):
            return GeocodeError(error="Invalid coordinates", code="INVALID_INPUT")

        try:
            result = self.geolocator.reverse((lat, lng))
        except GeopyError as e:
            logger.warning("Reverse geocoding failed for (%s, %s): %s", lat, lng, e)
            return GeocodeError(error="Failed to reverse geocode coordinates", code="NETWORK_ERROR")

        if not result:
            return GeocodeError(error="No address found for these coordinates", code="ZERO_RESULTS")

        return GeocodeResult(latitude=lat, longitude=lng, formatted_address=result.address)

    def suggest(self, text: str, limit: int = 5) -> List[dict]:
        """Address suggestions for a partial input, best match first."""
        try:
            results = self.geolocator.geocode(text.strip(), exactly_one=False, limit=limit)
        except GeopyError as e:
            logger.warning("Address suggestion lookup failed for %r: %s", text, e)
            raise
        return [
            {
                "description": r.address,
                "latitude": float(r.latitude),
                "longitude": float(r.longitude),
            }
            for r in (results or [])
        ]
