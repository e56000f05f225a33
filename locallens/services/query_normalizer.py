# locallens/services/query_normalizer.py
"""
Turns raw discovery query parameters into a validated QueryDescriptor.

Radius is carried in miles everywhere past this point. Callers may send
`radiusMi` (miles) or the older `radius` (meters); meters are converted
here and nowhere else.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Mapping, Optional

from locallens.core.errors import ValidationError
from locallens.models.category import Category, parse_category
from locallens.models.domain import Coordinate
from locallens.services.geo_service import meters_to_miles


class SortOrder(str, Enum):
    RECENT = "recent"
    DISTANCE = "distance"


@dataclass(frozen=True)
class FeedCursor:
    created_at: datetime
    id: str

    def encode(self) -> str:
        return f"{self.created_at.isoformat()}:{self.id}"


@dataclass(frozen=True)
class QueryDescriptor:
    center: Optional[Coordinate] = None
    radius_miles: float = 5.0
    category: Optional[Category] = None
    limit: int = 50
    order: SortOrder = SortOrder.RECENT
    cursor: Optional[FeedCursor] = None


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_float(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a valid number")
    if not math.isfinite(number):
        raise ValidationError(f"{name} must be a valid number")
    return number


def parse_center(lat, lng) -> Optional[Coordinate]:
    if _blank(lat) and _blank(lng):
        return None
    if _blank(lat) or _blank(lng):
        raise ValidationError("lat and lng must be provided together")

    latitude = _parse_float("lat", lat)
    longitude = _parse_float("lng", lng)
    if not -90 <= latitude <= 90:
        raise ValidationError("lat must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise ValidationError("lng must be between -180 and 180")
    return Coordinate(latitude=latitude, longitude=longitude)


def parse_radius_miles(params: Mapping, default_miles: float) -> float:
    if not _blank(params.get("radiusMi")):
        radius = _parse_float("radiusMi", params.get("radiusMi"))
    elif not _blank(params.get("radius")):
        radius = meters_to_miles(_parse_float("radius", params.get("radius")))
    else:
        radius = default_miles

    if radius <= 0:
        raise ValidationError("radius must be greater than 0")
    return radius


def parse_limit(value, default: int, maximum: int) -> int:
    if _blank(value):
        return min(default, maximum)
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError("limit must be an integer")
    if limit < 1:
        raise ValidationError("limit must be at least 1")
    return min(limit, maximum)


def parse_cursor(value) -> Optional[FeedCursor]:
    if _blank(value):
        return None
    # ISO timestamps contain colons; ids do not
    date_str, sep, cursor_id = str(value).rpartition(":")
    try:
        if not sep or not cursor_id:
            raise ValueError(value)
        created_at = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError('Invalid cursor format. Expected "createdAt:id"')
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return FeedCursor(created_at=created_at, id=cursor_id)


def parse_sort(value) -> SortOrder:
    if _blank(value):
        return SortOrder.RECENT
    try:
        return SortOrder(str(value).strip().lower())
    except ValueError:
        raise ValidationError("sort must be one of: recent, distance")


def normalize_query(
    params: Mapping,
    default_radius_miles: float = 5.0,
    default_limit: int = 50,
    max_limit: int = 50,
    allow_cursor: bool = False,
    default_order: SortOrder = SortOrder.RECENT,
) -> QueryDescriptor:
    center = parse_center(params.get("lat"), params.get("lng"))
    radius = parse_radius_miles(params, default_radius_miles)
    category = parse_category(params.get("category"))
    limit = parse_limit(params.get("limit"), default_limit, max_limit)
    order = parse_sort(params.get("sort")) if not _blank(params.get("sort")) else default_order

    if order is SortOrder.DISTANCE and center is None:
        raise ValidationError("sort=distance requires lat and lng")

    cursor = None
    if not _blank(params.get("cursor")):
        if not allow_cursor:
            raise ValidationError("cursor is not supported on this endpoint")
        if order is not SortOrder.RECENT:
            raise ValidationError("cursor pagination requires sort=recent")
        cursor = parse_cursor(params.get("cursor"))

    return QueryDescriptor(
        center=center,
        radius_miles=radius,
        category=category,
        limit=limit,
        order=order,
        cursor=cursor,
    )
