# locallens/services/proximity.py
"""
Radius filtering around a center point.

Inclusion rule: an item is kept iff its business has a coordinate and the
Haversine distance to the center is <= radius (boundary included). With no
center everything passes through unscored. The Mongo helpers below only
narrow the candidate set; the Haversine check is always applied after them.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from locallens.models.domain import Business, Coordinate
from locallens.services.geo_service import EARTH_RADIUS_MILES, haversine_miles, miles_to_meters
from locallens.services.query_normalizer import QueryDescriptor

# widens the store-side prefilter so its own earth model never drops a match
PREFILTER_SLACK = 1.01


@dataclass
class ScoredResult:
    item: Any
    business: Business
    distance_miles: Optional[float] = None


def distance_to(center: Coordinate, business: Business) -> Optional[float]:
    if business.coordinate is None:
        return None
    return haversine_miles(
        center.latitude,
        center.longitude,
        business.coordinate.latitude,
        business.coordinate.longitude,
    )


def filter_by_proximity(
    query: QueryDescriptor,
    candidates: Iterable,
    locate: Callable[[Any], Optional[Business]] = lambda b: b,
) -> List[ScoredResult]:
    """
    Keep candidates matching the query's category and radius.

    `locate` maps a candidate to the business whose coordinate and category
    decide its fate (identity for businesses, the owning business for
    videos). Candidates whose business can't be resolved are dropped.
    """
    results = []

    for item in candidates:
        business = locate(item)
        if business is None:
            continue

        if query.category is not None and business.category != query.category:
            continue

        if query.center is None:
            results.append(ScoredResult(item=item, business=business))
            continue

        dist = distance_to(query.center, business)
        if dist is None or dist > query.radius_miles:
            continue

        results.append(ScoredResult(item=item, business=business, distance_miles=dist))

    return results


def _point(center: Coordinate) -> dict:
    # GeoJSON wants [lng, lat]
    return {"type": "Point", "coordinates": [center.longitude, center.latitude]}


def build_within_query(center: Coordinate, radius_miles: float) -> dict:
    radius_radians = radius_miles * PREFILTER_SLACK / EARTH_RADIUS_MILES
    return {
        "location": {
            "$geoWithin": {
                "$centerSphere": [[center.longitude, center.latitude], radius_radians]
            }
        }
    }


def build_near_query(center: Coordinate, radius_miles: float) -> dict:
    return {
        "location": {
            "$nearSphere": {
                "$geometry": _point(center),
                "$maxDistance": miles_to_meters(radius_miles * PREFILTER_SLACK),
            }
        }
    }
