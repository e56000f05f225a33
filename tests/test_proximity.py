import pytest

from locallens.models.category import Category
from locallens.models.domain import Coordinate
from locallens.services.geo_service import EARTH_RADIUS_MILES, haversine_miles
from locallens.services.proximity import (
    PREFILTER_SLACK,
    build_near_query,
    build_within_query,
    filter_by_proximity,
)
from locallens.services.query_normalizer import QueryDescriptor
from tests.fakes import make_business

CENTER = Coordinate(latitude=42.4430, longitude=-76.5019)
MILES_PER_DEGREE_LAT = haversine_miles(0, 0, 1, 0)


def north_of_center(miles):
    return CENTER.latitude + miles / MILES_PER_DEGREE_LAT


def test_boundary_is_inclusive():
    lat = north_of_center(3.0)
    exact = haversine_miles(CENTER.latitude, CENTER.longitude, lat, CENTER.longitude)
    on_edge = make_business("edge", lat, CENTER.longitude)

    included = filter_by_proximity(QueryDescriptor(center=CENTER, radius_miles=exact), [on_edge])
    assert [r.item.name for r in included] == ["edge"]

    excluded = filter_by_proximity(
        QueryDescriptor(center=CENTER, radius_miles=exact - 1e-9), [on_edge]
    )
    assert excluded == []


def test_null_coordinates_never_match_a_located_query():
    businesses = [
        make_business("nowhere", category=Category.ART),
        make_business("here", CENTER.latitude, CENTER.longitude, category=Category.ART),
    ]
    for category in (None, Category.ART):
        query = QueryDescriptor(center=CENTER, radius_miles=20000, category=category)
        names = [r.item.name for r in filter_by_proximity(query, businesses)]
        assert names == ["here"]


def test_category_purity():
    businesses = [
        make_business("a", CENTER.latitude, CENTER.longitude, category=Category.ART),
        make_business("b", CENTER.latitude, CENTER.longitude, category=Category.CLOTHING),
        make_business("c", CENTER.latitude, CENTER.longitude),
    ]
    query = QueryDescriptor(center=CENTER, radius_miles=1, category=Category.ART)
    results = filter_by_proximity(query, businesses)
    assert [r.business.category for r in results] == [Category.ART]


def test_no_center_passes_everything_through_unscored():
    businesses = [
        make_business("located", 10, 10),
        make_business("unlocated"),
    ]
    results = filter_by_proximity(QueryDescriptor(), businesses)
    assert [r.item.name for r in results] == ["located", "unlocated"]
    assert all(r.distance_miles is None for r in results)


def test_distance_is_reported():
    b = make_business("b", north_of_center(2), CENTER.longitude)
    [result] = filter_by_proximity(QueryDescriptor(center=CENTER, radius_miles=5), [b])
    assert result.distance_miles == pytest.approx(2.0)


def test_unresolvable_owner_is_dropped():
    owner = make_business("owner", CENTER.latitude, CENTER.longitude)
    items = [("v1", owner), ("v2", None)]
    results = filter_by_proximity(QueryDescriptor(), items, locate=lambda item: item[1])
    assert [r.item[0] for r in results] == ["v1"]


def test_within_query_uses_lng_lat_and_radians():
    query = build_within_query(CENTER, 5)
    [[lng, lat], radius] = query["location"]["$geoWithin"]["$centerSphere"]
    assert (lng, lat) == (CENTER.longitude, CENTER.latitude)
    assert radius == pytest.approx(5 * PREFILTER_SLACK / EARTH_RADIUS_MILES)


def test_near_query_uses_meters():
    query = build_near_query(CENTER, 1)
    near = query["location"]["$nearSphere"]
    assert near["$geometry"] == {"type": "Point", "coordinates": [CENTER.longitude, CENTER.latitude]}
    assert near["$maxDistance"] == pytest.approx(1609.344 * PREFILTER_SLACK)
