from datetime import datetime, timedelta, timezone

import pytest

from locallens.models.category import Category
from locallens.models.domain import Coordinate, Review, Video
from locallens.services.discovery import discover_businesses, discover_videos
from locallens.services.geo_service import haversine_miles
from locallens.services.query_normalizer import QueryDescriptor, SortOrder, parse_cursor
from locallens.services.result_assembler import order_results, paginate
from locallens.services.proximity import ScoredResult
from tests.fakes import MemoryStore, make_business

CENTER = Coordinate(latitude=40.0, longitude=-75.0)
MILES_PER_DEGREE_LAT = haversine_miles(0, 0, 1, 0)
T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def at_miles(miles):
    return CENTER.latitude + miles / MILES_PER_DEGREE_LAT, CENTER.longitude


def seed_business(store, name, miles=None, category=None, age_hours=0):
    lat, lng = at_miles(miles) if miles is not None else (None, None)
    created = T0 - timedelta(hours=age_hours)
    return store.insert_business(
        make_business(name, lat, lng, category=category, created_at=created, updated_at=created)
    )


def seed_video(store, business, title, age_hours=0):
    return store.insert_video(
        Video(
            business_id=business.id,
            url=f"https://example.com/{title}",
            title=title,
            created_at=T0 - timedelta(hours=age_hours),
        )
    )


def test_end_to_end_radius_scenario():
    store = MemoryStore()
    seed_business(store, "one-mile", 1, age_hours=2)
    seed_business(store, "four-miles", 4, age_hours=1)
    seed_business(store, "ten-miles", 10, age_hours=0)

    query = QueryDescriptor(center=CENTER, radius_miles=5)
    results = discover_businesses(store, query)

    # recency order: the 4-mile business was created more recently
    assert [r["name"] for r in results] == ["four-miles", "one-mile"]
    assert results[0]["distanceMiles"] == pytest.approx(4, abs=1e-6)


def test_distance_order_is_opt_in():
    store = MemoryStore()
    seed_business(store, "one-mile", 1, age_hours=2)
    seed_business(store, "four-miles", 4, age_hours=1)
    seed_business(store, "ten-miles", 10, age_hours=0)

    query = QueryDescriptor(center=CENTER, radius_miles=5, order=SortOrder.DISTANCE)
    results = discover_businesses(store, query)
    assert [r["name"] for r in results] == ["one-mile", "four-miles"]
    assert store.find_business_calls[-1] == (CENTER, 5, True)


def test_no_location_passthrough_is_capped_with_null_distance():
    store = MemoryStore()
    for i in range(8):
        seed_business(store, f"b{i}", miles=i if i % 2 else None, category=Category.ART, age_hours=i)
    seed_business(store, "other", 1, category=Category.CLOTHING)

    results = discover_businesses(store, QueryDescriptor(category=Category.ART, limit=5))
    assert [r["name"] for r in results] == ["b0", "b1", "b2", "b3", "b4"]
    assert all(r["distanceMiles"] is None for r in results)
    assert all(r["category"] == "ART" for r in results)


def test_cap_applies_after_ordering_the_full_candidate_set():
    store = MemoryStore()
    # inserted oldest first so an unsorted prefix would be the oldest ones
    for i in range(80):
        seed_business(store, f"b{i:02d}", miles=0.5, age_hours=80 - i)

    results = discover_businesses(store, QueryDescriptor(center=CENTER, radius_miles=5, limit=50))
    assert len(results) == 50
    assert [r["name"] for r in results] == [f"b{i:02d}" for i in range(79, 29, -1)]


def test_cap_with_distance_order_returns_the_closest():
    store = MemoryStore()
    for i in range(60):
        seed_business(store, f"b{i:02d}", miles=4.9 - i * 0.08)

    query = QueryDescriptor(center=CENTER, radius_miles=5, limit=50, order=SortOrder.DISTANCE)
    results = discover_businesses(store, query)
    assert len(results) == 50
    assert [r["name"] for r in results] == [f"b{i:02d}" for i in range(59, 9, -1)]


def test_same_query_twice_gives_identical_results():
    store = MemoryStore()
    for i in range(10):
        seed_business(store, f"b{i}", miles=i * 0.7, age_hours=i % 3)
    query = QueryDescriptor(center=CENTER, radius_miles=5)
    assert discover_businesses(store, query) == discover_businesses(store, query)


def test_business_results_carry_videos_and_reviews():
    store = MemoryStore()
    b = seed_business(store, "cafe", 1)
    seed_video(store, b, "old", age_hours=5)
    seed_video(store, b, "new", age_hours=1)
    store.insert_review(Review(business_id=b.id, rating=4))
    store.insert_review(Review(business_id=b.id, rating=5))

    [result] = discover_businesses(store, QueryDescriptor(center=CENTER, radius_miles=5))
    assert [v["title"] for v in result["videos"]] == ["new", "old"]
    assert result["reviewCount"] == 2
    assert result["averageRating"] == 4.5


def test_videos_follow_their_business_location_and_category():
    store = MemoryStore()
    near = seed_business(store, "near", 1, category=Category.RESTAURANTS)
    far = seed_business(store, "far", 20, category=Category.RESTAURANTS)
    art = seed_business(store, "art", 1, category=Category.ART)
    seed_video(store, near, "near-video", age_hours=3)
    seed_video(store, far, "far-video", age_hours=2)
    seed_video(store, art, "art-video", age_hours=1)

    query = QueryDescriptor(center=CENTER, radius_miles=5, category=Category.RESTAURANTS)
    page = discover_videos(store, query)
    assert [r.item.title for r in page.results] == ["near-video"]
    assert page.results[0].business.name == "near"


def test_orphaned_videos_are_excluded():
    store = MemoryStore()
    b = seed_business(store, "cafe", 1)
    seed_video(store, b, "kept")
    store.insert_video(Video(business_id="0" * 24, url="https://example.com/x", title="orphan"))

    page = discover_videos(store, QueryDescriptor())
    assert [r.item.title for r in page.results] == ["kept"]


def test_video_page_cursor_walks_the_whole_feed():
    store = MemoryStore()
    b = seed_business(store, "cafe", 1)
    for i in range(7):
        seed_video(store, b, f"v{i}", age_hours=i // 2)

    seen = []
    query = QueryDescriptor(limit=3)
    while True:
        page = discover_videos(store, query)
        seen.extend(r.item.title for r in page.results)
        if not page.has_more:
            assert page.next_cursor is None
            break
        query = QueryDescriptor(limit=3, cursor=parse_cursor(page.next_cursor))

    assert sorted(seen) == [f"v{i}" for i in range(7)]
    assert len(seen) == 7


def test_listing_without_center_reads_only_what_the_page_needs():
    store = MemoryStore()
    b = seed_business(store, "cafe", 1)
    for i in range(10):
        seed_video(store, b, f"v{i}", age_hours=i)

    page = discover_videos(store, QueryDescriptor(limit=2), batch_size=3)
    assert [r.item.title for r in page.results] == ["v0", "v1"]
    assert page.has_more
    assert store.find_video_calls == [(None, None, 3)]


def test_category_listing_keeps_reading_batches_until_a_page_fills():
    store = MemoryStore()
    art = seed_business(store, "gallery", 1, category=Category.ART)
    food = seed_business(store, "diner", 1, category=Category.RESTAURANTS)
    for i in range(6):
        seed_video(store, art, f"art{i}", age_hours=i)
    seed_video(store, food, "food0", age_hours=10)
    seed_video(store, food, "food1", age_hours=11)

    query = QueryDescriptor(category=Category.RESTAURANTS, limit=1)
    page = discover_videos(store, query, batch_size=2)
    assert [r.item.title for r in page.results] == ["food0"]
    assert page.has_more
    assert len(store.find_video_calls) == 4

    query = QueryDescriptor(category=Category.RESTAURANTS, limit=1, cursor=parse_cursor(page.next_cursor))
    page = discover_videos(store, query, batch_size=2)
    assert [r.item.title for r in page.results] == ["food1"]
    assert not page.has_more


def test_recent_order_breaks_ties_by_id():
    b = make_business("b", 1, 1)
    same_time = T0
    items = [
        ScoredResult(item=Video(id="c", business_id="x", url="u", created_at=same_time), business=b),
        ScoredResult(item=Video(id="a", business_id="x", url="u", created_at=same_time), business=b),
        ScoredResult(item=Video(id="b", business_id="x", url="u", created_at=same_time), business=b),
    ]
    assert [r.item.id for r in order_results(items, SortOrder.RECENT)] == ["a", "b", "c"]


def test_paginate_reports_total_and_has_more():
    b = make_business("b", 1, 1)
    items = [
        ScoredResult(item=Video(id=str(i), business_id="x", url="u", created_at=T0 - timedelta(hours=i)), business=b)
        for i in range(5)
    ]
    page = paginate(items, QueryDescriptor(limit=2))
    assert page.total == 5
    assert page.has_more is True
    assert [r.item.id for r in page.results] == ["0", "1"]
    assert page.next_cursor.endswith(":1")
