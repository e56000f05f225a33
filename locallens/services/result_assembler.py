# locallens/services/result_assembler.py
"""
Ordering, capping and shaping of discovery results.

Recency (newest first, id as tie-break) is the default order for every
listing. Distance order is opt-in and only meaningful when a center was
given. Results are always ordered over the full filtered set before the
limit is applied.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from locallens.models.domain import Business, Review, Video
from locallens.models.response_models import BusinessOut, ReviewOut, VideoOut
from locallens.services.proximity import ScoredResult
from locallens.services.query_normalizer import FeedCursor, QueryDescriptor, SortOrder


@dataclass
class Page:
    results: List[ScoredResult]
    has_more: bool
    next_cursor: Optional[str]
    total: int


def order_results(results: Iterable[ScoredResult], order: SortOrder) -> List[ScoredResult]:
    # stable sorts, least significant key first
    ordered = sorted(results, key=lambda r: r.item.id)
    ordered.sort(key=lambda r: r.item.created_at, reverse=True)
    if order is SortOrder.DISTANCE:
        ordered.sort(
            key=lambda r: r.distance_miles if r.distance_miles is not None else float("inf")
        )
    return ordered


def _after_cursor(result: ScoredResult, cursor: FeedCursor) -> bool:
    created = result.item.created_at
    if created < cursor.created_at:
        return True
    return created == cursor.created_at and result.item.id > cursor.id


def paginate(results: List[ScoredResult], query: QueryDescriptor) -> Page:
    ordered = order_results(results, query.order)
    total = len(ordered)

    if query.cursor is not None:
        ordered = [r for r in ordered if _after_cursor(r, query.cursor)]

    page = ordered[: query.limit]
    has_more = len(ordered) > query.limit

    next_cursor = None
    if has_more and page:
        last = page[-1].item
        next_cursor = FeedCursor(created_at=last.created_at, id=last.id).encode()

    return Page(results=page, has_more=has_more, next_cursor=next_cursor, total=total)


def average_rating(reviews: List[Review]) -> Optional[float]:
    if not reviews:
        return None
    return round(sum(r.rating for r in reviews) / len(reviews), 1)


def newest_first(items):
    ordered = sorted(items, key=lambda i: i.id)
    ordered.sort(key=lambda i: i.created_at, reverse=True)
    return ordered


def business_payload(
    business: Business,
    videos: List[Video],
    reviews: List[Review],
    distance_miles: Optional[float] = None,
) -> dict:
    return BusinessOut.from_domain(
        business,
        videos=[VideoOut.from_domain(v) for v in newest_first(videos)],
        reviews=[ReviewOut.from_domain(r) for r in newest_first(reviews)],
        review_count=len(reviews),
        average_rating=average_rating(reviews),
        distance_miles=distance_miles,
    ).to_json()


def assemble_businesses(results: List[ScoredResult], store) -> List[dict]:
    """Attach videos and reviews to each business result, keeping order."""
    ids = [r.business.id for r in results]
    videos_by_business: Dict[str, List[Video]] = {i: [] for i in ids}
    reviews_by_business: Dict[str, List[Review]] = {i: [] for i in ids}

    if ids:
        for video in store.find_videos(business_ids=ids):
            videos_by_business.setdefault(video.business_id, []).append(video)
        for review in store.find_reviews(business_ids=ids):
            reviews_by_business.setdefault(review.business_id, []).append(review)

    return [
        business_payload(
            r.business,
            videos_by_business[r.business.id],
            reviews_by_business[r.business.id],
            distance_miles=r.distance_miles,
        )
        for r in results
    ]


def assemble_videos(results: List[ScoredResult]) -> List[VideoOut]:
    return [VideoOut.from_domain(r.item, r.business) for r in results]
