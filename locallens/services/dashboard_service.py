# locallens/services/dashboard_service.py
"""
Business-owner operations behind the dashboard: profile edits, manual
coordinates, statistics and the owner's video catalog.
"""

import logging
from typing import Optional, Tuple

from locallens.core.errors import ForbiddenError, NotFoundError, ValidationError
from locallens.models.category import parse_category
from locallens.models.domain import Business, Coordinate, Video, utcnow
from locallens.models.request_models import (
    CoordinatesUpdateRequest,
    ProfileUpdateRequest,
    VideoCreateRequest,
)
from locallens.models.response_models import (
    Analytics,
    AnalyticsOverview,
    DashboardStats,
    RecentActivity,
    ReviewOut,
    VideoOut,
)
from locallens.services.geo_service import GeocodeResult, is_valid_coordinates
from locallens.services.result_assembler import average_rating, business_payload, newest_first

logger = logging.getLogger(__name__)


def locate_address(
    geocoder,
    address: Optional[str],
    current: Optional[Coordinate] = None,
    fallback: Optional[Coordinate] = None,
) -> Tuple[Optional[Coordinate], bool]:
    """
    Geocode an address for a write.

    Never fails the write: on a lookup failure the current coordinate (or
    `fallback` when given) is kept and the second value is False.
    """
    if not address:
        return current, False

    result = geocoder.geocode(address)
    if isinstance(result, GeocodeResult):
        return Coordinate(latitude=result.latitude, longitude=result.longitude), True

    logger.warning("Address %r not geocoded (%s): %s", address, result.code, result.error)
    if fallback is not None:
        return fallback, False
    return current, False


def owner_business(store, user_id) -> Business:
    business = store.find_business_by_owner(user_id)
    if business is None:
        raise NotFoundError("Business not found")
    return business


def dashboard_summary(store, business: Business) -> dict:
    videos = store.find_videos(business_ids=[business.id])
    reviews = store.find_reviews(business_ids=[business.id])

    stats = DashboardStats(
        total_videos=len(videos),
        total_reviews=len(reviews),
        average_rating=average_rating(reviews) or 0.0,
        recent_reviews=[ReviewOut.from_domain(r) for r in newest_first(reviews)[:5]],
    )
    return {
        "business": business_payload(business, videos, reviews),
        "stats": stats.to_json(),
    }


def update_profile(
    store,
    geocoder,
    business: Business,
    req: ProfileUpdateRequest,
    fallback: Optional[Coordinate] = None,
) -> Tuple[Business, bool]:
    category = parse_category(req.category)
    if category is None:
        raise ValidationError("Name and category are required")

    coordinate, geocoded = business.coordinate, False
    if req.address and req.address != business.address:
        coordinate, geocoded = locate_address(geocoder, req.address, business.coordinate, fallback)

    updated = business.model_copy(
        update={
            "name": req.name,
            "category": category,
            "category_label": req.category,
            "website": req.website or None,
            "address": req.address or None,
            "description": req.description if req.description is not None else business.description,
            "coordinate": coordinate,
            "updated_at": utcnow(),
        }
    )
    store.update_business(updated)
    logger.info("Business %s profile updated (geocoded=%s)", business.id, geocoded)
    return updated, geocoded


def update_coordinates(store, business: Business, req: CoordinatesUpdateRequest) -> Business:
    if not is_valid_coordinates(req.latitude, req.longitude):
        raise ValidationError("Invalid coordinates")

    updated = business.model_copy(
        update={
            "coordinate": Coordinate(latitude=req.latitude, longitude=req.longitude),
            "updated_at": utcnow(),
        }
    )
    store.update_business(updated)
    return updated


def analytics(store, business: Business) -> dict:
    videos = newest_first(store.find_videos(business_ids=[business.id]))
    reviews = newest_first(store.find_reviews(business_ids=[business.id]))

    histogram = {str(star): 0 for star in range(1, 6)}
    for review in reviews:
        histogram[str(review.rating)] += 1

    return Analytics(
        overview=AnalyticsOverview(
            total_videos=len(videos),
            total_reviews=len(reviews),
            average_rating=average_rating(reviews) or 0.0,
        ),
        ratings=histogram,
        recent_activity=RecentActivity(
            recent_reviews=[ReviewOut.from_domain(r) for r in reviews[:10]],
            recent_videos=[VideoOut.from_domain(v) for v in videos[:5]],
        ),
    ).to_json()


def list_videos(store, business: Business) -> list:
    videos = newest_first(store.find_videos(business_ids=[business.id]))
    return [VideoOut.from_domain(v, business).to_json() for v in videos]


def create_video(store, business: Business, req: VideoCreateRequest) -> dict:
    video = store.insert_video(
        Video(
            business_id=business.id,
            url=req.url,
            title=req.title,
            caption=req.caption or req.title,
            thumbnail_url=req.thumbnail_url,
            tags=req.tags,
        )
    )
    logger.info("Video %s created for business %s", video.id, business.id)
    return VideoOut.from_domain(video, business).to_json()


def delete_video(store, business: Business, video_id: str):
    video = store.get_video(video_id)
    if video.business_id != business.id:
        raise ForbiddenError("Not authorized to delete this video")
    store.delete_video(video.id)
    logger.info("Video %s deleted by business %s", video.id, business.id)
