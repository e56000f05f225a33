from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from locallens.models.domain import Business, Review, User, Video


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class BusinessSummary(ApiModel):
    id: str
    name: str
    category: Optional[str]
    category_label: Optional[str]
    website: Optional[str]
    address: Optional[str]
    description: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    owner_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, business: Business, **extra):
        coord = business.coordinate
        return cls(
            id=business.id,
            name=business.name,
            category=business.category.value if business.category else None,
            category_label=business.category_label,
            website=business.website,
            address=business.address,
            description=business.description,
            latitude=coord.latitude if coord else None,
            longitude=coord.longitude if coord else None,
            owner_id=business.owner_id,
            created_at=business.created_at,
            updated_at=business.updated_at,
            **extra,
        )


class VideoOut(ApiModel):
    id: str
    business_id: str
    url: str
    title: Optional[str]
    caption: Optional[str]
    thumbnail_url: Optional[str]
    tags: List[str]
    created_at: datetime
    business: Optional[BusinessSummary] = None

    @classmethod
    def from_domain(cls, video: Video, business: Optional[Business] = None):
        return cls(
            id=video.id,
            business_id=video.business_id,
            url=video.url,
            title=video.title,
            caption=video.caption,
            thumbnail_url=video.thumbnail_url,
            tags=list(video.tags),
            created_at=video.created_at,
            business=BusinessSummary.from_domain(business) if business else None,
        )


class ReviewOut(ApiModel):
    id: str
    business_id: str
    rating: int
    comment: Optional[str]
    created_at: datetime

    @classmethod
    def from_domain(cls, review: Review):
        return cls(
            id=review.id,
            business_id=review.business_id,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
        )


class BusinessOut(BusinessSummary):
    videos: List[VideoOut] = []
    reviews: List[ReviewOut] = []
    review_count: int = 0
    average_rating: Optional[float] = None
    distance_miles: Optional[float] = None


class FeedResponse(ApiModel):
    videos: List[VideoOut]
    next_cursor: Optional[str]
    has_more: bool
    total_in_radius: Optional[int] = None

    def to_json(self) -> dict:
        body = super().to_json()
        # only reported for location queries
        if self.total_in_radius is None:
            body.pop("totalInRadius", None)
        return body


class UserOut(ApiModel):
    id: str
    email: str
    name: Optional[str]
    role: str
    business_id: Optional[str]
    created_at: datetime

    @classmethod
    def from_domain(cls, user: User, business_id: Optional[str] = None):
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            business_id=business_id,
            created_at=user.created_at,
        )


class DashboardStats(ApiModel):
    total_videos: int
    total_reviews: int
    average_rating: float
    recent_reviews: List[ReviewOut]


class AnalyticsOverview(ApiModel):
    total_videos: int
    total_reviews: int
    average_rating: float


class RecentActivity(ApiModel):
    recent_reviews: List[ReviewOut]
    recent_videos: List[VideoOut]


class Analytics(ApiModel):
    overview: AnalyticsOverview
    # keys "1".."5"
    ratings: Dict[str, int]
    recent_activity: RecentActivity
