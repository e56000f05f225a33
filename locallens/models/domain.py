# locallens/models/domain.py
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from locallens.models.category import Category


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Coordinate(BaseModel):
    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False)


class Business(BaseModel):
    id: Optional[str] = None
    name: str
    category: Optional[Category] = None
    # original free-text label, kept for display
    category_label: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    coordinate: Optional[Coordinate] = None
    owner_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Video(BaseModel):
    id: Optional[str] = None
    business_id: str
    url: str
    title: Optional[str] = None
    caption: Optional[str] = Field(default=None, max_length=280)
    thumbnail_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)


class Review(BaseModel):
    id: Optional[str] = None
    business_id: str
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utcnow)


class User(BaseModel):
    id: Optional[str] = None
    email: str
    password_hash: str
    name: Optional[str] = None
    role: str = "business_owner"
    created_at: datetime = Field(default_factory=utcnow)
