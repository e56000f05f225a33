# locallens/services/data_normalizer.py
"""
Mapping between Mongo documents and the domain models.

Documents written by this service use snake_case fields, `lat`/`lng`
columns and a GeoJSON `location` point. Older documents (written by the
first Express API) differ: GeoJSON-only coordinates, an address object,
free-text categories, `business` instead of `business_id` and camelCase
timestamps. Both shapes are read here so nothing else has to care.
"""

from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId

from locallens.models.category import category_from_label
from locallens.models.domain import Business, Coordinate, Review, User, Video, utcnow
from locallens.services.geo_service import is_valid_coordinates


def _str_id(value) -> Optional[str]:
    if value is None:
        return None
    # populated refs come back as documents
    if isinstance(value, dict):
        value = value.get("_id")
    return str(value) if value is not None else None


def _timestamp(doc: dict, *keys) -> datetime:
    for key in keys:
        value = doc.get(key)
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return value
    return utcnow()


def _to_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _coordinate(doc: dict) -> Optional[Coordinate]:
    lat = doc.get("lat", doc.get("latitude"))
    lng = doc.get("lng", doc.get("longitude"))

    if lat is None or lng is None:
        # GeoJSON: [lng, lat]
        for key in ("location", "coordinates"):
            geo = doc.get(key)
            if isinstance(geo, dict) and isinstance(geo.get("coordinates"), (list, tuple)):
                pair = geo["coordinates"]
                if len(pair) == 2:
                    lng, lat = pair
                    break

    lat, lng = _to_float(lat), _to_float(lng)
    if lat is None or lng is None or not is_valid_coordinates(lat, lng):
        return None
    return Coordinate(latitude=lat, longitude=lng)


def _address(value) -> Optional[str]:
    if isinstance(value, dict):
        parts = [
            value.get("street"),
            value.get("city"),
            " ".join(filter(None, [value.get("state"), value.get("zipCode")])),
        ]
        return ", ".join(p for p in parts if p) or None
    return value or None


def normalize_business_doc(doc: dict) -> Business:
    label = doc.get("category_label") or doc.get("category") or doc.get("businessCategory")
    contact = doc.get("contactInfo") or {}

    return Business(
        id=_str_id(doc.get("_id")),
        name=doc.get("name") or doc.get("businessName") or "",
        category=category_from_label(doc.get("category") or label),
        category_label=label,
        website=doc.get("website") or contact.get("website"),
        address=_address(doc.get("address")),
        description=doc.get("description"),
        coordinate=_coordinate(doc),
        owner_id=_str_id(doc.get("owner_id") or doc.get("ownerId")),
        created_at=_timestamp(doc, "created_at", "createdAt"),
        updated_at=_timestamp(doc, "updated_at", "updatedAt", "created_at", "createdAt"),
    )


def coordinate_fields(coordinate: Optional[Coordinate]) -> dict:
    if coordinate is None:
        return {"lat": None, "lng": None, "location": None}
    return {
        "lat": coordinate.latitude,
        "lng": coordinate.longitude,
        "location": {
            "type": "Point",
            "coordinates": [coordinate.longitude, coordinate.latitude],
        },
    }


def business_to_doc(business: Business) -> dict:
    doc = {
        "name": business.name,
        "category": business.category.value if business.category else None,
        "category_label": business.category_label,
        "website": business.website,
        "address": business.address,
        "description": business.description,
        "owner_id": ObjectId(business.owner_id) if business.owner_id else None,
        "created_at": business.created_at,
        "updated_at": business.updated_at,
    }
    doc.update(coordinate_fields(business.coordinate))
    return doc


def normalize_video_doc(doc: dict) -> Video:
    return Video(
        id=_str_id(doc.get("_id")),
        business_id=_str_id(doc.get("business_id") or doc.get("business")),
        url=doc.get("url") or "",
        title=doc.get("title"),
        caption=doc.get("caption"),
        thumbnail_url=doc.get("thumbnail_url") or doc.get("thumbnailUrl") or doc.get("thumbUrl"),
        tags=[str(t) for t in (doc.get("tags") or [])],
        created_at=_timestamp(doc, "created_at", "createdAt"),
    )


def video_to_doc(video: Video) -> dict:
    return {
        "business_id": ObjectId(video.business_id),
        "url": video.url,
        "title": video.title,
        "caption": video.caption,
        "thumbnail_url": video.thumbnail_url,
        "tags": list(video.tags),
        "created_at": video.created_at,
    }


def normalize_review_doc(doc: dict) -> Review:
    return Review(
        id=_str_id(doc.get("_id")),
        business_id=_str_id(doc.get("business_id") or doc.get("business")),
        rating=int(doc.get("rating")),
        comment=doc.get("comment"),
        created_at=_timestamp(doc, "created_at", "createdAt"),
    )


def review_to_doc(review: Review) -> dict:
    return {
        "business_id": ObjectId(review.business_id),
        "rating": review.rating,
        "comment": review.comment,
        "created_at": review.created_at,
    }


def normalize_user_doc(doc: dict) -> User:
    return User(
        id=_str_id(doc.get("_id")),
        email=doc.get("email"),
        password_hash=doc.get("password_hash") or doc.get("password") or "",
        name=doc.get("name"),
        role=doc.get("role") or "business_owner",
        created_at=_timestamp(doc, "created_at", "createdAt"),
    )


def user_to_doc(user: User) -> dict:
    return {
        "email": user.email,
        "password_hash": user.password_hash,
        "name": user.name,
        "role": user.role,
        "created_at": user.created_at,
    }
