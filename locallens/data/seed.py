"""
seed.py
-------
Loads a handful of Ithaca, NY businesses with videos and reviews into the
configured Mongo database. Existing businesses, videos and reviews are
removed first; users are left alone.

    python -m locallens.data.seed
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List

from locallens.core.config import settings
from locallens.core.logging import setup_logging
from locallens.core.mongo_client import connect
from locallens.models.category import category_from_label
from locallens.models.domain import Business, Coordinate, Review, Video, utcnow
from locallens.services.store import MongoStore

logger = logging.getLogger(__name__)

SAMPLE_BUSINESSES: List[Dict[str, Any]] = [
    {
        "name": "Moosewood Restaurant",
        "category": "Food & Drink",
        "address": "215 N Cayuga St, Ithaca, NY 14850",
        "website": "https://moosewoodrestaurant.com",
        "lat": 42.4430,
        "lng": -76.5019,
        "videos": [
            {"title": "Seasonal menu", "url": "https://www.youtube.com/embed/dQw4w9WgXcQ"},
        ],
        "ratings": [5, 4, 5],
    },
    {
        "name": "Ithaca Beer Co.",
        "category": "Food & Drink",
        "address": "122 Ithaca Beer Dr, Ithaca, NY 14850",
        "website": None,
        "lat": 42.4401,
        "lng": -76.4951,
        "videos": [
            {"title": "Taproom live music", "url": "https://www.youtube.com/embed/ysz5S6PUM-U"},
        ],
        "ratings": [4, 4],
    },
    {
        "name": "Neon Arcade",
        "category": "arcade",
        "address": "123 College Ave, Ithaca, NY 14850",
        "website": None,
        "lat": 42.447,
        "lng": -76.483,
        "videos": [
            {"title": "Friday free-play night!", "url": "https://www.youtube.com/embed/dQw4w9WgXcQ", "tags": ["retro", "pinball"]},
        ],
        "ratings": [],
    },
    {
        "name": "Basement Comedy Night",
        "category": "comedy",
        "address": "456 Aurora St, Ithaca, NY 14850",
        "website": None,
        "lat": 42.441,
        "lng": -76.49,
        "videos": [
            {"title": "Open mic highlights", "url": "https://www.youtube.com/embed/ysz5S6PUM-U", "tags": ["comedy", "open-mic"]},
        ],
        "ratings": [3],
    },
    {
        "name": "The Handwork Collective",
        "category": "Local Shopping",
        "address": "102 W State St, Ithaca, NY 14850",
        "website": None,
        "lat": 42.4393,
        "lng": -76.4988,
        "videos": [],
        "ratings": [5],
    },
    {
        "name": "State of the Art Gallery",
        "category": "Arts & Culture",
        "address": "120 W State St, Ithaca, NY 14850",
        "website": None,
        # never geocoded: only shows up in listings without a location
        "lat": None,
        "lng": None,
        "videos": [],
        "ratings": [],
    },
]


def seed(store: MongoStore, samples: List[Dict[str, Any]] = SAMPLE_BUSINESSES):
    store.businesses.delete_many({})
    store.videos.delete_many({})
    store.reviews.delete_many({})

    now = utcnow()
    n_videos = 0
    n_reviews = 0

    for i, row in enumerate(samples):
        coordinate = None
        if row.get("lat") is not None and row.get("lng") is not None:
            coordinate = Coordinate(latitude=row["lat"], longitude=row["lng"])

        created = now - timedelta(hours=i)
        business = store.insert_business(
            Business(
                name=row["name"],
                category=category_from_label(row["category"]),
                category_label=row["category"],
                address=row.get("address"),
                website=row.get("website"),
                coordinate=coordinate,
                created_at=created,
                updated_at=created,
            )
        )

        for j, v in enumerate(row.get("videos", [])):
            store.insert_video(
                Video(
                    business_id=business.id,
                    url=v["url"],
                    title=v["title"],
                    caption=v.get("caption") or v["title"],
                    tags=v.get("tags", []),
                    created_at=created - timedelta(minutes=j),
                )
            )
            n_videos += 1

        for rating in row.get("ratings", []):
            store.insert_review(Review(business_id=business.id, rating=rating))
            n_reviews += 1

    logger.info("Seeded %d businesses, %d videos and %d reviews", len(samples), n_videos, n_reviews)


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    mongo_store = MongoStore(connect(settings.MONGODB_URI, settings.MONGO_DB_NAME))
    mongo_store.ensure_indexes()
    seed(mongo_store)
