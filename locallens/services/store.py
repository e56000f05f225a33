# locallens/services/store.py
"""
MongoDB-backed store.

One instance is created by the app factory and handed to request handlers
through `app.extensions`; nothing here is module-global. Children (videos,
reviews) carry their parent's id and are looked up by query, so creating
one is a single insert.

Any object with the same methods can stand in for this class (the tests
use an in-memory one).
"""

import logging
from typing import Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, GEOSPHERE
from pymongo.errors import DuplicateKeyError

from locallens.core.errors import ConflictError, NotFoundError, ValidationError
from locallens.models.domain import Business, Coordinate, Review, User, Video
from locallens.services.data_normalizer import (
    business_to_doc,
    coordinate_fields,
    normalize_business_doc,
    normalize_review_doc,
    normalize_user_doc,
    normalize_video_doc,
    review_to_doc,
    user_to_doc,
    video_to_doc,
)
from locallens.services.proximity import build_near_query, build_within_query
from locallens.services.query_normalizer import FeedCursor

logger = logging.getLogger(__name__)


def to_object_id(value, what: str = "Record") -> ObjectId:
    # a malformed id is reported exactly like a missing record
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFoundError(f"{what} not found")


def _object_ids(values: Iterable) -> List[ObjectId]:
    ids = []
    for v in values:
        try:
            ids.append(ObjectId(str(v)))
        except (InvalidId, TypeError):
            continue
    return ids


def _parent_filter(business_ids: Iterable) -> dict:
    oids = _object_ids(business_ids)
    return {"$or": [{"business_id": {"$in": oids}}, {"business": {"$in": oids}}]}


def _after_filter(cursor: FeedCursor) -> dict:
    # strictly after the cursor in (created_at desc, _id asc) order
    try:
        oid = ObjectId(cursor.id)
    except (InvalidId, TypeError):
        raise ValidationError('Invalid cursor format. Expected "createdAt:id"')
    return {
        "$or": [
            {"created_at": {"$lt": cursor.created_at}},
            {"created_at": cursor.created_at, "_id": {"$gt": oid}},
        ]
    }


class MongoStore:
    def __init__(self, db):
        self.db = db
        self.businesses = db.businesses
        self.videos = db.videos
        self.reviews = db.reviews
        self.users = db.users

    def ensure_indexes(self):
        self.backfill_legacy_fields()
        self.businesses.create_index([("location", GEOSPHERE)])
        self.businesses.create_index([("owner_id", ASCENDING)])
        self.videos.create_index([("business_id", ASCENDING), ("created_at", DESCENDING)])
        self.videos.create_index([("created_at", DESCENDING), ("_id", ASCENDING)])
        self.reviews.create_index([("business_id", ASCENDING)])
        self.users.create_index([("email", ASCENDING)], unique=True)
        logger.info("Mongo indexes ensured")

    def backfill_legacy_fields(self):
        """
        Bring older documents up to the shape the queries rely on.

        Businesses that only carry `lat`/`lng` or a GeoJSON `coordinates`
        point get the indexed `location` field, and children with only
        `createdAt` get `created_at`. Safe to run repeatedly.
        """
        unlocated = {"$or": [{"location": {"$exists": False}}, {"location": None}]}
        located = 0
        for doc in self.businesses.find(unlocated):
            business = normalize_business_doc(doc)
            if business.coordinate is None:
                continue
            self.businesses.update_one(
                {"_id": doc["_id"]}, {"$set": coordinate_fields(business.coordinate)}
            )
            located += 1

        stamped = 0
        legacy_stamp = {"created_at": {"$exists": False}, "createdAt": {"$exists": True}}
        for collection in (self.videos, self.reviews):
            result = collection.update_many(legacy_stamp, [{"$set": {"created_at": "$createdAt"}}])
            stamped += result.modified_count

        if located or stamped:
            logger.info("Backfilled %d business locations and %d timestamps", located, stamped)
        return located, stamped

    # ---------------- businesses ---------------- #

    def find_businesses(
        self,
        center: Optional[Coordinate] = None,
        radius_miles: Optional[float] = None,
        nearest_first: bool = False,
    ) -> List[Business]:
        """
        Candidate businesses for a discovery query.

        With a center the geo index narrows the set to (slightly more than)
        the radius; callers still apply the exact distance check.
        """
        if center is not None and radius_miles is not None:
            if nearest_first:
                query = build_near_query(center, radius_miles)
            else:
                query = build_within_query(center, radius_miles)
        else:
            query = {}

        return [normalize_business_doc(d) for d in self.businesses.find(query)]

    def find_businesses_by_ids(self, business_ids: Iterable) -> Dict[str, Business]:
        oids = _object_ids(business_ids)
        if not oids:
            return {}
        docs = self.businesses.find({"_id": {"$in": oids}})
        found = [normalize_business_doc(d) for d in docs]
        return {b.id: b for b in found}

    def get_business(self, business_id) -> Business:
        doc = self.businesses.find_one({"_id": to_object_id(business_id, "Business")})
        if not doc:
            raise NotFoundError("Business not found")
        return normalize_business_doc(doc)

    def find_business_by_owner(self, owner_id) -> Optional[Business]:
        try:
            oid = ObjectId(str(owner_id))
        except (InvalidId, TypeError):
            return None
        doc = self.businesses.find_one({"owner_id": oid})
        return normalize_business_doc(doc) if doc else None

    def insert_business(self, business: Business) -> Business:
        result = self.businesses.insert_one(business_to_doc(business))
        return business.model_copy(update={"id": str(result.inserted_id)})

    def update_business(self, business: Business) -> Business:
        oid = to_object_id(business.id, "Business")
        result = self.businesses.update_one({"_id": oid}, {"$set": business_to_doc(business)})
        if result.matched_count == 0:
            raise NotFoundError("Business not found")
        return business

    def delete_business(self, business_id):
        self.businesses.delete_one({"_id": to_object_id(business_id, "Business")})

    # ---------------- videos ---------------- #

    def find_videos(
        self,
        business_ids: Optional[Iterable] = None,
        after: Optional[FeedCursor] = None,
        limit: Optional[int] = None,
    ) -> List[Video]:
        """Videos newest first, optionally only those after `after` and at most `limit`."""
        clauses = []
        if business_ids is not None:
            clauses.append(_parent_filter(business_ids))
        if after is not None:
            clauses.append(_after_filter(after))
        query = {"$and": clauses} if len(clauses) > 1 else (clauses[0] if clauses else {})

        cursor = self.videos.find(query).sort([("created_at", DESCENDING), ("_id", ASCENDING)])
        if limit is not None:
            cursor = cursor.limit(limit)
        return [normalize_video_doc(d) for d in cursor]

    def get_video(self, video_id) -> Video:
        doc = self.videos.find_one({"_id": to_object_id(video_id, "Video")})
        if not doc:
            raise NotFoundError("Video not found")
        return normalize_video_doc(doc)

    def insert_video(self, video: Video) -> Video:
        result = self.videos.insert_one(video_to_doc(video))
        return video.model_copy(update={"id": str(result.inserted_id)})

    def delete_video(self, video_id):
        result = self.videos.delete_one({"_id": to_object_id(video_id, "Video")})
        if result.deleted_count == 0:
            raise NotFoundError("Video not found")

    # ---------------- reviews ---------------- #

    def find_reviews(self, business_ids: Iterable) -> List[Review]:
        cursor = self.reviews.find(_parent_filter(business_ids))
        return [normalize_review_doc(d) for d in cursor]

    def insert_review(self, review: Review) -> Review:
        result = self.reviews.insert_one(review_to_doc(review))
        return review.model_copy(update={"id": str(result.inserted_id)})

    # ---------------- users ---------------- #

    def get_user(self, user_id) -> User:
        doc = self.users.find_one({"_id": to_object_id(user_id, "User")})
        if not doc:
            raise NotFoundError("User not found")
        return normalize_user_doc(doc)

    def find_user_by_email(self, email: str) -> Optional[User]:
        doc = self.users.find_one({"email": email.strip().lower()})
        return normalize_user_doc(doc) if doc else None

    def insert_user(self, user: User) -> User:
        try:
            result = self.users.insert_one(user_to_doc(user))
        except DuplicateKeyError:
            raise ConflictError("User with this email already exists")
        return user.model_copy(update={"id": str(result.inserted_id)})

    def delete_user(self, user_id):
        self.users.delete_one({"_id": to_object_id(user_id, "User")})
