# locallens/api/endpoints/businesses.py

from flask import Blueprint, current_app, jsonify, request

from locallens.api.context import get_store, json_body
from locallens.core.errors import ValidationError
from locallens.models.domain import Review
from locallens.models.request_models import ReviewCreateRequest
from locallens.models.response_models import ReviewOut, VideoOut
from locallens.services.discovery import discover_businesses
from locallens.services.geo_service import meters_to_miles
from locallens.services.query_normalizer import SortOrder, normalize_query
from locallens.services.result_assembler import business_payload, newest_first

bp = Blueprint("businesses", __name__)

NEAR_DEFAULT_LIMIT = 30


@bp.route("/businesses", methods=["GET"])
def list_businesses():
    cfg = current_app.config
    query = normalize_query(
        request.args,
        default_radius_miles=meters_to_miles(cfg["DEFAULT_RADIUS_METERS"]),
        default_limit=cfg["MAX_LIMIT"],
        max_limit=cfg["MAX_LIMIT"],
    )
    return jsonify(discover_businesses(get_store(), query)), 200


@bp.route("/businesses/near", methods=["GET"])
def near_businesses():
    """Map listing: center required, nearest first, distance on every result."""
    if not request.args.get("lat") or not request.args.get("lng"):
        raise ValidationError("lat & lng required")

    cfg = current_app.config
    query = normalize_query(
        request.args,
        default_radius_miles=meters_to_miles(cfg["DEFAULT_RADIUS_METERS"]),
        default_limit=NEAR_DEFAULT_LIMIT,
        max_limit=cfg["MAX_LIMIT"],
        default_order=SortOrder.DISTANCE,
    )
    return jsonify(discover_businesses(get_store(), query)), 200


@bp.route("/businesses/<business_id>", methods=["GET"])
def get_business(business_id):
    store = get_store()
    business = store.get_business(business_id)
    videos = store.find_videos(business_ids=[business.id])
    reviews = store.find_reviews(business_ids=[business.id])
    return jsonify(business_payload(business, videos, reviews)), 200


@bp.route("/businesses/<business_id>/reviews", methods=["POST"])
def create_review(business_id):
    store = get_store()
    req = ReviewCreateRequest.model_validate(json_body())
    business = store.get_business(business_id)

    review = store.insert_review(
        Review(business_id=business.id, rating=req.rating, comment=req.comment)
    )

    body = ReviewOut.from_domain(review).to_json()
    body["business"] = {"id": business.id, "name": business.name}
    return jsonify(body), 201


@bp.route("/businesses/<business_id>/videos", methods=["GET"])
def business_videos(business_id):
    store = get_store()
    business = store.get_business(business_id)
    videos = newest_first(store.find_videos(business_ids=[business.id]))
    return jsonify({"videos": [VideoOut.from_domain(v, business).to_json() for v in videos]}), 200
