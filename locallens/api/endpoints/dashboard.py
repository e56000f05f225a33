# locallens/api/endpoints/dashboard.py
"""Owner dashboard. Every route needs a bearer token."""

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from locallens.api.context import centroid_fallback, current_business, get_geocoder, get_store, json_body
from locallens.models.request_models import (
    CoordinatesUpdateRequest,
    ProfileUpdateRequest,
    VideoCreateRequest,
)
from locallens.services import dashboard_service
from locallens.services.result_assembler import business_payload

bp = Blueprint("dashboard", __name__)


@bp.before_request
@jwt_required()
def _require_token():
    pass


def _full_business(store, business):
    videos = store.find_videos(business_ids=[business.id])
    reviews = store.find_reviews(business_ids=[business.id])
    return business_payload(business, videos, reviews)


@bp.route("/dashboard", methods=["GET"])
def summary():
    store = get_store()
    return jsonify(dashboard_service.dashboard_summary(store, current_business())), 200


@bp.route("/dashboard/profile", methods=["GET"])
def get_profile():
    store = get_store()
    return jsonify({"business": _full_business(store, current_business())}), 200


@bp.route("/dashboard/profile", methods=["PUT"])
def update_profile():
    store = get_store()
    req = ProfileUpdateRequest.model_validate(json_body())
    business, geocoded = dashboard_service.update_profile(
        store, get_geocoder(), current_business(), req, centroid_fallback()
    )
    return jsonify({"business": _full_business(store, business), "geocoded": geocoded}), 200


@bp.route("/dashboard/coordinates", methods=["PUT"])
def update_coordinates():
    store = get_store()
    req = CoordinatesUpdateRequest.model_validate(json_body())
    business = dashboard_service.update_coordinates(store, current_business(), req)
    return jsonify({"business": _full_business(store, business)}), 200


@bp.route("/dashboard/analytics", methods=["GET"])
def analytics():
    return jsonify(dashboard_service.analytics(get_store(), current_business())), 200


@bp.route("/dashboard/videos", methods=["GET"])
def list_videos():
    store = get_store()
    return jsonify({"videos": dashboard_service.list_videos(store, current_business())}), 200


@bp.route("/dashboard/videos", methods=["POST"])
def create_video():
    store = get_store()
    req = VideoCreateRequest.model_validate(json_body())
    video = dashboard_service.create_video(store, current_business(), req)
    return jsonify({"video": video}), 201


@bp.route("/dashboard/videos/<video_id>", methods=["DELETE"])
def delete_video(video_id):
    dashboard_service.delete_video(get_store(), current_business(), video_id)
    return jsonify({"message": "Video deleted successfully"}), 200
