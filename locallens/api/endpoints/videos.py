# locallens/api/endpoints/videos.py

from flask import Blueprint, current_app, jsonify, request

from locallens.api.context import get_store
from locallens.core.errors import NotFoundError
from locallens.models.response_models import FeedResponse, VideoOut
from locallens.services.discovery import discover_videos
from locallens.services.query_normalizer import normalize_query
from locallens.services.result_assembler import assemble_videos

bp = Blueprint("videos", __name__)


@bp.route("/videos", methods=["GET"])
def list_videos():
    cfg = current_app.config
    query = normalize_query(
        request.args,
        default_radius_miles=cfg["DEFAULT_RADIUS_MILES"],
        default_limit=cfg["MAX_LIMIT"],
        max_limit=cfg["MAX_LIMIT"],
    )
    page = discover_videos(get_store(), query)
    return jsonify([v.to_json() for v in assemble_videos(page.results)]), 200


@bp.route("/videos/<video_id>", methods=["GET"])
def get_video(video_id):
    store = get_store()
    video = store.get_video(video_id)
    try:
        business = store.get_business(video.business_id)
    except NotFoundError:
        # orphaned video
        raise NotFoundError("Video not found")
    return jsonify(VideoOut.from_domain(video, business).to_json()), 200


@bp.route("/feed", methods=["GET"])
def feed():
    """Same selection as /videos, returned one cursor page at a time."""
    cfg = current_app.config
    query = normalize_query(
        request.args,
        default_radius_miles=cfg["DEFAULT_RADIUS_MILES"],
        default_limit=cfg["DEFAULT_FEED_LIMIT"],
        max_limit=cfg["MAX_LIMIT"],
        allow_cursor=True,
    )
    page = discover_videos(get_store(), query)

    response = FeedResponse(
        videos=assemble_videos(page.results),
        next_cursor=page.next_cursor,
        has_more=page.has_more,
        total_in_radius=page.total if query.center is not None else None,
    )
    return jsonify(response.to_json()), 200
