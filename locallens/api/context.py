from flask import current_app, request
from flask_jwt_extended import get_jwt_identity

from locallens.core.errors import ValidationError
from locallens.models.domain import Coordinate
from locallens.services.dashboard_service import owner_business

STORE_KEY = "locallens.store"
GEOCODER_KEY = "locallens.geocoder"


def get_store():
    return current_app.extensions[STORE_KEY]


def get_geocoder():
    return current_app.extensions[GEOCODER_KEY]


def centroid_fallback():
    cfg = current_app.config
    if not cfg.get("FALLBACK_TO_CENTROID"):
        return None
    return Coordinate(latitude=cfg["CENTROID_LAT"], longitude=cfg["CENTROID_LNG"])


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def current_business():
    """The authenticated owner's business; call inside a jwt_required view."""
    return owner_business(get_store(), get_jwt_identity())
