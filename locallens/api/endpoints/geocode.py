from flask import Blueprint, request, jsonify
from geopy.exc import GeopyError

from locallens.api.context import get_geocoder, json_body
from locallens.core.errors import GeocodingError, NotFoundError, ValidationError
from locallens.models.request_models import GeocodeRequest
from locallens.services.geo_service import GeocodeResult
from locallens.services.query_normalizer import parse_center

geo_bp = Blueprint("geocode", __name__)

AUTOCOMPLETE_LIMIT = 5


def _location(result: GeocodeResult) -> dict:
    return {
        "latitude": result.latitude,
        "longitude": result.longitude,
        "formattedAddress": result.formatted_address,
    }


@geo_bp.route("/geocode", methods=["POST"])
def geocode():
    req = GeocodeRequest.model_validate(json_body())
    result = get_geocoder().geocode(req.address)

    if isinstance(result, GeocodeResult):
        return jsonify(_location(result)), 200

    if result.code == "ZERO_RESULTS":
        raise NotFoundError("Location not found", details=result.code)
    if result.code == "INVALID_INPUT":
        raise ValidationError(result.error, details=result.code)
    raise GeocodingError(result.error, details=result.code)


@geo_bp.route("/geocode/reverse", methods=["GET"])
def reverse_geocode():
    center = parse_center(request.args.get("lat"), request.args.get("lng"))
    if center is None:
        raise ValidationError("lat & lng required")

    result = get_geocoder().reverse(center.latitude, center.longitude)
    if isinstance(result, GeocodeResult):
        return jsonify(_location(result)), 200

    if result.code == "ZERO_RESULTS":
        raise NotFoundError("Address not found", details=result.code)
    raise GeocodingError(result.error, details=result.code)


@geo_bp.route("/places/autocomplete", methods=["GET"])
def autocomplete():
    text = (request.args.get("input") or "").strip()
    if not text:
        raise ValidationError("Input parameter is required")

    try:
        predictions = get_geocoder().suggest(text, limit=AUTOCOMPLETE_LIMIT)
    except GeopyError as e:
        raise GeocodingError("Failed to fetch address suggestions", details=str(e))

    return jsonify({"predictions": predictions}), 200
