# locallens/api/endpoints/auth.py

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from locallens.api.context import centroid_fallback, get_geocoder, get_store, json_body
from locallens.models.request_models import LoginRequest, SignUpRequest
from locallens.models.response_models import UserOut
from locallens.services.auth_service import authenticate, issue_token, register_owner
from locallens.services.result_assembler import business_payload

bp = Blueprint("auth", __name__)


@bp.route("/auth/register", methods=["POST"])
def register():
    store = get_store()
    req = SignUpRequest.model_validate(json_body())

    user, business, geocoded = register_owner(store, get_geocoder(), req, centroid_fallback())
    token = issue_token(user, business, current_app.config["JWT_EXPIRES_DAYS"])

    return jsonify(
        {
            "token": token,
            "user": UserOut.from_domain(user, business.id).to_json(),
            "business": business_payload(business, [], []),
            "geocoded": geocoded,
        }
    ), 201


@bp.route("/auth/login", methods=["POST"])
def login():
    store = get_store()
    req = LoginRequest.model_validate(json_body())

    user = authenticate(store, req.email, req.password)
    business = store.find_business_by_owner(user.id)
    token = issue_token(user, business, current_app.config["JWT_EXPIRES_DAYS"])

    return jsonify(
        {
            "token": token,
            "user": UserOut.from_domain(user, business.id if business else None).to_json(),
        }
    ), 200


@bp.route("/auth/me", methods=["GET"])
@jwt_required()
def me():
    store = get_store()
    user = store.get_user(get_jwt_identity())
    business = store.find_business_by_owner(user.id)
    return jsonify({"user": UserOut.from_domain(user, business.id if business else None).to_json()}), 200
