from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from locallens.api.context import GEOCODER_KEY, STORE_KEY
from locallens.api.routes import register_api
from locallens.core.config import settings
from locallens.core.errors import register_error_handlers
from locallens.core.logging import register_request_logging, setup_logging
from locallens.core.mongo_client import connect
from locallens.services.geo_service import Geocoder
from locallens.services.store import MongoStore


def _register_jwt(app):
    jwt = JWTManager(app)

    @jwt.unauthorized_loader
    def _missing_token(reason):
        return jsonify({"error": "Not authorized, no token", "details": reason}), 401

    @jwt.invalid_token_loader
    def _bad_token(reason):
        return jsonify({"error": "Not authorized, token failed", "details": reason}), 401

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return jsonify({"error": "Not authorized, token expired"}), 401

    return jwt


def create_app(overrides=None, store=None, geocoder=None):
    app = Flask(__name__)
    app.config.update(settings.as_flask_config())
    app.config.update(overrides or {})
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]

    setup_logging(app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=False,
    )

    if store is None:
        store = MongoStore(connect(app.config["MONGODB_URI"], app.config["MONGO_DB_NAME"]))
        store.ensure_indexes()
    if geocoder is None:
        geocoder = Geocoder(
            user_agent=app.config["GEOCODER_USER_AGENT"],
            timeout=app.config["GEOCODER_TIMEOUT"],
        )
    app.extensions[STORE_KEY] = store
    app.extensions[GEOCODER_KEY] = geocoder

    _register_jwt(app)
    register_error_handlers(app)
    register_request_logging(app)

    # register all blueprints
    register_api(app)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=8000, debug=True)
