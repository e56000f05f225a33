# locallens/api/routes.py

from locallens.api.endpoints.auth import bp as auth_bp
from locallens.api.endpoints.businesses import bp as businesses_bp
from locallens.api.endpoints.dashboard import bp as dashboard_bp
from locallens.api.endpoints.geocode import geo_bp
from locallens.api.endpoints.videos import bp as videos_bp


def register_api(app):
    # Register all API blueprints under /api
    app.register_blueprint(businesses_bp, url_prefix="/api")
    app.register_blueprint(videos_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(dashboard_bp, url_prefix="/api")
    app.register_blueprint(geo_bp, url_prefix="/api")
