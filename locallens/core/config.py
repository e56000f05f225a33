import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "locallens")
    SECRET_KEY = os.getenv("SECRET_KEY", "secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", os.getenv("SECRET_KEY", "secret"))
    JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", 30))

    GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "locallens")
    GEOCODER_TIMEOUT = float(os.getenv("GEOCODER_TIMEOUT", 5))
    # Continental US centroid, used only when FALLBACK_TO_CENTROID is on
    FALLBACK_TO_CENTROID = _env_bool("FALLBACK_TO_CENTROID", False)
    CENTROID_LAT = 39.8283
    CENTROID_LNG = -98.5795

    DEFAULT_RADIUS_MILES = float(os.getenv("DEFAULT_RADIUS_MILES", 5.0))
    DEFAULT_RADIUS_METERS = float(os.getenv("DEFAULT_RADIUS_METERS", 5000))
    MAX_LIMIT = int(os.getenv("MAX_LIMIT", 50))
    DEFAULT_FEED_LIMIT = int(os.getenv("DEFAULT_FEED_LIMIT", 20))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    def as_flask_config(self) -> dict:
        return {
            key: getattr(self, key)
            for key in dir(self)
            if key.isupper()
        }


settings = Settings()
