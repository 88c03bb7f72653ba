import os
from datetime import timedelta


def _database_url():
    # relative sqlite paths land in the Flask instance folder
    url = os.environ.get("DATABASE_URL", "sqlite:///eunoia.sqlite3")
    # Hosted Postgres hands out legacy schemes and pooler-only params
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url.replace("&channel_binding=require", "")


def _flag(name, default="false"):
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "eunoia_session")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_COOKIE_SECURE = _flag("SESSION_COOKIE_SECURE")
    SESSION_TTL = timedelta(days=int(os.environ.get("SESSION_TTL_DAYS", "30")))

    # Photos and videos travel inline as data URIs
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", str(50 * 1024 * 1024)))

    CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "").split(",") if o.strip()]
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    ENV_NAME = os.environ.get("ENV", "development")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SESSION_COOKIE_SECURE = False
    LOG_LEVEL = "WARNING"
    ENV_NAME = "test"
