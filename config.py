import os
import tempfile

from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

# Local development reads a .env next to this file; real environment wins.
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as roombooker.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "roombooker.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    BCRYPT_ROUNDS = 12

    # Admin bearer tokens
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-only-jwt-secret-change-me-please")
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRES_SECONDS = int(os.getenv("JWT_EXPIRES_SECONDS", str(7 * 24 * 60 * 60)))

    # Simple IP rate limit for login endpoint
    LOGIN_RATE_WINDOW_SECONDS = 60      # window size
    LOGIN_RATE_MAX_REQUESTS = 15        # max login requests per IP per window

    # Room images
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(BASE_DIR, "uploads"))
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5 MB
    # accepted mimetype -> stored extension
    ALLOWED_IMAGE_TYPES = {
        "image/jpeg": ".jpg",
        "image/png": ".png",
        "image/gif": ".gif",
        "image/webp": ".webp",
    }

    # Weekly calendar window (slot start times, inclusive on both ends)
    CALENDAR_DAY_START = "07:00"
    CALENDAR_DAY_END = "20:00"
    CALENDAR_SLOT_MINUTES = 30

    # IANA name, e.g. "America/Bogota"; empty means server local time
    TIMEZONE = os.getenv("TIMEZONE", "")

    # History pagination
    HISTORY_DEFAULT_LIMIT = 50
    HISTORY_MAX_LIMIT = 200

    # Default admin created by `flask seed`
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@roombooker.com")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

    # Basic app settings
    DEBUG = False


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET = "test-jwt-secret-not-for-production-use"
    BCRYPT_ROUNDS = 4
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), "roombooker-test-uploads")
    LOGIN_RATE_MAX_REQUESTS = 3
    TIMEZONE = ""
