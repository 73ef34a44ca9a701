"""
Application configuration
Everything is read once from the environment at import time.
"""

import os

ENV = os.getenv("ENV", "development")

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./db.sqlite")

# Sessions
SESSION_SECRET = os.getenv("SESSION_SECRET", "learnhub-dev-secret")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "learnhub_session")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", 60 * 60 * 24 * 7))  # 1 week
SESSION_COOKIE_SECURE = ENV == "production"

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Reviews: when on, a second review by the same user replaces the first
ONE_REVIEW_PER_USER = os.getenv("ONE_REVIEW_PER_USER", "false").lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
