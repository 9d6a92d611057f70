import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value : str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


# database

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./prompt_enhancer.db")


# JWT

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))


# plans

FREE_TIER_DAILY_LIMIT = int(os.getenv("FREE_TIER_DAILY_LIMIT", "10"))
FREE_HISTORY_DAYS = int(os.getenv("FREE_HISTORY_DAYS", "7"))


# analytics

ANALYTICS_CACHE_TTL_SECONDS = int(os.getenv("ANALYTICS_CACHE_TTL_SECONDS", "3600"))


# rate limiting

RATE_LIMIT_ENABLED = _as_bool(os.getenv("RATE_LIMIT_ENABLED", "true"))
ENHANCE_RATE_LIMIT = os.getenv("ENHANCE_RATE_LIMIT", "30/minute")


# email

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM = os.getenv("EMAIL_FROM", "Prompt Enhancer <onboarding@resend.dev>")


# logging

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
