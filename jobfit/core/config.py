import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./jobfit.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ Security / sessions
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "user_session")
ADMIN_COOKIE_NAME = os.getenv("ADMIN_COOKIE_NAME", "admin_auth")
SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", "86400"))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "0") == "1"
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

# ✅ AI backends
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

# Ordered fallback list, "provider:model" (provider defaults to gemini).
# Flash-Lite first: it has the largest free-tier daily request quota.
AI_MODELS = os.getenv(
    "AI_MODELS",
    "gemini-2.5-flash-lite,"
    "gemini-flash-lite-latest,"
    "gemini-2.0-flash-lite,"
    "gemini-2.5-flash,"
    "gemini-flash-latest,"
    "gemini-2.0-flash",
)
AI_REQUEST_TIMEOUT_SECONDS = float(os.getenv("AI_REQUEST_TIMEOUT_SECONDS", "30"))
AI_TOTAL_TIMEOUT_SECONDS = float(os.getenv("AI_TOTAL_TIMEOUT_SECONDS", "55"))

# ✅ Generation / quota
MAX_RESUME_TEXT_CHARS = int(os.getenv("MAX_RESUME_TEXT_CHARS", "10000"))
DEFAULT_DAILY_RESUME_LIMIT = int(os.getenv("DEFAULT_DAILY_RESUME_LIMIT", "70"))
FREE_PLAN_CREDIT_LIMIT = int(os.getenv("FREE_PLAN_CREDIT_LIMIT", "5"))
PRO_PLAN_CREDIT_LIMIT = int(os.getenv("PRO_PLAN_CREDIT_LIMIT", "999999"))
REQUIRE_LOGIN_FOR_GENERATION = os.getenv("REQUIRE_LOGIN_FOR_GENERATION", "0") == "1"
RESUME_RETENTION_MONTHS = int(os.getenv("RESUME_RETENTION_MONTHS", "5"))
HISTORY_PAGE_LIMIT = int(os.getenv("HISTORY_PAGE_LIMIT", "100"))

# IANA timezone for the day boundary; server local time when unset
APP_TIMEZONE = os.getenv("APP_TIMEZONE")

# ✅ HTTP / logging
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")
