import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobfit.core import config
from jobfit.core.config import CORS_ORIGINS, LOG_DIR, LOG_LEVEL, RUN_MIGRATIONS
from jobfit.core.errors import JobFitError
from jobfit.core.logging_config import sanitize_log_data, setup_logging

# ✅ Import All API Routes
from jobfit.api.routes import admin, auth, generate, health, resumes, stats, user

logger = logging.getLogger(__name__)


def startup_settings() -> dict:
    return {
        "database_url": config.DATABASE_URL,
        "run_migrations": config.RUN_MIGRATIONS,
        "ai_models": config.AI_MODELS,
        "gemini_api_key": config.GEMINI_API_KEY,
        "openai_api_key": config.OPENAI_API_KEY,
        "require_login_for_generation": config.REQUIRE_LOGIN_FOR_GENERATION,
        "app_timezone": config.APP_TIMEZONE,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(LOG_LEVEL, LOG_DIR)
    logger.info(f"Startup config: {sanitize_log_data(startup_settings())}")
    if RUN_MIGRATIONS:
        from jobfit.db.migrate import run_migrations
        run_migrations()
    else:
        from jobfit.db.init_db import init_db
        init_db()
    logger.info("JobFit Pro API started")
    yield


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="JobFit Pro", lifespan=lifespan)

# ✅ CORS: only the configured frontends; cookies need allow_credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(JobFitError)
async def jobfit_error_handler(request: Request, exc: JobFitError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.to_dict()}")
    else:
        logger.info(f"{request.method} {request.url.path} refused ({exc.status_code}): {exc.error}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(generate.router)
app.include_router(stats.router)
app.include_router(auth.router)
app.include_router(user.router)
app.include_router(resumes.router)
app.include_router(admin.router)
app.include_router(health.router)


# ============================================
# ✅ ROOT ENDPOINT
# ============================================

@app.get("/")
def root():
    return {"status": "JobFit Pro API running"}
