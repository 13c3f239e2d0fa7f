"""
Alembic migration runner used at startup when RUN_MIGRATIONS=1.
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

ALEMBIC_INI_PATH = Path(__file__).resolve().parents[2] / "alembic.ini"
# Arbitrary but fixed: every worker must contend for the same lock
ADVISORY_LOCK_ID = 735001942


def build_alembic_config(database_url: str) -> Config:
    if not ALEMBIC_INI_PATH.exists():
        raise FileNotFoundError(f"alembic.ini not found at {ALEMBIC_INI_PATH}")
    
    alembic_cfg = Config(str(ALEMBIC_INI_PATH))
    alembic_cfg.set_main_option("sqlalchemy.url", database_url)
    # env.py must not replace the URL or the app's logging setup
    alembic_cfg.attributes["configured_by_app"] = True
    return alembic_cfg


@contextmanager
def migration_lock(engine: Engine):
    """
    Hold a Postgres advisory lock while migrating.
    
    Other databases run without a lock (single-process SQLite deployments).
    """
    if engine.dialect.name != "postgresql":
        yield
        return
    
    with engine.connect() as conn:
        conn.execute(text(f"SELECT pg_advisory_lock({ADVISORY_LOCK_ID})"))
        conn.commit()
        logger.info("Migration lock acquired")
        try:
            yield
        finally:
            conn.execute(text(f"SELECT pg_advisory_unlock({ADVISORY_LOCK_ID})"))
            conn.commit()
            logger.info("Migration lock released")


def run_migrations(database_url: Optional[str] = None, revision: str = "head"):
    """
    Upgrade the database to ``revision``.
    
    Args:
        database_url: Target database, defaults to ``DATABASE_URL``
        revision: Alembic revision to upgrade to
    """
    from jobfit.core import config as app_config
    
    database_url = database_url or app_config.DATABASE_URL
    if not database_url:
        raise ValueError("DATABASE_URL is not set")
    
    logger.info(f"Running alembic upgrade {revision}")
    alembic_cfg = build_alembic_config(database_url)
    engine = create_engine(database_url, pool_pre_ping=True)
    try:
        with migration_lock(engine):
            command.upgrade(alembic_cfg, revision)
    except Exception:
        logger.exception("Migration failed")
        raise
    finally:
        engine.dispose()
    
    logger.info("Migrations complete")
