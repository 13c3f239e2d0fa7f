"""
Alembic baseline migration against a throwaway SQLite file.
"""
from sqlalchemy import create_engine, inspect

from jobfit.db.migrate import run_migrations


def test_baseline_creates_all_tables(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    
    run_migrations(url)
    # Re-running is a no-op
    run_migrations(url)
    
    engine = create_engine(url)
    tables = set(inspect(engine).get_table_names())
    engine.dispose()
    assert {"users", "resume_generations", "login_history", "system_activity", "alembic_version"} <= tables
