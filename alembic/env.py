from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from jobfit.core.config import DATABASE_URL
from jobfit.db.base import Base
import jobfit.db.models  # noqa: F401  registers every table on Base.metadata

config = context.config

# run_migrations() passes its own URL and keeps the app logging setup;
# the alembic CLI falls back to DATABASE_URL
if not config.attributes.get("configured_by_app"):
    if config.config_file_name is not None:
        fileConfig(config.config_file_name, disable_existing_loggers=False)
    config.set_main_option("sqlalchemy.url", DATABASE_URL)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
