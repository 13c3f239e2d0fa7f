from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Note: models are registered through jobfit.db.models (imported by init_db and alembic env)
# All models must import Base from this module
