import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from logging.config import fileConfig
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool
from alembic import context
from app.config import settings
from app.models import Base


config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

db_url = settings.DATABASE_URL
if not db_url:
    raise RuntimeError("DATABASE_URL not set. Export it (or add in .env).")

# The app uses asyncpg; alembic runs on the sync driver:
# postgresql+asyncpg://...  ->  postgresql://...
sync_db_url = db_url.replace("+asyncpg", "").replace("+aiosqlite", "")

if settings.DATABASE_SSL and "sslmode=" not in sync_db_url.lower():
    sep = "&" if "?" in sync_db_url else "?"
    sync_db_url = f"{sync_db_url}{sep}sslmode=require"

# Create sync engine for alembic work (no pooling to avoid pooler issues)
engine = create_engine(
    sync_db_url,
    poolclass=NullPool,
    future=True,
)


def run_migrations_offline():
    """Run migrations in 'offline' mode.

    This configures the context with just a URL
    and not an Engine, though an Engine is still acceptable
    here as it will be used to render the SQL DDL statements
    to the script output.
    """
    context.configure(
        url=sync_db_url,
        target_metadata=Base.metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode against the sync engine."""
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=Base.metadata,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
