"""
Alembic environment for FleetDesk.

- DATABASE_URL comes from fleetdesk.config (environment / .env), never alembic.ini
- All models are imported through fleetdesk.models so autogenerate sees them
- SQLite dev databases need batch mode for ALTER TABLE
"""

import os
import sys
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

# ─── Make the fleetdesk package importable from a source checkout ─────────────
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fleetdesk.config import settings
from fleetdesk.database import Base
import fleetdesk.models  # noqa: F401  registers every table on Base.metadata

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
RENDER_AS_BATCH = settings.is_sqlite


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of touching the database (review before applying)."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=RENDER_AS_BATCH,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,   # migrations run once; no pooling
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=RENDER_AS_BATCH,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
