"""Alembic environment.

DATABASE_URL comes from credchain.core.config, the same source the
running app reads, so migrations and the app always target one database.
"""

from __future__ import annotations

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context
from credchain.core.config import SETTINGS
from credchain.db.engine import Base

config = context.config

if SETTINGS.database_url:
    # Migrations run synchronously: swap the asyncpg driver for psycopg2.
    sync_url = SETTINGS.database_url.replace("postgresql+asyncpg", "postgresql")
    config.set_main_option("sqlalchemy.url", sync_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Registers CredentialRow on Base.metadata for autogenerate.
import credchain.db.tables  # noqa: E402, F401

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
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
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
