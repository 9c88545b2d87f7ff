"""
Alembic environment for the trip booking schema.

Migrations run over the synchronous driver (`DATABASE_URL_SYNC`), either
against a live database or as a SQL script with `--sql`. SQLite targets use
batch mode so ALTERs on tables with CHECK constraints are rebuilt correctly.
"""

from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from app.db.base import Base
from app.models import (  # noqa: F401 - registers every table on Base.metadata
    Booking, Complaint, PasswordReset, Provider, Review, Trip, User,
)
from app.core.config import get_settings

config = context.config
config.set_main_option("sqlalchemy.url", get_settings().DATABASE_URL_SYNC)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _configure_options(url: str) -> dict:
    return {
        "target_metadata": Base.metadata,
        # Catch Numeric precision and String length changes on autogenerate
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            **_configure_options(str(engine.url)),
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
