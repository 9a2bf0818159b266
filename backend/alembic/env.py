"""
Alembic environment for the conference center schema.

Runs online against DATABASE_URL_SYNC, or offline to emit a SQL script.
Models are imported so autogenerate sees every table.
"""

from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from conference_center.core.config import get_settings
from conference_center.db.base import Base
from conference_center import models  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", get_settings().DATABASE_URL_SYNC)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Lives only in the migration (PostgreSQL-specific), not in the ORM metadata
IGNORED_CONSTRAINTS = {"ex_bookings_facility_no_overlap"}


def include_object(obj, name, type_, reflected, compare_to):
    return not (type_ == "constraint" and name in IGNORED_CONSTRAINTS)


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        include_object=include_object,
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
            compare_type=True,
            include_object=include_object,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
