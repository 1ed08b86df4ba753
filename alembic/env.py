"""Alembic migration environment."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from teamsync.config import settings
from teamsync.models.base import Base
from teamsync.models.activity_log import ActivityLog  # noqa: F401
from teamsync.models.assignment import Assignment  # noqa: F401
from teamsync.models.branch import Branch  # noqa: F401
from teamsync.models.client import Client  # noqa: F401
from teamsync.models.contract import Contract  # noqa: F401
from teamsync.models.event import Event  # noqa: F401
from teamsync.models.invoice import Invoice  # noqa: F401
from teamsync.models.plan import Plan  # noqa: F401
from teamsync.models.tenant import Tenant  # noqa: F401
from teamsync.models.tenant_membership import TenantMembership  # noqa: F401
from teamsync.models.user import User  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

# Logging config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
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
