from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from finance_tracker.config import settings
from finance_tracker.models.base import Base
# Import all model classes so they're registered on Base.metadata
from finance_tracker.models.user import User  # noqa: F401
from finance_tracker.models.organization import Organization  # noqa: F401
from finance_tracker.models.organization_member import OrganizationMember  # noqa: F401
from finance_tracker.models.invitation import Invitation  # noqa: F401
from finance_tracker.models.account import Account  # noqa: F401
from finance_tracker.models.liability import Liability  # noqa: F401
from finance_tracker.models.balance import Balance  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

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
            connection=connection, target_metadata=target_metadata, render_as_batch=True
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
