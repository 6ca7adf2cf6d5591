"""Alembic environment for the orders database."""

from sqlalchemy import MetaData, engine_from_config, pool
from alembic import context

from orderflow.common.config import settings
from orderflow.services.orders.models import Order, OrderItem, OrderNumberCounter

config = context.config
target_metadata = MetaData()
for table in (Order.__table__, OrderItem.__table__, OrderNumberCounter.__table__,):
    table.to_metadata(target_metadata)

VERSION_TABLE = "alembic_version_orders"


def run_migrations_offline():
    context.configure(
        url=settings.postgres_dsn,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        version_table=VERSION_TABLE,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        {"sqlalchemy.url": settings.postgres_dsn},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            version_table=VERSION_TABLE,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
