from logging.config import fileConfig
from sqlalchemy import pool, create_engine
from alembic import context

# DATABASE_URL comes from the environment / .env through the app config
from config.app_config import DATABASE_URL

# Alembic Config object, gives access to values in alembic.ini
config = context.config

# Set up loggers from the ini file
if config.config_file_name:
    fileConfig(config.config_file_name)

# Import all models so autogenerate sees every table
from database.models import Base
from database import marketplace_models  # noqa: F401

target_metadata = Base.metadata


def run_migrations_offline():
    """
    Run migrations in 'offline' mode, emitting SQL instead of executing it.
    """
    context.configure(
        url=DATABASE_URL, target_metadata=target_metadata, literal_binds=True, dialect_opts={"paramstyle": "named"}
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """
    Run migrations in 'online' mode against DATABASE_URL.
    """
    connectable = create_engine(DATABASE_URL, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
