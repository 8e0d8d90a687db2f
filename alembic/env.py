from alembic import context
from sqlalchemy import engine_from_config, pool

from plutoxbot.bot.config import settings
from plutoxbot.bot.db.sqla_models import Base
from plutoxbot.bot.logging_config import configure_alembic_logging

config = context.config
config.set_main_option("sqlalchemy.url", settings.POSTGRES_DSN.replace("%", "%%"))

configure_alembic_logging(config)

target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
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
