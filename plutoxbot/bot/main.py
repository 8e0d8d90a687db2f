import asyncio
import sys
from aiogram import Bot, Dispatcher
from aiogram.types import BotCommand
from alembic.config import Config
from alembic import command

from .config import settings
from .db.postgres import Database
from .db.redis_client import create_redis
from .db.repository import MessageStore
from .logging_config import logger
from .handlers import user
from .middlewares import setup_middlewares
from .services.dialog_service import DialogService
from .services.openai_service import GenerationClient


def check_environment():
    missing = settings.missing_required()
    if missing:
        logger.error(f"Missing environment variables: {', '.join(missing)}. Check your .env file.")
        sys.exit(1)


def migration_config(path: str = "alembic.ini") -> Config:
    alembic_cfg = Config(path)
    # keep the loguru intercept installed by logging_config
    alembic_cfg.attributes["configure_logger"] = False
    return alembic_cfg


def apply_migrations():
    command.upgrade(migration_config(), "head")


async def set_commands(bot: Bot):
    commands = [
        BotCommand(command="start", description="Start PlutoxAI"),
    ]
    await bot.set_my_commands(commands)


async def on_startup(bot: Bot, db: Database, redis_client):
    logger.info("Connecting to PostgreSQL...")
    await db.connect()
    logger.info("PostgreSQL connection established")

    logger.info("Applying database migrations...")
    try:
        await asyncio.to_thread(apply_migrations)
        logger.info("Database migrations applied.")
    except Exception as e:
        logger.error(f"Failed to apply migrations: {e}")

    if redis_client is not None:
        logger.info("Connecting to Redis...")
        try:
            await redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.error(f"Redis connection failed: {e}")
            sys.exit(1)

    await set_commands(bot)
    logger.info("Bot commands registered")
    logger.info("🔥 PlutoxAI bot started")


async def on_shutdown(db: Database, backend: GenerationClient, redis_client):
    await backend.close()
    await db.close()
    if redis_client is not None:
        await redis_client.aclose()
    logger.info("Bot stopped, connections closed")


def register_handlers(dp: Dispatcher):
    dp.include_router(user.router)


def create_dispatcher() -> Dispatcher:
    """
    Builds the dispatcher with every collaborator constructed once and passed to
    handlers through workflow data (``dialog``, ``db``, ``backend``, ``redis_client``).
    Shared by the polling and webhook entry points.
    """
    db = Database(settings.POSTGRES_DSN)
    redis_client = create_redis(settings.REDIS_DSN)
    backend = GenerationClient.from_settings(settings)
    dialog = DialogService(MessageStore(db), backend, system_prompt=settings.SYSTEM_PROMPT)

    dp = Dispatcher(dialog=dialog, db=db, backend=backend, redis_client=redis_client)
    setup_middlewares(dp, redis=redis_client, serialize_user_turns=settings.SERIALIZE_USER_TURNS)
    register_handlers(dp)

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)
    return dp


async def main():
    check_environment()
    bot = Bot(token=settings.TELEGRAM_BOT_TOKEN)
    dp = create_dispatcher()

    try:
        await bot.delete_webhook(drop_pending_updates=False)
        await dp.start_polling(bot)
    except KeyboardInterrupt:
        logger.info("Stopping bot...")
    finally:
        await bot.session.close()

def run():
    try:
        asyncio.run(main())
    except Exception as e:
        logger.exception(f"Bot crashed: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run()
