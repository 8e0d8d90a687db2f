from aiohttp import web
from aiogram import Bot
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application

from .config import settings
from .logging_config import logger
from .main import check_environment, create_dispatcher


async def on_webhook_startup(bot: Bot):
    if not settings.WEBHOOK_BASE_URL:
        logger.warning("WEBHOOK_BASE_URL is empty, expecting the webhook to be registered externally")
        return
    url = f"{settings.WEBHOOK_BASE_URL.rstrip('/')}{settings.WEBHOOK_PATH}"
    await bot.set_webhook(url)
    logger.info(f"Webhook set to {url}")


def create_app() -> web.Application:
    bot = Bot(token=settings.TELEGRAM_BOT_TOKEN)
    dp = create_dispatcher()
    dp.startup.register(on_webhook_startup)

    app = web.Application()
    SimpleRequestHandler(dispatcher=dp, bot=bot).register(app, path=settings.WEBHOOK_PATH)
    setup_application(app, dp, bot=bot)
    return app


def main():
    check_environment()
    app = create_app()
    logger.info(f"🔥 PlutoxAI webhook listening on {settings.WEBAPP_HOST}:{settings.WEBAPP_PORT}{settings.WEBHOOK_PATH}")
    web.run_app(app, host=settings.WEBAPP_HOST, port=settings.WEBAPP_PORT)


if __name__ == "__main__":
    main()
