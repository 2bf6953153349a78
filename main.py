"""
Главный файл для запуска телеграм-бота трекера работы/отдыха
"""
import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.types import BotCommand

from config import load_config
from database.session_store import InMemorySessionStore
from handlers import tracker
from middlewares.correlation import CorrelationMiddleware
from services.tracker_service import TrackerService
from services.work_tracker import COMMAND_DESCRIPTIONS, WorkTracker
from utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

BOT_COMMANDS = [
    BotCommand(command=command.value, description=description)
    for command, description in COMMAND_DESCRIPTIONS.items()
]


async def main():
    """Основная точка входа приложения."""
    config = load_config()
    setup_logging(level=config.log_level)

    logger.info("Starting work/rest tracker bot")

    bot = Bot(token=config.bot_token)
    dp = Dispatcher()

    dp.message.middleware(CorrelationMiddleware())

    me = await bot.me()
    store = InMemorySessionStore()
    # Инъекция сервиса в модуль handlers.tracker
    tracker.tracker_service = TrackerService(store, WorkTracker(bot_username=me.username))
    logger.info("TrackerService инъецирован в handlers.tracker")

    dp.include_router(tracker.router)

    await bot.set_my_commands(BOT_COMMANDS)
    # Удаляем вебхуки (если были установлены)
    await bot.delete_webhook(drop_pending_updates=config.drop_pending_updates)

    logger.info("Бот запущен и готов к работе!")

    try:
        await dp.start_polling(bot)
    finally:
        logger.info("Shutting down...")
        await bot.session.close()
        logger.info("Bot stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.info("Бот остановлен пользователем")
