"""Конфигурация бота"""
import os
from dataclasses import dataclass

from utils.env_loader import load_env


@dataclass(frozen=True)
class Config:
    bot_token: str
    log_level: str = "INFO"
    drop_pending_updates: bool = True


def load_config() -> Config:
    """Читает настройки из окружения (и .env, если он есть)."""
    load_env()

    bot_token = os.getenv("BOT_TOKEN")
    if not bot_token:
        raise ValueError("BOT_TOKEN не найден в переменных окружения!")

    return Config(
        bot_token=bot_token,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        drop_pending_updates=os.getenv("DROP_PENDING_UPDATES", "1").lower() not in ("0", "false", "no"),
    )
