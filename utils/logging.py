import json
import logging
import re
import sys
from contextvars import ContextVar

# Контекстные переменные для correlation
_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_conversation_id_var: ContextVar[str | None] = ContextVar("conversation_id", default=None)

# Атрибуты LogRecord, которые не попадают в JSON как extra
_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

_SECRET_KEYS = frozenset({"token", "bot_token", "password", "secret", "api_key"})

_SECRET_RE = re.compile(r"(token|password|secret|api_key)=([^\s]+)", re.IGNORECASE)
# Токен Telegram бота: <id>:<35 символов>
_BOT_TOKEN_RE = re.compile(r"\b\d{6,}:[A-Za-z0-9_-]{30,}\b")


class JSONFormatter(logging.Formatter):
    """JSON formatter для структурированных логов."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": _redact_secrets(record.getMessage()),
            "request_id": _request_id_var.get(),
            "conversation_id": _conversation_id_var.get(),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED or key.startswith("_"):
                continue
            log_obj[key] = "***" if key.lower() in _SECRET_KEYS else value

        # Убираем None значения
        log_obj = {k: v for k, v in log_obj.items() if v is not None}

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Настройка системы логирования."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    # Убираем лишнее логирование от библиотек
    logging.getLogger("aiogram").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Получить logger для модуля."""
    return logging.getLogger(name)


def set_request_context(request_id: str | None = None, conversation_id: str | None = None) -> None:
    """Устанавливает контекст для текущего апдейта."""
    _request_id_var.set(request_id)
    _conversation_id_var.set(conversation_id)


def get_request_id() -> str | None:
    return _request_id_var.get()


def get_conversation_id() -> str | None:
    return _conversation_id_var.get()


def _redact_secrets(message: str) -> str:
    message = _SECRET_RE.sub(lambda m: f"{m.group(1)}=***", message)
    return _BOT_TOKEN_RE.sub("***", message)
