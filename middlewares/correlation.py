# middlewares/correlation.py
from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.types import Message, TelegramObject

from utils.logging import get_logger, set_request_context

logger = get_logger(__name__)


class CorrelationMiddleware(BaseMiddleware):
    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        request_id = str(uuid.uuid4())
        conversation_id: str | None = None
        if isinstance(event, Message) and event.chat:
            conversation_id = str(event.chat.id)

        set_request_context(request_id=request_id, conversation_id=conversation_id)
        data["request_id"] = request_id

        logger.info(
            "update received",
            extra={
                "update_type": event.__class__.__name__,
                "has_text": bool(getattr(event, "text", None)),
            },
        )
        try:
            return await handler(event, data)
        finally:
            # очистим контекст, чтобы значения не «протекали» в следующий апдейт
            set_request_context(request_id=None, conversation_id=None)
