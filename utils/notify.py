from typing import Awaitable, Callable

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from keyboards.tracker import get_reply_markup
from services.work_tracker import DeliveryError, Reply
from utils.logging import get_logger

logger = get_logger(__name__)


def make_replier(bot: Bot, chat_id: int) -> Callable[[Reply], Awaitable[None]]:
    async def deliver(reply: Reply) -> None:
        try:
            await bot.send_message(
                chat_id=chat_id,
                text=reply.text,
                reply_markup=get_reply_markup(reply.actions),
            )
        except TelegramAPIError as e:
            logger.error(
                "Reply delivery failed",
                extra={"conversation_id": str(chat_id), "error": str(e)},
            )
            raise DeliveryError(str(e)) from e
        logger.debug("Reply sent", extra={"conversation_id": str(chat_id)})
    return deliver
