"""
Обработчик сообщений трекера работы/отдыха.
Вся маршрутизация по состояниям - в services.work_tracker.
"""
from aiogram import Bot, Router
from aiogram.types import Message

from services.tracker_service import TrackerService
from services.work_tracker import DeliveryError
from utils.logging import get_logger
from utils.notify import make_replier

router = Router()
logger = get_logger(__name__)

# Глобальная ссылка, которую заполнит main.py после создания сервиса
tracker_service: TrackerService | None = None


def _get_tracker_service() -> TrackerService:
    """Получает TrackerService из глобальной переменной"""
    assert tracker_service is not None, "TrackerService не инициализирован"
    return tracker_service


@router.message()
async def handle_message(message: Message, bot: Bot):
    """Любое сообщение: команда, число часов или что-то ещё"""
    service = _get_tracker_service()
    conversation_id = str(message.chat.id)

    try:
        await service.handle_event(
            conversation_id,
            message.text,
            make_replier(bot, message.chat.id),
        )
    except DeliveryError:
        logger.warning(
            "Event dropped, session unchanged",
            extra={"conversation_id": conversation_id},
        )
