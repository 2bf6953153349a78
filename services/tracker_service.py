"""
Сервис обработки входящих событий трекера.
Связывает хранилище, машину состояний и доставку ответа.
"""
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from database.session_store import SessionStore
from services.work_tracker import Reply, Transition, WorkTracker
from utils.logging import get_logger

logger = get_logger(__name__)

Deliver = Callable[[Reply], Awaitable[None]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TrackerService:
    """
    Обработка одного события для одного чата атомарна:
    чтение, переход, отправка ответа и запись идут под блокировкой чата.
    """

    def __init__(
        self,
        store: SessionStore,
        tracker: Optional[WorkTracker] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            store: Хранилище состояний
            tracker: Машина состояний (по умолчанию без имени бота)
            clock: Источник текущего времени в UTC
        """
        self.store = store
        self.tracker = tracker or WorkTracker()
        self.clock = clock

    async def handle_event(
        self,
        conversation_id: str,
        text: Optional[str],
        deliver: Deliver,
    ) -> Transition:
        """
        Обрабатывает входящее сообщение.

        Новое состояние сохраняется только после успешной доставки ответа:
        если deliver бросил исключение, состояние чата не меняется.
        """
        async with self.store.lock(conversation_id):
            state = await self.store.get_or_create(conversation_id)
            now = self.clock()
            transition = self.tracker.handle(state, text, now)

            await deliver(transition.reply)
            await self.store.put(conversation_id, transition.state)

        if type(transition.state) is not type(state):
            logger.info(
                "Session state changed",
                extra={
                    "conversation_id": conversation_id,
                    "from_state": type(state).__name__,
                    "to_state": type(transition.state).__name__,
                },
            )
        return transition
