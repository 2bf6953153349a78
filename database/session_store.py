"""
Хранилище состояний диалога.
In-memory реализация: данные живут до перезапуска процесса.
"""
import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from models.work_session import SessionState, Start
from utils.logging import get_logger

logger = get_logger(__name__)


class SessionStore(ABC):
    """Интерфейс хранилища: чтение, запись и блокировка по ключу чата."""

    @abstractmethod
    async def get_or_create(self, conversation_id: str) -> SessionState:
        """Возвращает состояние чата, создавая Start при первом обращении."""

    @abstractmethod
    async def put(self, conversation_id: str, state: SessionState) -> None:
        """Сохраняет новое состояние чата."""

    @abstractmethod
    def lock(self, conversation_id: str):
        """Async context manager, эксклюзивный для одного чата."""


class InMemorySessionStore(SessionStore):
    """
    Состояния в словаре, отдельный asyncio.Lock на каждый чат.
    Разные чаты друг друга не блокируют.
    """

    def __init__(self):
        self.sessions: Dict[str, SessionState] = {}
        # Блокировки живут столько же, сколько состояния: до конца процесса
        self._locks: Dict[str, asyncio.Lock] = {}
        logger.info("InMemorySessionStore initialized")

    async def get_or_create(self, conversation_id: str) -> SessionState:
        if conversation_id not in self.sessions:
            self.sessions[conversation_id] = Start()
            logger.debug("Session created", extra={"conversation_id": conversation_id})
        return self.sessions[conversation_id]

    async def put(self, conversation_id: str, state: SessionState) -> None:
        self.sessions[conversation_id] = state

    @asynccontextmanager
    async def lock(self, conversation_id: str) -> AsyncIterator[None]:
        # setdefault без await между проверкой и вставкой - атомарно для event loop
        conversation_lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        async with conversation_lock:
            yield
