"""
Модель состояния диалога трекера работы/отдыха.
Одно состояние на чат, хранится только в памяти.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Union


@dataclass(frozen=True)
class Start:
    """Цель ещё не задана (состояние по умолчанию)."""


@dataclass(frozen=True)
class AwaitingTarget:
    """Ждём от пользователя количество часов."""


@dataclass(frozen=True)
class Resting:
    """Отдых: накопленное время зафиксировано."""

    target: timedelta
    accumulated: timedelta = timedelta(0)


@dataclass(frozen=True)
class Working:
    """Работа идёт с started_at (UTC)."""

    target: timedelta
    accumulated: timedelta
    started_at: datetime

    def projected(self, now: datetime) -> timedelta:
        """Накопленное время с учётом текущего отрезка, без сохранения."""
        return self.accumulated + max(now - self.started_at, timedelta(0))


SessionState = Union[Start, AwaitingTarget, Resting, Working]
