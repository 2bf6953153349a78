"""
Машина состояний трекера работы/отдыха.
Чистая логика без привязки к Telegram: на вход состояние, команда и время,
на выход новое состояние и ответ пользователю.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from models.work_session import AwaitingTarget, Resting, SessionState, Start, Working
from utils.logging import get_logger

logger = get_logger(__name__)


class Command(Enum):
    """Команды бота"""
    HELP = "help"
    WORK = "work"
    REST = "rest"
    STATUS = "status"
    RESET = "reset"


COMMAND_DESCRIPTIONS = {
    Command.HELP: "display this text.",
    Command.WORK: "start tracking work.",
    Command.REST: "stop tracking work.",
    Command.STATUS: "show current status.",
    Command.RESET: "reset working time.",
}

HELP_TEXT = "These commands are supported:\n" + "\n".join(
    f"/{command.value} - {description}" for command, description in COMMAND_DESCRIPTIONS.items()
)

SETUP_DONE = "Setup done."
BAD_TARGET = "Send correct hours count."
RESET_DONE = "Reset done. Type /help to set a new target."
UNABLE_TO_HANDLE = "Unable to handle the message. Type /help to see the usage."

RESTING_ACTIONS = ("/work", "/status")
WORKING_ACTIONS = ("/rest", "/status")

_TARGET_RE = re.compile(r"[+-]?[0-9]+")


class TrackerError(Exception):
    """Базовая ошибка трекера."""


class InvalidTargetError(TrackerError):
    """Пользователь прислал не целое число часов."""


class InvalidCommandError(TrackerError):
    """Команда недопустима в текущем состоянии."""


class DeliveryError(TrackerError):
    """Не удалось доставить ответ пользователю."""


@dataclass(frozen=True)
class Reply:
    """
    Ответ для отправки в чат.

    actions: None - клавиатуру не трогаем, () - убрать клавиатуру,
    иначе - кнопки с командами.
    """
    text: str
    actions: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class Transition:
    state: SessionState
    reply: Reply


def parse_command(text: Optional[str], bot_username: Optional[str] = None) -> Optional[Command]:
    """
    Распознаёт /command или /command@bot_username.
    Аргументы после команды игнорируются, неизвестные команды - обычный текст.
    """
    if not text or not text.startswith("/"):
        return None

    head = text[1:].split(maxsplit=1)[0] if text[1:2].strip() else ""
    name, _, mention = head.partition("@")
    if mention and (bot_username is None or mention.lower() != bot_username.lower()):
        return None

    try:
        return Command(name)
    except ValueError:
        return None


def parse_target_hours(text: Optional[str]) -> timedelta:
    """Целое неотрицательное число часов -> timedelta."""
    if text is None or not _TARGET_RE.fullmatch(text.strip()):
        raise InvalidTargetError(text)
    hours = int(text.strip())
    if hours < 0:
        raise InvalidTargetError(text)
    try:
        return timedelta(hours=hours)
    except OverflowError as e:
        raise InvalidTargetError(text) from e


def format_duration(duration: timedelta) -> str:
    """HH:MM:SS, часы не обрезаются на 24."""
    seconds = max(duration // timedelta(seconds=1), 0)
    hours = seconds // 3600
    minutes = (seconds // 60) % 60
    return f"{hours:02d}:{minutes:02d}:{seconds % 60:02d}"


def format_status(accumulated: timedelta, target: timedelta) -> str:
    return f"Done {format_duration(accumulated)} of {format_duration(target)}"


def format_timestamp(moment: datetime) -> str:
    """Дробная часть секунды выводится, только если она не нулевая."""
    if moment.microsecond:
        return moment.strftime("%Y-%m-%d %H:%M:%S.%f UTC")
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


# === ПЕРЕХОДЫ ===

def _help(state: Start, now: datetime) -> Transition:
    return Transition(AwaitingTarget(), Reply(HELP_TEXT))


def _work(state: Resting, now: datetime) -> Transition:
    working = Working(target=state.target, accumulated=state.accumulated, started_at=now)
    return Transition(working, Reply(f"Started work at {format_timestamp(now)}", WORKING_ACTIONS))


def _resting_status(state: Resting, now: datetime) -> Transition:
    return Transition(state, Reply(format_status(state.accumulated, state.target)))


def _rest(state: Working, now: datetime) -> Transition:
    resting = Resting(target=state.target, accumulated=state.projected(now))
    text = f"Work done. {format_status(resting.accumulated, resting.target)}"
    return Transition(resting, Reply(text, RESTING_ACTIONS))


def _working_status(state: Working, now: datetime) -> Transition:
    return Transition(state, Reply(format_status(state.projected(now), state.target)))


TRANSITIONS: Dict[Tuple[type, Command], Callable[..., Transition]] = {
    (Start, Command.HELP): _help,
    (Resting, Command.WORK): _work,
    (Resting, Command.STATUS): _resting_status,
    (Working, Command.REST): _rest,
    (Working, Command.STATUS): _working_status,
}


class WorkTracker:
    """
    Диспетчер переходов по таблице (тип состояния, команда).
    Ошибки ввода превращаются в ответ, состояние при этом не меняется.
    """

    def __init__(self, bot_username: Optional[str] = None):
        self.bot_username = bot_username

    def handle(self, state: SessionState, text: Optional[str], now: datetime) -> Transition:
        """
        Обрабатывает одно входящее сообщение.

        Args:
            state: Текущее состояние чата
            text: Текст сообщения (None для сообщений без текста)
            now: Время события (UTC), читается один раз на событие

        Returns:
            Новое состояние и ответ
        """
        command = parse_command(text, self.bot_username)
        try:
            return self._transition(state, command, text, now)
        except InvalidTargetError:
            logger.info("Invalid target hours", extra={"state": type(state).__name__})
            return Transition(state, Reply(BAD_TARGET))
        except InvalidCommandError:
            logger.info(
                "Command not allowed in state",
                extra={
                    "state": type(state).__name__,
                    "command": command.value if command else None,
                },
            )
            return Transition(state, Reply(UNABLE_TO_HANDLE))

    def _transition(
        self,
        state: SessionState,
        command: Optional[Command],
        text: Optional[str],
        now: datetime,
    ) -> Transition:
        if command is Command.RESET:
            return Transition(Start(), Reply(RESET_DONE, ()))

        if isinstance(state, AwaitingTarget):
            target = parse_target_hours(text)
            return Transition(Resting(target=target), Reply(SETUP_DONE, RESTING_ACTIONS))

        handler = TRANSITIONS.get((type(state), command))
        if handler is None:
            raise InvalidCommandError(command)
        return handler(state, now)
