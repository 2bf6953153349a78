"""
Клавиатуры для трекера работы/отдыха
"""
from typing import Optional, Sequence, Union

from aiogram.types import KeyboardButton, ReplyKeyboardMarkup, ReplyKeyboardRemove
from aiogram.utils.keyboard import ReplyKeyboardBuilder


def get_actions_keyboard(actions: Sequence[str]) -> ReplyKeyboardMarkup:
    """
    Одна строка кнопок с командами (/work, /status и т.п.)
    """
    builder = ReplyKeyboardBuilder()
    builder.row(*(KeyboardButton(text=action) for action in actions))
    return builder.as_markup(resize_keyboard=True)


def get_reply_markup(
    actions: Optional[Sequence[str]],
) -> Optional[Union[ReplyKeyboardMarkup, ReplyKeyboardRemove]]:
    """None - не трогать клавиатуру, пустой набор - убрать её."""
    if actions is None:
        return None
    if not actions:
        return ReplyKeyboardRemove()
    return get_actions_keyboard(actions)
