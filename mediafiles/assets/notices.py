"""Structured user notices emitted by the engine instead of UI toasts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NoticeLevel(str, Enum):
    ERROR = "error"
    INFO = "info"
    SUCCESS = "success"


@dataclass(frozen=True)
class Notice:
    """A message for the user.  Sticky notices stay until dismissed."""

    level: NoticeLevel
    message: str
    title: str | None = None
    sticky: bool = False


def error(message: str, title: str | None = None) -> Notice:
    return Notice(NoticeLevel.ERROR, message, title, sticky=True)


def info(message: str, title: str | None = None, sticky: bool = False) -> Notice:
    return Notice(NoticeLevel.INFO, message, title, sticky=sticky)


def success(message: str) -> Notice:
    return Notice(NoticeLevel.SUCCESS, message)
