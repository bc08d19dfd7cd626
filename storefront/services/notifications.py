from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Literal, Optional, Protocol, runtime_checkable

log = logging.getLogger(__name__)

NoticeLevel = Literal["success", "error"]


@runtime_checkable
class NotificationService(Protocol):
    def notify_success(self, message: str) -> None:
        ...

    def notify_error(self, message: str) -> None:
        ...


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str


class LogNotifier:
    def notify_success(self, message: str) -> None:
        log.info("%s", message)

    def notify_error(self, message: str) -> None:
        log.warning("%s", message)


class FlashNotifier:
    """Queues notices until the render layer pops them for display."""

    def __init__(self) -> None:
        self._notices: Deque[Notice] = deque()

    def notify_success(self, message: str) -> None:
        self._notices.append(Notice("success", message))

    def notify_error(self, message: str) -> None:
        self._notices.append(Notice("error", message))

    def pop(self) -> Optional[Notice]:
        return self._notices.popleft() if self._notices else None

    def __len__(self) -> int:
        return len(self._notices)
