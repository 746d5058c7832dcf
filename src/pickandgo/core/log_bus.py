"""Process-wide LogBus for observing emitted log records.

``pickandgo.core.logging`` publishes every record it emits; tests and the
web app subscribe to see what went to the developer log. A failing
subscriber never stops delivery to the others.
"""

from __future__ import annotations

import contextlib
import sys
import traceback
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class LogRecord:
    level_name: str
    message: str
    logger_name: str

    @property
    def plain(self) -> str:
        return f"[{self.level_name.lower()}] {self.message}"


Subscriber = Callable[[LogRecord], None]


class LogBus:
    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, cb: Subscriber) -> None:
        self._subscribers.append(cb)

    def unsubscribe(self, cb: Subscriber) -> None:
        if cb in self._subscribers:
            self._subscribers.remove(cb)

    def publish(self, record: LogRecord) -> None:
        for cb in list(self._subscribers):
            try:
                cb(record)
            except Exception:
                # The core logger would recurse into publish.
                with contextlib.suppress(Exception):
                    sys.stderr.write(
                        f"LogBus subscriber {cb!r} raised; suppressed.\n{traceback.format_exc()}"
                    )


_LOG_BUS: LogBus | None = None


def get_log_bus() -> LogBus:
    global _LOG_BUS
    if _LOG_BUS is None:
        _LOG_BUS = LogBus()
    return _LOG_BUS
