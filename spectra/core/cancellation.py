"""协作式中止模块，长时间循环在每轮迭代时调用检查函数以响应中止请求。"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from ..exceptions import ProcessStoppedError

StopCheck = Callable[[], None]


class StopFlag:
    """Thread-safe flag a caller can set to abort a running fit or apply.

    中文说明：调用 ``stop()`` 后，下一次 ``check()`` 会抛出 ``ProcessStoppedError``。
    实例可直接作为 ``check_for_stop`` 参数传入。
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def stop(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    @property
    def stopped(self) -> bool:
        return self._event.is_set()

    def check(self) -> None:
        if self._event.is_set():
            raise ProcessStoppedError("Process was stopped by the caller")

    def __call__(self) -> None:
        self.check()


def _never_stop() -> None:
    return None


def as_stop_check(check_for_stop: Optional[StopCheck]) -> StopCheck:
    """Return a callable stop check, substituting a no-op for ``None``."""

    return check_for_stop if check_for_stop is not None else _never_stop


__all__ = ["StopFlag", "StopCheck", "as_stop_check"]
