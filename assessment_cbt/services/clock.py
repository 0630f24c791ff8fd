"""
services/clock.py

컨트롤러에 주입되는 시간 소스 + 취소 가능한 예약 콜백.
운영 환경은 SystemClock(벽시계 + threading.Timer)을 쓰고,
테스트는 같은 인터페이스의 수동 시계로 시간을 직접 흘려보낸다.
"""

import threading
from datetime import datetime, timezone
from typing import Callable, Protocol


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    def now(self) -> datetime: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall: ...


class SystemClock:
    """UTC 벽시계. 예약 콜백은 데몬 스레드(threading.Timer)에서 실행된다."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer
