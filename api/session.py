"""
api/session.py — 멀티유저 인메모리 세션 (쿠키 기반)

각 브라우저에 UUID 세션 ID를 발급하고, 세션별로 로그인 정보와
진행 중인 응시 컨트롤러(최대 1개)를 독립적으로 유지한다.
TTL(기본 1시간) 경과 시 자동 만료되며, 만료 시 컨트롤러의 타이머도 정리한다.
"""

import threading
import time
import uuid
from typing import Any

_lock = threading.Lock()
_sessions: dict[str, dict[str, Any]] = {}
_timestamps: dict[str, float] = {}

SESSION_TTL = 3600  # 1시간


def _new_state() -> dict[str, Any]:
    return {
        "auth": None,         # AuthSession
        "controller": None,   # TestSessionController
    }


def _abandon(state: dict[str, Any]) -> None:
    controller = state.get("controller")
    if controller is not None:
        controller.abandon()


def create_session() -> str:
    """새 세션을 생성하고 세션 ID를 반환."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = _new_state()
        _timestamps[sid] = time.time()
    return sid


def get_session(sid: str) -> dict[str, Any] | None:
    """세션 ID로 세션 데이터를 가져옴. 만료되었거나 없으면 None."""
    with _lock:
        if sid not in _sessions:
            return None
        if time.time() - _timestamps[sid] > SESSION_TTL:
            _abandon(_sessions.pop(sid))
            del _timestamps[sid]
            return None
        _timestamps[sid] = time.time()  # 접근 시 갱신
        return _sessions[sid]


def get(sid: str, key: str, default=None):
    """세션에서 값 읽기."""
    session = get_session(sid)
    if session is None:
        return default
    return session.get(key, default)


def put(sid: str, key: str, value) -> None:
    """세션에 값 쓰기. 컨트롤러를 교체하면 이전 컨트롤러의 타이머를 멈춘다."""
    with _lock:
        if sid in _sessions:
            previous = _sessions[sid].get(key)
            if key == "controller" and previous is not None and previous is not value:
                previous.abandon()
            _sessions[sid][key] = value
            _timestamps[sid] = time.time()


def reset(sid: str) -> None:
    """세션 초기화 (로그아웃)."""
    with _lock:
        if sid in _sessions:
            _abandon(_sessions[sid])
            _sessions[sid] = _new_state()
            _timestamps[sid] = time.time()


def cleanup_expired() -> int:
    """만료된 세션을 정리. 제거된 수 반환."""
    now = time.time()
    removed = 0
    with _lock:
        expired = [sid for sid, ts in _timestamps.items() if now - ts > SESSION_TTL]
        for sid in expired:
            _abandon(_sessions.pop(sid))
            del _timestamps[sid]
            removed += 1
    return removed
