"""
services/errors.py

응시 흐름과 원격 저장소 호출에서 발생하는 예외 계층.
API 레이어는 이 예외들을 HTTP 응답으로, Streamlit 화면은 알림으로 변환한다.
"""

from typing import Optional


class StoreError(Exception):
    """원격 저장소 호출 실패 (네트워크 오류 또는 2xx가 아닌 응답)."""

    def __init__(self, operation: str, message: str, status_code: Optional[int] = None):
        self.operation = operation
        self.status_code = status_code
        self.message = message
        super().__init__(f"{operation}: {message}")


class AuthError(StoreError):
    """로그인 실패 또는 인증 토큰 거부."""


class AttemptError(Exception):
    """응시 상태 머신 오류의 공통 부모."""


class AssessmentLoadError(AttemptError):
    """
    평가 로드 실패 — 응시 자체가 불가능하다.

    평가가 없거나 미공개, 활성 문제가 0개, 또는 저장소 오류.
    세션은 생성되지 않으며 redirect 페이지로 이동해야 한다.
    """

    def __init__(self, message: str, redirect: str):
        self.redirect = redirect
        super().__init__(message)


class SessionStartError(AttemptError):
    """세션 생성 실패 — Intro 상태로 남아 다시 시작할 수 있다."""


class SubmissionError(AttemptError):
    """답안 저장 또는 세션 갱신 실패 — Submitting 상태로 남아 수동 재시도만 가능하다."""


class InvalidTransitionError(AttemptError):
    """현재 단계에서 허용되지 않는 명령."""


class InvalidOptionError(AttemptError):
    """현재 문제에 존재하지 않는 보기 인덱스."""
