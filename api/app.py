"""
api/app.py — FastAPI 앱 인스턴스 + 세션 미들웨어 + 예외 매핑
"""

import logging
import threading
import time

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import STORE_API_KEY, STORE_URL
from api.routes import router
import api.session as session
from assessment_cbt.services.clock import Clock, SystemClock
from assessment_cbt.services.errors import (
    AssessmentLoadError, AuthError, InvalidOptionError, InvalidTransitionError,
    SessionStartError, StoreError, SubmissionError,
)
from assessment_cbt.services.store import StoreClient

logger = logging.getLogger(__name__)

SESSION_COOKIE = "cbt_session"


def _register_error_handlers(app: FastAPI) -> None:
    """도메인 예외 → JSON 오류 응답. 화면은 detail을 알림(toast)으로 표시한다."""

    @app.exception_handler(AssessmentLoadError)
    async def _load_failed(request: Request, exc: AssessmentLoadError):
        return JSONResponse(
            status_code=404,
            content={"detail": str(exc), "redirect": exc.redirect},
        )

    @app.exception_handler(SessionStartError)
    @app.exception_handler(SubmissionError)
    async def _retryable(request: Request, exc: Exception):
        return JSONResponse(status_code=503, content={"detail": str(exc), "retry": True})

    @app.exception_handler(InvalidTransitionError)
    async def _invalid_transition(request: Request, exc: InvalidTransitionError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(InvalidOptionError)
    async def _invalid_option(request: Request, exc: InvalidOptionError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(AuthError)
    async def _auth_failed(request: Request, exc: AuthError):
        return JSONResponse(status_code=401, content={"detail": "인증에 실패했습니다."})

    @app.exception_handler(StoreError)
    async def _store_failed(request: Request, exc: StoreError):
        return JSONResponse(
            status_code=503,
            content={"detail": "저장소 오류가 발생했습니다. 잠시 후 다시 시도해 주세요."},
        )


def create_app(
    store_client: StoreClient | None = None,
    clock: Clock | None = None,
    cleanup_sessions: bool = True,
) -> FastAPI:
    app = FastAPI(title="Assessment CBT", docs_url=None, redoc_url=None)
    app.state.store_client = store_client or StoreClient(STORE_URL, STORE_API_KEY)
    app.state.clock = clock or SystemClock()

    # CORS (모바일 브라우저 등 다양한 출처 허용)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 세션 미들웨어: 쿠키에서 세션 ID를 읽고, 없으면 새로 발급
    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        sid = request.cookies.get(SESSION_COOKIE)
        if not sid or session.get_session(sid) is None:
            sid = session.create_session()

        request.state.session_id = sid
        response: Response = await call_next(request)
        response.set_cookie(
            key=SESSION_COOKIE,
            value=sid,
            httponly=True,
            samesite="lax",
            max_age=session.SESSION_TTL,
        )
        return response

    _register_error_handlers(app)
    app.include_router(router)

    # 만료 세션 주기적 정리 (5분마다)
    def _cleanup_loop():
        while True:
            time.sleep(300)
            removed = session.cleanup_expired()
            if removed:
                logger.info(f"만료 세션 {removed}개 정리")

    if cleanup_sessions:
        t = threading.Thread(target=_cleanup_loop, daemon=True)
        t.start()

    return app
