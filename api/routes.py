"""
api/routes.py — FastAPI 엔드포인트

응시 컨트롤러의 명령을 그대로 노출한다. 모든 응답은 AttemptView(JSON)이다.

컨트롤러 락을 잡는 핸들러는 이벤트 루프에서 실행하지 않는다.
일반 def 핸들러는 FastAPI 스레드풀에서, async 핸들러는 asyncio.to_thread로 호출한다.
"""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

import api.session as session
from assessment_cbt.models.view_model import AttemptView
from assessment_cbt.services.exam_service import summarize_results
from assessment_cbt.services.repository import AssessmentRepository
from assessment_cbt.services.store import AuthSession, StoreClient
from assessment_cbt.services.test_controller import TestSessionController

logger = logging.getLogger(__name__)

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class LoginBody(BaseModel):
    email: str
    password: str

class LoadAttemptBody(BaseModel):
    assessment_id: str

class SelectOptionBody(BaseModel):
    option_index: int

class NavigateBody(BaseModel):
    index: int = 0

class KeyBody(BaseModel):
    key: str

class SubmitBody(BaseModel):
    confirmed: bool = False


# ── 헬퍼 ─────────────────────────────────────────────────────────────────────

def _sid(request: Request) -> str:
    return request.state.session_id


def _store(request: Request) -> StoreClient:
    return request.app.state.store_client


def _require_auth(request: Request) -> AuthSession:
    auth: AuthSession | None = session.get(_sid(request), "auth")
    if auth is None:
        raise HTTPException(status_code=401, detail="로그인이 필요합니다.")
    return auth


def _repository(request: Request, auth: AuthSession) -> AssessmentRepository:
    return AssessmentRepository(_store(request).with_token(auth.access_token))


def _controller(request: Request) -> TestSessionController:
    _require_auth(request)
    controller: TestSessionController | None = session.get(_sid(request), "controller")
    if controller is None:
        raise HTTPException(status_code=404, detail="진행 중인 응시가 없습니다.")
    return controller


# ── 인증 ─────────────────────────────────────────────────────────────────────

@router.post("/api/login")
async def login(request: Request, body: LoginBody):
    email = body.email.strip()
    if not email or not body.password:
        raise HTTPException(status_code=400, detail="이메일과 비밀번호를 입력해 주세요.")

    auth = await asyncio.to_thread(_store(request).sign_in, email, body.password)
    session.put(_sid(request), "auth", auth)
    return {"ok": True, "user_id": auth.user_id, "email": auth.email}


@router.post("/api/logout")
def logout(request: Request):
    session.reset(_sid(request))
    return {"ok": True}


# ── 응시 ─────────────────────────────────────────────────────────────────────

@router.post("/api/attempt/load", response_model=AttemptView)
def load_attempt(request: Request, body: LoadAttemptBody):
    auth = _require_auth(request)
    assessment_id = body.assessment_id.strip()
    if not assessment_id:
        raise HTTPException(status_code=400, detail="평가가 지정되지 않았습니다.")

    controller = TestSessionController(
        _repository(request, auth),
        request.app.state.clock,
        auth.user_id,
    )
    session.put(_sid(request), "controller", controller)
    return controller.load(assessment_id)


@router.get("/api/attempt", response_model=AttemptView)
def get_attempt(request: Request):
    return _controller(request).view()


@router.post("/api/attempt/start", response_model=AttemptView)
async def start_attempt(request: Request):
    return await asyncio.to_thread(_controller(request).start)


@router.post("/api/attempt/select", response_model=AttemptView)
def select_option(request: Request, body: SelectOptionBody):
    return _controller(request).select_option(body.option_index)


@router.post("/api/attempt/next", response_model=AttemptView)
def next_question(request: Request):
    return _controller(request).next()


@router.post("/api/attempt/previous", response_model=AttemptView)
def previous_question(request: Request):
    return _controller(request).previous()


@router.post("/api/attempt/goto", response_model=AttemptView)
def go_to_question(request: Request, body: NavigateBody):
    return _controller(request).go_to(body.index)


@router.post("/api/attempt/key", response_model=AttemptView)
def press_key(request: Request, body: KeyBody):
    return _controller(request).handle_key(body.key)


@router.post("/api/attempt/submit", response_model=AttemptView)
async def submit_attempt(request: Request, body: SubmitBody):
    controller = _controller(request)
    return await asyncio.to_thread(controller.submit, body.confirmed)


@router.post("/api/attempt/cancel-submit", response_model=AttemptView)
def cancel_submit(request: Request):
    return _controller(request).cancel_submit()


# ── 내 결과 ──────────────────────────────────────────────────────────────────

@router.get("/api/my-results")
async def my_results(request: Request):
    auth = _require_auth(request)
    repository = _repository(request, auth)
    sessions = await asyncio.to_thread(repository.list_completed_sessions, auth.user_id)
    return {
        "summary": summarize_results(sessions),
        "results": [s.model_dump(mode="json") for s in sessions],
    }
