"""
Pytest configuration and shared fixtures for testing.

- ManualClock: 수동으로 시간을 흘리는 시계 (예약 콜백 포함)
- FakeRepository: 원격 저장소 논리 연산의 인메모리 대체
- FakeStoreServer: PostgREST/Auth 엔드포인트를 흉내 내는 httpx.MockTransport 핸들러
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from assessment_cbt.models.assessment_model import (
    AnswerRecord, Assessment, CompletedSession, TestSession,
)
from assessment_cbt.models.question_model import Question
from assessment_cbt.services.errors import StoreError
from assessment_cbt.services.store import StoreClient
from assessment_cbt.services.test_controller import TestSessionController

START_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


# ── 시계 ─────────────────────────────────────────────────────────────────────

@dataclass(eq=False)
class ManualCall:
    when: datetime
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """advance()로만 시간이 흐르는 시계. 만기된 콜백을 1초 단위로 실행한다."""

    def __init__(self, start: datetime = START_TIME):
        self.current = start
        self._calls: List[ManualCall] = []

    def now(self) -> datetime:
        return self.current

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualCall:
        call = ManualCall(self.current + timedelta(seconds=delay), callback)
        self._calls.append(call)
        return call

    @property
    def pending(self) -> List[ManualCall]:
        return [c for c in self._calls if not c.cancelled]

    def advance(self, seconds: int) -> None:
        for _ in range(seconds):
            self.current += timedelta(seconds=1)
            due = [c for c in self.pending if c.when <= self.current]
            for call in due:
                call.cancelled = True
                call.callback()
            self._calls = self.pending


# ── 인메모리 저장소 ──────────────────────────────────────────────────────────

class FakeRepository:
    """
    AssessmentRepository와 같은 메서드를 가진 인메모리 저장소.

    fail_on에 연산 이름을 넣으면 해당 호출이 StoreError를 던진다.
    """

    def __init__(self, assessment: Optional[Assessment], questions: List[Question]):
        self.assessment = assessment
        self.questions = questions
        self.sessions: List[TestSession] = []
        self.answers: List[AnswerRecord] = []
        self.completed: Dict[str, Dict[str, Any]] = {}
        self.calls: List[str] = []
        self.fail_on: set = set()

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise StoreError(operation, "simulated failure", status_code=500)

    def get_published_assessment(self, assessment_id: str) -> Optional[Assessment]:
        self._record("get_published_assessment")
        a = self.assessment
        if a is None or a.id != assessment_id or a.status != "published":
            return None
        return a

    def list_active_questions(self, assessment_id: str) -> List[Question]:
        self._record("list_active_questions")
        return [q for q in self.questions if q.assessment_id == assessment_id and q.is_active]

    def create_test_session(self, user_id: str, assessment_id: str, started_at: datetime) -> TestSession:
        self._record("create_test_session")
        session = TestSession(
            id=f"session-{len(self.sessions) + 1}",
            user_id=user_id,
            assessment_id=assessment_id,
            started_at=started_at,
        )
        self.sessions.append(session)
        return session

    def insert_answers(self, records) -> None:
        self._record("insert_answers")
        self.answers.extend(records)

    def complete_test_session(self, session_id: str, completed_at: datetime, score: int, passed: bool) -> None:
        self._record("complete_test_session")
        self.completed[session_id] = {
            "completed_at": completed_at,
            "score": score,
            "passed": passed,
        }

    def list_completed_sessions(self, user_id: str) -> List[CompletedSession]:
        self._record("list_completed_sessions")
        return [
            CompletedSession(
                id=sid,
                assessment_id=self.assessment.id,
                assessment_title=self.assessment.title,
                **values,
            )
            for sid, values in self.completed.items()
        ]


def make_question(
    number: int,
    correct: int = 0,
    n_options: int = 4,
    assessment_id: str = "assessment-1",
    **overrides,
) -> Question:
    data = {
        "id": f"q{number}",
        "assessment_id": assessment_id,
        "question_text": f"Question {number}?",
        "options": [f"Option {i + 1}" for i in range(n_options)],
        "correct_option_index": correct,
        "explanation": f"Explanation {number}",
        "order_num": number,
    }
    data.update(overrides)
    return Question(**data)


def make_assessment(passing_score: int = 60, status: str = "published") -> Assessment:
    return Assessment(
        id="assessment-1",
        title="Phishing Awareness",
        year=2026,
        status=status,
        passing_score=passing_score,
    )


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def build_controller(clock):
    """
    (controller, repository) 생성기.

    Args:
        n_questions:   문제 수 (정답 인덱스는 모두 0)
        passing_score: 합격 기준
        load:          True면 load()까지 수행해 Intro 상태로 반환
        start:         True면 start()까지 수행해 InProgress 상태로 반환
    """

    def _build(n_questions: int = 3, passing_score: int = 60, load: bool = True, start: bool = True):
        questions = [make_question(i + 1) for i in range(n_questions)]
        repository = FakeRepository(make_assessment(passing_score), questions)
        controller = TestSessionController(repository, clock, user_id="user-1")
        if load:
            controller.load("assessment-1")
        if load and start:
            controller.start()
        return controller, repository

    return _build


# ── PostgREST 흉내 서버 ──────────────────────────────────────────────────────

def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class FakeStoreServer:
    """
    httpx.MockTransport용 핸들러. 테이블은 dict 행 리스트로 보관한다.

    fail:  {(method, table): status_code} — 해당 요청에 오류 응답을 돌려준다.
    hooks: {(method, table): callable} — 응답 전에 호출된다 (느린 저장소 흉내).
    """

    tables: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    users: Dict[str, Dict[str, str]] = field(default_factory=dict)
    fail: Dict[tuple, int] = field(default_factory=dict)
    hooks: Dict[tuple, Callable[[], None]] = field(default_factory=dict)
    requests: List[httpx.Request] = field(default_factory=list)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/auth/v1/token":
            return self._token(request)

        table = path.rsplit("/", 1)[-1]
        hook = self.hooks.get((request.method, table))
        if hook is not None:
            hook()
        status = self.fail.get((request.method, table))
        if status is not None:
            return httpx.Response(status, json={"message": f"{table} unavailable"})

        rows = self.tables.setdefault(table, [])
        if request.method == "GET":
            return httpx.Response(200, json=self._select(table, rows, request.url.params))
        if request.method == "POST":
            payload = json.loads(request.content)
            created = []
            for row in payload if isinstance(payload, list) else [payload]:
                row = {"id": f"{table}-{len(rows) + 1}", **row}
                rows.append(row)
                created.append(row)
            if request.headers.get("Prefer") == "return=representation":
                return httpx.Response(201, json=created)
            return httpx.Response(201)
        if request.method == "PATCH":
            values = json.loads(request.content)
            for row in self._filter(rows, request.url.params):
                row.update(values)
            return httpx.Response(204)
        return httpx.Response(405)

    def _token(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        user = self.users.get(body.get("email"))
        if user is None or user["password"] != body.get("password"):
            return httpx.Response(
                400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"}
            )
        return httpx.Response(
            200,
            json={"access_token": f"token-{user['id']}", "user": {"id": user["id"], "email": body["email"]}},
        )

    @staticmethod
    def _filter(rows, params) -> List[Dict[str, Any]]:
        result = rows
        for column, predicate in params.items():
            if column in ("select", "order", "limit"):
                continue
            if predicate == "not.is.null":
                result = [r for r in result if r.get(column) is not None]
            elif predicate.startswith("eq."):
                expected = predicate[3:]
                result = [r for r in result if _as_text(r.get(column)) == expected]
        return result

    def _select(self, table, rows, params) -> List[Dict[str, Any]]:
        result = [dict(r) for r in self._filter(rows, params)]
        if "order" in params:
            column, direction = params["order"].split(".")
            result.sort(key=lambda r: r.get(column), reverse=(direction == "desc"))
        if "assessments:assessment_id(title)" in params.get("select", ""):
            titles = {a["id"]: a["title"] for a in self.tables.get("assessments", [])}
            for r in result:
                r["assessments"] = {"title": titles.get(r.get("assessment_id"), "")}
        if "limit" in params:
            result = result[: int(params["limit"])]
        return result


@pytest.fixture
def store_server():
    server = FakeStoreServer()
    server.tables["assessments"] = [
        {"id": "a-1", "title": "Phishing Awareness", "status": "published", "passing_score": 50, "year": 2026},
        {"id": "a-draft", "title": "Draft", "status": "draft", "passing_score": 70},
        {"id": "a-empty", "title": "Empty", "status": "published", "passing_score": 70},
    ]
    server.tables["questions"] = [
        {"id": "q2", "assessment_id": "a-1", "question_text": "Second?", "options": ["Yes", "No"],
         "correct_option_index": 1, "is_active": True, "order_num": 2},
        {"id": "q1", "assessment_id": "a-1", "question_text": "First?", "options": ["A1", "B1", "C1"],
         "correct_answer": 0, "explanation": "Because.", "is_active": True, "order_num": 1},
        {"id": "q-off", "assessment_id": "a-1", "question_text": "Retired?", "options": ["x", "y"],
         "correct_option_index": 0, "is_active": False, "order_num": 3},
    ]
    server.users["student@example.com"] = {"id": "user-1", "password": "secret"}
    return server


@pytest.fixture
def store_client(store_server):
    client = StoreClient("http://store.test", "anon-key", transport=store_server.transport())
    yield client
    client.close()
