"""
services/store.py

원격 저장소(PostgREST / Supabase 호환) 범용 클라이언트.

테이블 조회(필터/정렬), 단건·일괄 삽입, 필터 기반 갱신,
비밀번호 방식 로그인 엔드포인트만 다룬다. 테이블별 로직은 repository.py에 있다.

행 단위 권한은 전적으로 저장소가 판단한다.
로그인 후에는 모든 호출이 사용자 access token으로 실행된다.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx
from pydantic import BaseModel

from assessment_cbt.services.errors import AuthError, StoreError

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"
AUTH_TOKEN_PATH = "/auth/v1/token"


def eq(value: Any) -> str:
    """PostgREST 동등 조건 문자열 (eq.<value>)."""
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"eq.{value}"


def is_not_null() -> str:
    return "not.is.null"


class AuthSession(BaseModel):
    """토큰 엔드포인트가 돌려준 로그인 사용자."""

    access_token: str
    user_id: str
    email: Optional[str] = None


class StoreClient:
    """
    원격 저장소 조회 클라이언트.

    Attributes:
        base_url:     저장소 루트 URL (예: "https://project.supabase.co")
        api_key:      apikey 헤더로 보내는 프로젝트 키
        access_token: 로그인 사용자의 bearer 토큰. 로그인 전에는 None
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            transport:   httpx 전송 계층 (테스트에서는 httpx.MockTransport)
            http_client: 공유할 httpx.Client. 주어지면 닫을 책임은 원래 소유자에게 있다.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self._owns_client = http_client is None
        if http_client is None:
            # 타임아웃은 httpx 기본값
            http_client = httpx.Client(base_url=self.base_url, transport=transport)
        self._client = http_client

    def with_token(self, access_token: str) -> "StoreClient":
        """
        같은 저장소에 다른 사용자 토큰으로 접근하는 클라이언트.

        연결 풀은 이 클라이언트와 공유하고, 토큰은 요청마다 헤더로만 보낸다.
        """
        return StoreClient(
            self.base_url,
            self.api_key,
            access_token=access_token,
            http_client=self._client,
        )

    def close(self) -> None:
        """소유한 연결 풀만 닫는다. with_token()으로 만든 클라이언트에서는 아무 일도 없다."""
        if self._owns_client:
            self._client.close()

    def _get_headers(self) -> Dict[str, str]:
        token = self.access_token or self.api_key
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        all_headers = self._get_headers()
        if headers:
            all_headers.update(headers)

        try:
            response = self._client.request(
                method, path, params=params, json=json, headers=all_headers
            )
        except httpx.HTTPError as e:
            logger.error(f"저장소 요청 실패 ({operation}): {e}")
            raise StoreError(operation, str(e)) from e

        if response.is_error:
            message = _error_message(response)
            logger.error(
                f"저장소 오류 응답 ({operation}): HTTP {response.status_code} {message}"
            )
            error_cls = AuthError if response.status_code in (401, 403) else StoreError
            raise error_cls(operation, message, status_code=response.status_code)

        return response

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, str]] = None,
        *,
        columns: str = "*",
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        모든 필터 조건을 만족하는 행 조회.

        Args:
            table:   테이블 이름
            filters: 컬럼 → PostgREST 조건 (eq() 참고)
            columns: PostgREST select 식
            order:   정렬 (예: "order_num.asc")
            limit:   최대 행 수

        Returns:
            행 dict 리스트 (빈 리스트 가능)
        """
        params: Dict[str, str] = {"select": columns}
        params.update(filters or {})
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = str(limit)

        response = self._request(f"select {table}", "GET", f"{REST_PREFIX}/{table}", params=params)
        return response.json()

    def select_one(
        self,
        table: str,
        filters: Mapping[str, str],
        *,
        columns: str = "*",
    ) -> Optional[Dict[str, Any]]:
        """단일 행 조회. 없으면 None."""
        rows = self.select(table, filters, columns=columns, limit=1)
        return rows[0] if rows else None

    def insert_one(self, table: str, row: Mapping[str, Any]) -> Dict[str, Any]:
        """한 행 삽입 후 저장된 행을 반환."""
        response = self._request(
            f"insert {table}",
            "POST",
            f"{REST_PREFIX}/{table}",
            json=dict(row),
            headers={"Prefer": "return=representation"},
        )
        created = response.json()
        if isinstance(created, list):
            if not created:
                raise StoreError(f"insert {table}", "store returned no row")
            created = created[0]
        return created

    def insert_many(self, table: str, rows: List[Mapping[str, Any]]) -> None:
        """모든 행을 한 번의 요청으로 삽입."""
        self._request(
            f"insert {table}",
            "POST",
            f"{REST_PREFIX}/{table}",
            json=[dict(r) for r in rows],
            headers={"Prefer": "return=minimal"},
        )

    def update(
        self,
        table: str,
        filters: Mapping[str, str],
        values: Mapping[str, Any],
    ) -> None:
        """필터 조건에 맞는 모든 행 갱신."""
        if not filters:
            raise ValueError("update requires at least one filter")
        self._request(
            f"update {table}",
            "PATCH",
            f"{REST_PREFIX}/{table}",
            params=dict(filters),
            json=dict(values),
            headers={"Prefer": "return=minimal"},
        )

    def sign_in(self, email: str, password: str) -> AuthSession:
        """
        이메일/비밀번호로 access token 발급.

        Raises:
            AuthError: 자격 증명이 거부된 경우
        """
        try:
            response = self._request(
                "sign in",
                "POST",
                AUTH_TOKEN_PATH,
                params={"grant_type": "password"},
                json={"email": email, "password": password},
            )
        except AuthError:
            raise
        except StoreError as e:
            # 잘못된 자격 증명은 400 invalid_grant
            raise AuthError("sign in", e.message, status_code=e.status_code) from e

        body = response.json()
        try:
            user = body["user"]
            session = AuthSession(
                access_token=body["access_token"],
                user_id=user["id"],
                email=user.get("email"),
            )
        except (KeyError, TypeError) as e:
            raise AuthError("sign in", f"unexpected token response: {e}") from e

        logger.info(f"로그인 성공: user={session.user_id}")
        return session


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("message", "error_description", "msg", "error"):
            if body.get(key):
                return str(body[key])
    return response.text
