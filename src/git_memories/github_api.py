"""GitHub REST/GraphQL API 동기 클라이언트.

모든 요청에 Bearer 토큰과 API 버전 헤더를 붙이고, 실패를 예외로 통일한다.
- non-2xx → GitHubApiError(status_code, status_text)
- GraphQL errors 배열 → GraphQLError (HTTP 200이어도)
- delay(): 호출자가 repo 사이에 넣는 고정 대기 (재시도/백오프 없음)
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import httpx

from git_memories.config import GitHubApiConfig

logger = logging.getLogger(__name__)


class GitHubApiError(Exception):
    """GitHub API 호출 실패 (non-2xx 응답 또는 전송 계층 예외)."""

    def __init__(self, status_code: int, status_text: str):
        self.status_code = status_code
        self.status_text = status_text
        super().__init__(f"GitHub API error: {status_code} {status_text}")

    @property
    def is_fatal(self) -> bool:
        """인증 실패(401)는 이후 모든 호출이 실패하므로 실행 전체를 중단한다."""
        return self.status_code == 401


class GraphQLError(Exception):
    """GraphQL 응답에 errors 배열이 포함된 경우."""

    def __init__(self, messages: list[str]):
        self.messages = messages
        super().__init__(f"GraphQL errors: {', '.join(messages)}")


class GitHubApiClient:
    """GitHub REST/GraphQL API 동기 클라이언트."""

    def __init__(self, config: GitHubApiConfig, token: str | None = None) -> None:
        token = token or os.environ.get(config.token_env_var, "")
        if not token:
            raise RuntimeError(f"환경변수 {config.token_env_var}이 설정되지 않았습니다")

        self._config = config
        self._client = httpx.Client(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github.v3+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": config.user_agent,
            },
            timeout=config.request_timeout_sec,
        )
        self._rate_remaining: int | None = None
        self._request_count = 0

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """요청을 보내고 non-2xx/전송 예외를 GitHubApiError로 변환한다."""
        self._request_count += 1
        try:
            resp = self._client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("Transport error on %s %s: %s", method, url, exc)
            raise GitHubApiError(0, str(exc) or type(exc).__name__) from exc

        remaining = resp.headers.get("X-RateLimit-Remaining")
        if remaining is not None:
            self._rate_remaining = int(remaining)

        if not resp.is_success:
            logger.debug(
                "%s %s failed: %d %s", method, url, resp.status_code, resp.reason_phrase,
                extra={"status_code": resp.status_code},
            )
            raise GitHubApiError(resp.status_code, resp.reason_phrase)
        return resp

    @staticmethod
    def _decode(resp: httpx.Response) -> Any:
        """2xx 본문을 JSON으로 해석한다. 점검 페이지 등 비JSON 본문은 GitHubApiError."""
        try:
            return resp.json()
        except ValueError as exc:
            logger.warning(
                "Invalid JSON body from %s: %.80r", resp.request.url, resp.text,
                extra={"status_code": resp.status_code},
            )
            raise GitHubApiError(resp.status_code, "Invalid JSON response") from exc

    def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        """GET 요청 후 JSON 본문을 반환한다."""
        resp = self._send("GET", path, params=params)
        return self._decode(resp) if resp.content else None

    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """GraphQL 요청 후 data 필드를 반환한다.

        Raises:
            GitHubApiError: non-2xx 응답
            GraphQLError: 응답에 errors 배열이 있는 경우
        """
        resp = self._send(
            "POST",
            self._config.graphql_url,
            json={"query": query, "variables": variables or {}},
            headers={"Content-Type": "application/json"},
        )
        body = self._decode(resp)
        if not isinstance(body, dict):
            raise GitHubApiError(resp.status_code, "Invalid JSON response")
        if body.get("errors"):
            raise GraphQLError([e.get("message", "") for e in body["errors"]])
        return body.get("data") or {}

    def delay(self, ms: int | None = None) -> None:
        """rate limit 회피용 고정 대기. ms 미지정 시 config.api_delay_ms."""
        wait_ms = self._config.api_delay_ms if ms is None else ms
        if wait_ms > 0:
            time.sleep(wait_ms / 1000)

    @property
    def per_page(self) -> int:
        return self._config.per_page

    @property
    def rate_remaining(self) -> int | None:
        """마지막 응답 기준 남은 rate limit."""
        return self._rate_remaining

    @property
    def request_count(self) -> int:
        """지금까지 보낸 요청 수."""
        return self._request_count

    def close(self) -> None:
        """httpx.Client를 종료한다."""
        self._client.close()

    def __enter__(self) -> GitHubApiClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
