"""유저 repo 목록 / 유저 정보 조회."""

from __future__ import annotations

import logging

from git_memories.github_api import GitHubApiClient, GitHubApiError, GraphQLError
from git_memories.models import GitHubUser, RepositoryRecord

logger = logging.getLogger(__name__)

_USER_QUERY = """
query GetUser($username: String!) {
  user(login: $username) {
    login
    name
    createdAt
  }
}
"""


def list_repositories(client: GitHubApiClient, username: str) -> list[RepositoryRecord]:
    """GET /users/{username}/repos — 최근 업데이트 순 첫 페이지만 조회한다.

    실패는 그대로 전파한다 (repo 목록 없이는 탐색 범위를 좁힐 수 없음).
    """
    data = client.get(
        f"/users/{username}/repos",
        params={"per_page": client.per_page, "sort": "updated"},
    )
    if not isinstance(data, list):
        raise GitHubApiError(200, "Unexpected repository list payload")

    try:
        repos = [RepositoryRecord.from_api_response(raw) for raw in data]
    except (KeyError, TypeError, ValueError) as exc:
        raise GitHubApiError(200, f"Malformed repository payload: {exc}") from exc

    logger.info(
        "Fetched %d repositories for %s", len(repos), username,
        extra={"event_code": "INVENTORY_FETCHED", "counts": {"repositories": len(repos)}},
    )
    return repos


def fetch_user(client: GitHubApiClient, username: str = "") -> GitHubUser:
    """유저 정보를 조회한다.

    username이 비어 있으면 토큰 소유자(GET /user), 아니면 GraphQL user(login) 조회.
    """
    if not username:
        data = client.get("/user")
        return GitHubUser(login=data["login"], name=data.get("name"), created_at=data["created_at"])

    data = client.graphql(_USER_QUERY, {"username": username})
    user = data.get("user")
    if user is None:
        raise GraphQLError([f"Could not resolve to a User with the login of '{username}'."])
    return GitHubUser.model_validate(user)


def account_creation_year(user: GitHubUser) -> int:
    return user.created_at.year
