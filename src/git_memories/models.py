"""GitHub 응답 → 기여 데이터 모델 (Pydantic).

API 응답 dict는 수신 직후 이 모델들로 변환하고, 이후 단계에는 모델만 전달한다.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

PullRequestState = Literal["OPEN", "CLOSED", "MERGED"]


class RepoRef(BaseModel):
    """repo 식별자 (owner/name)."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class RepositoryRecord(BaseModel):
    """유저 repo 목록의 한 항목.

    - 연도 3종(created/updated/pushed)은 활동 연도 추정에 사용
    - pushed_at이 없는 repo(push 이력 없음)는 created_year를 pushed_year로 쓴다
    """

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str
    created_year: int
    updated_year: int
    pushed_year: int

    @property
    def ref(self) -> RepoRef:
        return RepoRef(owner=self.owner, name=self.name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def from_api_response(cls, raw: dict[str, Any]) -> RepositoryRecord:
        """GET /users/{username}/repos 항목 → RepositoryRecord."""
        created = _parse_timestamp(_require_object(raw, "repository item")["created_at"])
        updated = _parse_timestamp(raw.get("updated_at") or raw["created_at"])
        pushed_raw = raw.get("pushed_at")
        pushed = _parse_timestamp(pushed_raw) if pushed_raw else created
        return cls(
            owner=raw["owner"]["login"],
            name=raw["name"],
            created_year=created.year,
            updated_year=updated.year,
            pushed_year=pushed.year,
        )


class Commit(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    url: str
    repository: RepoRef
    pushed_date: datetime  # commit.author.date, 날짜 매칭 기준

    @classmethod
    def from_api_response(cls, raw: dict[str, Any], repository: RepoRef) -> Commit:
        commit = _require_object(raw, "commit item").get("commit")
        _require_object(commit, "commit.commit")
        return cls(
            message=commit.get("message") or "",
            url=raw["html_url"],
            repository=repository,
            pushed_date=commit["author"]["date"],
        )


class PullRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    repository: RepoRef
    created_at: datetime
    state: PullRequestState

    @classmethod
    def from_api_response(cls, raw: dict[str, Any], repository: RepoRef) -> PullRequest:
        """REST state는 open/closed뿐이므로 merged_at으로 MERGED를 구분한다."""
        _require_object(raw, "pull request item")
        state: PullRequestState = "OPEN" if raw.get("state") == "open" else "CLOSED"
        if raw.get("merged_at"):
            state = "MERGED"
        return cls(
            title=raw.get("title") or "",
            url=raw["html_url"],
            repository=repository,
            created_at=raw["created_at"],
            state=state,
        )


class YearContribution(BaseModel):
    """특정 연도의 대상 날짜에 발견된 커밋/PR."""

    year: int
    commits: list[Commit] = Field(default_factory=list)
    pull_requests: list[PullRequest] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.commits and not self.pull_requests


class ContributionSet(BaseModel):
    """최종 결과. years는 연도 내림차순."""

    month: int
    day: int
    years: list[YearContribution] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.years

    @property
    def total_commits(self) -> int:
        return sum(len(y.commits) for y in self.years)

    @property
    def total_pull_requests(self) -> int:
        return sum(len(y.pull_requests) for y in self.years)


class GitHubUser(BaseModel):
    login: str
    name: str | None = None
    created_at: datetime = Field(alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


def _require_object(value: Any, what: str) -> dict[str, Any]:
    """응답 항목이 JSON 객체가 아니면 ValueError."""
    if not isinstance(value, dict):
        raise ValueError(f"{what} is not an object: {type(value).__name__}")
    return value


def _parse_timestamp(value: str) -> datetime:
    """GitHub ISO 8601 타임스탬프('Z' 포함)를 파싱한다."""
    if not isinstance(value, str):
        raise ValueError(f"timestamp is not a string: {value!r}")
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
