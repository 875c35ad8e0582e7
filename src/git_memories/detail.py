"""연도별 커밋/PR 상세 수집.

후보 repo마다 대상 날짜 하루 구간으로 좁힌 커밋을 조회하고,
커밋이 1건 이상인 repo에 한해서만 PR을 조회한다 (호출 수 절감).
- 그 날 커밋이 없는 repo에서 그 날 열린 PR은 놓친다 (의도된 편향)
- repo 하나의 실패는 경고 로그 후 건너뛴다
- repo마다 client.delay()로 고정 대기
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from git_memories.dates import DayWindow, day_window, in_window, to_github_timestamp
from git_memories.github_api import GitHubApiClient, GitHubApiError
from git_memories.models import Commit, PullRequest, RepositoryRecord

logger = logging.getLogger(__name__)


class PartialFetchError(Exception):
    """단일 repo의 연도별 수집 실패."""

    def __init__(self, repository: str, reason: str):
        self.repository = repository
        self.reason = reason
        super().__init__(f"Failed to fetch {repository}: {reason}")


@dataclass
class YearDetail:
    """단일 연도 수집 결과 (repo 순회 순서 유지)."""

    year: int
    commits: list[Commit] = field(default_factory=list)
    pull_requests: list[PullRequest] = field(default_factory=list)
    failed_repositories: list[str] = field(default_factory=list)


def fetch_commits_on_date(
    client: GitHubApiClient, repo: RepositoryRecord, window: DayWindow,
) -> list[Commit]:
    """GET /repos/{owner}/{repo}/commits?since&until — 구간 밖 커밋은 로컬에서 한 번 더 거른다."""
    since, until = window
    data = client.get(
        f"/repos/{repo.owner}/{repo.name}/commits",
        params={
            "since": to_github_timestamp(since),
            "until": to_github_timestamp(until),
            "per_page": client.per_page,
        },
    )
    if not isinstance(data, list):
        raise ValueError("commit list payload is not an array")

    commits = [Commit.from_api_response(raw, repo.ref) for raw in data]
    return [c for c in commits if in_window(c.pushed_date, window)]


def fetch_pull_requests_on_date(
    client: GitHubApiClient, repo: RepositoryRecord, window: DayWindow,
) -> list[PullRequest]:
    """GET /repos/{owner}/{repo}/pulls?state=all&since — API가 하한만 지원하므로 created_at으로 후처리."""
    since, _ = window
    data = client.get(
        f"/repos/{repo.owner}/{repo.name}/pulls",
        params={
            "state": "all",
            "since": to_github_timestamp(since),
            "per_page": client.per_page,
        },
    )
    if not isinstance(data, list):
        raise ValueError("pull request list payload is not an array")

    pulls = [PullRequest.from_api_response(raw, repo.ref) for raw in data]
    return [pr for pr in pulls if in_window(pr.created_at, window)]


def _fetch_repo_detail(
    client: GitHubApiClient, repo: RepositoryRecord, window: DayWindow,
) -> tuple[list[Commit], list[PullRequest]]:
    """repo 하나의 커밋 → (커밋이 있으면) PR 조회.

    Raises:
        PartialFetchError: 이 repo만 건너뛰면 되는 실패
        GitHubApiError: 인증 실패 등 치명적 오류 (is_fatal)
    """
    try:
        commits = fetch_commits_on_date(client, repo, window)
        pulls = fetch_pull_requests_on_date(client, repo, window) if commits else []
    except GitHubApiError as exc:
        if exc.is_fatal:
            raise
        raise PartialFetchError(repo.full_name, str(exc)) from exc
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise PartialFetchError(repo.full_name, f"malformed payload: {exc}") from exc
    return commits, pulls


def fetch_year_detail(
    client: GitHubApiClient,
    username: str,
    year: int,
    target_month: int,
    target_day: int,
    candidates: Iterable[RepositoryRecord],
) -> YearDetail:
    """후보 repo들에서 year-target_month-target_day 하루치 커밋/PR을 수집한다."""
    detail = YearDetail(year=year)

    try:
        window = day_window(year, target_month, target_day)
    except ValueError:
        # 평년의 2월 29일 등: 해당 연도엔 대상 날짜가 없다
        logger.debug("No %02d-%02d in %d, skipping", target_month, target_day, year,
                     extra={"year": year})
        return detail

    for repo in candidates:
        try:
            commits, pulls = _fetch_repo_detail(client, repo, window)
        except PartialFetchError as exc:
            detail.failed_repositories.append(repo.full_name)
            logger.warning(
                "Skipping %s for %s in %d: %s", repo.full_name, username, year, exc.reason,
                extra={"event_code": "REPO_FETCH_FAILED", "year": year, "repo": repo.full_name},
            )
        else:
            detail.commits.extend(commits)
            detail.pull_requests.extend(pulls)

        client.delay()

    return detail
