"""날짜별 기여 탐색 오케스트레이션.

흐름: INIT → INVENTORY → PLAN → FETCH(연도별, 최신 우선) → ASSEMBLE → DONE
- repo 목록 조회 실패는 치명적 (FAILED, 예외 전파)
- 연도별 수집 중 치명적이지 않은 오류는 "해당 연도 기여 없음"으로 처리
- 커밋/PR이 모두 없는 연도는 결과에서 제외
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from git_memories.config import AppConfig
from git_memories.detail import fetch_year_detail
from git_memories.github_api import GitHubApiClient, GitHubApiError
from git_memories.inventory import list_repositories
from git_memories.models import ContributionSet, RepositoryRecord, YearContribution
from git_memories.planner import plan_activity

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class DiscoveryState(str, Enum):
    INIT = "INIT"
    INVENTORY = "INVENTORY"
    PLAN = "PLAN"
    FETCH = "FETCH"
    ASSEMBLE = "ASSEMBLE"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass
class DiscoveryStats:
    """탐색 실행 통계."""

    username: str = ""
    start_year: int = 0
    end_year: int = 0
    state: DiscoveryState = DiscoveryState.INIT
    repositories: int = 0
    planned_years: int = 0
    years_with_contributions: list[int] = field(default_factory=list)
    failed_years: list[int] = field(default_factory=list)
    failed_repositories: list[str] = field(default_factory=list)
    api_calls: int = 0
    rate_remaining: int | None = None
    duration_ms: float = 0.0
    error: str | None = None


class ContributionAggregator:
    """연도 범위 전체에서 특정 월/일의 커밋/PR을 모은다."""

    def __init__(self, api_client: GitHubApiClient, config: AppConfig) -> None:
        self._api = api_client
        self._config = config
        self.stats = DiscoveryStats()

    def discover(
        self,
        username: str,
        target_month: int,
        target_day: int,
        start_year: int,
        end_year: int,
        *,
        on_year: ProgressCallback | None = None,
    ) -> ContributionSet:
        """start_year~end_year의 target_month/target_day 기여를 연도 내림차순으로 반환한다.

        Raises:
            GitHubApiError: repo 목록 조회 실패 또는 인증 실패
        """
        start = time.monotonic()
        self.stats = DiscoveryStats(username=username, start_year=start_year, end_year=end_year)
        result = ContributionSet(month=target_month, day=target_day)

        if start_year > end_year:
            logger.info("Empty year range %d-%d, nothing to discover", start_year, end_year)
            self._finish(start, DiscoveryState.DONE)
            return result

        try:
            self.stats.state = DiscoveryState.INVENTORY
            repos = list_repositories(self._api, username)
            self.stats.repositories = len(repos)

            self.stats.state = DiscoveryState.PLAN
            plan = plan_activity(
                repos, target_month, target_day, start_year, end_year,
                max_repos_per_year=self._config.discovery.max_repos_per_year,
            )
            self.stats.planned_years = len(plan)

            self.stats.state = DiscoveryState.FETCH
            contributions: list[YearContribution] = []
            for entry in plan:
                if on_year is not None:
                    on_year(entry.year)
                contribution = self._fetch_year(
                    username, entry.year, target_month, target_day, entry.repositories,
                )
                if contribution is not None and not contribution.is_empty:
                    contributions.append(contribution)
        except GitHubApiError as exc:
            self.stats.error = str(exc)
            self._finish(start, DiscoveryState.FAILED)
            logger.error(
                "Discovery failed for %s: %s", username, exc,
                extra={"event_code": "DISCOVERY_FAILED", "status_code": exc.status_code},
            )
            raise
        except Exception as exc:
            self.stats.error = f"{type(exc).__name__}: {exc}"
            self._finish(start, DiscoveryState.FAILED)
            logger.exception(
                "Discovery aborted for %s", username,
                extra={"event_code": "DISCOVERY_FAILED"},
            )
            raise

        self.stats.state = DiscoveryState.ASSEMBLE
        result.years = sorted(contributions, key=lambda c: c.year, reverse=True)
        self.stats.years_with_contributions = [c.year for c in result.years]

        self._finish(start, DiscoveryState.DONE)
        self._log_summary(result)
        return result

    def _fetch_year(
        self,
        username: str,
        year: int,
        target_month: int,
        target_day: int,
        candidates: tuple[RepositoryRecord, ...],
    ) -> YearContribution | None:
        """단일 연도 수집. 치명적이지 않은 오류는 None (기여 없음)."""
        try:
            detail = fetch_year_detail(
                self._api, username, year, target_month, target_day, candidates,
            )
        except GitHubApiError as exc:
            if exc.is_fatal:
                raise
            self.stats.failed_years.append(year)
            logger.warning(
                "Failed to get contributions for %d: %s", year, exc,
                extra={"event_code": "YEAR_FETCH_FAILED", "year": year},
            )
            return None

        self.stats.failed_repositories.extend(f"{year}:{name}" for name in detail.failed_repositories)
        logger.debug(
            "Year %d: %d commits, %d pull requests from %d repos",
            year, len(detail.commits), len(detail.pull_requests), len(candidates),
            extra={"year": year},
        )
        return YearContribution(
            year=year, commits=detail.commits, pull_requests=detail.pull_requests,
        )

    def _finish(self, start: float, state: DiscoveryState) -> None:
        self.stats.state = state
        self.stats.api_calls = self._api.request_count
        self.stats.rate_remaining = self._api.rate_remaining
        self.stats.duration_ms = (time.monotonic() - start) * 1000

    def _log_summary(self, result: ContributionSet) -> None:
        logger.info(
            "Discovery complete: user=%s, years=%d-%d, repos=%d, planned_years=%d, "
            "years_with_contributions=%d, failed_repos=%d, api_calls=%d, duration=%.0fms",
            self.stats.username, self.stats.start_year, self.stats.end_year,
            self.stats.repositories, self.stats.planned_years, len(result.years),
            len(self.stats.failed_repositories), self.stats.api_calls, self.stats.duration_ms,
            extra={
                "event_code": "DISCOVERY_SUMMARY",
                "duration_ms": round(self.stats.duration_ms, 1),
                "counts": {
                    "repositories": self.stats.repositories,
                    "planned_years": self.stats.planned_years,
                    "commits": result.total_commits,
                    "pull_requests": result.total_pull_requests,
                    "failed_repositories": len(self.stats.failed_repositories),
                    "api_calls": self.stats.api_calls,
                    "rate_remaining": self.stats.rate_remaining,
                },
            },
        )
