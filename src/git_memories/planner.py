"""연도별 활동 repo 후보 선정.

repo 메타데이터의 연도(created/updated/pushed)만으로 각 연도에 활동했을
가능성이 있는 repo를 고른다. 모든 repo × 모든 연도를 조회하지 않기 위한 핵심 휴리스틱.

후보 조건 (연도 Y):
    created_year <= Y  and  (updated_year >= Y  or  pushed_year >= Y)

- 생성 전 연도에는 기여가 있을 수 없다
- OR 조건은 의도적으로 관대하다 (false positive는 API 호출 몇 번, false negative는 데이터 유실)
- 알려진 한계: 설정 변경 같은 메타데이터 수정만으로 updated_year가 Y 이상이면
  push가 없던 연도에도 후보가 된다
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from git_memories.models import RepositoryRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_REPOS_PER_YEAR = 10


@dataclass(frozen=True)
class YearCandidates:
    year: int
    repositories: tuple[RepositoryRecord, ...]


@dataclass(frozen=True)
class ActivityPlan:
    """연도 → 후보 repo 목록. 연도 내림차순(최신 우선)으로 고정된다."""

    entries: tuple[YearCandidates, ...] = ()

    def __iter__(self) -> Iterator[YearCandidates]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, year: object) -> bool:
        return any(entry.year == year for entry in self.entries)

    @property
    def years(self) -> list[int]:
        return [entry.year for entry in self.entries]

    def candidates(self, year: int) -> tuple[RepositoryRecord, ...]:
        """해당 연도 후보. 계획에 없는 연도는 빈 tuple."""
        for entry in self.entries:
            if entry.year == year:
                return entry.repositories
        return ()

    @property
    def total_candidates(self) -> int:
        return sum(len(entry.repositories) for entry in self.entries)


def is_candidate(repo: RepositoryRecord, year: int) -> bool:
    return repo.created_year <= year and (repo.updated_year >= year or repo.pushed_year >= year)


def plan_activity(
    repositories: Iterable[RepositoryRecord],
    target_month: int,
    target_day: int,
    start_year: int,
    end_year: int,
    *,
    max_repos_per_year: int = DEFAULT_MAX_REPOS_PER_YEAR,
) -> ActivityPlan:
    """start_year~end_year 각 연도의 후보 repo를 고른다 (순수 함수).

    - 후보는 입력 순서(최근 업데이트 순)를 유지하고 max_repos_per_year개로 자른다
    - 후보가 없는 연도는 계획에서 제외한다
    - target_month/target_day는 현재 후보 판정에 쓰이지 않는다 (연 단위 판정)
    """
    repos = list(repositories)
    entries: list[YearCandidates] = []

    for year in range(end_year, start_year - 1, -1):
        active = [repo for repo in repos if is_candidate(repo, year)]
        if active:
            entries.append(YearCandidates(year=year, repositories=tuple(active[:max_repos_per_year])))

    plan = ActivityPlan(entries=tuple(entries))
    logger.debug(
        "Planned %d years for %02d-%02d (%d-%d), %d candidate slots",
        len(plan), target_month, target_day, start_year, end_year, plan.total_candidates,
        extra={"event_code": "PLAN_BUILT"},
    )
    return plan
