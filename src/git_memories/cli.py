"""click CLI 엔트리포인트.

git-memories fetch                      # 오늘 날짜의 과거 기여
git-memories fetch --date 2017-09-15    # 9월 15일의 연도별 기여
git-memories plan --user octocat        # 연도별 후보 repo만 출력 (상세 조회 없음)
"""

from __future__ import annotations

import logging
import re
import sys
from datetime import date
from pathlib import Path

import click
import orjson

from git_memories.aggregator import ContributionAggregator
from git_memories.config import AppConfig, load_config
from git_memories.dates import parse_date_string, today_utc
from git_memories.github_api import GitHubApiClient, GitHubApiError, GraphQLError
from git_memories.inventory import account_creation_year, fetch_user, list_repositories
from git_memories.logging_config import setup_logging
from git_memories.planner import plan_activity

logger = logging.getLogger(__name__)

_USERNAME_RE = re.compile(r"^[a-zA-Z0-9-]+$")


def _parse_date(ctx: click.Context, param: click.Parameter, value: str | None) -> date:
    """YYYY-MM-DD 형식의 날짜를 파싱한다. 미지정 시 오늘(UTC)."""
    if value is None:
        return today_utc()
    try:
        return parse_date_string(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


def _validate_username(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return None
    if not value.strip():
        raise click.BadParameter("Username is required")
    if not _USERNAME_RE.match(value):
        raise click.BadParameter("Username can only contain letters, numbers, and hyphens")
    return value


def _common_options(func):
    options = [
        click.option("--date", "target_date", default=None, callback=_parse_date,
                     help="대상 날짜 (YYYY-MM-DD, 기본: 오늘)"),
        click.option("--user", "username", default=None, callback=_validate_username,
                     help="GitHub 유저 (기본: 토큰 소유자)"),
        click.option("--start-year", type=int, default=None,
                     help="탐색 시작 연도 (기본: 계정 생성 연도)"),
        click.option("--config", "config_path", type=click.Path(exists=True, path_type=Path),
                     default=None, help="설정 파일 경로 (기본: config.yaml)"),
        click.option("--json-log", is_flag=True, help="JSON 형태 로그 출력"),
        click.option("--verbose", is_flag=True, help="DEBUG 로그 출력"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _resolve_user(client: GitHubApiClient, username: str | None, start_year: int | None) -> tuple[str, int]:
    """탐색 대상 유저와 시작 연도를 결정한다."""
    user = fetch_user(client, username or "")
    if start_year is None:
        start_year = account_creation_year(user)
    return user.login, start_year


def _open_client(config: AppConfig) -> GitHubApiClient:
    try:
        return GitHubApiClient(config.github)
    except RuntimeError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _echo_json(payload: object) -> None:
    click.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


@click.group()
@click.version_option(version="0.1.0", prog_name="git-memories")
def main() -> None:
    """git-memories - 오늘 날짜의 과거 GitHub 기여를 연도별로 찾아본다."""


@main.command()
@_common_options
def fetch(
    target_date: date,
    username: str | None,
    start_year: int | None,
    config_path: Path | None,
    json_log: bool,
    verbose: bool,
) -> None:
    """대상 날짜(월/일)의 연도별 커밋/PR을 JSON으로 출력한다."""
    setup_logging(json_format=json_log, level=logging.DEBUG if verbose else logging.INFO)
    config = load_config(config_path)

    with _open_client(config) as client:
        try:
            login, first_year = _resolve_user(client, username, start_year)
            logger.info(
                "Searching contributions on %02d-%02d for %s (%d-%d)",
                target_date.month, target_date.day, login, first_year, target_date.year,
            )
            aggregator = ContributionAggregator(client, config)
            contributions = aggregator.discover(
                login, target_date.month, target_date.day, first_year, target_date.year,
                on_year=lambda year: logger.info("Fetching contributions (%d)", year,
                                                 extra={"year": year}),
            )
        except (GitHubApiError, GraphQLError) as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    _echo_json({"username": login, **contributions.model_dump(mode="json")})


@main.command()
@_common_options
def plan(
    target_date: date,
    username: str | None,
    start_year: int | None,
    config_path: Path | None,
    json_log: bool,
    verbose: bool,
) -> None:
    """연도별 후보 repo 목록만 출력한다 (커밋/PR 조회 없음)."""
    setup_logging(json_format=json_log, level=logging.DEBUG if verbose else logging.INFO)
    config = load_config(config_path)

    with _open_client(config) as client:
        try:
            login, first_year = _resolve_user(client, username, start_year)
            repos = list_repositories(client, login)
        except (GitHubApiError, GraphQLError) as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    activity = plan_activity(
        repos, target_date.month, target_date.day, first_year, target_date.year,
        max_repos_per_year=config.discovery.max_repos_per_year,
    )
    _echo_json({
        "username": login,
        "month": target_date.month,
        "day": target_date.day,
        "years": [
            {"year": entry.year, "repositories": [r.full_name for r in entry.repositories]}
            for entry in activity
        ],
    })
