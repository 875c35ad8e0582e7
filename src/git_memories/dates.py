"""날짜 유틸리티 (UTC 하루 구간, 입력 파싱)."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, timedelta

MIN_YEAR = 2008  # GitHub 서비스 시작 연도

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

DayWindow = tuple[datetime, datetime]


def day_window(year: int, month: int, day: int) -> DayWindow:
    """[해당일 00:00 UTC, 다음날 00:00 UTC) 반열린 구간.

    Raises:
        ValueError: 해당 연도에 존재하지 않는 날짜 (예: 평년의 2월 29일)
    """
    start = datetime(year, month, day, tzinfo=UTC)
    return start, start + timedelta(days=1)


def in_window(ts: datetime, window: DayWindow) -> bool:
    start, end = window
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return start <= ts < end


def to_github_timestamp(dt: datetime) -> str:
    """since/until 쿼리용 ISO 8601 문자열."""
    return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def today_utc() -> date:
    return datetime.now(tz=UTC).date()


def parse_date_string(value: str, *, today: date | None = None) -> date:
    """YYYY-MM-DD 문자열을 검증해 date로 변환한다.

    - 연도는 2008 ~ 올해
    - 월 1~12, 일 1~31
    - 실제 달력에 존재하는 날짜여야 한다 (2월 30일 불가)
    """
    match = _DATE_RE.match(value)
    if not match:
        raise ValueError(f"Invalid date format. Expected YYYY-MM-DD, got: {value}")

    year, month, day = (int(part) for part in match.groups())
    current_year = (today or today_utc()).year

    if year < MIN_YEAR or year > current_year:
        raise ValueError(f"Year must be between {MIN_YEAR} and {current_year}, got: {year}")
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got: {month}")
    if not 1 <= day <= 31:
        raise ValueError(f"Day must be between 1 and 31, got: {day}")

    try:
        return date(year, month, day)
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value}") from exc
