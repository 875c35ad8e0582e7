"""YAML 설정 로딩 + Pydantic 모델."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config.yaml"


# ── 설정 모델 ──────────────────────────────────────────


class GitHubApiConfig(BaseModel):
    base_url: str = "https://api.github.com"
    graphql_url: str = "https://api.github.com/graphql"
    token_env_var: str = "GITHUB_TOKEN"
    request_timeout_sec: float = 30.0
    per_page: int = Field(default=100, ge=1, le=100)
    api_delay_ms: int = Field(default=50, ge=0)  # repo 단위 호출 사이 고정 대기
    user_agent: str = "git-memories/0.1.0"


class DiscoveryConfig(BaseModel):
    max_repos_per_year: int = Field(default=10, ge=1)


class AppConfig(BaseModel):
    """애플리케이션 전체 설정."""

    github: GitHubApiConfig = Field(default_factory=GitHubApiConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)


# ── 로딩 ───────────────────────────────────────────────


def load_config(path: Path | None = None) -> AppConfig:
    """YAML 설정 파일을 로딩하고 Pydantic 모델로 검증한다.

    환경변수 우선순위: 시스템 환경변수 > .env 파일 > config.yaml 기본값
    경로를 지정하지 않았고 기본 config.yaml도 없으면 기본값으로 동작한다.
    """
    config_path = path or _DEFAULT_CONFIG_PATH

    # .env 파일 로딩: config.yaml과 같은 디렉터리의 .env를 탐색
    dotenv_path = config_path.parent / ".env"
    load_dotenv(dotenv_path=dotenv_path, override=False)

    if path is None and not config_path.exists():
        raw: dict = {}
    else:
        with open(config_path) as f:
            raw = yaml.safe_load(f)

        if raw is None:
            raise ValueError(f"Empty config file: {config_path}")

    # 환경변수 오버라이드 (GitHub Enterprise 등)
    if base_url := os.environ.get("GITHUB_API_URL"):
        raw.setdefault("github", {})
        raw["github"]["base_url"] = base_url

    if graphql_url := os.environ.get("GITHUB_GRAPHQL_URL"):
        raw.setdefault("github", {})
        raw["github"]["graphql_url"] = graphql_url

    return AppConfig.model_validate(raw)
