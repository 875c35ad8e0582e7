"""공통 fixture."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import yaml

from git_memories.config import GitHubApiConfig
from git_memories.github_api import GitHubApiClient
from git_memories.models import RepositoryRecord


@pytest.fixture()
def api_config() -> GitHubApiConfig:
    return GitHubApiConfig(
        token_env_var="GITHUB_TOKEN",
        request_timeout_sec=5,
        api_delay_ms=0,
    )


@pytest.fixture()
def api_client(api_config: GitHubApiConfig, monkeypatch: pytest.MonkeyPatch) -> GitHubApiClient:
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test_token_12345")
    client = GitHubApiClient(api_config)
    yield client
    client.close()


@pytest.fixture()
def mock_client() -> MagicMock:
    """GitHubApiClient 대체 mock (get 라우팅은 각 테스트에서 지정)."""
    client = MagicMock()
    client.per_page = 100
    client.request_count = 0
    client.rate_remaining = None
    return client


@pytest.fixture()
def sample_repo_data() -> dict[str, Any]:
    """GET /users/{username}/repos 항목 샘플."""
    return {
        "id": 1296269,
        "name": "hello-world",
        "full_name": "octocat/hello-world",
        "owner": {"login": "octocat", "id": 1},
        "private": False,
        "created_at": "2020-01-26T19:01:12Z",
        "updated_at": "2024-01-26T19:14:43Z",
        "pushed_at": "2023-01-26T19:06:43Z",
    }


@pytest.fixture()
def make_repo() -> Callable[..., RepositoryRecord]:
    def _make(
        name: str = "repo", created: int = 2020, updated: int = 2023, pushed: int = 2023,
        owner: str = "octocat",
    ) -> RepositoryRecord:
        return RepositoryRecord(
            owner=owner, name=name, created_year=created, updated_year=updated, pushed_year=pushed,
        )

    return _make


@pytest.fixture()
def sample_config_data() -> dict[str, Any]:
    """테스트용 config dict."""
    return {
        "github": {
            "base_url": "https://api.github.com",
            "graphql_url": "https://api.github.com/graphql",
            "token_env_var": "GITHUB_TOKEN",
            "request_timeout_sec": 10,
            "per_page": 50,
            "api_delay_ms": 25,
        },
        "discovery": {"max_repos_per_year": 5},
    }


@pytest.fixture()
def tmp_config_file(tmp_path: Path, sample_config_data: dict[str, Any]) -> Path:
    """임시 YAML 설정 파일."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump(sample_config_data), encoding="utf-8")
    return config_path
