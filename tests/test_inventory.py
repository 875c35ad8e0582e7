"""repo 목록 / 유저 조회 테스트."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from pytest_httpx import HTTPXMock

from git_memories.github_api import GitHubApiClient, GitHubApiError, GraphQLError
from git_memories.inventory import account_creation_year, fetch_user, list_repositories


class TestListRepositories:
    def test_single_page_sorted_by_updated(
        self, api_client: GitHubApiClient, httpx_mock: HTTPXMock, sample_repo_data: dict[str, Any]
    ) -> None:
        second = {**sample_repo_data, "name": "older", "updated_at": "2021-03-01T00:00:00Z"}
        httpx_mock.add_response(
            url="https://api.github.com/users/octocat/repos?per_page=100&sort=updated",
            json=[sample_repo_data, second],
            headers={"Link": '<https://api.github.com/user/1/repos?page=2>; rel="next"'},
        )
        repos = list_repositories(api_client, "octocat")

        # 다음 페이지는 따라가지 않는다
        assert len(httpx_mock.get_requests()) == 1
        assert [r.name for r in repos] == ["hello-world", "older"]
        assert repos[1].updated_year == 2021

    def test_error_propagates(self, api_client: GitHubApiClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url="https://api.github.com/users/ghost/repos?per_page=100&sort=updated",
            status_code=404,
        )
        with pytest.raises(GitHubApiError) as exc_info:
            list_repositories(api_client, "ghost")
        assert exc_info.value.status_code == 404

    def test_malformed_payload_raises_api_error(self, mock_client: MagicMock) -> None:
        mock_client.get.return_value = [{"name": "no-dates"}]
        with pytest.raises(GitHubApiError, match="Malformed repository payload"):
            list_repositories(mock_client, "octocat")

    def test_non_list_payload_raises(self, mock_client: MagicMock) -> None:
        mock_client.get.return_value = {"message": "weird"}
        with pytest.raises(GitHubApiError):
            list_repositories(mock_client, "octocat")

    def test_empty_inventory(self, mock_client: MagicMock) -> None:
        mock_client.get.return_value = []
        assert list_repositories(mock_client, "octocat") == []


class TestFetchUser:
    def test_graphql_lookup(self, api_client: GitHubApiClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url="https://api.github.com/graphql",
            method="POST",
            json={"data": {"user": {"login": "octocat", "name": "The Octocat", "createdAt": "2011-01-25T18:44:36Z"}}},
        )
        user = fetch_user(api_client, "octocat")

        assert user.login == "octocat"
        assert account_creation_year(user) == 2011
        body = httpx_mock.get_requests()[0].read()
        assert b'"username":"octocat"' in body.replace(b" ", b"")

    def test_authenticated_user(self, api_client: GitHubApiClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url="https://api.github.com/user",
            json={"login": "me", "name": None, "created_at": "2015-05-05T00:00:00Z"},
        )
        user = fetch_user(api_client)
        assert user.login == "me"
        assert account_creation_year(user) == 2015

    def test_unknown_user(self, mock_client: MagicMock) -> None:
        mock_client.graphql.return_value = {"user": None}
        with pytest.raises(GraphQLError, match="ghost"):
            fetch_user(mock_client, "ghost")
