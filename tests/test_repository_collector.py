"""Tests for repository discovery and filtering."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from config import AccountConfig, AccountKind, GitHubConfig
from conftest import repo_payload
from github_client import GitHubClient
from repository_collector import RepositoryCollector, RepositoryRecord, is_eligible


def _page(repos, next_url=None) -> MagicMock:
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = repos
    response.links = {'next': {'url': next_url}} if next_url else {}
    return response


def _make_client(kind: AccountKind = AccountKind.ORG) -> GitHubClient:
    client = GitHubClient(
        GitHubConfig(api_url='https://api.github.com', token='gh-token'),
        AccountConfig(kind=kind, name='acme'),
    )
    client.rate_limiter.wait_if_needed = lambda *_args, **_kwargs: None
    return client


def test_is_eligible_rejects_forks_archived_disabled_and_other_defaults() -> None:
    assert is_eligible(repo_payload(1, 'ok'), 'master')
    assert not is_eligible(repo_payload(2, 'fork', fork=True), 'master')
    assert not is_eligible(repo_payload(3, 'archived', archived=True), 'master')
    assert not is_eligible(repo_payload(4, 'disabled', disabled=True), 'master')
    assert not is_eligible(repo_payload(5, 'main', default_branch='main'), 'master')


def test_collect_keeps_only_eligible_repositories() -> None:
    client = MagicMock()
    client.account = AccountConfig(kind=AccountKind.ORG, name='acme')
    client.list_repositories.return_value = iter(
        [
            repo_payload(1, 'svc-a'),
            repo_payload(2, 'svc-b', fork=True),
            repo_payload(3, 'svc-c', archived=True),
            repo_payload(4, 'svc-d', disabled=True),
            repo_payload(5, 'svc-e', default_branch='main'),
            repo_payload(6, 'svc-f'),
        ]
    )

    records = RepositoryCollector(client, 'master').collect()

    assert records == [RepositoryRecord(1, 'svc-a'), RepositoryRecord(6, 'svc-f')]


def test_list_repositories_follows_next_links() -> None:
    """Three pages (100 + 100 + 1) are fetched and every item is yielded."""
    client = _make_client()
    page_2 = 'https://api.github.com/organizations/1/repos?per_page=100&page=2'
    page_3 = 'https://api.github.com/organizations/1/repos?per_page=100&page=3'
    pages = [
        _page([repo_payload(i, f'r{i}') for i in range(100)], page_2),
        _page([repo_payload(i, f'r{i}') for i in range(100, 200)], page_3),
        _page([repo_payload(200, 'r200')]),
    ]

    with patch('github_client.requests.get', side_effect=pages) as mock_get:
        repos = list(client.list_repositories())

    assert len(repos) == 201
    assert mock_get.call_count == 3
    first, second, third = mock_get.call_args_list
    assert first.args[0] == 'https://api.github.com/orgs/acme/repos'
    assert first.kwargs['params'] == {'per_page': 100}
    assert second.args[0] == page_2
    assert second.kwargs['params'] is None
    assert third.args[0] == page_3


def test_user_accounts_use_users_endpoint() -> None:
    client = _make_client(AccountKind.USER)

    with patch('github_client.requests.get', return_value=_page([])) as mock_get:
        assert list(client.list_repositories()) == []

    assert mock_get.call_args.args[0] == 'https://api.github.com/users/acme/repos'


def test_collector_over_paginated_listing_filters_each_page() -> None:
    client = _make_client()
    pages = [
        _page(
            [repo_payload(1, 'keep'), repo_payload(2, 'fork', fork=True)],
            'https://api.github.com/next',
        ),
        _page([repo_payload(3, 'also-keep'), repo_payload(4, 'main', default_branch='main')]),
    ]

    with patch('github_client.requests.get', side_effect=pages):
        records = RepositoryCollector(client, 'master').collect()

    assert [r.name for r in records] == ['keep', 'also-keep']
