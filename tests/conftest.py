"""Shared fixtures for rename-default-branch tests."""

from __future__ import annotations

from typing import Callable

import pytest

from config import (
    AccountConfig,
    AccountKind,
    BranchConfig,
    CloneMethod,
    Config,
    GitHubConfig,
    GitOperationConfig,
    RunMode,
)


@pytest.fixture
def make_config(tmp_path) -> Callable[..., Config]:
    def _make(
        mode: RunMode = RunMode.FORCE,
        delete_old: bool = False,
        kind: AccountKind = AccountKind.ORG,
        name: str = 'acme',
        clone_method: CloneMethod = CloneMethod.HTTPS,
    ) -> Config:
        return Config(
            account=AccountConfig(kind=kind, name=name),
            github=GitHubConfig(api_url='https://api.github.com', token='gh-token'),
            branches=BranchConfig(
                old_branch='master',
                new_branch='main',
                delete_old=delete_old,
            ),
            mode=mode,
            git_config=GitOperationConfig(
                clone_temp_dir=str(tmp_path / 'clones'),
                clone_method=clone_method,
            ),
        )

    return _make


def repo_payload(
    repo_id: int,
    name: str,
    default_branch: str = 'master',
    fork: bool = False,
    archived: bool = False,
    disabled: bool = False,
) -> dict:
    """Subset of the GitHub "list repositories" item used by the collector."""
    return {
        'id': repo_id,
        'name': name,
        'default_branch': default_branch,
        'fork': fork,
        'archived': archived,
        'disabled': disabled,
    }
