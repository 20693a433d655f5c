"""Tests for RenameOrchestrator."""

from __future__ import annotations

import os
from unittest.mock import MagicMock, patch

from argument_parser import parse_arguments
from config import RunMode
from conftest import repo_payload
from errors import AuthError, LocalVCSError, NotFoundError
from github_client import PullRequestRecord
from rename_orchestrator import (
    EXIT_AUTH_ERROR,
    EXIT_GITHUB_ERROR,
    EXIT_SUCCESS,
    RenameOrchestrator,
)


def _wire(orchestrator: RenameOrchestrator, repos, pulls=None):
    gh = MagicMock()
    gh.account = orchestrator.cfg.account
    gh.list_repositories.return_value = iter(repos)
    gh.clone_url.side_effect = lambda name, _method: f'https://github.com/acme/{name}.git'
    gh.list_open_pulls.return_value = pulls or []
    git = MagicMock()
    reporter = MagicMock()
    orchestrator.gh = gh
    orchestrator.git = git
    orchestrator.reporter = reporter
    return gh, git, reporter


def test_acme_end_to_end_only_touches_eligible_repository(tmp_path) -> None:
    """svc-b (fork) and svc-c (already main) are left alone."""
    with patch('argument_parser.discover_token', return_value='tok'):
        cfg = parse_arguments(
            ['--org', 'acme', '--force', '--clone-temp-dir', str(tmp_path / 'clones')]
        )
    orchestrator = RenameOrchestrator(cfg)
    gh, git, reporter = _wire(
        orchestrator,
        [
            repo_payload(1, 'svc-a'),
            repo_payload(2, 'svc-b', fork=True),
            repo_payload(3, 'svc-c', default_branch='main'),
        ],
        pulls=[PullRequestRecord(7, 'Add feature')],
    )

    assert orchestrator.run() == EXIT_SUCCESS

    clone_dir = os.path.join(str(tmp_path / 'clones'), 'acme', 'svc-a')
    git.clone.assert_called_once_with('https://github.com/acme/svc-a.git', clone_dir)
    git.create_branch.assert_called_once_with(clone_dir, 'main', 'master')
    git.push_upstream.assert_called_once_with(clone_dir, 'main')
    git.set_remote_head.assert_called_once_with(clone_dir, 'main')
    gh.set_default_branch.assert_called_once_with(1, 'main')
    gh.list_open_pulls.assert_called_once_with(1, 'master')
    gh.retarget_pull.assert_called_once_with(1, 7, 'main')
    git.delete_remote_branch.assert_not_called()

    report = reporter.report.call_args.args[0]
    assert report.succeeded == ['svc-a']
    assert report.failed_renames == []
    assert report.failed_deletions == []


def test_one_failed_clone_does_not_block_other_repositories(make_config) -> None:
    orchestrator = RenameOrchestrator(make_config())
    gh, git, reporter = _wire(
        orchestrator,
        [repo_payload(1, 'a'), repo_payload(2, 'b'), repo_payload(3, 'c')],
    )

    def clone(url, clone_dir):
        if clone_dir.endswith(os.sep + 'b'):
            raise LocalVCSError('clone failed')

    git.clone.side_effect = clone

    assert orchestrator.run() == EXIT_SUCCESS

    assert git.clone.call_count == 3
    assert [c.args[0] for c in gh.set_default_branch.call_args_list] == [1, 3]
    report = reporter.report.call_args.args[0]
    assert report.succeeded == ['a', 'c']
    assert report.failed_renames == ['b']


def test_deletion_failures_are_not_rename_failures(make_config) -> None:
    orchestrator = RenameOrchestrator(make_config(delete_old=True))
    _, git, reporter = _wire(orchestrator, [repo_payload(1, 'a'), repo_payload(2, 'b')])

    def delete(clone_dir, branch):
        if clone_dir.endswith(os.sep + 'a'):
            raise LocalVCSError('refusing to delete the current branch')

    git.delete_remote_branch.side_effect = delete

    assert orchestrator.run() == EXIT_SUCCESS

    report = reporter.report.call_args.args[0]
    assert report.failed_deletions == ['a']
    assert report.failed_renames == []
    assert report.succeeded == ['b']


def test_dry_run_issues_no_mutating_calls(make_config) -> None:
    orchestrator = RenameOrchestrator(make_config(mode=RunMode.DRY_RUN, delete_old=True))
    gh, git, _ = _wire(
        orchestrator,
        [repo_payload(1, 'a')],
        pulls=[PullRequestRecord(3, 'pending')],
    )

    assert orchestrator.run() == EXIT_SUCCESS

    git.clone.assert_called_once()
    git.create_branch.assert_called_once()
    git.push_upstream.assert_not_called()
    git.set_remote_head.assert_not_called()
    git.delete_remote_branch.assert_not_called()
    gh.set_default_branch.assert_not_called()
    gh.retarget_pull.assert_not_called()


def test_scratch_directory_is_recreated(make_config, tmp_path) -> None:
    cfg = make_config()
    stale = os.path.join(cfg.git_config.clone_temp_dir, 'acme', 'old-repo')
    os.makedirs(stale)
    orchestrator = RenameOrchestrator(cfg)
    _wire(orchestrator, [repo_payload(1, 'a')])

    assert orchestrator.run() == EXIT_SUCCESS

    assert not os.path.exists(stale)
    assert os.path.isdir(os.path.join(cfg.git_config.clone_temp_dir, 'acme'))


def test_no_eligible_repositories_is_a_successful_run(make_config) -> None:
    cfg = make_config()
    orchestrator = RenameOrchestrator(cfg)
    _, git, reporter = _wire(orchestrator, [repo_payload(1, 'a', default_branch='main')])

    assert orchestrator.run() == EXIT_SUCCESS

    git.clone.assert_not_called()
    reporter.report.assert_not_called()
    assert os.path.isdir(os.path.join(cfg.git_config.clone_temp_dir, 'acme'))


def test_auth_failure_during_connect_returns_auth_exit_code(make_config) -> None:
    orchestrator = RenameOrchestrator(make_config())
    gh, _, _ = _wire(orchestrator, [])
    gh.connect.side_effect = AuthError('bad credentials', 401)

    assert orchestrator.run() == EXIT_AUTH_ERROR
    gh.list_repositories.assert_not_called()


def test_listing_failure_returns_github_exit_code(make_config) -> None:
    orchestrator = RenameOrchestrator(make_config())
    gh, _, _ = _wire(orchestrator, [])
    gh.list_repositories.side_effect = NotFoundError('no such org', 404)

    assert orchestrator.run() == EXIT_GITHUB_ERROR


def test_unexpected_exception_in_one_repository_does_not_stop_batch(make_config) -> None:
    """A non-MigrationError in b is recorded as a rename failure; c still runs."""
    orchestrator = RenameOrchestrator(make_config())
    gh, git, reporter = _wire(
        orchestrator,
        [repo_payload(1, 'a'), repo_payload(2, 'b'), repo_payload(3, 'c')],
    )

    def clone(url, clone_dir):
        if clone_dir.endswith(os.sep + 'b'):
            raise KeyError('clone_url')

    git.clone.side_effect = clone

    assert orchestrator.run() == EXIT_SUCCESS

    assert git.clone.call_count == 3
    assert [c.args[0] for c in gh.set_default_branch.call_args_list] == [1, 3]
    report = reporter.report.call_args.args[0]
    assert report.succeeded == ['a', 'c']
    assert report.failed_renames == ['b']
