#!/usr/bin/env python3
"""Per-repository default branch rename."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from config import Config
from errors import LocalVCSError, MigrationError
from git_client import GitClient
from github_client import GitHubClient
from logging_utils import Logger
from repository_collector import RepositoryRecord
from security import SecurityValidator


class MigrationOutcome(Enum):
    SUCCEEDED = "succeeded"
    FAILED_RENAME = "failed_rename"
    FAILED_DELETION = "failed_deletion"


class MigrationState(Enum):
    START = "start"
    CLONED = "cloned"
    BRANCH_CREATED = "branch_created"
    PUBLISHED = "published"
    PRS_PROCESSED = "prs_processed"
    OLD_BRANCH_DELETED = "old_branch_deleted"
    DONE = "done"
    FAILED = "failed"


class MigrationStep(Enum):
    CLONE = "clone"
    CREATE_BRANCH = "create branch"
    PUSH_BRANCH = "push branch"
    SET_REMOTE_HEAD = "set remote HEAD"
    SET_DEFAULT_BRANCH = "set default branch"
    RETARGET_PULLS = "retarget pull requests"
    DELETE_OLD_BRANCH = "delete old branch"


@dataclass
class MigrationResult:
    """What happened to one repository."""
    name: str
    outcome: MigrationOutcome = MigrationOutcome.SUCCEEDED
    state: MigrationState = MigrationState.START
    step: Optional[MigrationStep] = None
    failed_step: Optional[MigrationStep] = None
    error: Optional[MigrationError] = None
    retargeted_pulls: List[int] = field(default_factory=list)

    def fail(self, outcome: MigrationOutcome, error: MigrationError) -> None:
        self.outcome = outcome
        self.state = MigrationState.FAILED
        self.failed_step = self.step
        self.error = error


def _as_migration_error(error: Exception) -> MigrationError:
    if isinstance(error, MigrationError):
        return error
    return MigrationError(f"unexpected error: {error!r}")


class BranchMigrator:
    """Moves one repository at a time from the old to the new default branch.

    Every step before deletion is part of the rename: the first one that
    raises a MigrationError stops the repository and marks it FAILED_RENAME.
    Deleting the old branch is attempted only after a successful rename and
    its failure is reported separately as FAILED_DELETION. In dry-run mode
    the clone and local branch are still created but nothing is sent to the
    remote.
    """

    def __init__(
        self,
        cfg: Config,
        gh: GitHubClient,
        git: GitClient,
        scratch_dir: str,
    ) -> None:
        self.cfg = cfg
        self.gh = gh
        self.git = git
        self.scratch_dir = scratch_dir

    @property
    def old_branch(self) -> str:
        return self.cfg.branches.old_branch

    @property
    def new_branch(self) -> str:
        return self.cfg.branches.new_branch

    def migrate(self, record: RepositoryRecord) -> MigrationResult:
        result = MigrationResult(name=record.name)
        try:
            self._rename(record, result)
        except Exception as e:
            error = _as_migration_error(e)
            result.fail(MigrationOutcome.FAILED_RENAME, error)
            step = result.failed_step.value if result.failed_step else "start"
            Logger.error(f"rename failed for '{record.name}' ({step}): {error}")
            return result

        if self.cfg.branches.delete_old:
            self._delete_old_branch(record, result)

        if result.outcome == MigrationOutcome.SUCCEEDED:
            result.state = MigrationState.DONE
        return result

    def _rename(self, record: RepositoryRecord, result: MigrationResult) -> None:
        result.step = MigrationStep.CLONE
        clone_dir = self._clone(record)
        result.state = MigrationState.CLONED

        result.step = MigrationStep.CREATE_BRANCH
        self.git.create_branch(clone_dir, self.new_branch, self.old_branch)
        result.state = MigrationState.BRANCH_CREATED
        Logger.debug(
            f"created '{self.new_branch}' from '{self.old_branch}' in {record.name}"
        )

        self._publish(record, clone_dir, result)

        result.step = MigrationStep.RETARGET_PULLS
        self._retarget_pulls(record, result)
        result.state = MigrationState.PRS_PROCESSED

    def _clone(self, record: RepositoryRecord) -> str:
        try:
            name = SecurityValidator.validate_repo_name(record.name)
        except ValueError as e:
            raise LocalVCSError(f"refusing to clone '{record.name}': {e}") from e
        clone_dir = os.path.join(self.scratch_dir, name)
        url = self.gh.clone_url(name, self.cfg.git_config.clone_method)
        Logger.info(f"cloning {self.cfg.account.name}/{name}")
        self.git.clone(url, clone_dir)
        return clone_dir

    def _publish(
        self, record: RepositoryRecord, clone_dir: str, result: MigrationResult
    ) -> None:
        if self.cfg.dry_run:
            Logger.info(
                f"would push '{self.new_branch}', set it as remote HEAD and "
                f"default branch of {record.name}"
            )
            return

        result.step = MigrationStep.PUSH_BRANCH
        self.git.push_upstream(clone_dir, self.new_branch)
        result.step = MigrationStep.SET_REMOTE_HEAD
        self.git.set_remote_head(clone_dir, self.new_branch)
        result.step = MigrationStep.SET_DEFAULT_BRANCH
        self.gh.set_default_branch(record.id, self.new_branch)
        result.state = MigrationState.PUBLISHED
        Logger.info(f"default branch of {record.name} is now '{self.new_branch}'")

    def _retarget_pulls(self, record: RepositoryRecord, result: MigrationResult) -> None:
        pulls = self.gh.list_open_pulls(record.id, self.old_branch)
        if not pulls:
            Logger.debug(f"no open pull requests against '{self.old_branch}'")
            return

        for pull in pulls:
            if self.cfg.dry_run:
                Logger.info(
                    f"would retarget #{pull.number} '{pull.title}' "
                    f"to '{self.new_branch}'"
                )
                continue
            Logger.info(f"retargeting #{pull.number} '{pull.title}'")
            self.gh.retarget_pull(record.id, pull.number, self.new_branch)
            result.retargeted_pulls.append(pull.number)

    def _delete_old_branch(self, record: RepositoryRecord, result: MigrationResult) -> None:
        if self.cfg.dry_run:
            Logger.info(f"would delete '{self.old_branch}' from {record.name}")
            return

        result.step = MigrationStep.DELETE_OLD_BRANCH
        clone_dir = os.path.join(self.scratch_dir, record.name)
        try:
            self.git.delete_remote_branch(clone_dir, self.old_branch)
        except Exception as e:
            error = _as_migration_error(e)
            result.fail(MigrationOutcome.FAILED_DELETION, error)
            Logger.error(
                f"failed to delete '{self.old_branch}' from '{record.name}': {error}"
            )
            return
        result.state = MigrationState.OLD_BRANCH_DELETED
        Logger.info(f"deleted '{self.old_branch}' from {record.name}")
