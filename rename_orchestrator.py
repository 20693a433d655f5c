#!/usr/bin/env python3
"""Main orchestrator for renaming the default branch across an account."""

from __future__ import annotations

import os
import shutil
from typing import List

from branch_migrator import BranchMigrator, MigrationResult
from config import Config
from errors import AuthError, MigrationError
from git_client import GitClient
from github_client import GitHubClient
from logging_utils import Logger
from repository_collector import RepositoryCollector, RepositoryRecord
from result_reporter import MigrationReport, ResultReporter

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1
EXIT_GITHUB_ERROR = 31
EXIT_AUTH_ERROR = 40


class RenameOrchestrator:
    def __init__(self, cfg: Config) -> None:
        self.cfg = cfg
        self.gh = GitHubClient(cfg.github, cfg.account)
        self.git = GitClient(cfg.github.token, cfg.git_config.clone_method)
        self.reporter = ResultReporter(
            cfg.branches.old_branch, cfg.branches.new_branch, cfg.dry_run
        )

    def run(self) -> int:
        try:
            if self.cfg.dry_run:
                Logger.warn("dry-run: no changes will be made on GitHub")

            self.gh.connect()
            records = RepositoryCollector(self.gh, self.cfg.branches.old_branch).collect()
            scratch_dir = self._prepare_scratch_dir()
            if not records:
                Logger.info(
                    f"no repositories with default branch "
                    f"'{self.cfg.branches.old_branch}' found, nothing to do"
                )
                return EXIT_SUCCESS

            results = self._migrate_all(records, scratch_dir)
            self.reporter.report(MigrationReport.from_results(results))
            return EXIT_SUCCESS
        except AuthError as e:
            Logger.error(f"authentication failed (github): {e}")
            return EXIT_AUTH_ERROR
        except MigrationError as e:
            Logger.error(f"github error: {e}")
            return EXIT_GITHUB_ERROR
        except Exception as e:
            Logger.error(f"unexpected error: {e}")
            return EXIT_EXECUTION_ERROR

    def _prepare_scratch_dir(self) -> str:
        """Recreate ``<clone_temp_dir>/<account>`` empty and owner-only."""
        root = self.cfg.git_config.clone_temp_dir
        scratch_dir = os.path.join(root, self.cfg.account.name)
        os.makedirs(root, mode=0o700, exist_ok=True)
        if os.path.exists(scratch_dir):
            Logger.debug(f"removing previous scratch directory {scratch_dir}")
            shutil.rmtree(scratch_dir)
        os.makedirs(scratch_dir, mode=0o700)
        return scratch_dir

    def _migrate_all(
        self, records: List[RepositoryRecord], scratch_dir: str
    ) -> List[MigrationResult]:
        migrator = BranchMigrator(self.cfg, self.gh, self.git, scratch_dir)
        results: List[MigrationResult] = []
        total = len(records)
        for idx, record in enumerate(records, start=1):
            Logger.info(
                f"[{idx}/{total}] {self.cfg.account.name}/{record.name}: "
                f"'{self.cfg.branches.old_branch}' -> '{self.cfg.branches.new_branch}'"
            )
            results.append(migrator.migrate(record))
        return results
