#!/usr/bin/env python3
"""Final summary of a rename run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from branch_migrator import MigrationOutcome, MigrationResult
from logging_utils import Logger


@dataclass
class MigrationReport:
    succeeded: List[str] = field(default_factory=list)
    failed_renames: List[str] = field(default_factory=list)
    failed_deletions: List[str] = field(default_factory=list)

    @classmethod
    def from_results(cls, results: Iterable[MigrationResult]) -> "MigrationReport":
        report = cls()
        for result in results:
            if result.outcome == MigrationOutcome.FAILED_RENAME:
                report.failed_renames.append(result.name)
            elif result.outcome == MigrationOutcome.FAILED_DELETION:
                report.failed_deletions.append(result.name)
            else:
                report.succeeded.append(result.name)
        return report

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed_renames) + len(self.failed_deletions)


class ResultReporter:
    def __init__(self, old_branch: str, new_branch: str, dry_run: bool) -> None:
        self.old_branch = old_branch
        self.new_branch = new_branch
        self.dry_run = dry_run

    def report(self, report: MigrationReport) -> None:
        renamed = report.total - len(report.failed_renames)
        if self.dry_run:
            Logger.success(
                f"done: checked {report.total} repositories, {renamed} would be "
                f"renamed '{self.old_branch}' -> '{self.new_branch}' (dry-run)"
            )
        else:
            Logger.success(
                f"done: processed {report.total} repositories, {renamed} renamed "
                f"'{self.old_branch}' -> '{self.new_branch}'"
            )

        if report.failed_renames:
            Logger.warn(
                f"{len(report.failed_renames)} repositories could not be renamed "
                "and need manual intervention:"
            )
            for idx, name in enumerate(report.failed_renames, start=1):
                Logger.warn(f"  {idx}. {name}")

        if report.failed_deletions:
            Logger.warn(
                f"{len(report.failed_deletions)} repositories were renamed but "
                f"still have a '{self.old_branch}' branch that must be deleted manually:"
            )
            for idx, name in enumerate(report.failed_deletions, start=1):
                Logger.warn(f"  {idx}. {name}")

        Logger.info(
            "reminder: CI pipelines, webhooks, branch protection rules and other "
            f"settings that reference '{self.old_branch}' must be updated manually"
        )
