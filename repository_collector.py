#!/usr/bin/env python3
"""Discovery of repositories whose default branch should be renamed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from github_client import GitHubClient
from logging_utils import Logger


@dataclass(frozen=True)
class RepositoryRecord:
    id: int
    name: str


def is_eligible(repo: Dict[str, Any], old_branch: str) -> bool:
    """True for active, non-fork repositories whose default branch is ``old_branch``."""
    return (
        not repo.get("fork", False)
        and not repo.get("archived", False)
        and not repo.get("disabled", False)
        and repo.get("default_branch") == old_branch
    )


class RepositoryCollector:
    """Lists an account's repositories and keeps the eligible ones."""

    def __init__(self, client: GitHubClient, old_branch: str) -> None:
        self.client = client
        self.old_branch = old_branch

    def collect(self) -> List[RepositoryRecord]:
        account = self.client.account
        Logger.info(
            f"discovering repositories of {account.kind.value} '{account.name}' "
            f"with default branch '{self.old_branch}'"
        )
        records: List[RepositoryRecord] = []
        seen = 0
        for repo in self.client.list_repositories():
            seen += 1
            if not is_eligible(repo, self.old_branch):
                continue
            records.append(RepositoryRecord(id=repo["id"], name=repo["name"]))
            Logger.debug(f"found: {repo['name']}")

        Logger.info(f"found {len(records)} of {seen} repositories to process")
        return records
