#!/usr/bin/env python3
"""Configuration dataclasses for rename-default-branch."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AccountKind(Enum):
    """Kind of GitHub account owning the repositories."""
    USER = "user"
    ORG = "org"


class RunMode(Enum):
    """Whether remote changes are only reported or actually applied."""
    DRY_RUN = "dry-run"
    FORCE = "force"


class CloneMethod(Enum):
    """Enumeration for git clone/push methods."""
    HTTPS = "https"
    SSH = "ssh"


@dataclass
class AccountConfig:
    """Account whose repositories are migrated."""
    kind: AccountKind
    name: str


@dataclass
class GitHubConfig:
    """GitHub-specific configuration."""
    api_url: str
    token: str


@dataclass
class BranchConfig:
    """Branch rename configuration."""
    old_branch: str
    new_branch: str
    delete_old: bool


@dataclass
class GitOperationConfig:
    """Git operation configuration."""
    clone_temp_dir: str
    clone_method: CloneMethod = CloneMethod.HTTPS


@dataclass
class Config:
    """Main configuration for a default branch rename run."""
    account: AccountConfig
    github: GitHubConfig
    branches: BranchConfig
    mode: RunMode
    git_config: GitOperationConfig

    @property
    def dry_run(self) -> bool:
        return self.mode == RunMode.DRY_RUN
