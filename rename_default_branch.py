#!/usr/bin/env python3
"""
Rename Default Branch - Rename the default branch of every repository owned
by a GitHub user or organization.

Eligible repositories (not forks, not archived, not disabled, default branch
equal to the old name) are cloned, get the new branch created from the tip of
the old one, and, with --force, have it pushed, set as default branch, and
their open pull requests retargeted. The old branch can optionally be deleted.
Use --dry-run first to review what would change.
"""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_arguments
from rename_orchestrator import RenameOrchestrator


def main() -> NoReturn:
    cfg = parse_arguments()
    orchestrator = RenameOrchestrator(cfg)
    sys.exit(orchestrator.run())


if __name__ == "__main__":
    main()
