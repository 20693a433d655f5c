#!/usr/bin/env python3
"""Command line argument parsing and configuration building."""

from __future__ import annotations

import argparse
import sys
from typing import List, NoReturn, Optional, Sequence, Tuple

from config import (AccountConfig, AccountKind, BranchConfig, CloneMethod,
                    Config, GitHubConfig, GitOperationConfig, RunMode)
from logging_utils import Logger
from security import SecurityValidator
from utils import discover_token

# Exit codes
EXIT_USAGE_ERROR = 1
EXIT_AUTH_ERROR = 40

MIN_ARGUMENTS = 2
HELP_FLAGS = ("-h", "--help")


class UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit code 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        Logger.error(f"error: {message}")
        sys.exit(EXIT_USAGE_ERROR)


def _create_argument_parser() -> UsageArgumentParser:
    """Create and configure the argument parser."""
    parser = UsageArgumentParser(
        prog="rename-default-branch",
        description="Rename the default branch of every repository owned by "
        "a GitHub user or organization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --org acme --dry-run
  %(prog)s --org acme --force
  %(prog)s --user octocat --new-branch trunk --delete --force
  %(prog)s --gh-api https://github.company.com/api/v3 \\
           --org team --clone-method ssh --force
        """,
    )
    return parser


def _add_account_arguments(parser: argparse.ArgumentParser) -> None:
    """Add account selection arguments to parser."""
    account = parser.add_mutually_exclusive_group(required=True)
    account.add_argument(
        "-o",
        "--org",
        dest="org",
        help="GitHub organization whose repositories are renamed",
    )
    account.add_argument(
        "-u",
        "--user",
        dest="user",
        help="GitHub user whose repositories are renamed",
    )


def _add_github_arguments(parser: argparse.ArgumentParser) -> None:
    """Add GitHub-related arguments to parser."""
    parser.add_argument(
        "--gh-api",
        dest="gh_api_url",
        default="https://api.github.com",
        help="Base URL of the GitHub API",
    )
    parser.add_argument(
        "--token",
        dest="token",
        help="GitHub API token (or set GITHUB_TOKEN/GH_TOKEN, or log in with gh)",
    )


def _add_behavior_arguments(parser: argparse.ArgumentParser) -> None:
    """Add behavior and configuration arguments to parser."""
    parser.add_argument(
        "-b",
        "--new-branch",
        dest="new_branch",
        default="main",
        help="Name of the new default branch (default: main)",
    )
    parser.add_argument(
        "--old-branch",
        dest="old_branch",
        default="master",
        help="Name of the default branch being replaced (default: master)",
    )
    parser.add_argument(
        "-d",
        "--delete",
        action="store_true",
        dest="delete_old",
        help="Delete the old branch after the rename",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="Clone and branch locally, print remote actions without doing them",
    )
    mode.add_argument(
        "-f",
        "--force",
        action="store_true",
        dest="force",
        help="Apply remote changes",
    )
    parser.add_argument(
        "--clone-temp-dir",
        dest="clone_temp_dir",
        default="/tmp/rename-default-branch",
        help="Scratch directory for git clones (default: /tmp/rename-default-branch)",
    )
    parser.add_argument(
        "--clone-method",
        dest="clone_method",
        choices=[method.value for method in CloneMethod],
        default=CloneMethod.HTTPS.value,
        help="Clone method: https or ssh (default: https)",
    )


def _check_argument_count(parser: argparse.ArgumentParser, args: List[str]) -> None:
    """Reject obviously incomplete invocations before parsing flags."""
    if len(args) >= MIN_ARGUMENTS or any(arg in HELP_FLAGS for arg in args):
        return
    parser.print_help(sys.stderr)
    sys.exit(EXIT_USAGE_ERROR)


def _validate_parsed_arguments(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> Tuple[AccountConfig, str, str, str, str]:
    """Validate and sanitize parsed arguments for security."""
    try:
        if args.org is not None:
            account = AccountConfig(
                kind=AccountKind.ORG,
                name=SecurityValidator.validate_username(args.org),
            )
        else:
            account = AccountConfig(
                kind=AccountKind.USER,
                name=SecurityValidator.validate_username(args.user),
            )

        validated_gh_api_url = SecurityValidator.validate_url(
            args.gh_api_url, ["https", "http"]
        )
        validated_old_branch = SecurityValidator.validate_branch_name(args.old_branch)
        validated_new_branch = SecurityValidator.validate_branch_name(args.new_branch)
        validated_clone_temp_dir = SecurityValidator.validate_file_path(
            args.clone_temp_dir
        )
    except ValueError as e:
        Logger.security_event(
            "CONFIG_VALIDATION_FAILED", f"configuration validation failed: {e}"
        )
        parser.error(f"configuration validation error: {e}")

    if validated_old_branch == validated_new_branch:
        parser.error("new branch name must differ from the old branch name")

    return (
        account,
        validated_gh_api_url,
        validated_old_branch,
        validated_new_branch,
        validated_clone_temp_dir,
    )


def _get_and_validate_token(args: argparse.Namespace) -> str:
    """Get the GitHub token from flags, environment, or the gh CLI."""
    token = discover_token(args.token)
    if not token:
        Logger.error(
            "error: github token not provided "
            "(use --token, GITHUB_TOKEN, GH_TOKEN or `gh auth login`)"
        )
        sys.exit(EXIT_AUTH_ERROR)
    return token


def parse_arguments(argv: Optional[Sequence[str]] = None) -> Config:
    """Parse command line arguments and return configuration object."""
    parser = _create_argument_parser()
    _add_account_arguments(parser)
    _add_github_arguments(parser)
    _add_behavior_arguments(parser)

    raw_args = list(sys.argv[1:] if argv is None else argv)
    _check_argument_count(parser, raw_args)

    args = parser.parse_args(raw_args)

    (
        account,
        validated_gh_api_url,
        validated_old_branch,
        validated_new_branch,
        validated_clone_temp_dir,
    ) = _validate_parsed_arguments(parser, args)

    token = _get_and_validate_token(args)

    return Config(
        account=account,
        github=GitHubConfig(api_url=validated_gh_api_url, token=token),
        branches=BranchConfig(
            old_branch=validated_old_branch,
            new_branch=validated_new_branch,
            delete_old=args.delete_old,
        ),
        mode=RunMode.FORCE if args.force else RunMode.DRY_RUN,
        git_config=GitOperationConfig(
            clone_temp_dir=validated_clone_temp_dir,
            clone_method=CloneMethod(args.clone_method),
        ),
    )
