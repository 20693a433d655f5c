#!/usr/bin/env python3
"""GitHub API wrapper for listing repositories, branches and pull requests."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import islice
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import urlparse

import github
import requests
from github.Repository import Repository

from config import AccountConfig, AccountKind, CloneMethod, GitHubConfig
from errors import MigrationError, NetworkError, error_for_status
from logging_utils import Logger
from utils import RateLimiter

DEFAULT_API_URL = "https://api.github.com"
REPOS_PER_PAGE = 100
# gh pr list --limit equivalent; effectively "all open pull requests"
PULL_REQUEST_LIMIT = 1000
REQUEST_TIMEOUT_S = 30


@dataclass(frozen=True)
class PullRequestRecord:
    number: int
    title: str


class GitHubClient:
    """Wrapper around the GitHub API for one user or organization."""

    def __init__(self, config: GitHubConfig, account: AccountConfig) -> None:
        self.config = config
        self.account = account
        self.api: Optional[github.Github] = None
        # REST quota is 5000 requests per hour for authenticated tokens
        self.rate_limiter = RateLimiter(max_requests_per_minute=80)
        self._repo_cache: Dict[int, Repository] = {}

    def connect(self) -> None:
        """Create the API client and check that the account is visible."""
        Logger.info(f"init github API: {self.config.api_url}")
        auth = github.Auth.Token(self.config.token)
        if self.config.api_url != DEFAULT_API_URL:
            self.api = github.Github(
                base_url=self.config.api_url, auth=auth, retry=None
            )
        else:
            self.api = github.Github(auth=auth, retry=None)
        self._preflight_account()

    def _get_api_headers(self) -> dict:
        """Get standard API headers for GitHub requests."""
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.config.token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _account_url(self) -> str:
        segment = "orgs" if self.account.kind == AccountKind.ORG else "users"
        return f"{self.config.api_url}/{segment}/{self.account.name}"

    def _get(self, url: str, params: Optional[dict] = None) -> requests.Response:
        """GET a REST resource, raising a MigrationError on any failure."""
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            response = requests.get(
                url,
                headers=self._get_api_headers(),
                params=params,
                timeout=REQUEST_TIMEOUT_S,
            )
        except requests.RequestException as e:
            raise NetworkError(f"failed to contact github api: {e}") from e

        if response.status_code != 200:
            raise error_for_status(
                response.status_code,
                f"GET {url} returned {response.status_code}: "
                f"{self._response_message(response)}",
            )
        return response

    @staticmethod
    def _response_message(response: requests.Response) -> str:
        try:
            return response.json().get("message", "")
        except ValueError:
            return response.text[:200]

    def _preflight_account(self) -> None:
        """Check the account exists and is visible to the token."""
        try:
            self._get(self._account_url())
        except MigrationError as e:
            if e.status == 401:
                Logger.error(
                    "unauthorized (401): token invalid or not authorized for GitHub API"
                )
            elif e.status == 403:
                Logger.error(
                    "forbidden (403): token lacks permission to read the account. "
                    "Possible causes: missing read:org scope, fine-grained token "
                    "not granted to the org, or SAML SSO not authorized."
                )
            elif e.status == 404:
                Logger.error(
                    f"not found (404): {self.account.kind.value} "
                    f"'{self.account.name}' does not exist or is not visible "
                    "to this token."
                )
            raise
        Logger.debug(f"github {self.account.kind.value}: {self.account.name}")

    def list_repositories(self) -> Iterator[Dict[str, Any]]:
        """Yield every repository of the account, following ``Link`` headers."""
        url: Optional[str] = f"{self._account_url()}/repos"
        params: Optional[dict] = {"per_page": REPOS_PER_PAGE}
        page = 0
        while url:
            response = self._get(url, params)
            page += 1
            repos = response.json()
            Logger.debug(f"repository page {page}: {len(repos)} entries")
            yield from repos
            url = response.links.get("next", {}).get("url")
            params = None  # next URL already carries the query string

    def _git_base_url(self) -> str:
        """Return base URL for Git operations derived from API endpoint."""
        parsed = urlparse(self.config.api_url)
        if parsed.netloc == "api.github.com":
            return "https://github.com"

        base_path = parsed.path.rstrip("/")
        if base_path.endswith("/api/v3"):
            base_path = base_path[: -len("/api/v3")]
        base = f"{parsed.scheme}://{parsed.netloc}"
        if base_path:
            base += base_path
        return base

    def _git_hostname(self) -> str:
        """Return hostname for SSH Git operations."""
        parsed = urlparse(self.config.api_url)
        if parsed.netloc == "api.github.com":
            return "github.com"
        return parsed.netloc

    def clone_url(self, repo_name: str, method: CloneMethod) -> str:
        """Get the git remote URL of a repository for the given method."""
        if method == CloneMethod.SSH:
            hostname = self._git_hostname()
            return f"git@{hostname}:{self.account.name}/{repo_name}.git"
        base_url = self._git_base_url().rstrip("/")
        return f"{base_url}/{self.account.name}/{repo_name}.git"

    @staticmethod
    def _translate(error: Exception, action: str) -> MigrationError:
        if isinstance(error, github.GithubException):
            detail = error.data.get("message") if isinstance(error.data, dict) else None
            return error_for_status(error.status, f"{action}: {detail or error}")
        return NetworkError(f"{action}: {error}")

    def _get_repo(self, repo_id: int) -> Repository:
        if self.api is None:
            raise NetworkError("github API not initialized")
        if repo_id not in self._repo_cache:
            try:
                self.rate_limiter.wait_if_needed("GitHub API")
                self._repo_cache[repo_id] = self.api.get_repo(repo_id)
            except (github.GithubException, requests.RequestException) as e:
                raise self._translate(e, f"failed to load repository {repo_id}") from e
        return self._repo_cache[repo_id]

    def set_default_branch(self, repo_id: int, branch: str) -> None:
        repo = self._get_repo(repo_id)
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            repo.edit(default_branch=branch)
        except (github.GithubException, requests.RequestException) as e:
            raise self._translate(
                e, f"failed to set default branch of '{repo.name}' to '{branch}'"
            ) from e

    def list_open_pulls(self, repo_id: int, base: str) -> List[PullRequestRecord]:
        """Return open pull requests targeting ``base``."""
        repo = self._get_repo(repo_id)
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            pulls = repo.get_pulls(state="open", base=base)
            return [
                PullRequestRecord(number=pull.number, title=pull.title)
                for pull in islice(pulls, PULL_REQUEST_LIMIT)
            ]
        except (github.GithubException, requests.RequestException) as e:
            raise self._translate(
                e, f"failed to list pull requests of '{repo.name}'"
            ) from e

    def retarget_pull(self, repo_id: int, number: int, base: str) -> None:
        """Change the base branch of an open pull request."""
        repo = self._get_repo(repo_id)
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            pull = repo.get_pull(number)
            self.rate_limiter.wait_if_needed("GitHub API")
            pull.edit(base=base)
        except (github.GithubException, requests.RequestException) as e:
            raise self._translate(
                e, f"failed to retarget pull request #{number} of '{repo.name}'"
            ) from e
