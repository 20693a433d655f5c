#!/usr/bin/env python3
"""Git CLI wrapper for cloning, branching and publishing branches."""

from __future__ import annotations

import os
import subprocess
import tempfile
from typing import Dict, List, Optional, Tuple

from config import CloneMethod
from errors import LocalVCSError
from logging_utils import Logger
from security import SecurityValidator

REMOTE = "origin"
CLONE_TIMEOUT_S = 300  # 5 minute timeout
PUSH_TIMEOUT_S = 600  # 10 minute timeout
LOCAL_TIMEOUT_S = 60


class GitClient:
    """Runs git commands against clones of the account's repositories."""

    def __init__(self, token: str, clone_method: CloneMethod) -> None:
        self.token = token
        self.clone_method = clone_method

    def _create_askpass_script(self, username: str, password: str) -> str:
        """Create a temporary askpass script for secure credential injection."""
        fd, path = tempfile.mkstemp(prefix="rdb_askpass_", text=True)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as script:
                script.write("#!/bin/sh\n")
                script.write("case \"$1\" in\n")
                script.write(f"  *Username*) echo '{username}' ;;\n")
                script.write(f"  *Password*) echo '{password}' ;;\n")
                script.write("  *) exit 1 ;;\n")
                script.write("esac\n")
            os.chmod(path, 0o700)
        except Exception:
            os.unlink(path)
            raise
        return path

    @staticmethod
    def _cleanup_askpass_script(path: Optional[str]) -> None:
        """Remove temporary askpass script if it exists."""
        if not path:
            return
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as error:
            Logger.warn(
                f"failed to clean up temporary credential helper: {error}"
            )

    def _remote_env(self) -> Tuple[Dict[str, str], Optional[str]]:
        """Environment for commands that talk to the remote."""
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        if self.clone_method != CloneMethod.HTTPS or not self.token:
            return env, None
        askpass_script = self._create_askpass_script("x-access-token", self.token)
        env["GIT_ASKPASS"] = askpass_script
        return env, askpass_script

    def _run(
        self,
        args: List[str],
        *,
        cwd: Optional[str] = None,
        remote: bool = False,
        timeout: int = LOCAL_TIMEOUT_S,
    ) -> str:
        """Run a git command, raising LocalVCSError with sanitized output."""
        command = " ".join(["git", *args[:2]])
        askpass_script: Optional[str] = None
        try:
            if remote:
                env, askpass_script = self._remote_env()
            else:
                env = None
            result = subprocess.run(
                ["git", *args],
                cwd=cwd,
                check=True,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=env,
            )
            return result.stdout
        except subprocess.TimeoutExpired as e:
            raise LocalVCSError(f"{command} timed out after {timeout}s") from e
        except subprocess.CalledProcessError as e:
            safe_stderr = SecurityValidator.sanitize_for_logging(
                (e.stderr or e.stdout or "").strip()
            )
            raise LocalVCSError(
                f"{command} failed with exit code {e.returncode}: {safe_stderr}"
            ) from e
        except OSError as e:
            raise LocalVCSError(f"{command} could not be started: {e}") from e
        finally:
            self._cleanup_askpass_script(askpass_script)

    def clone(self, url: str, clone_dir: str) -> None:
        Logger.debug(f"git clone {url}")
        self._run(["clone", url, clone_dir], remote=True, timeout=CLONE_TIMEOUT_S)

    def create_branch(self, clone_dir: str, branch: str, start_branch: str) -> None:
        """Create ``branch`` at the tip of the remote ``start_branch``."""
        self._run(
            ["branch", "--no-track", branch, f"{REMOTE}/{start_branch}"],
            cwd=clone_dir,
        )

    def push_upstream(self, clone_dir: str, branch: str) -> None:
        self._run(
            ["push", "--set-upstream", REMOTE, branch],
            cwd=clone_dir,
            remote=True,
            timeout=PUSH_TIMEOUT_S,
        )

    def set_remote_head(self, clone_dir: str, branch: str) -> None:
        self._run(["remote", "set-head", REMOTE, branch], cwd=clone_dir)

    def delete_remote_branch(self, clone_dir: str, branch: str) -> None:
        self._run(
            ["push", REMOTE, "--delete", branch],
            cwd=clone_dir,
            remote=True,
            timeout=PUSH_TIMEOUT_S,
        )
