"""
Error taxonomy for API and git failures.

Every call made against GitHub or the local ``git`` binary raises one of the
exceptions below on failure, so callers can decide per repository what to do
without inspecting HTTP statuses or process exit codes themselves.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    NETWORK = "network"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    LOCAL_VCS = "local_vcs"


class MigrationError(Exception):
    """Base exception for migration errors."""

    kind: ErrorKind = ErrorKind.NETWORK

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class NetworkError(MigrationError):
    """Transport failure or unexpected server response."""

    kind = ErrorKind.NETWORK


class AuthError(MigrationError):
    """Token missing, invalid, or lacking permission."""

    kind = ErrorKind.AUTH


class NotFoundError(MigrationError):
    """Account, repository, branch or pull request does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(MigrationError):
    """Request rejected because of the current remote state."""

    kind = ErrorKind.CONFLICT


class LocalVCSError(MigrationError):
    """A local git command failed or timed out."""

    kind = ErrorKind.LOCAL_VCS


def error_for_status(status: int, message: str) -> MigrationError:
    """Map an HTTP status code to the matching exception instance."""
    if status in (401, 403):
        return AuthError(message, status)
    if status == 404:
        return NotFoundError(message, status)
    if status in (409, 422):
        return ConflictError(message, status)
    return NetworkError(message, status)
