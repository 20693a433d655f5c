#!/usr/bin/env python3
"""Colored console output for rename-default-branch."""

import os
import sys
import time
from typing import TextIO

import colorama

from security import SecurityValidator

# Initialize colorama for cross-platform colored output
colorama.init(autoreset=True)


class Logger:
    """Prints one redacted, colored line per call, prefixed with the process header.

    Progress goes to stdout; errors and security events go to stderr so a
    dry-run listing can be piped without them.
    """

    PROCESS_NAME = "rename-default-branch"

    @classmethod
    def debug(cls, *messages: object) -> None:
        cls._emit(sys.stdout, colorama.Fore.LIGHTBLACK_EX, messages)

    @classmethod
    def info(cls, *messages: object) -> None:
        cls._emit(sys.stdout, colorama.Fore.CYAN, messages)

    @classmethod
    def success(cls, *messages: object) -> None:
        cls._emit(sys.stdout, colorama.Fore.GREEN, messages)

    @classmethod
    def warn(cls, *messages: object) -> None:
        cls._emit(sys.stdout, colorama.Fore.YELLOW, messages)

    @classmethod
    def error(cls, *messages: object) -> None:
        cls._emit(sys.stderr, colorama.Fore.RED, messages)

    @classmethod
    def security_event(cls, event_type: str, details: str) -> None:
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
        cls._emit(
            sys.stderr,
            colorama.Fore.MAGENTA,
            (f"[SECURITY:{event_type}] {timestamp}: {details}",),
        )

    @classmethod
    def _emit(cls, stream: TextIO, color: str, messages: tuple) -> None:
        text = " ".join(
            SecurityValidator.sanitize_for_logging(str(m)) for m in messages
        )
        header = f"[{cls.PROCESS_NAME}:{os.getpid()}]"
        stream.write(f"{color}{header}{colorama.Style.RESET_ALL} {text}\n")
