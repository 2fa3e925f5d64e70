"""
Unified error handling for Stagehand.

Every failure inside a resolution pass is raised as a StagehandError
subclass. A pass either completes with a full desired-state resource list
or aborts with one of these errors; the core itself never retries.

Exit Codes:
- 0: Success
- 1: Warning (resolution succeeded, some components not ready)
- 10: Configuration error (identity mismatch, missing credential, unknown milestone)
- 11: Store error (secret/status lookup failure)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    WARNING = 1
    CONFIG_ERROR = 10
    STORE_ERROR = 11
    UNKNOWN_ERROR = 127


class StagehandError(Exception):
    """Base exception for Stagehand errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(StagehandError):
    """Raised when the custom resource cannot be resolved as written."""

    exit_code = ExitCode.CONFIG_ERROR


class IdentityMismatchError(ConfigurationError):
    """Raised when a merge is attempted across differing (type, kind, name) triples."""


class MissingCredentialError(ConfigurationError):
    """Raised when a component expects resolved secrets of a kind that has none."""


class UnknownMilestoneError(ConfigurationError):
    """Raised for milestone names outside the rollout stage order."""


class StoreError(StagehandError):
    """Raised when the secret or workload-status store fails."""

    exit_code = ExitCode.STORE_ERROR


class SecretExistsError(StoreError):
    """Raised by a store when creating a secret that already exists."""


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI main functions that provides unified error handling.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - StagehandError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except StagehandError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                        **e.details,
                    )
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: StagehandError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
