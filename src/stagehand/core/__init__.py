"""Core modules for Stagehand - centralized definitions and utilities."""

from stagehand.core.errors import (
    ConfigurationError,
    ExitCode,
    IdentityMismatchError,
    MissingCredentialError,
    SecretExistsError,
    StagehandError,
    StoreError,
    UnknownMilestoneError,
    format_error_message,
    main_with_error_handling,
)
from stagehand.core.milestones import (
    MILESTONE_ORDER,
    Milestone,
    compare_milestones,
    is_eligible,
    parse_milestone,
)

__all__ = [
    # Errors
    "ExitCode",
    "StagehandError",
    "ConfigurationError",
    "IdentityMismatchError",
    "MissingCredentialError",
    "UnknownMilestoneError",
    "StoreError",
    "SecretExistsError",
    "main_with_error_handling",
    "format_error_message",
    # Milestones
    "Milestone",
    "MILESTONE_ORDER",
    "compare_milestones",
    "is_eligible",
    "parse_milestone",
]
