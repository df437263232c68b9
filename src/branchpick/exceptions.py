"""branchpick exception hierarchy."""

from __future__ import annotations


class BranchpickError(Exception):
    """Base exception for all branchpick errors."""


class RepositoryNotFoundError(BranchpickError):
    """Raised when no git repository contains the working directory."""


class BranchListError(BranchpickError):
    """Raised when git fails to enumerate branches."""


class BranchNameDecodeError(BranchpickError):
    """Raised when a branch name is not valid UTF-8."""


class CheckoutError(BranchpickError):
    """Raised when checking out the selected branch fails."""


class TerminalError(BranchpickError):
    """Raised when the terminal cannot be acquired for the picker."""


class ConfigError(BranchpickError):
    """Raised when a configuration value is invalid."""
