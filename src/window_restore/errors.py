"""
Error types for window capture and restoration
"""


class WindowRestoreError(Exception):
    """Base exception for window-restore errors."""


class SnapshotMissingError(WindowRestoreError):
    """No saved window positions exist at the snapshot path."""


class SnapshotParseError(WindowRestoreError):
    """The snapshot file exists but cannot be decoded."""


class PermissionDeniedError(WindowRestoreError):
    """The automation runner cannot access the accessibility tree."""


class RunnerError(WindowRestoreError):
    """An automation command failed to run."""


class RunnerTimeoutError(RunnerError):
    """An automation command did not finish within its time budget."""
