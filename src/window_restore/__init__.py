"""
window-restore - Save and restore macOS window positions and sizes
"""

__version__ = "0.1.0"
__description__ = "Save and restore macOS window positions and sizes"

from .main import main
from .config import Config
from .errors import (
    PermissionDeniedError,
    RunnerError,
    RunnerTimeoutError,
    SnapshotMissingError,
    SnapshotParseError,
    WindowRestoreError,
)
from .window_manager import (
    LiveWindow,
    TitleEnhancer,
    WindowDescriptor,
    WindowManager,
    group_windows,
)
from .matcher import WindowMatcher
from .scripts import CommandGenerator
from .runner import OsascriptRunner, RunOutcome
from .report import RestoreReport
from .restorer import WindowRestorer, restore_positions
from .snapshot_manager import SnapshotConfig, SnapshotManager
from .permissions import PermissionsHelper

__all__ = [
    "main",
    "Config",
    "WindowRestoreError",
    "SnapshotMissingError",
    "SnapshotParseError",
    "PermissionDeniedError",
    "RunnerError",
    "RunnerTimeoutError",
    "WindowDescriptor",
    "LiveWindow",
    "WindowManager",
    "TitleEnhancer",
    "group_windows",
    "WindowMatcher",
    "CommandGenerator",
    "OsascriptRunner",
    "RunOutcome",
    "RestoreReport",
    "WindowRestorer",
    "restore_positions",
    "SnapshotConfig",
    "SnapshotManager",
    "PermissionsHelper",
]
