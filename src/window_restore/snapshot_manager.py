"""
Snapshot manager for saving and loading window positions
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from PyQt6.QtCore import QObject, pyqtSignal

from .errors import SnapshotMissingError, SnapshotParseError
from .window_manager import WindowDescriptor

logger = logging.getLogger(__name__)

GEOMETRY_FIELDS = ("x", "y", "width", "height")


@dataclass(frozen=True)
class SnapshotConfig:
    """The saved window layout: capture time plus every window in capture order"""

    timestamp: str
    windows: tuple[WindowDescriptor, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "windows": [asdict(w) for w in self.windows],
        }


def _window_from_dict(data: Any, position: int) -> WindowDescriptor:
    if not isinstance(data, dict):
        raise SnapshotParseError(f"window #{position} is not an object")

    app = data.get("app")
    if not isinstance(app, str) or not app:
        raise SnapshotParseError(f"window #{position} has no app name")

    title = data.get("title") or ""
    if not isinstance(title, str):
        raise SnapshotParseError(f"window #{position} has a non-text title")

    geometry = {}
    for name in GEOMETRY_FIELDS:
        value = data.get(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SnapshotParseError(f"window #{position} has invalid {name}: {value!r}")
        geometry[name] = int(value)

    return WindowDescriptor(app=app, title=title, **geometry)


def snapshot_from_dict(data: Any) -> SnapshotConfig:
    if not isinstance(data, dict):
        raise SnapshotParseError("snapshot must be a JSON object")
    windows = data.get("windows")
    if not isinstance(windows, list):
        raise SnapshotParseError("snapshot has no 'windows' list")
    return SnapshotConfig(
        timestamp=str(data.get("timestamp", "")),
        windows=tuple(_window_from_dict(w, i) for i, w in enumerate(windows)),
    )


class SnapshotManager(QObject):
    """Reads and writes the saved window positions file"""

    snapshot_saved = pyqtSignal(str)  # snapshot path
    snapshot_loaded = pyqtSignal(str)
    snapshot_restored = pyqtSignal(str)

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)

    def save(self, snapshot: SnapshotConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(snapshot.to_dict(), indent=2), encoding="utf-8")
        logger.debug("Wrote %d windows to %s", len(snapshot.windows), self.path)
        self.snapshot_saved.emit(str(self.path))

    def save_windows(self, windows: Sequence[WindowDescriptor]) -> SnapshotConfig:
        snapshot = SnapshotConfig(
            timestamp=datetime.now().isoformat(),
            windows=tuple(windows),
        )
        self.save(snapshot)
        return snapshot

    def load(self) -> SnapshotConfig:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise SnapshotMissingError(
                f"No saved window positions found at {self.path}"
            ) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SnapshotParseError(f"{self.path} is not valid JSON: {e}") from e

        snapshot = snapshot_from_dict(data)
        logger.debug("Loaded %d windows from %s", len(snapshot.windows), self.path)
        self.snapshot_loaded.emit(str(self.path))
        return snapshot
