"""
Window capture: descriptors, per-app grouping and title enhancement
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, pyqtSignal

from .errors import RunnerError, RunnerTimeoutError
from .runner import AutomationRunner, OutcomeKind
from .scripts import (
    FIELD_DELIMITER,
    TITLE_DELIMITER,
    TITLES_PREFIX,
    build_enumeration_script,
    build_title_query,
    split_titles,
)

if TYPE_CHECKING:
    from .providers import WindowProvider
    from .snapshot_manager import SnapshotConfig, SnapshotManager

logger = logging.getLogger(__name__)

DEFAULT_MULTI_WINDOW_APPS = (
    "Google Chrome",
    "Code",
    "Visual Studio Code",
    "Finder",
    "Terminal",
)


@dataclass(frozen=True)
class WindowDescriptor:
    """Identity and geometry of one window at capture time"""

    app: str
    title: str
    x: int
    y: int
    width: int
    height: int

    @property
    def has_valid_dimensions(self) -> bool:
        return self.width > 0 and self.height > 0

    def with_title(self, title: str) -> "WindowDescriptor":
        return replace(self, title=title)

    def label(self) -> str:
        return f"{self.app} - {self.title}" if self.title else self.app


@dataclass(frozen=True)
class LiveWindow:
    """A window open right now; index is its position in live enumeration order"""

    app: str
    index: int
    title: str


def group_windows(
    windows: Iterable[WindowDescriptor],
) -> dict[str, list[WindowDescriptor]]:
    """Partition windows per app, keeping capture order within each app.

    Apps appear in order of their first window. Names are compared exactly.
    """
    groups: dict[str, list[WindowDescriptor]] = {}
    for window in windows:
        groups.setdefault(window.app, []).append(window)
    return groups


def flatten_groups(
    groups: dict[str, list[WindowDescriptor]],
) -> list[WindowDescriptor]:
    return [window for app_windows in groups.values() for window in app_windows]


def query_live_windows(
    runner: AutomationRunner, app_name: str, timeout: float
) -> list[LiveWindow]:
    """Enumerate the live standard windows of one app with a single query.

    Raises RunnerTimeoutError / RunnerError when the query fails, including
    when the runner itself raises.
    """
    try:
        outcome = runner.run(build_title_query(app_name), timeout)
    except RunnerError:
        raise
    except Exception as e:
        raise RunnerError(str(e) or type(e).__name__) from e
    if outcome.kind is OutcomeKind.TIMED_OUT:
        raise RunnerTimeoutError(outcome.message)
    if outcome.kind is OutcomeKind.ERROR:
        raise RunnerError(outcome.message)
    if not outcome.text.startswith(TITLES_PREFIX):
        raise RunnerError(f"unexpected title query output: {outcome.text!r}")
    return [
        LiveWindow(app=app_name, index=i, title=title)
        for i, title in enumerate(split_titles(outcome.text))
    ]


class TitleEnhancer:
    """Fills in titles for apps that commonly have several windows.

    Raw descriptors from the fast enumeration path have no reliable titles.
    One batched query per app fetches the live titles, which are zipped onto
    that app's descriptors by position.
    """

    def __init__(
        self,
        runner: AutomationRunner,
        apps: Iterable[str] = DEFAULT_MULTI_WINDOW_APPS,
        timeout: float = 5.0,
    ):
        self.runner = runner
        self.apps = list(apps)
        self.timeout = timeout

    def enhance(self, windows: Sequence[WindowDescriptor]) -> list[WindowDescriptor]:
        enhanced = list(windows)
        groups = group_windows(enhanced)
        count = 0

        for app_name in self.apps:
            if len(groups.get(app_name, [])) < 2:
                continue
            try:
                live = query_live_windows(self.runner, app_name, self.timeout)
            except RunnerError as e:
                logger.warning("Failed to enhance %s windows: %s", app_name, e)
                continue

            titles = iter(window.title for window in live)
            for i, window in enumerate(enhanced):
                if window.app != app_name:
                    continue
                title = next(titles, None)
                if title is None:
                    break
                if title:
                    enhanced[i] = window.with_title(title)
                    count += 1

        if count:
            logger.info("Enhanced %d windows with titles", count)
        return enhanced


def parse_enumeration(output: str) -> list[WindowDescriptor]:
    """Parse the output of the AppleScript enumeration script"""
    windows = []
    text = output.strip("\r\n")
    if not text:
        return windows

    for record in text.split(TITLE_DELIMITER):
        fields = record.split(FIELD_DELIMITER)
        if len(fields) != 6:
            logger.warning("Skipping malformed window record: %r", record)
            continue
        app, title, *numbers = fields
        try:
            x, y, width, height = (int(float(n)) for n in numbers)
        except ValueError:
            logger.warning("Skipping window record with bad geometry: %r", record)
            continue
        windows.append(WindowDescriptor(app, title, x, y, width, height))
    return windows


class WindowManager(QObject):
    """Captures the geometry of every open window"""

    window_captured = pyqtSignal(WindowDescriptor)

    def __init__(
        self,
        runner: AutomationRunner,
        provider: "WindowProvider | None" = None,
        enhancer: TitleEnhancer | None = None,
        enumeration_timeout: float = 10.0,
    ):
        super().__init__()
        self.runner = runner
        self.provider = provider
        self.enhancer = enhancer or TitleEnhancer(runner)
        self.enumeration_timeout = enumeration_timeout

    def capture_windows(self) -> list[WindowDescriptor]:
        if self.provider is not None and self.provider.is_available():
            windows = self.enhancer.enhance(self.provider.list_windows())
        else:
            windows = self._capture_via_applescript()

        for window in windows:
            self.window_captured.emit(window)
        return windows

    def _capture_via_applescript(self) -> list[WindowDescriptor]:
        outcome = self.runner.run(build_enumeration_script(), self.enumeration_timeout)
        if outcome.kind is OutcomeKind.TIMED_OUT:
            raise RunnerTimeoutError(f"window enumeration {outcome.message}")
        if outcome.kind is not OutcomeKind.OK:
            raise RunnerError(f"window enumeration failed: {outcome.message}")
        return parse_enumeration(outcome.text)

    def save_positions(self, snapshot_manager: "SnapshotManager") -> "SnapshotConfig":
        """Capture all windows and persist them as a new snapshot"""
        windows = self.capture_windows()
        snapshot = snapshot_manager.save_windows(windows)
        logger.info("Saved positions for %d windows", len(windows))
        return snapshot
