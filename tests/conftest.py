import re
from dataclasses import dataclass

import pytest

from window_restore.runner import RunOutcome
from window_restore.scripts import FIELD_DELIMITER, TITLE_DELIMITER, TITLES_PREFIX
from window_restore.window_manager import WindowDescriptor

APP_RE = re.compile(r'application process "((?:[^"\\]|\\.)*)"')
INDEX_RE = re.compile(r"set targetIndex to (\d+)")
TERM_RE = re.compile(r'set searchTerm to "((?:[^"\\]|\\.)*)"')
POSITION_RE = re.compile(r"set position of targetWindow to \{(-?\d+), (-?\d+)\}")
SIZE_RE = re.compile(r"set size of targetWindow to \{(-?\d+), (-?\d+)\}")


def unescape(text: str) -> str:
    return re.sub(r"\\(.)", r"\1", text)


@dataclass
class FakeWindow:
    title: str
    x: int = 0
    y: int = 0
    width: int = 800
    height: int = 600
    minimized: bool = False


class FakeDesktop:
    """In-memory stand-in for the System Events accessibility tree"""

    def __init__(self, apps=None, accessible=True):
        self.apps: dict[str, list[FakeWindow]] = apps or {}
        self.accessible = accessible

    def geometry(self, app, index):
        w = self.apps[app][index]
        return (w.x, w.y, w.width, w.height)


class FakeRunner:
    """Interprets the generated AppleScript against a FakeDesktop"""

    def __init__(self, desktop=None):
        self.desktop = desktop or FakeDesktop()
        self.calls: list[tuple[str, float]] = []
        self.overrides = []
        self.on_dispatch = None

    def respond(self, predicate, outcome):
        """Return ``outcome`` (or call it) for scripts matching ``predicate``"""
        self.overrides.insert(0, (predicate, outcome))

    @property
    def dispatches(self) -> list[str]:
        return [script for script, _ in self.calls if is_restore(script)]

    @property
    def title_queries(self) -> list[str]:
        return [script for script, _ in self.calls if is_title_query(script)]

    def run(self, command: str, timeout: float) -> RunOutcome:
        self.calls.append((command, timeout))
        for predicate, outcome in self.overrides:
            if predicate(command):
                return outcome(command) if callable(outcome) else outcome

        if "first application process whose name is" in command:
            return self._check_access(command)
        if "background only is false" in command:
            return RunOutcome.ok(self._enumerate())
        if is_title_query(command):
            app = unescape(APP_RE.search(command).group(1))
            titles = [w.title for w in self.desktop.apps.get(app, [])]
            return RunOutcome.from_output(TITLES_PREFIX + TITLE_DELIMITER.join(titles))
        if is_restore(command):
            outcome = self._restore(command)
            if self.on_dispatch:
                self.on_dispatch(command)
            return outcome
        return RunOutcome.error(f"unexpected script: {command[:40]}")

    def _check_access(self, script: str) -> RunOutcome:
        app = unescape(re.search(r'whose name is "((?:[^"\\]|\\.)*)"', script).group(1))
        granted = self.desktop.accessible
        # Asking for a specific window fails when the app has none open
        if "first window of" in script and not self.desktop.apps.get(app):
            granted = False
        return RunOutcome.ok("accessible" if granted else "not accessible")

    def _enumerate(self) -> str:
        records = []
        for app, windows in self.desktop.apps.items():
            for w in windows:
                fields = [app, w.title, w.x, w.y, w.width, w.height]
                records.append(FIELD_DELIMITER.join(str(f) for f in fields))
        return TITLE_DELIMITER.join(records)

    def _restore(self, script: str) -> RunOutcome:
        if not self.desktop.accessible:
            return RunOutcome.error("System Events got an error: access not allowed")
        app = unescape(APP_RE.search(script).group(1))
        windows = self.desktop.apps.get(app)
        if windows is None:
            return RunOutcome.error(f'System Events got an error: Can’t get application process "{app}".')

        index = int(INDEX_RE.search(script).group(1))
        term = unescape(TERM_RE.search(script).group(1))
        if len(windows) < index:
            return RunOutcome.no_match()
        target = windows[index - 1]
        if term and term not in target.title:
            return RunOutcome.no_match()

        target.minimized = False
        target.x, target.y = (int(v) for v in POSITION_RE.search(script).groups())
        target.width, target.height = (int(v) for v in SIZE_RE.search(script).groups())
        return RunOutcome.ok("success")


def is_restore(script: str) -> bool:
    return "set targetIndex to" in script


def is_title_query(script: str) -> bool:
    return "set windowTitles to" in script


def window(app, title="", x=0, y=0, width=800, height=600) -> WindowDescriptor:
    return WindowDescriptor(app=app, title=title, x=x, y=y, width=width, height=height)


@pytest.fixture
def desktop():
    return FakeDesktop()


@pytest.fixture
def runner(desktop):
    return FakeRunner(desktop)
