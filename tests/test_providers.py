import sys
import types

import pytest

from window_restore.providers import QuartzWindowProvider
from window_restore.window_manager import WindowDescriptor


class FakeApp:
    def __init__(self, pid, policy=0):
        self.pid = pid
        self.policy = policy

    def processIdentifier(self):
        return self.pid

    def activationPolicy(self):
        return self.policy


def _window(owner, pid, bounds, layer=0):
    return {
        "kCGWindowLayer": layer,
        "kCGWindowOwnerName": owner,
        "kCGWindowOwnerPID": pid,
        "kCGWindowBounds": bounds,
    }


@pytest.fixture
def fake_pyobjc(monkeypatch):
    windows = [
        _window("Terminal", 10, {"X": 10, "Y": 30, "Width": 700.0, "Height": 450}),
        _window("Dock", 20, {"X": 0, "Y": 0, "Width": 1440, "Height": 900}),
        _window("Menubar Extra", 30, {"X": 0, "Y": 0, "Width": 30, "Height": 22}),
        _window("Notes", 40, {"X": 900, "Y": 40, "Width": 400, "Height": 500}, layer=25),
        _window("Safari", 50, {}),
        _window("Safari", 50, {"X": -1440, "Y": 25, "Width": 1440, "Height": 875}),
    ]
    quartz = types.SimpleNamespace(
        kCGWindowListOptionOnScreenOnly=1,
        kCGWindowListExcludeDesktopElements=16,
        kCGNullWindowID=0,
        kCGWindowLayer="kCGWindowLayer",
        kCGWindowOwnerName="kCGWindowOwnerName",
        kCGWindowOwnerPID="kCGWindowOwnerPID",
        kCGWindowBounds="kCGWindowBounds",
        CGWindowListCopyWindowInfo=lambda options, relative: windows,
    )
    apps = [FakeApp(10), FakeApp(20), FakeApp(30, policy=2), FakeApp(40), FakeApp(50)]
    workspace = types.SimpleNamespace(runningApplications=lambda: apps)
    appkit = types.SimpleNamespace(
        NSWorkspace=types.SimpleNamespace(sharedWorkspace=lambda: workspace)
    )
    monkeypatch.setitem(sys.modules, "Quartz", quartz)
    monkeypatch.setitem(sys.modules, "AppKit", appkit)


def test_lists_regular_app_windows_without_titles(fake_pyobjc):
    provider = QuartzWindowProvider()

    assert provider.is_available()
    assert provider.list_windows() == [
        WindowDescriptor("Terminal", "", 10, 30, 700, 450),
        WindowDescriptor("Safari", "", -1440, 25, 1440, 875),
    ]


def test_unavailable_without_pyobjc(monkeypatch):
    monkeypatch.setitem(sys.modules, "Quartz", None)

    provider = QuartzWindowProvider()

    assert not provider.is_available()
    assert provider.list_windows() == []
