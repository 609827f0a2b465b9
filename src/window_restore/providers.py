"""
Fast window enumeration through Quartz

CGWindowListCopyWindowInfo lists every on-screen window in one call, far
faster than walking System Events, but titles are only present when the
process holds Screen Recording permission. Titles are therefore left empty
and filled in by the TitleEnhancer.
"""

import logging
from typing import Protocol

from .window_manager import WindowDescriptor

logger = logging.getLogger(__name__)

IGNORED_OWNERS = ("Window Server", "Dock")


class WindowProvider(Protocol):
    def is_available(self) -> bool: ...

    def list_windows(self) -> list[WindowDescriptor]: ...


class QuartzWindowProvider:
    """Raw window descriptors from Quartz, without titles"""

    def __init__(self):
        self._quartz = None
        self._workspace = None
        try:
            import Quartz
            from AppKit import NSWorkspace

            self._quartz = Quartz
            self._workspace = NSWorkspace.sharedWorkspace()
        except ImportError as e:
            logger.info("Quartz not available, using AppleScript enumeration: %s", e)

    def is_available(self) -> bool:
        return self._quartz is not None

    def _regular_app_pids(self) -> set[int]:
        """PIDs of regular (Dock-visible) applications"""
        pids = set()
        for app in self._workspace.runningApplications():
            if app.activationPolicy() == 0:
                pids.add(int(app.processIdentifier()))
        return pids

    def list_windows(self) -> list[WindowDescriptor]:
        if not self.is_available():
            return []
        Quartz = self._quartz

        window_list = Quartz.CGWindowListCopyWindowInfo(
            Quartz.kCGWindowListOptionOnScreenOnly
            | Quartz.kCGWindowListExcludeDesktopElements,
            Quartz.kCGNullWindowID,
        )
        if not window_list:
            return []

        regular = self._regular_app_pids()
        windows = []
        for window in window_list:
            # Skip system windows
            if window.get(Quartz.kCGWindowLayer, 0) != 0:
                continue

            owner_name = window.get(Quartz.kCGWindowOwnerName, "")
            if not owner_name or owner_name in IGNORED_OWNERS:
                continue
            if int(window.get(Quartz.kCGWindowOwnerPID, 0)) not in regular:
                continue

            bounds = window.get(Quartz.kCGWindowBounds, {})
            if not bounds:
                continue

            windows.append(
                WindowDescriptor(
                    app=str(owner_name),
                    title="",
                    x=int(bounds.get("X", 0)),
                    y=int(bounds.get("Y", 0)),
                    width=int(bounds.get("Width", 0)),
                    height=int(bounds.get("Height", 0)),
                )
            )

        logger.debug("Quartz listed %d windows", len(windows))
        return windows
