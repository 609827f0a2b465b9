"""
Permissions helper for macOS accessibility permissions
"""

import logging
import platform
import subprocess

from .errors import PermissionDeniedError
from .runner import AutomationRunner, OutcomeKind
from .scripts import PERMISSION_OK, build_permission_probe

logger = logging.getLogger(__name__)

ACCESSIBILITY_PANE = (
    "x-apple.systempreferences:com.apple.preference.security?Privacy_Accessibility"
)


class PermissionsHelper:
    """Checks that the automation runner may drive the accessibility tree"""

    def __init__(
        self,
        runner: AutomationRunner,
        reference_app: str = "Finder",
        timeout: float = 5.0,
    ):
        self.runner = runner
        self.reference_app = reference_app
        self.timeout = timeout

    def check_accessibility_permissions(self) -> bool:
        """Probe the first window of a system app that is always running"""
        outcome = self.runner.run(build_permission_probe(self.reference_app), self.timeout)
        if outcome.kind is not OutcomeKind.OK:
            logger.debug("Permission probe failed: %s", outcome.message)
            return False
        return outcome.text == PERMISSION_OK

    def ensure_accessibility(self) -> None:
        if not self.check_accessibility_permissions():
            raise PermissionDeniedError(
                "Accessibility permission is required to move windows"
            )

    @staticmethod
    def settings_app_name() -> str:
        major, _ = PermissionsHelper.get_macos_version()
        return "System Settings" if major >= 13 else "System Preferences"

    @staticmethod
    def request_permissions_instructions() -> str:
        """Get instructions for granting permissions"""
        settings = PermissionsHelper.settings_app_name()
        if settings == "System Settings":
            pane = "Privacy & Security → Accessibility"
        else:
            pane = "Security & Privacy → Privacy → Accessibility"
        instructions = f"""
Accessibility permission is required for window restoration.

To grant it:
1. Open {settings}
2. Go to {pane}
3. Click the lock icon and enter your password (if shown)
4. Click "+" and add your terminal application
5. Make sure the checkbox next to it is enabled
6. Restart the terminal and try again

Alternatively, run window-restore from a terminal that already has
Accessibility permission (for example an editor's integrated terminal).
"""
        return instructions.strip()

    @staticmethod
    def open_system_preferences() -> None:
        """Open the Accessibility section of the privacy settings"""
        try:
            subprocess.run(["open", ACCESSIBILITY_PANE], check=False)
        except OSError as e:
            logger.warning("Could not open %s: %s", PermissionsHelper.settings_app_name(), e)

    @staticmethod
    def is_macos() -> bool:
        """Check if running on macOS"""
        return platform.system() == "Darwin"

    @staticmethod
    def get_macos_version() -> tuple[int, int]:
        """Get macOS version as (major, minor) tuple"""
        version = platform.mac_ver()[0]
        if version:
            parts = version.split(".")
            try:
                major = int(parts[0])
                minor = int(parts[1]) if len(parts) > 1 else 0
                return (major, minor)
            except ValueError:
                pass
        return (10, 0)
