"""
window-restore - save and restore macOS window positions
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import Config
from .errors import PermissionDeniedError, RunnerError, SnapshotMissingError, SnapshotParseError
from .matcher import WindowMatcher
from .permissions import PermissionsHelper
from .providers import QuartzWindowProvider
from .restorer import WindowRestorer, restore_positions
from .runner import OsascriptRunner
from .scripts import CommandGenerator
from .snapshot_manager import SnapshotManager
from .window_manager import TitleEnhancer, WindowManager

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

DESCRIPTION = """\
Save and restore the position and size of every open window on macOS.

Window restoration requires Accessibility permission for your terminal.
Run 'window-restore check' to verify it."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="window-restore",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config-dir", type=Path, default=None, help="directory holding config.yaml"
    )
    parser.add_argument(
        "--file", type=Path, default=None, help="saved positions file (overrides config)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("save", help="save current window positions")
    sub.add_parser("restore", help="restore saved window positions")
    check = sub.add_parser("check", help="check accessibility permissions")
    check.add_argument(
        "--open-settings",
        action="store_true",
        help="open the Accessibility settings pane when permission is missing",
    )
    sub.add_parser("help", help="show this help message")
    return parser


def setup_logging(level: str, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def make_runner() -> OsascriptRunner:
    return OsascriptRunner()


def make_permissions(config: Config, runner) -> PermissionsHelper:
    return PermissionsHelper(
        runner,
        reference_app=config.get("permissions.reference_app", "Finder"),
        timeout=float(config.get("permissions.probe_timeout", 5)),
    )


def make_window_manager(config: Config, runner) -> WindowManager:
    provider = None
    if config.get("capture.use_fast_enumeration", True):
        provider = QuartzWindowProvider()
    enhancer = TitleEnhancer(
        runner,
        apps=config.get("matching.multi_window_apps", []),
        timeout=float(config.get("capture.title_query_timeout", 5)),
    )
    return WindowManager(
        runner,
        provider=provider,
        enhancer=enhancer,
        enumeration_timeout=float(config.get("capture.enumeration_timeout", 10)),
    )


def make_restorer(config: Config, runner) -> WindowRestorer:
    generator = CommandGenerator(
        settle_delay=float(config.get("restore.settle_delay", 0.2)),
        timeout=float(config.get("restore.command_timeout", 10)),
    )
    return WindowRestorer(
        runner,
        matcher=WindowMatcher(config.get("matching.title_strategies", {})),
        generator=generator,
        pacing_delay=float(config.get("restore.pacing_delay", 0.1)),
        query_timeout=float(config.get("capture.title_query_timeout", 5)),
    )


def cmd_save(config: Config, snapshot_manager: SnapshotManager) -> int:
    window_manager = make_window_manager(config, make_runner())
    print("Saving window positions...")
    try:
        snapshot = window_manager.save_positions(snapshot_manager)
    except RunnerError as e:
        print(f"Could not read window positions: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except OSError as e:
        print(f"Could not write {snapshot_manager.path}: {e}", file=sys.stderr)
        return EXIT_FAILURE
    print(f"Saved positions for {len(snapshot.windows)} windows to {snapshot_manager.path}")
    return EXIT_OK


def cmd_restore(config: Config, snapshot_manager: SnapshotManager) -> int:
    runner = make_runner()
    permissions = make_permissions(config, runner)
    restorer = make_restorer(config, runner)

    restorer.window_restored.connect(lambda app, title: print(f"  ✓ {_label(app, title)}"))
    restorer.window_restore_failed.connect(
        lambda app, title, reason: print(f"  ✗ {_label(app, title)} ({reason})")
    )
    restorer.window_skipped.connect(
        lambda app, title, reason: print(f"  - {_label(app, title)} skipped ({reason})")
    )

    print(f"Restoring window positions from {snapshot_manager.path}...")
    try:
        report = restore_positions(snapshot_manager, restorer, permissions)
    except SnapshotMissingError as e:
        print(f"{e}. Run 'window-restore save' first.", file=sys.stderr)
        return EXIT_FAILURE
    except SnapshotParseError as e:
        print(f"Could not read saved positions: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except PermissionDeniedError:
        print(permissions.request_permissions_instructions(), file=sys.stderr)
        print("\nSkipping restoration due to missing permissions.", file=sys.stderr)
        return EXIT_FAILURE

    print()
    print(report.summary())
    hint = report.remediation_hint()
    if hint:
        print()
        print(hint)
    return EXIT_OK


def cmd_check(config: Config, open_settings: bool = False) -> int:
    permissions = make_permissions(config, make_runner())
    print("Checking accessibility permissions...")
    if permissions.check_accessibility_permissions():
        print("Accessibility permissions are granted.")
        print("You can now use 'window-restore restore' to restore window positions.")
        return EXIT_OK

    print("Accessibility permissions are not granted.\n")
    print(permissions.request_permissions_instructions())
    if open_settings:
        permissions.open_system_preferences()
    return EXIT_FAILURE


def _label(app: str, title: str) -> str:
    return f"{app} - {title}" if title else app


def main(argv: list[str] | None = None) -> int:
    """Main application entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "help"):
        parser.print_help()
        return EXIT_OK

    config = Config(args.config_dir)
    setup_logging(config.log_level, args.verbose)

    if not PermissionsHelper.is_macos():
        logger.warning("window-restore drives System Events and only works on macOS")

    snapshot_manager = SnapshotManager(args.file or config.snapshot_path)

    if args.command == "save":
        return cmd_save(config, snapshot_manager)
    if args.command == "restore":
        return cmd_restore(config, snapshot_manager)
    return cmd_check(config, open_settings=args.open_settings)


if __name__ == "__main__":
    sys.exit(main())
