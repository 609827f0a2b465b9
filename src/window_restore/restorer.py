"""
Sequential restoration of saved window positions
"""

import logging
import threading
from collections.abc import Sequence

from PyQt6.QtCore import QObject, pyqtSignal

from .errors import RunnerError
from .matcher import Match, WindowMatcher
from .permissions import PermissionsHelper
from .report import DispatchState, RestoreReport, RestoreStatus, WindowResult
from .runner import AutomationRunner, OutcomeKind, RunOutcome
from .scripts import CommandGenerator
from .snapshot_manager import SnapshotManager
from .window_manager import LiveWindow, WindowDescriptor, group_windows, query_live_windows

logger = logging.getLogger(__name__)

_DISPATCH_STATES = {
    OutcomeKind.NO_MATCH: DispatchState.NO_MATCH,
    OutcomeKind.ERROR: DispatchState.RUNNER_ERROR,
    OutcomeKind.TIMED_OUT: DispatchState.TIMED_OUT,
}


class WindowRestorer(QObject):
    """Matches saved windows to live ones and moves them, one at a time.

    Windows are processed per app (first-appearance order) and in saved
    order within an app. Every dispatch is followed by a pacing delay so
    the accessibility subsystem is never flooded. Per-window problems are
    recorded in the report; nothing here aborts the batch.
    """

    window_restore_started = pyqtSignal(str, str)  # app_name, window_title
    window_restored = pyqtSignal(str, str)
    window_restore_failed = pyqtSignal(str, str, str)  # app_name, window_title, reason
    window_skipped = pyqtSignal(str, str, str)

    def __init__(
        self,
        runner: AutomationRunner,
        matcher: WindowMatcher | None = None,
        generator: CommandGenerator | None = None,
        pacing_delay: float = 0.1,
        query_timeout: float = 5.0,
    ):
        super().__init__()
        self.runner = runner
        self.matcher = matcher or WindowMatcher()
        self.generator = generator or CommandGenerator()
        self.pacing_delay = pacing_delay
        self.query_timeout = query_timeout
        self._cancel_event = threading.Event()

    def cancel(self) -> None:
        """Stop before the next dispatch; an in-flight command is not interrupted"""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def restore(self, windows: Sequence[WindowDescriptor]) -> RestoreReport:
        report = RestoreReport()
        logger.info("Attempting to restore %d windows", len(windows))

        for app_name, saved in group_windows(windows).items():
            if self.cancelled:
                break
            logger.info("Processing %s (%d windows)", app_name, len(saved))
            self._restore_group(app_name, saved, report)

        report.finish(cancelled=self.cancelled)
        # A cancel only ever applies to the run it arrived before or during
        self._cancel_event.clear()
        logger.info(report.summary())
        return report

    def _live_windows(self, app_name: str, saved: Sequence[WindowDescriptor]) -> list[LiveWindow]:
        if not any(w.has_valid_dimensions for w in saved):
            return []
        try:
            return query_live_windows(self.runner, app_name, self.query_timeout)
        except RunnerError as e:
            # Matching degrades to in-script positional probes
            logger.warning("Could not list %s windows: %s", app_name, e)
            return []

    def _restore_group(
        self, app_name: str, saved: Sequence[WindowDescriptor], report: RestoreReport
    ) -> None:
        live = self._live_windows(app_name, saved)

        for index, descriptor in enumerate(saved):
            if self.cancelled:
                return

            if not descriptor.has_valid_dimensions:
                reason = "invalid dimensions"
                logger.warning("Skipping window with invalid dimensions: %s", descriptor.label())
                report.record(self._result(descriptor, index, RestoreStatus.SKIPPED, reason=reason))
                self.window_skipped.emit(descriptor.app, descriptor.title, reason)
                continue

            match = self.matcher.match(descriptor, index, live)
            report.record(self._dispatch(match))
            self._cancel_event.wait(self.pacing_delay)

    def _dispatch(self, match: Match) -> WindowResult:
        descriptor = match.descriptor
        self.window_restore_started.emit(descriptor.app, descriptor.title)
        command = self.generator.for_match(match)
        logger.debug(
            "Dispatching %s (target #%d, %s)",
            descriptor.label(),
            command.index,
            match.method or "probe",
        )

        try:
            outcome = self.runner.run(command.script, command.timeout)
        except Exception as e:
            logger.exception("Runner raised for %s", descriptor.label())
            outcome = RunOutcome.error(str(e) or type(e).__name__)

        if outcome.succeeded:
            logger.info("Restored: %s", descriptor.label())
            self.window_restored.emit(descriptor.app, descriptor.title)
            return self._result(
                descriptor, match.saved_index, RestoreStatus.RESTORED, DispatchState.SUCCESS
            )

        state = _DISPATCH_STATES.get(outcome.kind, DispatchState.RUNNER_ERROR)
        if state is DispatchState.NO_MATCH:
            reason = "no matching window"
        else:
            reason = outcome.message or outcome.text or "unexpected output"
        logger.warning("Failed to restore: %s (%s)", descriptor.label(), reason)
        self.window_restore_failed.emit(descriptor.app, descriptor.title, reason)
        return self._result(descriptor, match.saved_index, RestoreStatus.FAILED, state, reason)

    @staticmethod
    def _result(
        descriptor: WindowDescriptor,
        index: int,
        status: RestoreStatus,
        dispatch: DispatchState = DispatchState.PENDING,
        reason: str | None = None,
    ) -> WindowResult:
        return WindowResult(
            app=descriptor.app,
            title=descriptor.title,
            index=index,
            status=status,
            dispatch=dispatch,
            reason=reason,
            x=descriptor.x,
            y=descriptor.y,
            width=descriptor.width,
            height=descriptor.height,
        )


def restore_positions(
    snapshot_manager: SnapshotManager,
    restorer: WindowRestorer,
    permissions: PermissionsHelper,
) -> RestoreReport:
    """Load the saved snapshot, check permissions, then restore.

    SnapshotMissingError / SnapshotParseError and PermissionDeniedError
    propagate before any window is dispatched.
    """
    snapshot = snapshot_manager.load()
    permissions.ensure_accessibility()
    report = restorer.restore(snapshot.windows)
    snapshot_manager.snapshot_restored.emit(str(snapshot_manager.path))
    return report
