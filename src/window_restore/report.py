"""
Restore outcome aggregation
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class RestoreStatus(Enum):
    RESTORED = "restored"
    SKIPPED = "skipped"
    FAILED = "failed"


class DispatchState(Enum):
    PENDING = "pending"
    SUCCESS = "success"
    NO_MATCH = "no_match"
    RUNNER_ERROR = "runner_error"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class WindowResult:
    app: str
    title: str
    index: int
    status: RestoreStatus
    dispatch: DispatchState = DispatchState.PENDING
    reason: str | None = None
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def geometry(self) -> str:
        return f"{self.x},{self.y} {self.width}x{self.height}"


@dataclass
class RestoreReport:
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None
    items: list[WindowResult] = field(default_factory=list)
    cancelled: bool = False

    def record(self, result: WindowResult) -> None:
        self.items.append(result)

    def _count(self, status: RestoreStatus) -> int:
        return sum(1 for item in self.items if item.status is status)

    @property
    def restored_count(self) -> int:
        return self._count(RestoreStatus.RESTORED)

    @property
    def failed_count(self) -> int:
        return self._count(RestoreStatus.FAILED)

    @property
    def skipped_count(self) -> int:
        return self._count(RestoreStatus.SKIPPED)

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def needs_remediation(self) -> bool:
        """Nothing restored but something failed: likely a systemic problem"""
        return self.restored_count == 0 and self.failed_count > 0

    def finish(self, cancelled: bool = False) -> None:
        self.finished_at = datetime.now()
        self.cancelled = cancelled

    def summary(self) -> str:
        line = (
            f"Restoration complete: {self.restored_count} restored, "
            f"{self.failed_count} failed, {self.skipped_count} skipped"
        )
        if self.cancelled:
            line += " (cancelled)"
        return line

    def remediation_hint(self) -> str | None:
        if not self.needs_remediation:
            return None
        return "\n".join(
            [
                "No windows were restored. This might be because:",
                "  • Some applications were closed since saving",
                "  • Window titles have changed",
                "  • Windows moved to another Space or display that is not available",
                "Run 'window-restore save' again once your windows are open.",
            ]
        )
