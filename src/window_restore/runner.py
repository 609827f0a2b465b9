"""
Automation runner: the single seam between window-restore and the OS

Every query and every move goes through ``AutomationRunner.run`` as an
opaque AppleScript string. The ``osascript`` implementation is the only
code that touches the real accessibility interface.
"""

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .errors import RunnerError, RunnerTimeoutError

logger = logging.getLogger(__name__)

SUCCESS_SENTINEL = "success"
NO_MATCH_SENTINELS = ("no matching window", "no window")
ERROR_PREFIX = "error:"


class OutcomeKind(Enum):
    OK = "ok"
    NO_MATCH = "no_match"
    ERROR = "error"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class RunOutcome:
    """Tagged result of one automation command"""

    kind: OutcomeKind
    text: str = ""
    message: str = ""

    @classmethod
    def ok(cls, text: str) -> "RunOutcome":
        return cls(OutcomeKind.OK, text=text)

    @classmethod
    def no_match(cls, text: str = NO_MATCH_SENTINELS[0]) -> "RunOutcome":
        return cls(OutcomeKind.NO_MATCH, text=text, message=text)

    @classmethod
    def error(cls, message: str) -> "RunOutcome":
        return cls(OutcomeKind.ERROR, message=message)

    @classmethod
    def timed_out(cls, message: str) -> "RunOutcome":
        return cls(OutcomeKind.TIMED_OUT, message=message)

    @classmethod
    def from_output(cls, output: str) -> "RunOutcome":
        """Classify the text a script printed on stdout."""
        text = output.strip()
        if text in NO_MATCH_SENTINELS:
            return cls.no_match(text)
        if text.startswith(ERROR_PREFIX):
            return cls.error(text[len(ERROR_PREFIX):].strip())
        return cls.ok(text)

    @property
    def succeeded(self) -> bool:
        return self.kind is OutcomeKind.OK and SUCCESS_SENTINEL in self.text


class AutomationRunner(Protocol):
    def run(self, command: str, timeout: float) -> RunOutcome: ...


class OsascriptRunner:
    """Runs AppleScript through ``osascript -e``"""

    def __init__(self, executable: str = "osascript"):
        self.executable = executable

    def execute(self, command: str, timeout: float) -> str:
        """Run a script and return its raw stdout.

        Raises RunnerTimeoutError when the budget is exceeded and RunnerError
        for any other failure to run the script.
        """
        try:
            result = subprocess.run(
                [self.executable, "-e", command],
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise RunnerTimeoutError(f"timed out after {timeout:g}s") from e
        except OSError as e:
            raise RunnerError(f"could not start {self.executable}: {e}") from e

        if result.returncode != 0:
            message = (result.stderr or "").strip() or f"exit status {result.returncode}"
            raise RunnerError(message)
        return result.stdout

    def run(self, command: str, timeout: float) -> RunOutcome:
        try:
            output = self.execute(command, timeout)
        except RunnerTimeoutError as e:
            logger.debug("osascript timed out: %s", e)
            return RunOutcome.timed_out(str(e))
        except RunnerError as e:
            logger.debug("osascript failed: %s", e)
            return RunOutcome.error(str(e))
        return RunOutcome.from_output(output)
