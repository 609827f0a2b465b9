"""
AppleScript generation for querying and moving windows

All free-form text (application names, titles, search terms) is escaped
with ``escape_applescript`` before it is placed inside a string literal.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .matcher import Match
    from .window_manager import WindowDescriptor

# Low-probability separators for batched query results
TITLE_DELIMITER = "|~|"
FIELD_DELIMITER = "|#|"

# Marks a title query result so window titles never read as a status
TITLES_PREFIX = "titles:"

PERMISSION_OK = "accessible"
PERMISSION_DENIED = "not accessible"


def escape_applescript(text: str) -> str:
    """Escape text for use inside an AppleScript double-quoted string"""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def build_restore_script(
    descriptor: "WindowDescriptor",
    index: int,
    search_term: str = "",
    settle_delay: float = 0.2,
) -> str:
    """Move and resize window ``index`` (1 based) of the descriptor's app.

    When ``search_term`` is set the selected window must still contain it,
    otherwise the script reports ``no matching window``.
    """
    app = escape_applescript(descriptor.app)
    term = escape_applescript(search_term)
    return f'''tell application "System Events"
    try
        tell application process "{app}"
            set theWindows to (every window whose subrole is "AXStandardWindow")
            set targetIndex to {index}
            set searchTerm to "{term}"
            set targetWindow to missing value
            if (count of theWindows) >= targetIndex then
                set candidate to item targetIndex of theWindows
                if searchTerm is "" or (title of candidate as string) contains searchTerm then
                    set targetWindow to candidate
                end if
            end if
            if targetWindow is missing value then
                return "no matching window"
            end if
            try
                if value of attribute "AXMinimized" of targetWindow is true then
                    set value of attribute "AXMinimized" of targetWindow to false
                    delay {settle_delay:g}
                end if
            end try
            set position of targetWindow to {{{descriptor.x}, {descriptor.y}}}
            set size of targetWindow to {{{descriptor.width}, {descriptor.height}}}
            return "success"
        end tell
    on error errMsg
        return "error: " & errMsg
    end try
end tell'''


def build_title_query(app_name: str) -> str:
    """Return every standard window title of one app, joined by TITLE_DELIMITER.

    The result starts with TITLES_PREFIX. Untitled windows produce an empty
    slot so positions stay aligned. A missing process yields no titles.
    """
    app = escape_applescript(app_name)
    return f'''tell application "System Events"
    try
        if exists (application process "{app}") then
            tell application process "{app}"
                set windowTitles to {{}}
                repeat with w in (every window whose subrole is "AXStandardWindow")
                    try
                        set windowTitle to title of w
                        if windowTitle is missing value then set windowTitle to ""
                        set end of windowTitles to (windowTitle as string)
                    on error
                        set end of windowTitles to ""
                    end try
                end repeat
                set AppleScript's text item delimiters to "{TITLE_DELIMITER}"
                set titleString to windowTitles as string
                set AppleScript's text item delimiters to ""
                return "{TITLES_PREFIX}" & titleString
            end tell
        else
            return "{TITLES_PREFIX}"
        end if
    on error errMsg
        return "error: " & errMsg
    end try
end tell'''


def build_permission_probe(reference_app: str = "Finder") -> str:
    app = escape_applescript(reference_app)
    return f'''tell application "System Events"
    try
        set testProcess to first application process whose name is "{app}"
        set windowCount to count of windows of testProcess
        return "{PERMISSION_OK}"
    on error
        return "{PERMISSION_DENIED}"
    end try
end tell'''


def build_enumeration_script() -> str:
    """List every standard window of every foreground process.

    One record per window, fields joined by FIELD_DELIMITER and records by
    TITLE_DELIMITER: app, title, x, y, width, height.
    """
    return f'''tell application "System Events"
    set records to {{}}
    repeat with proc in (every process whose background only is false)
        try
            set appName to name of proc
            tell proc
                repeat with win in (every window whose subrole is "AXStandardWindow")
                    try
                        set winPosition to position of win
                        set winSize to size of win
                        set winTitle to title of win
                        if winTitle is missing value then set winTitle to ""
                        set AppleScript's text item delimiters to "{FIELD_DELIMITER}"
                        set end of records to ({{appName, winTitle as string, item 1 of winPosition, item 2 of winPosition, item 1 of winSize, item 2 of winSize}} as string)
                        set AppleScript's text item delimiters to ""
                    end try
                end repeat
            end tell
        end try
    end repeat
    set AppleScript's text item delimiters to "{TITLE_DELIMITER}"
    set output to records as string
    set AppleScript's text item delimiters to ""
    return output
end tell'''


def split_titles(output: str) -> list[str]:
    """Split a batched title query result, keeping empty slots"""
    text = output.strip("\r\n")
    if text.startswith(TITLES_PREFIX):
        text = text[len(TITLES_PREFIX):]
    if not text:
        return []
    return text.split(TITLE_DELIMITER)


@dataclass(frozen=True)
class AutomationCommand:
    """A generated script plus the budget to run it with"""

    script: str
    timeout: float
    app: str
    index: int
    search_term: str = ""


class CommandGenerator:
    """Builds the restore command for a matched or unmatched descriptor"""

    def __init__(self, settle_delay: float = 0.2, timeout: float = 10.0):
        self.settle_delay = settle_delay
        self.timeout = timeout

    def for_match(self, match: "Match") -> AutomationCommand:
        if match.live is not None:
            # Title matches are re-checked inside the script in case the
            # live order changed after the title query.
            index = match.live.index + 1
            term = match.search_term if match.method == "title" else ""
        else:
            # Unmatched: probe the saved position so the negative result is
            # reported by the runner.
            index = match.saved_index + 1
            term = ""
        script = build_restore_script(
            match.descriptor, index, term, settle_delay=self.settle_delay
        )
        return AutomationCommand(
            script=script,
            timeout=self.timeout,
            app=match.descriptor.app,
            index=index,
            search_term=term,
        )
