"""
Re-identification of saved windows among the live windows of an app
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from .window_manager import LiveWindow, WindowDescriptor

logger = logging.getLogger(__name__)

DOCUMENT_SEPARATOR = " - "


def full_title(title: str) -> str:
    return title


def document_prefix(title: str) -> str:
    """Document or page name: the part before the first " - " separator"""
    return title.split(DOCUMENT_SEPARATOR, 1)[0]


SEARCH_TERM_STRATEGIES: dict[str, Callable[[str], str]] = {
    "full": full_title,
    "prefix": document_prefix,
}

DEFAULT_TITLE_STRATEGIES = {
    "Google Chrome": "prefix",
    "Code": "prefix",
    "Visual Studio Code": "prefix",
}


@dataclass(frozen=True)
class Match:
    """Pairing of one saved descriptor with a live window, or none"""

    descriptor: WindowDescriptor
    saved_index: int
    live: LiveWindow | None
    method: str | None = None  # "title", "position" or None when unmatched
    search_term: str = ""

    @property
    def matched(self) -> bool:
        return self.live is not None


class WindowMatcher:
    """Matches saved windows to live windows by title, then by position"""

    def __init__(self, strategies: Mapping[str, str] | None = None):
        table = dict(DEFAULT_TITLE_STRATEGIES if strategies is None else strategies)
        for app, name in table.items():
            if name not in SEARCH_TERM_STRATEGIES:
                raise ValueError(f"Unknown title strategy {name!r} for {app!r}")
        self.strategies = table

    def search_term(self, descriptor: WindowDescriptor) -> str:
        if not descriptor.title:
            return ""
        strategy = SEARCH_TERM_STRATEGIES[self.strategies.get(descriptor.app, "full")]
        return strategy(descriptor.title)

    def match(
        self, descriptor: WindowDescriptor, index: int, live: Sequence[LiveWindow]
    ) -> Match:
        term = self.search_term(descriptor)
        if term:
            for window in live:
                if term in window.title:
                    return Match(descriptor, index, window, "title", term)

        if len(live) > index:
            return Match(descriptor, index, live[index], "position", term)

        logger.debug(
            "No live window for %s #%d (term=%r, %d live)",
            descriptor.app,
            index,
            term,
            len(live),
        )
        return Match(descriptor, index, None, None, term)

    def match_group(
        self, saved: Sequence[WindowDescriptor], live: Sequence[LiveWindow]
    ) -> list[Match]:
        """Match one app's saved windows, in capture order, against its live windows"""
        return [self.match(descriptor, i, live) for i, descriptor in enumerate(saved)]
