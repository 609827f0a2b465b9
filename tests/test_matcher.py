import pytest

from conftest import window
from window_restore.matcher import WindowMatcher, document_prefix
from window_restore.window_manager import LiveWindow


def live(app, *titles):
    return [LiveWindow(app=app, index=i, title=t) for i, t in enumerate(titles)]


def test_untitled_window_falls_back_to_position():
    saved = window("TextEdit", "", 10, 20, 640, 480)

    match = WindowMatcher().match(saved, 0, live("TextEdit", "Untitled"))

    assert match.matched
    assert match.method == "position"
    assert match.live.index == 0


@pytest.mark.parametrize(
    "live_titles",
    [
        ("GitHub: pulls — Google Chrome", "Gmail — Inbox"),
        ("Gmail — Inbox", "GitHub: pulls — Google Chrome"),
    ],
)
def test_chrome_titles_match_by_document_prefix_in_any_order(live_titles):
    saved = [window("Google Chrome", "GitHub - Chrome"), window("Google Chrome", "Gmail - Chrome")]
    current = live("Google Chrome", *live_titles)

    github, gmail = WindowMatcher().match_group(saved, current)

    assert github.search_term == "GitHub"
    assert github.method == "title"
    assert github.live.title.startswith("GitHub")
    assert gmail.search_term == "Gmail"
    assert gmail.live.title == "Gmail — Inbox"


def test_unmatched_when_title_misses_and_index_exceeds_live_count():
    saved = [window("Terminal", "build"), window("Terminal", "deploy")]

    first, second = WindowMatcher().match_group(saved, live("Terminal", "zsh"))

    assert first.method == "position"
    assert first.live.index == 0
    assert not second.matched
    assert second.method is None
    assert second.saved_index == 1


def test_no_live_windows_leaves_everything_unmatched():
    matches = WindowMatcher().match_group([window("Notes", "a"), window("Notes")], [])
    assert [m.matched for m in matches] == [False, False]


def test_other_apps_use_full_title_verbatim():
    matcher = WindowMatcher()
    saved = window("Finder", "Projects - Archive")

    match = matcher.match(saved, 0, live("Finder", "Projects", "Projects - Archive"))

    assert match.search_term == "Projects - Archive"
    assert match.live.index == 1


def test_title_search_is_case_sensitive():
    match = WindowMatcher().match(window("Finder", "projects"), 3, live("Finder", "Projects"))
    assert not match.matched


def test_first_live_window_containing_the_term_wins():
    current = live("Code", "main.py - repo", "main.py - other", "README.md - repo")

    match = WindowMatcher().match(window("Code", "main.py - repo - Visual Studio Code"), 2, current)

    assert match.live.index == 0


def test_strategy_table_is_data_driven():
    matcher = WindowMatcher({"Preview": "prefix"})

    assert matcher.search_term(window("Preview", "report.pdf - Page 3")) == "report.pdf"
    assert matcher.search_term(window("Google Chrome", "GitHub - Chrome")) == "GitHub - Chrome"
    assert matcher.search_term(window("Preview", "")) == ""


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError, match="fuzzy"):
        WindowMatcher({"Preview": "fuzzy"})


def test_document_prefix_without_separator_is_whole_title():
    assert document_prefix("Inbox") == "Inbox"
    assert document_prefix("a - b - c") == "a"
