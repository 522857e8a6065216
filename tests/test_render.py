from app import VISIBLE_BEHIND, SummaryScreen, describe_history, render_text
from stats import SessionRecord


def test_marks_correct_wrong_and_caret():
    markup = render_text("cat dog", "cx", {1})
    assert markup.startswith("[green]c[/][bold red on #4f2f2f]x[/]")
    assert "[reverse]t[/]" in markup
    assert markup.endswith("[dim]g[/]")


def test_wrong_space_is_visible():
    markup = render_text("cats dog", "cat ", {3})
    assert "[bold red on #4f2f2f]_[/]" in markup


def test_window_starts_on_word_boundary():
    text = " ".join(["word"] * 100)
    typed = text[:200]
    markup = render_text(text, typed, set())
    first_visible = markup.split("[/]", 1)[0]
    assert first_visible == "[green]w"
    assert markup.count("[green]") <= VISIBLE_BEHIND


def test_describe_history():
    history = [(0, 12.0), (1, 48.6), (2, 40.0)]
    assert describe_history(history) == "Peak 49 WPM at 1s over 3 samples"
    assert describe_history(history, 55.0).endswith(", best so far 55 WPM")


def test_describe_empty_history():
    assert describe_history([]) == "No WPM samples recorded."


def test_summary_screen_keeps_wpm_history():
    record = SessionRecord(
        id="abc",
        created_at="2026-01-01T00:00:00+00:00",
        duration=15,
        source="words",
        wpm=40.0,
        raw_wpm=44.0,
        accuracy=95,
        active_seconds=14.2,
    )
    history = [(0, 30.0), (1, 40.0)]
    screen = SummaryScreen(record, previous_best=35.0, wpm_history=history)
    assert screen.wpm_history == history
