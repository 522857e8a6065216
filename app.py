from __future__ import annotations

import datetime as dt
import logging
import uuid

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Sparkline, Static
from rich.markup import escape
from rich.console import Group
from rich.table import Table

import config
from session import TypingSession
from stats import SessionRecord, StatsStore
from wikipedia import fetch_random_article
from words import generate_text


log = logging.getLogger(__name__)

SOURCES = ("words", "wikipedia")
VISIBLE_BEHIND = 60
VISIBLE_AHEAD = 240


def render_text(text: str, typed: str, mistakes: set[int]) -> str:
    """Rich markup for the part of the text around the caret."""
    start = max(0, len(typed) - VISIBLE_BEHIND)
    if start:
        # begin on a word boundary
        start = text.find(" ", start) + 1 or start
    end = min(len(text), len(typed) + VISIBLE_AHEAD)

    rendered = []
    for i in range(start, end):
        ch = escape(text[i])
        if i < len(typed):
            if i in mistakes:
                shown = escape(typed[i]) if typed[i] != " " else "_"
                rendered.append(f"[bold red on #4f2f2f]{shown}[/]")
            else:
                rendered.append(f"[green]{ch}[/]")
        elif i == len(typed):
            rendered.append(f"[reverse]{ch}[/]")
        else:
            rendered.append(f"[dim]{ch}[/]")
    return "".join(rendered)


def describe_history(history: list[tuple[int, float]], previous_best: float | None = None) -> str:
    """One line about the per-second WPM samples shown under the sparkline."""
    if not history:
        return "No WPM samples recorded."
    peak_second, peak = max(history, key=lambda sample: sample[1])
    line = f"Peak {peak:.0f} WPM at {peak_second}s over {len(history)} samples"
    if previous_best is not None:
        line += f", best so far {previous_best:.0f} WPM"
    return line


class HomeScreen(Screen):
    BINDINGS = [("q", "quit", "Quit")]

    def __init__(self) -> None:
        super().__init__()
        self.duration = config.DEFAULT_DURATION
        self.source = SOURCES[0]

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="home"):
            yield Static("Typing Tutor", id="title")
            yield Static("", id="subtitle")
            with Horizontal(id="time-buttons"):
                for seconds in config.TIME_OPTIONS:
                    yield Button(f"{seconds}s", id=f"time-{seconds}")
            with Horizontal(id="home-buttons"):
                yield Button("Start Test", id="start", variant="success")
                yield Button("Source", id="source")
                yield Button("View Stats", id="stats")
                yield Button("Quit", id="quit", variant="error")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_subtitle()

    def _refresh_subtitle(self) -> None:
        self.query_one("#subtitle", Static).update(
            f"{self.duration}s test, text from {self.source}."
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("time-"):
            self.duration = int(button_id.removeprefix("time-"))
            self._refresh_subtitle()
        elif button_id == "source":
            self.source = SOURCES[(SOURCES.index(self.source) + 1) % len(SOURCES)]
            self._refresh_subtitle()
        elif button_id == "start":
            self.app.push_screen(SessionScreen(self.duration, self.source))
        elif button_id == "stats":
            self.app.push_screen(StatsScreen())
        elif button_id == "quit":
            self.app.exit()

    def action_quit(self) -> None:
        self.app.exit()


class SessionScreen(Screen):
    BINDINGS = [
        Binding("tab", "restart", "Restart", priority=True),
        Binding("escape", "back", "Back"),
    ]

    def __init__(self, duration: int, source: str) -> None:
        super().__init__()
        self.duration = duration
        self.source = source
        self.source_meta: dict = {}
        self.session = TypingSession("", duration)

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="session"):
            yield Static("", id="lesson-title")
            yield Static("", id="lesson-text")
            with Horizontal(id="metrics"):
                yield Static("", id="time-left")
                yield Static("WPM: 0", id="wpm")
                yield Static("Accuracy: 100%", id="accuracy")
        yield Footer()

    def on_mount(self) -> None:
        self._load_text()
        self.set_interval(config.TICK_INTERVAL_S, self._on_tick)

    def _load_text(self) -> None:
        if self.source == "wikipedia":
            article = fetch_random_article()
            self.source_meta = {"title": article.title, "url": article.url}
            text = article.text
            title = f"Article: {article.title}"
        else:
            self.source_meta = {}
            text = generate_text()
            title = "Random words"

        self.session.reset(text)
        self.query_one("#lesson-title", Static).update(title)
        self._refresh()

    def on_key(self, event: events.Key) -> None:
        if self.session.finished:
            return
        if event.key == "backspace":
            changed = self.session.backspace()
        elif event.is_printable and event.character:
            changed = self.session.press(event.character)
        else:
            return
        event.stop()
        if changed:
            self._refresh()
        if self.session.finished:
            self._finish_session()

    def _on_tick(self) -> None:
        if self.session.finished or not self.session.started:
            return
        self.session.tick()
        self._refresh()
        if self.session.finished:
            self._finish_session()

    def _refresh(self) -> None:
        current = self.session.metrics()
        self.query_one("#lesson-text", Static).update(
            render_text(self.session.text, self.session.typed, self.session.mistakes)
        )
        self.query_one("#time-left", Static).update(f"Time: {self.session.time_left():.0f}s")
        self.query_one("#wpm", Static).update(f"WPM: {current['wpm']:.0f}")
        self.query_one("#accuracy", Static).update(f"Accuracy: {current['accuracy']}%")

    def _finish_session(self) -> None:
        final = self.session.metrics()
        record = SessionRecord(
            id=str(uuid.uuid4()),
            created_at=dt.datetime.now(dt.timezone.utc).isoformat(),
            duration=self.duration,
            source=self.source,
            wpm=final["wpm"],
            raw_wpm=final["raw_wpm"],
            accuracy=final["accuracy"],
            active_seconds=self.session.active_time.active_seconds(),
            source_meta=self.source_meta,
        )
        store = StatsStore()
        previous_best = store.best_scores().get(self.duration)
        if self.session.saveable:
            store.append_session(record)
        else:
            log.info("Result not saved: attempt was AFK")
        self.app.switch_screen(
            SummaryScreen(
                record,
                saved=self.session.saveable,
                previous_best=previous_best,
                wpm_history=list(self.session.wpm_history),
            )
        )

    def action_restart(self) -> None:
        self._load_text()

    def action_back(self) -> None:
        self.app.pop_screen()


class SummaryScreen(Screen):
    BINDINGS = [("enter", "home", "Home"), ("escape", "home", "Home")]

    def __init__(
        self,
        record: SessionRecord,
        saved: bool = True,
        previous_best: float | None = None,
        wpm_history: list[tuple[int, float]] | None = None,
    ) -> None:
        super().__init__()
        self.record = record
        self.saved = saved
        self.previous_best = previous_best
        self.wpm_history = wpm_history or []

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="summary"):
            yield Static("Test Summary", id="summary-title")
            yield Static(f"WPM: {self.record.wpm:.2f}", id="summary-wpm")
            yield Static(f"Raw WPM: {self.record.raw_wpm:.2f}", id="summary-raw-wpm")
            yield Static(f"Accuracy: {self.record.accuracy}%", id="summary-accuracy")
            yield Static(f"Duration: {self.record.duration}s", id="summary-duration")
            yield Static(f"Active typing: {self.record.active_seconds:.1f}s")
            yield Sparkline([wpm for _, wpm in self.wpm_history], id="summary-history")
            yield Static(
                describe_history(self.wpm_history, self.previous_best), id="summary-history-note"
            )
            yield Static(self._verdict(), id="summary-verdict")
            yield Button("Back to Home", id="home", variant="success")
        yield Footer()

    def _verdict(self) -> str:
        if not self.saved:
            return "Test not saved due to inactivity."
        if self.previous_best is None or self.record.wpm > self.previous_best:
            return f"New best for {self.record.duration}s!"
        return f"Best for {self.record.duration}s: {self.previous_best:.2f} WPM"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "home":
            self.app.pop_screen()

    def action_home(self) -> None:
        self.app.pop_screen()


def _humanize_timestamp(iso_ts: str) -> str:
    if not iso_ts:
        return "Unknown time"
    try:
        parsed = dt.datetime.fromisoformat(iso_ts)
    except ValueError:
        return iso_ts
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    now = dt.datetime.now(dt.timezone.utc)
    seconds = max((now - parsed).total_seconds(), 0.0)

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        minutes = int(seconds // 60)
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    if seconds < 86400:
        hours = int(seconds // 3600)
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    if seconds < 86400 * 30:
        days = int(seconds // 86400)
        return f"{days} day{'s' if days != 1 else ''} ago"
    if seconds < 86400 * 365:
        months = int(seconds // (86400 * 30))
        return f"{months} month{'s' if months != 1 else ''} ago"
    years = int(seconds // (86400 * 365))
    return f"{years} year{'s' if years != 1 else ''} ago"


class StatsScreen(Screen):
    BINDINGS = [("escape", "back", "Back")]

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="stats"):
            yield Static("Stats Summary", id="stats-title")
            yield Static("", id="stats-body")
            yield Button("Back", id="back")
        yield Footer()

    def on_mount(self) -> None:
        store = StatsStore()
        summary = store.summary()
        best = store.best_scores()
        sessions = sorted(store.sessions(), key=lambda s: s.get("created_at", ""), reverse=True)

        header = (
            f"Total Tests: {summary['total']}\n"
            f"Average WPM: {summary['avg_wpm']:.1f}\n"
            f"Average Raw WPM: {summary['avg_raw_wpm']:.1f}\n"
            f"Average Accuracy: {summary['avg_accuracy']:.1f}%\n"
        )
        if best:
            header += "Best: " + ", ".join(
                f"{duration}s {wpm:.1f}" for duration, wpm in sorted(best.items())
            ) + "\n"

        table = Table(show_header=True, box=None, show_edge=False, pad_edge=False)
        table.add_column("When", width=18, no_wrap=True)
        table.add_column("Time", justify="right", width=5, no_wrap=True)
        table.add_column("WPM", justify="right", width=7, no_wrap=True)
        table.add_column("Raw", justify="right", width=7, no_wrap=True)
        table.add_column("Accuracy", justify="right", width=9, no_wrap=True)

        for session in sessions:
            table.add_row(
                _humanize_timestamp(session.get("created_at", "")),
                f"{session.get('duration', 0)}s",
                f"{session.get('wpm', 0.0):.1f}",
                f"{session.get('raw_wpm', 0.0):.1f}",
                f"{session.get('accuracy', 0)}%",
            )

        self.query_one("#stats-body", Static).update(Group(header, table))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "back":
            self.app.pop_screen()

    def action_back(self) -> None:
        self.app.pop_screen()


class TypingTutorApp(App):
    CSS = """
    #home, #session, #summary, #stats {
        padding: 1 2;
    }

    #title {
        content-align: center middle;
        text-style: bold;
    }

    #subtitle {
        content-align: center middle;
        color: $text-muted;
        margin-bottom: 1;
    }

    #home-buttons, #time-buttons {
        height: auto;
        margin-top: 1;
    }

    #lesson-text {
        height: 12;
        border: solid $primary;
        padding: 1;
        overflow: auto;
    }

    #metrics {
        height: auto;
        margin: 1 0;
    }

    #metrics Static {
        width: 1fr;
    }

    #summary-history {
        height: 4;
        margin: 1 0;
    }

    #summary-title, #stats-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    TITLE = "Typing Tutor"

    def on_mount(self) -> None:
        self.push_screen(HomeScreen())


def main() -> None:
    if config.LOG_LEVEL:
        config.STATS_DIR.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            filename=config.LOG_FILE,
            level=config.LOG_LEVEL.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    TypingTutorApp().run()


if __name__ == "__main__":
    main()
