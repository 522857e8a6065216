from __future__ import annotations

from typing import Callable
import time

import config
from metrics import _round_half_up, compute_metrics


class ActiveTimeTracker:
    """Measures time spent actively typing.

    Gaps between consecutive keystrokes longer than ``afk_threshold``
    seconds are treated as idle and left out of the total.
    """

    DEBOUNCE_S = 0.01
    MIN_ACTIVE_S = 0.5

    def __init__(self, afk_threshold: float = config.AFK_THRESHOLD_S) -> None:
        self.afk_threshold = afk_threshold
        self._timestamps: list[float] = []

    def record(self, at: float) -> None:
        if self._timestamps and at - self._timestamps[-1] < self.DEBOUNCE_S:
            return
        self._timestamps.append(at)

    def keystroke_count(self) -> int:
        return len(self._timestamps)

    def active_seconds(self) -> float:
        if not self._timestamps:
            return 0.0
        if len(self._timestamps) == 1:
            return self.MIN_ACTIVE_S

        active = 0.0
        for prev, cur in zip(self._timestamps, self._timestamps[1:]):
            gap = cur - prev
            if gap <= self.afk_threshold:
                active += gap
        return max(self.MIN_ACTIVE_S, _round_half_up(active * 10) / 10)

    def reset(self) -> None:
        self._timestamps.clear()


class TypingSession:
    """One timed typing-test attempt.

    Keeps the typed text and keystroke counters the scoring functions in
    ``metrics`` need, and freezes the final result when time runs out.
    """

    def __init__(
        self,
        text: str,
        duration: int = config.DEFAULT_DURATION,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration!r}")
        self.text = text
        self.duration = duration
        self.clock = clock
        self.active_time = ActiveTimeTracker()
        self.reset()

    def reset(self, text: str | None = None) -> None:
        if text is not None:
            self.text = text
        self.typed = ""
        self.mistakes: set[int] = set()
        self.total_keystrokes = 0
        self.correct_keystrokes = 0
        self.start_time: float | None = None
        self.last_typed_at: float | None = None
        self.finished = False
        self.afk = False
        self.wpm_history: list[tuple[int, float]] = []
        self.final_metrics: dict | None = None
        self.active_time.reset()

    @property
    def started(self) -> bool:
        return self.start_time is not None

    @property
    def saveable(self) -> bool:
        return self.finished and self.started and not self.afk

    def press(self, key: str) -> bool:
        """Type one character. Returns False when the key was ignored."""
        if self.finished or len(key) != 1:
            return False

        if key == " " and (not self.typed or self.typed.endswith(" ")):
            return False
        if len(self.typed) >= len(self.text):
            return False

        correct = key == self.text[len(self.typed)]
        if not correct:
            self.mistakes.add(len(self.typed))

        self.total_keystrokes += 1
        if correct:
            self.correct_keystrokes += 1
        self.typed += key
        self._touch()

        if len(self.typed) == len(self.text):
            self.finish()
        return True

    def backspace(self) -> bool:
        if self.finished or not self.typed:
            return False

        last = len(self.typed) - 1
        if self.typed[last] == " " and last not in self.mistakes:
            # a correct word stays committed once its space is typed
            word_start = self.typed.rfind(" ", 0, last) + 1
            if not any(i in self.mistakes for i in range(word_start, last)):
                return False

        was_correct = last < len(self.text) and self.typed[last] == self.text[last]
        self.total_keystrokes = max(0, self.total_keystrokes - 1)
        if was_correct:
            self.correct_keystrokes = max(0, self.correct_keystrokes - 1)
        self.mistakes.discard(last)
        self.typed = self.typed[:-1]
        self._touch()
        return True

    def _touch(self) -> None:
        now = self.clock()
        if self.start_time is None:
            self.start_time = now
        self.last_typed_at = now
        self.active_time.record(now)

    def elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        return max(0.0, self.clock() - self.start_time)

    def time_left(self) -> float:
        return min(self.duration, max(0.0, self.duration - self.elapsed()))

    def metrics(self) -> dict:
        if self.final_metrics is not None:
            return self.final_metrics
        return compute_metrics(
            self.start_time,
            self.total_keystrokes,
            self.correct_keystrokes,
            self.typed,
            self.text,
            test_ended=False,
            now=self.clock(),
        )

    def tick(self) -> dict:
        """Advance the attempt's clock-driven state and return current metrics."""
        if self.finished or not self.started:
            return self.metrics()

        now = self.clock()
        if self.last_typed_at is not None and now - self.last_typed_at > config.AFK_TIMEOUT_S:
            self.afk = True

        if self.time_left() <= 0:
            return self.finish()

        current = self.metrics()
        second = int(now - self.start_time)
        if not self.wpm_history or self.wpm_history[-1][0] != second:
            self.wpm_history.append((second, current["wpm"]))
        return current

    def finish(self) -> dict:
        if self.finished:
            return self.metrics()
        now = self.clock()
        if self.start_time is not None:
            # the attempt never runs past its duration
            now = min(now, self.start_time + self.duration)
        self.final_metrics = compute_metrics(
            self.start_time,
            self.total_keystrokes,
            self.correct_keystrokes,
            self.typed,
            self.text,
            test_ended=True,
            now=now,
        )
        self.finished = True
        return self.final_metrics
