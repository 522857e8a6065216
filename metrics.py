from __future__ import annotations

from dataclasses import dataclass
import math
import time


CHARS_PER_WORD = 5


@dataclass(frozen=True)
class WordCredit:
    correct_word_chars: int = 0
    correct_spaces: int = 0

    @property
    def total(self) -> int:
        return self.correct_word_chars + self.correct_spaces


def count_correct_word_chars(typed: str, text: str, test_ended: bool = False) -> WordCredit:
    """Count characters of fully correct words and the spaces after them.

    A non-final word is only credited once the space after it has been typed
    correctly. When ``test_ended`` is set, the word the user stopped in the
    middle of earns credit for its typed prefix if that prefix is exact.
    """
    correct_word_chars = 0
    correct_spaces = 0
    index = 0

    while index < len(text):
        next_space = text.find(" ", index)
        word_end = len(text) if next_space == -1 else next_space

        if len(typed) < word_end:
            if test_ended and len(typed) > index:
                partial = typed[index:]
                if partial == text[index:len(typed)]:
                    correct_word_chars += len(partial)
            break

        word_correct = typed[index:word_end] == text[index:word_end]

        if next_space == -1:
            if word_correct:
                correct_word_chars += word_end - index
            break

        has_typed_space = len(typed) > word_end
        space_correct = has_typed_space and typed[word_end] == " "

        if word_correct and space_correct:
            correct_word_chars += word_end - index
            correct_spaces += 1

        if not has_typed_space:
            break

        index = word_end + 1

    return WordCredit(correct_word_chars, correct_spaces)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_metrics(
    start_time: float | None,
    total_keystrokes: int,
    correct_keystrokes: int,
    typed: str,
    text: str,
    test_ended: bool = False,
    now: float | None = None,
) -> dict:
    if start_time is None:
        return {"wpm": 0, "raw_wpm": 0, "accuracy": 100}

    if now is None:
        now = time.monotonic()
    minutes = (now - start_time) / 60.0

    raw_wpm = round((total_keystrokes / CHARS_PER_WORD) / minutes, 2) if minutes > 0 else 0

    if total_keystrokes > 0:
        accuracy = _round_half_up(correct_keystrokes / total_keystrokes * 100)
    else:
        accuracy = 100

    credit = count_correct_word_chars(typed, text, test_ended)
    wpm = round((credit.total / CHARS_PER_WORD) / minutes, 2) if minutes > 0 else 0

    return {
        "wpm": wpm,
        "raw_wpm": raw_wpm,
        "accuracy": accuracy,
    }
