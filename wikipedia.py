from __future__ import annotations

from dataclasses import dataclass
import logging
import re

import requests

from words import normalize_text


log = logging.getLogger(__name__)

WIKI_RANDOM_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/random/summary"

FALLBACK_TEXT = "Unable to load content. Please try again."


@dataclass
class Article:
    title: str
    url: str
    text: str
    extract_len: int


def _clean_text(text: str) -> str:
    text = re.sub(r"\[\d+\]", "", text)
    return normalize_text(text)


def _is_ascii(text: str) -> bool:
    try:
        text.encode("ascii")
        return True
    except UnicodeEncodeError:
        return False


def _trim_to_word(text: str, max_chars: int) -> str:
    """Cut at max_chars without leaving half a word or a trailing space."""
    if len(text) <= max_chars:
        return text
    cut = text[:max_chars]
    if text[max_chars] != " " and " " in cut:
        cut = cut[: cut.rfind(" ")]
    return cut.rstrip()


def fetch_random_article(
    min_chars: int = 300,
    max_chars: int = 900,
    tries: int = 5,
    timeout: float = 8,
) -> Article:
    last_article = None
    for attempt in range(1, tries + 1):
        try:
            response = requests.get(
                WIKI_RANDOM_SUMMARY_URL,
                timeout=timeout,
                allow_redirects=True,
                headers={
                    "User-Agent": "typing-tutor/0.2 (python requests)",
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            log.warning("Wikipedia fetch failed (attempt %d/%d): %s", attempt, tries, exc)
            continue

        text = _clean_text(data.get("extract") or "")
        title = data.get("title") or "Unknown Title"
        url = (
            data.get("content_urls", {})
            .get("desktop", {})
            .get("page", "https://en.wikipedia.org")
        )

        if not text or not _is_ascii(text):
            continue

        text = _trim_to_word(text, max_chars)
        last_article = Article(title=title, url=url, text=text, extract_len=len(text))

        if len(text) >= min_chars:
            log.info("Fetched article %r (%d chars)", title, len(text))
            return last_article

    if last_article is None:
        log.warning("No usable article after %d attempts, using fallback text", tries)
        return Article(
            title="Wikipedia",
            url="https://en.wikipedia.org",
            text=FALLBACK_TEXT,
            extract_len=0,
        )

    return last_article
