import random

import pytest
import requests

import wikipedia
from words import WORD_POOL, generate_text, normalize_text


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"status {self.status}")

    def json(self):
        return self.payload


def article_payload(extract, title="Typing"):
    return {
        "title": title,
        "extract": extract,
        "content_urls": {"desktop": {"page": "https://en.wikipedia.org/wiki/Typing"}},
    }


class TestWords:
    def test_generate_text_shape(self):
        text = generate_text(50, rng=random.Random(7))
        words = text.split(" ")
        assert len(words) == 50
        assert all(word in WORD_POOL for word in words)
        assert "  " not in text
        assert not text.startswith(" ") and not text.endswith(" ")

    def test_generate_text_is_reproducible(self):
        assert generate_text(20, rng=random.Random(1)) == generate_text(20, rng=random.Random(1))

    def test_normalize_text(self):
        assert normalize_text("  two\n words\there  ") == "two words here"


class TestFetchRandomArticle:
    def test_cleans_and_returns_article(self, monkeypatch):
        extract = "Typing[1] is the  process of writing text. " * 10
        monkeypatch.setattr(
            wikipedia.requests, "get", lambda *a, **kw: FakeResponse(article_payload(extract))
        )

        article = wikipedia.fetch_random_article(min_chars=100, max_chars=200)

        assert article.title == "Typing"
        assert "[1]" not in article.text
        assert "  " not in article.text
        assert len(article.text) <= 200
        assert not article.text.endswith(" ")
        # trimmed on a word boundary
        assert article.text.split(" ")[-1] in wikipedia._clean_text(extract).split(" ")

    def test_skips_non_ascii(self, monkeypatch):
        payloads = iter([
            article_payload("Café culture " * 40),
            article_payload("plain ascii words " * 40),
        ])
        monkeypatch.setattr(wikipedia.requests, "get", lambda *a, **kw: FakeResponse(next(payloads)))

        article = wikipedia.fetch_random_article(min_chars=100, tries=2)
        assert article.text.startswith("plain ascii words")

    def test_retries_after_network_error(self, monkeypatch):
        calls = []

        def fake_get(*args, **kwargs):
            calls.append(1)
            if len(calls) == 1:
                raise requests.ConnectionError("offline")
            return FakeResponse(article_payload("fine text " * 50))

        monkeypatch.setattr(wikipedia.requests, "get", fake_get)

        article = wikipedia.fetch_random_article(min_chars=100, tries=3)
        assert len(calls) == 2
        assert article.text.startswith("fine text")

    @pytest.mark.parametrize("status", [404, 500])
    def test_fallback_when_nothing_usable(self, monkeypatch, status):
        monkeypatch.setattr(
            wikipedia.requests, "get", lambda *a, **kw: FakeResponse({}, status=status)
        )

        article = wikipedia.fetch_random_article(tries=2)
        assert article.text == wikipedia.FALLBACK_TEXT
        assert article.extract_len == 0

    def test_short_article_used_as_last_resort(self, monkeypatch):
        monkeypatch.setattr(
            wikipedia.requests, "get", lambda *a, **kw: FakeResponse(article_payload("too short"))
        )

        article = wikipedia.fetch_random_article(min_chars=100, tries=2)
        assert article.text == "too short"
