from __future__ import annotations

from dataclasses import dataclass
import logging
import re

import requests

import config


logger = logging.getLogger(__name__)

WIKI_RANDOM_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/random/summary"
USER_AGENT = "keyflow/0.1 (python requests)"

SAMPLE_TEXT = (
    "The quick brown fox jumps over the lazy dog. This is a sample text for typing "
    "practice. Focus on accuracy first, then speed will follow naturally."
)

# Footnote markers like [1], [note 2], [citation needed].
_FOOTNOTE = re.compile(r"\[(?:\d+|note \d+|[a-z ]+ needed)\]")
_SENTENCE_END = re.compile(r"[.!?](?=\s|$)")


@dataclass
class Passage:
    title: str
    text: str
    source: str
    url: str = ""


def sample_passage() -> Passage:
    return Passage(title="Practice", text=SAMPLE_TEXT, source="sample")


def normalize_extract(extract: str) -> str:
    return " ".join(_FOOTNOTE.sub("", extract).split())


def trim_to_sentence(text: str, max_chars: int) -> str:
    """Cut ``text`` to at most ``max_chars``, preferring a sentence boundary."""
    if len(text) <= max_chars:
        return text
    head = text[:max_chars]
    ends = [m.end() for m in _SENTENCE_END.finditer(head)]
    return head[: ends[-1]] if ends else head.rstrip()


def passage_from_summary(data: dict, max_chars: int = config.WIKI_MAX_CHARS) -> Passage | None:
    text = normalize_extract(data.get("extract") or "")
    if not text or not text.isascii():
        return None
    page_url = data.get("content_urls", {}).get("desktop", {}).get("page", "")
    return Passage(
        title=data.get("title") or "Wikipedia",
        text=trim_to_sentence(text, max_chars),
        source="wikipedia",
        url=page_url,
    )


class WikipediaSource:
    """Random article summaries from the Wikipedia REST API."""

    def __init__(
        self,
        session: requests.Session | None = None,
        min_chars: int = config.WIKI_MIN_CHARS,
        max_chars: int = config.WIKI_MAX_CHARS,
        attempts: int = config.WIKI_TRIES,
        timeout: float = config.WIKI_TIMEOUT,
    ) -> None:
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
        self.min_chars = min_chars
        self.max_chars = max_chars
        self.attempts = attempts
        self.timeout = timeout

    def fetch_summary(self) -> dict:
        response = self.session.get(WIKI_RANDOM_SUMMARY_URL, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def random_passage(self) -> Passage | None:
        """Return the first passage long enough to practise on.

        Falls back to the longest usable candidate when every attempt comes
        back short, and to None when none was usable at all. Network and HTTP
        errors propagate as ``requests.RequestException``.
        """
        best = None
        for _ in range(self.attempts):
            passage = passage_from_summary(self.fetch_summary(), self.max_chars)
            if passage is None:
                continue
            if len(passage.text) >= self.min_chars:
                return passage
            if best is None or len(passage.text) > len(best.text):
                best = passage
        return best


def load_passage(source: str = config.DEFAULT_PASSAGE_SOURCE) -> Passage:
    if source not in config.PASSAGE_SOURCES:
        logger.warning("Unknown passage source %r, using sample passage", source)
        return sample_passage()
    if source == "sample":
        return sample_passage()

    try:
        passage = WikipediaSource().random_passage()
    except requests.RequestException as exc:
        logger.warning("Wikipedia fetch failed, using sample passage: %s", exc)
        return sample_passage()
    if passage is None:
        logger.warning("No usable Wikipedia article found, using sample passage")
        return sample_passage()

    logger.info("Loaded passage %r (%d chars)", passage.title, len(passage.text))
    return passage
