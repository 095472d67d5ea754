"""
Fuzzy search — approximate text matching across weighted store fields.

How a field value is scored (0 = perfect, 1 = worst):
    - The query appears verbatim (case-insensitive): a score below EXACT_BAND,
      closer to 0 the more of the value the query covers.
    - Otherwise the query is compared with every run of words in the value
      that has as many words as the query, using difflib's SequenceMatcher.
      The best ratio must reach 1 - threshold; the score then lands in
      [EXACT_BAND, 1], so a fuzzy hit never beats a verbatim one.

Field weights scale how much a good score counts: a perfect hit in the name
scores 0, the same hit in the category scores 0.75. A store's score is its best
weighted field score; results are ranked best first, ties in dataset order.
"""

import re
import threading
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Callable, Optional

from appstores.config import SEARCH_THRESHOLD, SEARCH_MIN_QUERY_LENGTH
from appstores.models import DirectoryEntry, DirectoryEntrySummary
from appstores.projection import to_summary


EXACT_BAND = 0.2
MIN_MATCH_CHARS = 2

_TOKEN_RE = re.compile(r"\w+")
_SPACES_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class SearchField:
    key: str
    weight: float
    values: Callable          # entry -> list of strings


SEARCH_FIELDS = (
    SearchField("name", 2.0, lambda e: [e.name]),
    SearchField("tagline", 1.5, lambda e: [e.tagline]),
    SearchField("description", 1.0, lambda e: [e.description]),
    SearchField("company.name", 1.0, lambda e: [e.company.name]),
    SearchField("category", 0.5, lambda e: [e.category.value]),
    SearchField("platforms", 0.5, lambda e: [p.value for p in e.platforms]),
)


@dataclass(frozen=True)
class SearchMatch:
    """Which part of which field justified a hit. Spans are (start, end), end exclusive."""
    key: str
    value: str
    indices: tuple


@dataclass(frozen=True)
class SearchResult:
    entry: DirectoryEntry
    score: float
    matches: tuple

    @property
    def summary(self) -> DirectoryEntrySummary:
        return to_summary(self.entry)


def normalize_query(query: str) -> str:
    return _SPACES_RE.sub(" ", query or "").strip().lower()


def _lower_with_offsets(value: str) -> tuple[str, Optional[list]]:
    """
    Lowercase a value for matching.

    A few characters change length when lowercased ("İ" becomes two), so in
    that case also return, for every lowered character, the index of the
    character it came from. None means positions line up one to one.
    """
    text = value.lower()
    if len(text) == len(value):
        return text, None
    chars, offsets = [], []
    for i, ch in enumerate(value):
        lowered = ch.lower()
        chars.append(lowered)
        offsets.extend([i] * len(lowered))
    return "".join(chars), offsets


def _to_original(spans, offsets: Optional[list]) -> tuple:
    if offsets is None:
        return tuple(spans)
    return tuple((offsets[start], offsets[end - 1] + 1) for start, end in spans)


def _occurrences(text: str, needle: str) -> list[tuple[int, int]]:
    spans = []
    start = text.find(needle)
    while start != -1:
        spans.append((start, start + len(needle)))
        start = text.find(needle, start + len(needle))
    return spans


def match_value(query: str, value: str, threshold: float = SEARCH_THRESHOLD,
                tokens: Optional[list] = None) -> Optional[tuple[float, tuple]]:
    """
    Score one field value against a normalized query.

    Returns:
        (score, spans) for a hit, None otherwise. Spans index into `value`
        itself, so they can be used to highlight the original text.
    """
    text, offsets = _lower_with_offsets(value)
    if not text or not query:
        return None

    spans = _occurrences(text, query)
    if spans:
        return EXACT_BAND * (1 - len(query) / len(text)), _to_original(spans, offsets)

    if tokens is None:
        tokens = [(m.start(), m.end()) for m in _TOKEN_RE.finditer(text)]
    width = max(1, len(_TOKEN_RE.findall(query)))
    if len(tokens) < width:
        windows = [(0, len(text))]
    else:
        windows = [(tokens[i][0], tokens[i + width - 1][1]) for i in range(len(tokens) - width + 1)]

    best_ratio, best_start, best_matcher = 0.0, 0, None
    for start, end in windows:
        matcher = SequenceMatcher(None, query, text[start:end])
        # quick_ratio is an upper bound, so skip windows that cannot win
        if matcher.quick_ratio() <= best_ratio:
            continue
        ratio = matcher.ratio()
        if ratio > best_ratio:
            best_ratio, best_start, best_matcher = ratio, start, matcher

    if best_matcher is None or best_ratio < 1 - threshold:
        return None

    spans = [
        (best_start + block.b, best_start + block.b + block.size)
        for block in best_matcher.get_matching_blocks()
        if block.size >= MIN_MATCH_CHARS
    ]
    return EXACT_BAND + (1 - EXACT_BAND) * (1 - best_ratio), _to_original(spans, offsets)


class SearchIndex:
    """Field values of a fixed set of entries, prepared once for repeated queries."""

    def __init__(self, entries, threshold: float = SEARCH_THRESHOLD,
                 min_query_length: int = SEARCH_MIN_QUERY_LENGTH):
        self.threshold = threshold
        self.min_query_length = min_query_length
        self._max_weight = max(f.weight for f in SEARCH_FIELDS)
        self._entries = tuple(entries)
        self._documents = []
        for entry in self._entries:
            doc = []
            for search_field in SEARCH_FIELDS:
                for value in search_field.values(entry):
                    if not value:
                        continue
                    lowered, _ = _lower_with_offsets(value)
                    tokens = [(m.start(), m.end()) for m in _TOKEN_RE.finditer(lowered)]
                    doc.append((search_field, value, tokens))
            self._documents.append(doc)

    def __len__(self) -> int:
        return len(self._entries)

    def _weighted(self, score: float, weight: float) -> float:
        return 1 - (1 - score) * (weight / self._max_weight)

    def search(self, query: str) -> list[SearchResult]:
        """
        Return matching entries, best first.
        Queries shorter than the minimum length (after trimming) return nothing.
        """
        normalized = normalize_query(query)
        if len(normalized) < self.min_query_length:
            return []

        ranked = []
        for position, (entry, doc) in enumerate(zip(self._entries, self._documents)):
            best = None
            matches = []
            for search_field, value, tokens in doc:
                hit = match_value(normalized, value, self.threshold, tokens)
                if hit is None:
                    continue
                score, spans = hit
                matches.append(SearchMatch(key=search_field.key, value=value, indices=spans))
                weighted = self._weighted(score, search_field.weight)
                if best is None or weighted < best:
                    best = weighted
            if matches:
                ranked.append((best, position, SearchResult(entry=entry, score=best, matches=tuple(matches))))

        ranked.sort(key=lambda item: (item[0], item[1]))
        return [result for _, _, result in ranked]


class SearchEngine:
    """
    Owns the search index for one catalog.

    The index is built on the first query and reused afterwards. `reset()`
    throws it away (optionally switching to a new catalog); the next query
    rebuilds it. Construction is serialized, so concurrent first queries build
    the index once.
    """

    def __init__(self, catalog, threshold: float = SEARCH_THRESHOLD,
                 min_query_length: int = SEARCH_MIN_QUERY_LENGTH):
        self._catalog = catalog
        self.threshold = threshold
        self.min_query_length = min_query_length
        self._index: Optional[SearchIndex] = None
        self._lock = threading.Lock()

    @property
    def is_built(self) -> bool:
        return self._index is not None

    def get_index(self) -> SearchIndex:
        index = self._index
        if index is None:
            with self._lock:
                if self._index is None:
                    self._index = SearchIndex(self._catalog.get_all(), self.threshold, self.min_query_length)
                index = self._index
        return index

    def reset(self, catalog=None) -> None:
        with self._lock:
            if catalog is not None:
                self._catalog = catalog
            self._index = None

    def search(self, query: str) -> list[SearchResult]:
        normalized = normalize_query(query)
        if len(normalized) < self.min_query_length:
            return []
        return self.get_index().search(normalized)

    def suggestions(self, query: str, limit: int = 5) -> list[str]:
        """Store names for a search-as-you-type dropdown."""
        return [r.entry.name for r in self.search(query)[:limit]]
