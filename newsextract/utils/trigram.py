"""Fuzzy trigram containment scoring against a fixed vocabulary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from cachetools import LRUCache, cached

# Inclusive floor for a token to be reported at all.
MIN_SIMILARITY_PCT = 49


@dataclass(frozen=True)
class TrigramMatch:
    token: str
    matches: int
    similarity: int


def iter_trigrams(text: str) -> Iterator[str]:
    """Yield the padded, upper-cased trigrams of every word in ``text``."""
    for word in text.split():
        padded = f"  {word}  ".upper()
        for start in range(len(padded) - 2):
            yield padded[start : start + 3]


class TrigramIndex:
    """Read-only mapping of trigram -> vocabulary token indices.

    Instances are never mutated after construction, so a single index can be
    shared by any number of extraction calls.
    """

    def __init__(self, vocabulary: Iterable[str] = ()) -> None:
        tokens: list[str] = []
        seen: set[str] = set()
        trigram_counts: list[int] = []
        index: dict[str, set[int]] = {}

        for token in vocabulary:
            if not token or not token.strip():
                continue
            key = token.strip().upper()
            if key in seen:
                continue
            seen.add(key)
            tokens.append(token.strip())
            token_index = len(tokens) - 1
            count = 0
            for trigram in iter_trigrams(key):
                index.setdefault(trigram, set()).add(token_index)
                count += 1
            trigram_counts.append(count)

        self._tokens: tuple[str, ...] = tuple(tokens)
        self._trigram_counts: tuple[int, ...] = tuple(trigram_counts)
        self._index: dict[str, frozenset[int]] = {
            trigram: frozenset(ids) for trigram, ids in index.items()
        }

    @classmethod
    def build(cls, vocabulary: Iterable[str]) -> "TrigramIndex":
        return cls(vocabulary)

    @property
    def tokens(self) -> tuple[str, ...]:
        return self._tokens

    def token_ids_for(self, trigram: str) -> frozenset[int]:
        return self._index.get(trigram.upper(), frozenset())

    def trigram_total(self, token_index: int) -> int:
        return self._trigram_counts[token_index]

    def __contains__(self, trigram: str) -> bool:
        return trigram.upper() in self._index

    def __len__(self) -> int:
        return len(self._tokens)

    def score(self, candidate: str | None) -> list[TrigramMatch]:
        """Score ``candidate`` against every vocabulary token.

        Only tokens at or above ``MIN_SIMILARITY_PCT`` are returned, ordered
        by raw match count (highest first, vocabulary order on ties).
        """
        if not candidate or not candidate.strip():
            return []

        word_matches = [0] * len(self._tokens)
        for trigram in iter_trigrams(candidate):
            for token_index in self._index.get(trigram, ()):
                word_matches[token_index] += 1

        results: list[TrigramMatch] = []
        for token_index, token in enumerate(self._tokens):
            total = self._trigram_counts[token_index]
            if not total:
                continue
            percentage = word_matches[token_index] / total * 100
            if percentage >= MIN_SIMILARITY_PCT:
                results.append(
                    TrigramMatch(
                        token=token,
                        matches=word_matches[token_index],
                        similarity=int(percentage + 0.5),
                    )
                )
        results.sort(key=lambda match: match.matches, reverse=True)
        return results

    def best_similarity(self, candidate: str | None) -> int:
        """Similarity of the top-ranked match, ``0`` when nothing matches."""
        results = self.score(candidate)
        return results[0].similarity if results else 0


@cached(cache=LRUCache(maxsize=64))
def _cached_index(vocabulary: tuple[str, ...]) -> TrigramIndex:
    return TrigramIndex(vocabulary)


def build_index(vocabulary: Sequence[str]) -> TrigramIndex:
    """Return a shared index for ``vocabulary``, building it at most once."""
    return _cached_index(tuple(vocabulary))


__all__ = [
    "MIN_SIMILARITY_PCT",
    "TrigramIndex",
    "TrigramMatch",
    "build_index",
    "iter_trigrams",
]
