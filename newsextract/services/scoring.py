"""Rank DOM subtrees by how much they look like an article body."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

import structlog

from newsextract.services.variables import CONTENT_KEYWORDS, NOISE_KEYWORDS
from newsextract.utils.text_cleaner import collapse_whitespace

logger = structlog.get_logger(__name__)

CANDIDATE_TAGS = ("div", "section", "article", "main")
MAX_SCORING_CANDIDATES = 2000
PARAGRAPH_WEIGHT = 50
CONTENT_KEYWORD_WEIGHT = 100
NOISE_KEYWORD_WEIGHT = 200
LINK_PENALTY_WEIGHT = 100
LINK_DENSITY_THRESHOLD = 0.3


@dataclass(frozen=True)
class Candidate:
    node: Any
    text: str
    score: float


def _attribute_signature(node: Any) -> str:
    classes = node.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    node_id = node.get("id") or ""
    return " ".join([*classes, node_id]).lower()


def _keyword_hits(signature: str, keywords: Iterable[str]) -> int:
    return sum(1 for keyword in keywords if keyword in signature)


def link_density(node: Any, text: Optional[str] = None) -> float:
    if text is None:
        text = collapse_whitespace(node.get_text(" "))
    links = len(node.find_all("a"))
    return links / max(len(text) / 100, 1)


class ContentScorer:
    def __init__(
        self,
        min_content_length: int = 50,
        max_candidates: int = MAX_SCORING_CANDIDATES,
    ) -> None:
        self.min_content_length = min_content_length
        self.max_candidates = max_candidates

    def score(self, node: Any, text: Optional[str] = None) -> float:
        """Article-likelihood of ``node``; never negative."""
        if text is None:
            text = collapse_whitespace(node.get_text(" "))
        signature = _attribute_signature(node)

        value = float(len(text))
        value += PARAGRAPH_WEIGHT * len(node.find_all("p"))
        value += CONTENT_KEYWORD_WEIGHT * _keyword_hits(signature, CONTENT_KEYWORDS)
        value -= NOISE_KEYWORD_WEIGHT * _keyword_hits(signature, NOISE_KEYWORDS)

        density = link_density(node, text)
        if density > LINK_DENSITY_THRESHOLD:
            value -= LINK_PENALTY_WEIGHT * density
        return max(0.0, value)

    def candidates(self, tree: Any) -> list[Any]:
        """Block-level containers in document order, capped at ``max_candidates``."""
        if tree is None:
            return []
        nodes = tree.find_all(list(CANDIDATE_TAGS), limit=self.max_candidates)
        if len(nodes) >= self.max_candidates:
            # structlog treats the first positional argument as the ``event`` field; keep it keyword-only.
            logger.debug(
                event="scoring_candidates_capped",
                operation="scorer.candidates",
                limit=self.max_candidates,
            )
        return nodes

    def rank(self, nodes: Iterable[Any]) -> list[Candidate]:
        ranked: list[Candidate] = []
        for node in nodes:
            text = collapse_whitespace(node.get_text(" "))
            if len(text) < self.min_content_length:
                continue
            ranked.append(Candidate(node=node, text=text, score=self.score(node, text)))
        return ranked

    def select_best(self, nodes: Iterable[Any]) -> Optional[Any]:
        """Highest-scoring node long enough to count; earliest wins ties.

        Returns ``None`` when no candidate clears ``min_content_length``.
        """
        best: Optional[Candidate] = None
        for candidate in self.rank(nodes):
            if best is None or candidate.score > best.score:
                best = candidate
        return best.node if best else None

    def is_noise_region(self, node: Any) -> bool:
        signature = _attribute_signature(node)
        if not signature.strip():
            return False
        noise_hits = _keyword_hits(signature, NOISE_KEYWORDS)
        content_hits = _keyword_hits(signature, CONTENT_KEYWORDS)
        if noise_hits <= content_hits:
            return False
        return self.score(node) == 0


__all__ = [
    "CANDIDATE_TAGS",
    "Candidate",
    "ContentScorer",
    "MAX_SCORING_CANDIDATES",
    "link_density",
]
