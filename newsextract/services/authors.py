"""Author resolution: metadata first, then trigram classification of the DOM."""

from __future__ import annotations

import re
import string
from typing import Any, Iterable, Optional

import structlog

from newsextract.services.document import (
    clone_document,
    decompose_all,
    jsonld_value,
    meta_content,
)
from newsextract.services.strategies import FieldStrategy, resolve_field
from newsextract.services.variables import (
    ENGLISH_STOP_WORDS,
    FULL_MONTH_NAMES,
    INVALID_AUTHOR_WORDS,
    SHORT_MONTH_NAMES,
    STOP_WORDS_BY_LANGUAGE,
    AuthorVariables,
)
from newsextract.utils.trigram import TrigramIndex, build_index

logger = structlog.get_logger(__name__)

MAX_ATTRIBUTE_LENGTH = 20
MAX_LIST_ATTRIBUTE_LENGTH = 25
MIN_AUTHOR_LENGTH = 2
MAX_AUTHOR_LENGTH = 100

_BY_PREFIX = re.compile(r"^(?:by\s+|author:\s*)", re.IGNORECASE)
_NAME_SEPARATORS = re.compile(r"\s*(?:,|;|&|\band\b)\s*", re.IGNORECASE)
# Letters in any script plus name punctuation; digits and underscores go.
_NON_NAME_CHARS = re.compile(r"[^\w.'-]|[\d_]")
_AUTHOR_WALL_CLASSES = re.compile(
    r"auth-wall|author-description|author-url|timestamp-entry|author-bio"
)
_DROPPED_NAME_WORDS = frozenset(FULL_MONTH_NAMES + SHORT_MONTH_NAMES + INVALID_AUTHOR_WORDS)
_STRUCTURAL_TAGS = frozenset({"html", "head", "body"})


class AuthorContext:
    """Inputs shared by every author strategy for one extraction call."""

    def __init__(
        self,
        document: Any,
        *,
        variables: Optional[AuthorVariables] = None,
        noise_threshold: int = 70,
        author_threshold: int = 60,
        language: str = "en",
    ) -> None:
        self.document = document
        self.variables = variables or AuthorVariables()
        self.noise_threshold = noise_threshold
        self.author_threshold = author_threshold
        self.stop_words = ENGLISH_STOP_WORDS | STOP_WORDS_BY_LANGUAGE.get(
            language, frozenset()
        )
        self.noise_index: TrigramIndex = build_index(self.variables.noise_keys)
        self.author_index: TrigramIndex = build_index(self.variables.author_keys)


def normalise_author(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    cleaned = " ".join(value.split())
    cleaned = _BY_PREFIX.sub("", cleaned).strip().lstrip("@")
    if cleaned.lower().startswith(("http://", "https://")):
        return None
    if not MIN_AUTHOR_LENGTH <= len(cleaned) < MAX_AUTHOR_LENGTH:
        return None
    return cleaned


def split_author_names(value: str) -> list[str]:
    names = []
    for part in _NAME_SEPARATORS.split(value):
        name = normalise_author(part)
        if name:
            names.append(name)
    return names


def _jsonld_author_names(payload: Any) -> list[str]:
    if isinstance(payload, str):
        return [payload]
    if isinstance(payload, dict):
        name = payload.get("name")
        return [name] if isinstance(name, str) else []
    if isinstance(payload, list):
        names: list[str] = []
        for item in payload:
            names.extend(_jsonld_author_names(item))
        return names
    return []


def _authors_from_meta(ctx: AuthorContext) -> Optional[str]:
    return meta_content(
        ctx.document,
        'meta[name="author"]',
        'meta[property="article:author"]',
        'meta[name="twitter:creator"]',
    )


def _authors_from_jsonld(ctx: AuthorContext) -> Optional[str]:
    names = _jsonld_author_names(jsonld_value(ctx.document, "author"))
    return ", ".join(name for name in names if name.strip()) or None


def _authors_from_rel(ctx: AuthorContext) -> Optional[str]:
    node = ctx.document.select_one('[rel~="author"]')
    return node.get_text(" ", strip=True) if node is not None else None


def _authors_from_classes(ctx: AuthorContext) -> Optional[str]:
    for selector in (
        ".author, .byline, .article-author, .post-author",
        '[class*="author"], [class*="byline"]',
    ):
        node = ctx.document.select_one(selector)
        if node is None:
            continue
        text = node.get_text(" ", strip=True)
        if text:
            return text
    return None


def _attribute_matches(value: Any, keys: Iterable[str], index: TrigramIndex, threshold: int) -> bool:
    values = value if isinstance(value, (list, tuple)) else [value]
    for item in values:
        if not isinstance(item, str) or not item:
            continue
        if item in keys or index.best_similarity(item) >= threshold:
            return True
    return False


def _strip_noise_tags(soup: Any, ctx: AuthorContext) -> None:
    keys = ctx.variables.noise_keys
    for tag in soup.find_all(True):
        if getattr(tag, "decomposed", False) or tag.name in _STRUCTURAL_TAGS:
            continue
        if any(
            _attribute_matches(value, keys, ctx.noise_index, ctx.noise_threshold)
            for value in tag.attrs.values()
        ):
            tag.decompose()

    decompose_all(soup.find_all(list(ctx.variables.tags_for_decompose)))
    decompose_all(soup.find_all("div", class_=_AUTHOR_WALL_CLASSES))
    decompose_all(soup.find_all("p", class_="author-bio"))


def _is_author_attribute(value: Any, ctx: AuthorContext) -> bool:
    if isinstance(value, (list, tuple)):
        for item in value:
            if not item or len(item) > MAX_LIST_ATTRIBUTE_LENGTH:
                continue
            if ctx.author_index.best_similarity(item) >= ctx.author_threshold:
                return True
        return False
    if not value or not isinstance(value, str) or len(value) > MAX_ATTRIBUTE_LENGTH:
        return False
    return ctx.author_index.best_similarity(value) >= ctx.author_threshold


def _is_punctuation_only(token: str) -> bool:
    return all(char in string.punctuation for char in token)


def _recase(word: str) -> str:
    """Title-case shouted or all-lowercase words; mixed case (``McDonald``) is kept."""
    if not (word.isupper() or word.islower()):
        return word
    return "-".join(part[:1].upper() + part[1:].lower() for part in word.split("-"))


def clean_author_name(text: str, stop_words: frozenset[str] = ENGLISH_STOP_WORDS) -> str:
    """Turn a byline element's text into a bare name."""
    tokens = [
        token
        for token in text.replace("\n", " ").split()
        if token.lower() not in stop_words and not _is_punctuation_only(token)
    ]
    words = " ".join(_NON_NAME_CHARS.sub(" ", token) for token in tokens).split()
    names = (_recase(word) for word in words if any(char.isalpha() for char in word))
    return " ".join(name for name in names if name not in _DROPPED_NAME_WORDS)


def _authors_from_fuzzy_attributes(ctx: AuthorContext) -> Optional[str]:
    soup = clone_document(ctx.document)
    _strip_noise_tags(soup, ctx)
    for tag_name in ctx.variables.author_tags:
        for block in soup.find_all(tag_name):
            if not any(_is_author_attribute(value, ctx) for value in block.attrs.values()):
                continue
            text = block.get_text(" ").strip()
            if not text:
                continue
            name = clean_author_name(text, ctx.stop_words)
            if name:
                return name
    return None


def _authors_from_meta_block(ctx: AuthorContext) -> Optional[str]:
    container = ctx.document.find("div", class_="meta")
    if container is None:
        return None
    target = container.find("p", class_="author")
    if target is None:
        return None
    target = clone_document(target)
    decompose_all(target.find_all("span"))
    return target.get_text(" ", strip=True) or None


AUTHOR_STRATEGIES: tuple[FieldStrategy, ...] = (
    FieldStrategy("meta_author", _authors_from_meta),
    FieldStrategy("jsonld_author", _authors_from_jsonld),
    FieldStrategy("rel_author", _authors_from_rel),
    FieldStrategy("author_classes", _authors_from_classes),
    FieldStrategy("fuzzy_attributes", _authors_from_fuzzy_attributes),
    FieldStrategy("meta_block", _authors_from_meta_block),
)


def _has_author_names(value: Any) -> bool:
    return isinstance(value, str) and bool(split_author_names(value))


def extract_authors(
    ctx: AuthorContext, *, max_authors: int = 2, url: Optional[str] = None
) -> Optional[list[str]]:
    """Resolved author names (deduplicated, capped) or ``None``."""
    raw, _ = resolve_field(
        "authors", AUTHOR_STRATEGIES, ctx, validate=_has_author_names, url=url
    )
    if raw is None:
        return None

    names: list[str] = []
    seen: set[str] = set()
    for name in split_author_names(raw):
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        names.append(name)
    return names[:max_authors] or None


__all__ = [
    "AUTHOR_STRATEGIES",
    "AuthorContext",
    "clean_author_name",
    "extract_authors",
    "normalise_author",
    "split_author_names",
]
