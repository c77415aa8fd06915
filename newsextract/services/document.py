"""Document-tree helpers shared by the extractor and the generic parser."""

from __future__ import annotations

import base64
import binascii
import copy
import json
import re
from typing import Any, Iterable, Iterator, Optional

import structlog

try:
    from bs4 import BeautifulSoup
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    BeautifulSoup = None  # type: ignore[assignment]

from newsextract.services.exceptions import InvalidInputError

logger = structlog.get_logger(__name__)

_BASE64_SHAPE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")
BASE64_MIN_LENGTH = 100


def decode_source(source: str) -> str:
    """Decode a base64-encoded page source; anything else passes through."""
    candidate = source.strip()
    if len(candidate) <= BASE64_MIN_LENGTH or not _BASE64_SHAPE.match(candidate):
        return source
    try:
        return base64.b64decode(candidate, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        # structlog treats the first positional argument as the ``event`` field; keep it keyword-only.
        logger.debug(
            event="source_decode_skipped",
            operation="document.decode",
            error_type=exc.__class__.__name__,
        )
        return source


def initialise_soup(html: str) -> Optional["BeautifulSoup"]:
    if BeautifulSoup is None:
        return None
    try:
        return BeautifulSoup(html, "lxml")  # type: ignore[call-arg]
    except Exception:  # pragma: no cover - fallback parser
        try:
            return BeautifulSoup(html, "html.parser")  # type: ignore[call-arg]
        except Exception:  # pragma: no cover - unexpected HTML edge case
            return None


def parse_html(html: Optional[str]) -> "BeautifulSoup":
    """Parse raw (or base64-encoded) HTML into a document tree."""
    if not html or not html.strip():
        raise InvalidInputError("No page source passed.")
    soup = initialise_soup(decode_source(html))
    if soup is None:
        raise InvalidInputError("Page source could not be parsed.")
    return soup


def clone_document(document: Any) -> Any:
    """Deep copy of ``document``; callers mutate the copy, never the original."""
    return copy.copy(document)


def decompose_all(nodes: Iterable[Any]) -> int:
    """Decompose every node not already removed with an ancestor; return the count."""
    removed = 0
    for node in nodes:
        if getattr(node, "decomposed", False):
            continue
        node.decompose()
        removed += 1
    return removed


def meta_content(soup: Any, *selectors: str) -> Optional[str]:
    """Stripped ``content`` of the first matching meta tag that has one."""
    for selector in selectors:
        for tag in soup.select(selector):
            value = (tag.get("content") or "").strip()
            if value:
                return value
    return None


def select_text(soup: Any, selector: str) -> Optional[str]:
    node = soup.select_one(selector)
    if node is None:
        return None
    text = node.get_text(" ", strip=True)
    return text or None


def _flatten_jsonld(payload: Any) -> Iterator[dict]:
    if isinstance(payload, list):
        for item in payload:
            yield from _flatten_jsonld(item)
    elif isinstance(payload, dict):
        yield payload
        graph = payload.get("@graph")
        if graph:
            yield from _flatten_jsonld(graph)


def jsonld_objects(soup: Any) -> Iterator[dict]:
    """Every JSON-LD object on the page, ``@graph`` members included."""
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            payload = json.loads(raw)
        except ValueError:
            continue
        yield from _flatten_jsonld(payload)


def jsonld_value(soup: Any, *keys: str) -> Any:
    """First non-empty value for any of ``keys`` across JSON-LD objects."""
    for item in jsonld_objects(soup):
        for key in keys:
            value = item.get(key)
            if value:
                return value
    return None


__all__ = [
    "clone_document",
    "decode_source",
    "decompose_all",
    "initialise_soup",
    "jsonld_objects",
    "jsonld_value",
    "meta_content",
    "parse_html",
    "select_text",
]
