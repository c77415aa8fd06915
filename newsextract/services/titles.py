from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from newsextract.services.document import jsonld_value, meta_content, select_text
from newsextract.services.strategies import FieldStrategy, resolve_field

UNTITLED = "Untitled"
MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 300
_TITLE_SEPARATORS = re.compile(r"[|\-\u2013\u2014]")


def _title_from_og(soup: Any) -> Optional[str]:
    return meta_content(soup, 'meta[property="og:title"]')


def _title_from_twitter(soup: Any) -> Optional[str]:
    return meta_content(soup, 'meta[name="twitter:title"]', 'meta[property="twitter:title"]')


def _title_from_jsonld(soup: Any) -> Optional[str]:
    value = jsonld_value(soup, "headline", "name", "title")
    return value.strip() if isinstance(value, str) else None


def _title_from_heading_classes(soup: Any) -> Optional[str]:
    return select_text(soup, "h1.title, h1.article-title, h1.post-title, h1.entry-title")


def _title_from_article_heading(soup: Any) -> Optional[str]:
    return select_text(soup, "article h1, .article-header h1, .post-header h1")


def _title_from_first_h1(soup: Any) -> Optional[str]:
    for heading in soup.find_all("h1"):
        text = heading.get_text(" ", strip=True)
        if 10 < len(text) < 200:
            return text
    return None


def _title_from_document_title(soup: Any) -> Optional[str]:
    node = soup.find("title")
    if node is None:
        return None
    text = node.get_text(" ", strip=True)
    if not text:
        return None
    return _TITLE_SEPARATORS.split(text)[0].strip()


def _title_from_title_classes(soup: Any) -> Optional[str]:
    return select_text(soup, ".title, .article-title, .post-title, .page-title")


def _title_from_any_heading(soup: Any) -> Optional[str]:
    return select_text(soup, "h1, h2, h3")


TITLE_STRATEGIES: tuple[FieldStrategy, ...] = (
    FieldStrategy("og_title", _title_from_og),
    FieldStrategy("twitter_title", _title_from_twitter),
    FieldStrategy("jsonld_headline", _title_from_jsonld),
    FieldStrategy("heading_classes", _title_from_heading_classes),
    FieldStrategy("article_heading", _title_from_article_heading),
    FieldStrategy("first_h1", _title_from_first_h1),
    FieldStrategy("document_title", _title_from_document_title),
    FieldStrategy("title_classes", _title_from_title_classes),
    FieldStrategy("any_heading", _title_from_any_heading),
)


def is_valid_title(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return MIN_TITLE_LENGTH < len(value.strip()) < MAX_TITLE_LENGTH


def is_blocklisted(title: str, blocklist: Iterable[str]) -> bool:
    lowered = title.lower()
    return any(key.lower() in lowered for key in blocklist)


def extract_title(
    soup: Any, blocklist: Iterable[str] = (), *, url: Optional[str] = None
) -> Optional[str]:
    """Resolve the page title.

    Returns ``"Untitled"`` when no strategy yields a usable candidate and
    ``None`` when the winning candidate contains a blocklisted phrase.
    """
    title, _ = resolve_field(
        "title", TITLE_STRATEGIES, soup, validate=is_valid_title, url=url
    )
    if title is None:
        return UNTITLED
    title = " ".join(title.split())
    if is_blocklisted(title, blocklist):
        return None
    return title


__all__ = [
    "TITLE_STRATEGIES",
    "UNTITLED",
    "extract_title",
    "is_blocklisted",
    "is_valid_title",
]
