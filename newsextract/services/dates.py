from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

import structlog
from dateutil import parser as date_parser

from newsextract.services.document import meta_content
from newsextract.services.strategies import FieldStrategy, resolve_field

logger = structlog.get_logger(__name__)

DATE_SCAN_SELECTORS: tuple[str, ...] = (
    'meta[property="article:published_time"]',
    'meta[name="article:published_time"]',
    'meta[property="og:published_time"]',
    'meta[name="date"]',
    'meta[name="pubdate"]',
    'meta[name="publishdate"]',
    "time[datetime]",
    '[class*="date"]',
    '[class*="time"]',
)

# Ordered: year-first, then month-first, then compact.
URL_DATE_PATTERNS: tuple[tuple[re.Pattern[str], tuple[int, int, int]], ...] = (
    (re.compile(r"(?<!\d)(\d{4})[/-](\d{1,2})[/-](\d{1,2})(?!\d)"), (1, 2, 3)),
    (re.compile(r"(?<!\d)(\d{1,2})[/-](\d{1,2})[/-](\d{4})(?!\d)"), (3, 1, 2)),
    (re.compile(r"(?<!\d)((?:19|20)\d{2})(\d{2})(\d{2})(?!\d)"), (1, 2, 3)),
)

_TEXT_DATE = re.compile(
    r"\d{4}-\d{2}-\d{2}(?:[T ][\d:.]+(?:Z|[+-]\d{2}:?\d{2})?)?"
    r"|\d{1,2}/\d{1,2}/\d{4}"
    r"|[A-Z][a-z]{2,8}\.? \d{1,2},? \d{4}"
    r"|\d{1,2} [A-Z][a-z]{2,8}\.? \d{4}"
)
_HAS_YEAR = re.compile(r"(?<!\d)(?:19|20)\d{2}(?!\d)")


def to_iso(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


def parse_date(value: Any) -> Optional[datetime]:
    """Parse ``value`` into a datetime; ``None`` when it is not a full date."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not _HAS_YEAR.search(value):
        return None
    try:
        return date_parser.parse(value.strip())
    except (ValueError, OverflowError, TypeError):
        return None


def _dates_from_structured_metadata(document: Any, signals: Mapping[str, Any]) -> Optional[str]:
    published = parse_date(signals.get("published_time"))
    if published is None:
        published = parse_date(
            meta_content(document, 'meta[property="article:published_time"]')
        )
    return to_iso(published) if published else None


def _dates_from_page_scan(document: Any, signals: Mapping[str, Any]) -> Optional[str]:
    for selector in DATE_SCAN_SELECTORS:
        for element in document.select(selector):
            attribute_value = element.get("content") or element.get("datetime")
            if attribute_value:
                parsed = parse_date(attribute_value)
            else:
                match = _TEXT_DATE.search(element.get_text(" ", strip=True))
                parsed = parse_date(match.group(0)) if match else None
            if parsed is not None:
                return to_iso(parsed)
    return None


DATE_STRATEGIES: tuple[FieldStrategy, ...] = (
    FieldStrategy("structured_metadata", _dates_from_structured_metadata),
    FieldStrategy("page_scan", _dates_from_page_scan),
)


def date_from_url(url: str) -> Optional[str]:
    """ISO date embedded in the URL path, if any pattern yields a real date."""
    for pattern, (year_group, month_group, day_group) in URL_DATE_PATTERNS:
        for match in pattern.finditer(url or ""):
            try:
                found = datetime(
                    int(match.group(year_group)),
                    int(match.group(month_group)),
                    int(match.group(day_group)),
                )
            except ValueError:
                continue
            return found.isoformat()
    return None


def extract_published_date(
    document: Any,
    url: str,
    signals: Optional[Mapping[str, Any]] = None,
) -> Optional[str]:
    """Resolve the publish date.

    A date read from the page is kept unless the URL carries a date on a
    different calendar day, in which case the URL date is returned.
    """
    metadata_date, strategy = resolve_field(
        "published_at", DATE_STRATEGIES, document, signals or {}, url=url
    )
    url_date = date_from_url(url)

    if metadata_date is None:
        return url_date
    if url_date is not None and url_date[:10] != metadata_date[:10]:
        # structlog uses the positional argument for the event name; keep ``event`` keyword-only.
        logger.info(
            event="published_date_conflict",
            operation="extractor.published_at",
            url=url,
            strategy=strategy,
            metadata_date=metadata_date,
            url_date=url_date,
        )
        return url_date
    return metadata_date


__all__ = [
    "DATE_SCAN_SELECTORS",
    "DATE_STRATEGIES",
    "date_from_url",
    "extract_published_date",
    "parse_date",
    "to_iso",
]
