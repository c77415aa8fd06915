"""General-purpose content parser.

Works on any page, article or not: strips navigation, advertising and UI
chrome from a copy of the document, then walks a ladder of content
strategies until one yields enough text. Backs the ``/general-parser``
endpoint and the final content fallback of the article extractor.
"""

from __future__ import annotations

import re
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Optional, Tuple
from urllib.parse import urljoin

import structlog

try:
    from bs4 import Comment, NavigableString
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    Comment = NavigableString = None  # type: ignore[assignment]

from newsextract.services import titles
from newsextract.services.authors import AUTHOR_STRATEGIES, AuthorContext, normalise_author
from newsextract.services.dates import parse_date, to_iso
from newsextract.services.document import (
    clone_document,
    decompose_all,
    jsonld_value,
    meta_content,
    parse_html,
)
from newsextract.services.exceptions import InvalidInputError
from newsextract.services.scoring import ContentScorer
from newsextract.services.strategies import FieldStrategy, resolve_field
from newsextract.utils.text_cleaner import collapse_whitespace

logger = structlog.get_logger(__name__)

WORDS_PER_MINUTE = 200
MAX_METADATA_IMAGES = 5
MAX_METADATA_LINKS = 20
UI_BLOCK_MAX_LENGTH = 50
PARAGRAPH_MIN_LENGTH = 30

REMOVE_TAGS: tuple[str, ...] = (
    "script", "style", "noscript", "iframe", "embed", "object",
    "nav", "header", "aside", "menu", "menuitem",
    "form", "input", "button", "select", "textarea", "label",
    "canvas", "svg", "audio", "video", "source", "track",
    "map", "area", "base", "link", "meta", "title",
)

REMOVE_CLASS_PATTERNS: tuple[str, ...] = (
    "nav", "navigation", "menu", "sidebar", "aside", "header",
    "advertisement", "ads", "ad", "advert", "banner", "promo",
    "social", "share", "sharing", "follow", "subscribe",
    "comment", "comments", "discussion", "reply", "replies",
    "related", "recommended", "trending", "popular", "most-read",
    "newsletter", "signup", "registration",
    "cookie", "gdpr", "privacy", "consent", "modal", "popup", "overlay",
    "breadcrumb", "pagination", "pager", "next", "prev", "previous",
    "widget", "plugin", "embed", "outbrain", "taboola",
    "carousel", "slider", "gallery", "lightbox",
    "search", "filter", "sort", "dropdown",
    "loading", "spinner", "placeholder",
    "error", "warning", "alert", "notice",
    "print", "email", "pdf", "download",
    "tag", "tags", "category", "categories",
    "author-bio", "bio", "profile", "avatar",
    "date", "time", "timestamp", "published",
    "vote", "rating", "star", "like", "dislike",
    "toolbar", "controls", "player-controls",
)

REMOVE_ID_PATTERNS: tuple[str, ...] = (
    "nav", "navigation", "menu", "sidebar", "header",
    "ads", "advertisement", "banner", "promo",
    "social", "share", "comments", "related",
    "newsletter", "signup", "modal", "popup",
    "breadcrumb", "pagination", "search",
    "cookie", "gdpr", "consent",
)

CONTENT_SELECTORS: tuple[str, ...] = (
    "article",
    '[role="main"]',
    "main",
    ".article-content",
    ".post-content",
    ".entry-content",
    ".content",
    ".main-content",
    ".story-content",
    ".article-body",
    ".post-body",
    ".articleBody",
    ".articleContent",
    ".text-content",
    ".body-content",
    ".page-content",
    ".single-content",
    ".blog-content",
    ".news-content",
)

# Stripped from any chosen container before its text or HTML is read.
UNWANTED_SELECTORS: tuple[str, ...] = (
    "script", "style", "nav", "header", "aside",
    ".advertisement", ".ads", ".social", ".share", ".comments",
    ".related", ".recommended", ".newsletter", ".popup",
)

BODY_NOISE_SELECTORS: tuple[str, ...] = (
    "nav", "header", "aside", "form", "script", "style",
    ".nav", ".navigation", ".menu", ".sidebar", ".header",
    ".ads", ".advertisement", ".social", ".share", ".comments",
    ".related", ".recommended", ".newsletter", ".popup", ".modal",
)

FOOTER_NOISE_SELECTORS: tuple[str, ...] = (
    ".social", ".share", ".newsletter", ".signup",
    ".advertisement", ".ads", ".banner", ".promo",
    ".cookie", ".gdpr", ".consent",
    "form", 'input[type="email"]', 'input[type="text"]', 'button[type="submit"]',
)

BLOCK_TAGS: tuple[str, ...] = (
    "p", "div", "section", "article", "main", "header", "footer",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li", "dl", "dt", "dd",
    "blockquote", "pre", "figure", "figcaption",
    "table", "tr", "br", "hr",
)

KEEP_EMPTY_TAGS = frozenset({"img", "br", "hr", "input", "meta", "link"})
_STRUCTURAL_TAGS = frozenset({"html", "head", "body"})
# Containers never removed by class/id pattern matching.
_PROTECTED_TAGS = frozenset({"html", "head", "body", "main", "article"})
_PROTECTED_TOKEN = re.compile(r"content|body|article-text|story-text", re.IGNORECASE)
_POST_CLASS_MARKERS = frozenset({"hentry", "post"})
_POST_CLASS_PREFIXES = ("post-", "type-", "tag-", "category-", "format-", "status-")

_UI_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"^(menu|nav|search|login|sign in|register|subscribe|follow|share|like|comment"
        r"|reply|next|previous|more|less|show|hide|close|open|toggle)$",
        re.IGNORECASE,
    ),
    re.compile(r"^(home|about|contact|privacy|terms|cookies|help|support|faq)$", re.IGNORECASE),
    re.compile(r"^(facebook|twitter|instagram|linkedin|youtube|pinterest|reddit)$", re.IGNORECASE),
    re.compile(r"^\d+$"),
    re.compile(r"^[^\w\s]+$"),
)

_NAVIGATION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(home|about|contact|login|register|search|menu|nav)$", re.IGNORECASE),
    re.compile(r"^(next|previous|more|less|show|hide|toggle)$", re.IGNORECASE),
    re.compile(r"^(share|like|tweet|pin|email)$", re.IGNORECASE),
    re.compile(r"^(subscribe|sign up|newsletter)$", re.IGNORECASE),
    re.compile(r"^\d+$"),
    re.compile(r"^[^\w\s]+$"),
    re.compile(r"^.{1,3}$"),
)

_TEXT_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE | re.MULTILINE)
    for pattern in (
        r"^(?:Advertisement|Sponsored|Promoted)$",
        r"^(?:Share|Like|Tweet|Pin|Email)$",
        r"^(?:Next|Previous|Continue Reading)$",
        r"^(?:Tags?:|Categories?:|Filed Under:).*$",
        r"^(?:Related Articles?|You May Also Like|Recommended).*$",
        r"^\d+\s+(?:shares?|likes?|comments?)$",
        r"^(?:Subscribe|Sign up|Newsletter).*$",
    )
)

_VALUABLE_FOOTER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b"),
    re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
    re.compile(
        r"\b\d+\s+[A-Za-z ]+(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Drive|Dr"
        r"|Lane|Ln|Way|Place|Pl)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:LLC|Inc|Corp|Corporation|Ltd|Limited|Company|Co\.)", re.IGNORECASE),
    re.compile(r"\b(?:Founded|Established|Since)\s+\d{4}\b", re.IGNORECASE),
    re.compile(r"(?:\bCopyright|©)\s*\d{4}", re.IGNORECASE),
    re.compile(r"\b[A-Z][a-z]+,\s*[A-Z]{2}\s+\d{5}\b"),
    re.compile(r"\b(?:Terms of Service|Privacy Policy|Legal Notice|Disclaimer)\b", re.IGNORECASE),
    re.compile(r"\b(?:All rights reserved|Trademark|Patent)\b", re.IGNORECASE),
    re.compile(
        r"\b(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)\b[^\n]*?\d{1,2}:\d{2}",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:Open|Closed|Hours)\b[^\n]*?\d{1,2}:\d{2}", re.IGNORECASE),
    re.compile(r"\b(?:About|Mission|Vision|Values|History|Team|Leadership|Careers|Jobs)\b", re.IGNORECASE),
)
_FOOTER_NAVIGATION_WORDS = re.compile(
    r"\b(?:Home|About|Contact|Services|Products|Blog|News|Help|Support|FAQ|Login"
    r"|Register|Subscribe)\b",
    re.IGNORECASE,
)
_FOOTER_NAVIGATION_ONLY = re.compile(
    r"^(?:Home|About|Contact|Services|Products|Blog|News|Help|Support|FAQ|Login"
    r"|Register|Subscribe|\s|,|•|·|\|)+$",
    re.IGNORECASE,
)

_INVALID_IMAGE_MARKERS = ("icon", "logo", "favicon", "sprite")
_BETWEEN_TAGS = re.compile(r">\s+<")
_WHITESPACE_RUN = re.compile(r"\s{2,}")
_TEXT_DATE = re.compile(r"\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{4}|[A-Za-z]+ \d{1,2}, \d{4}")


def calculate_reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Calculates the estimated reading time in minutes for a given text."""
    num_words = len(text.split())
    return max(1, int(round(num_words / words_per_minute)))


@dataclass(frozen=True)
class GeneralParserOptions:
    remove_images: bool = False
    remove_links: bool = False
    preserve_formatting: bool = True
    min_content_length: int = 50
    include_metadata: bool = True
    clean_html_only: bool = False
    remove_classes: bool = False
    remove_ids: bool = False
    remove_styles: bool = False


@dataclass
class ParsedContent:
    url: Optional[str]
    title: Optional[str]
    content: Optional[str]
    metadata: dict[str, Any] = field(default_factory=dict)
    word_count: int = 0
    reading_time: int = 0
    content_html: Optional[str] = None
    cleaned_html: Optional[str] = None
    cleaned_full_html: Optional[str] = None
    strategy: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


def _pattern_regex(pattern: str) -> re.Pattern[str]:
    return re.compile(rf"(?:^|[-_]){re.escape(pattern)}(?:$|[-_])", re.IGNORECASE)


_CLASS_REGEXES = tuple(_pattern_regex(pattern) for pattern in REMOVE_CLASS_PATTERNS)
_ID_REGEXES = tuple(_pattern_regex(pattern) for pattern in REMOVE_ID_PATTERNS)


def _attribute_tokens(node: Any, attribute: str) -> list[str]:
    value = node.get(attribute)
    if not value:
        return []
    if isinstance(value, str):
        return value.split()
    return [item for item in value if isinstance(item, str)]


def _matches_patterns(tokens: Iterable[str], regexes: Iterable[re.Pattern[str]]) -> bool:
    tokens = list(tokens)
    if not tokens or any(_PROTECTED_TOKEN.search(token) for token in tokens):
        return False
    if _POST_CLASS_MARKERS.intersection(token.lower() for token in tokens):
        # WordPress post_class() taxonomy tokens describe the post itself.
        tokens = [token for token in tokens if not token.lower().startswith(_POST_CLASS_PREFIXES)]
    return any(regex.search(token) for regex in regexes for token in tokens)


def is_likely_navigation(text: str) -> bool:
    stripped = text.strip()
    return any(pattern.search(stripped) for pattern in _NAVIGATION_PATTERNS)


def has_valuable_footer_info(text: str) -> bool:
    """Contact, legal or business information worth keeping in a footer."""
    if any(pattern.search(text) for pattern in _VALUABLE_FOOTER_PATTERNS):
        return True
    words = [word for word in text.split() if len(word) > 2]
    navigation_words = len(_FOOTER_NAVIGATION_WORDS.findall(text))
    return len(words) > 20 and navigation_words < len(words) * 0.3


def _strip_text_noise(text: str) -> str:
    for pattern in _TEXT_NOISE_PATTERNS:
        text = pattern.sub("", text)
    return text


def element_text(node: Any) -> str:
    """Paragraph-separated text of ``node`` with embedded chrome removed."""
    if node is None:
        return ""
    clone = clone_document(node)
    for selector in UNWANTED_SELECTORS:
        decompose_all(clone.select(selector))
    for block in clone.find_all(list(BLOCK_TAGS)):
        block.insert_before("\n")
        block.insert_after("\n")
    lines = (collapse_whitespace(line) for line in clone.get_text().split("\n"))
    text = "\n".join(line for line in lines if line)
    text = _strip_text_noise(text)
    return "\n\n".join(line for line in text.split("\n") if line.strip())


def element_html(node: Any) -> str:
    if node is None:
        return ""
    clone = clone_document(node)
    for selector in UNWANTED_SELECTORS:
        decompose_all(clone.select(selector))
    html = clone.decode_contents()
    html = _BETWEEN_TAGS.sub("><", html)
    return _WHITESPACE_RUN.sub(" ", html).strip()


def _body_of(soup: Any) -> Any:
    return soup.body or soup


# ---------------------------------------------------------------------------
# Content ladder
# ---------------------------------------------------------------------------

ContentCandidate = Tuple[str, Any]


def _content_from_selectors(soup: Any, parser: "GeneralParser") -> Optional[ContentCandidate]:
    for selector in CONTENT_SELECTORS:
        node = soup.select_one(selector)
        if node is None:
            continue
        text = element_text(node)
        if len(text) >= parser.options.min_content_length:
            return text, node
    return None


def _content_from_scored_block(soup: Any, parser: "GeneralParser") -> Optional[ContentCandidate]:
    node = parser.scorer.select_best(parser.scorer.candidates(soup))
    if node is None:
        return None
    text = element_text(node)
    return (text, node) if text else None


def _content_from_text_density(soup: Any, parser: "GeneralParser") -> Optional[ContentCandidate]:
    best_node = None
    best_density = 0.0
    minimum = parser.options.min_content_length
    for node in soup.find_all(["div", "section", "article", "main", "p"], limit=parser.scorer.max_candidates):
        text_length = len(node.get_text())
        if text_length < minimum:
            continue
        markup_length = len(node.decode_contents())
        density = text_length / markup_length if markup_length else 0.0
        if density > best_density:
            best_density = density
            best_node = node
    if best_node is None:
        return None
    text = element_text(best_node)
    return (text, best_node) if text else None


def _content_from_paragraphs(soup: Any, parser: "GeneralParser") -> Optional[ContentCandidate]:
    paragraphs = []
    for paragraph in soup.find_all("p"):
        text = collapse_whitespace(paragraph.get_text(" "))
        if len(text) > PARAGRAPH_MIN_LENGTH and not is_likely_navigation(text):
            paragraphs.append(text)
    combined = "\n\n".join(paragraphs)
    if len(combined) < parser.options.min_content_length:
        return None
    return combined, None


def _content_from_stripped_body(soup: Any, parser: "GeneralParser") -> Optional[ContentCandidate]:
    body = clone_document(_body_of(soup))
    for selector in BODY_NOISE_SELECTORS:
        decompose_all(body.select(selector))
    text = element_text(body)
    if len(text) < parser.options.min_content_length:
        return None
    return text, _body_of(soup)


def _content_from_raw_body(soup: Any, parser: "GeneralParser") -> Optional[ContentCandidate]:
    body = _body_of(soup)
    text = collapse_whitespace(body.get_text(" "))
    return (text, body) if text else None


CONTENT_STRATEGIES: tuple[FieldStrategy, ...] = (
    FieldStrategy("semantic_selectors", _content_from_selectors),
    FieldStrategy("scored_block", _content_from_scored_block),
    FieldStrategy("text_density", _content_from_text_density),
    FieldStrategy("paragraphs", _content_from_paragraphs),
    FieldStrategy("stripped_body", _content_from_stripped_body),
    FieldStrategy("raw_body", _content_from_raw_body),
)


def _has_text(candidate: Any) -> bool:
    return bool(candidate and candidate[0] and candidate[0].strip())


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def resolve_url(value: str, base_url: Optional[str]) -> str:
    if not base_url or value.startswith("http"):
        return value
    return urljoin(base_url, value)


def is_valid_link(href: str) -> bool:
    lowered = href.lower()
    if lowered.startswith(("http://", "https://", "/")):
        return True
    return False


def is_valid_image_url(src: str) -> bool:
    if not src or src.startswith("data:"):
        return False
    lowered = src.lower()
    return not any(marker in lowered for marker in _INVALID_IMAGE_MARKERS)


def _description(soup: Any) -> Optional[str]:
    candidates = (
        meta_content(soup, 'meta[property="og:description"]'),
        meta_content(soup, 'meta[name="description"]'),
        meta_content(soup, 'meta[name="twitter:description"]'),
    )
    for value in candidates:
        if value and len(value) > 10:
            return value
    value = jsonld_value(soup, "description")
    if isinstance(value, str) and len(value.strip()) > 10:
        return value.strip()
    paragraph = soup.select_one("article p, main p, .content p, p")
    if paragraph is not None:
        text = paragraph.get_text(" ", strip=True)
        if 50 < len(text) < 300:
            return text
    return None


def _author(soup: Any) -> Optional[str]:
    ctx = AuthorContext(soup)
    raw, _ = resolve_field(
        "metadata.author",
        AUTHOR_STRATEGIES[:4],
        ctx,
        validate=lambda value: normalise_author(value) is not None,
    )
    return normalise_author(raw) if raw else None


def _publish_date(soup: Any) -> Optional[str]:
    raw = (
        meta_content(
            soup,
            'meta[property="article:published_time"]',
            'meta[name="date"]',
            'meta[name="publish_date"]',
        )
        or _attribute_of(soup, "time[datetime]", "datetime")
        or _attribute_of(soup, "time[pubdate]", "datetime")
    )
    if not raw:
        value = jsonld_value(soup, "datePublished", "dateCreated")
        raw = value if isinstance(value, str) else None
    if not raw:
        node = soup.select_one(".date, .published, .publish-date, .article-date, .post-date")
        if node is not None:
            match = _TEXT_DATE.search(node.get_text(" ", strip=True))
            raw = match.group(0) if match else None
    if not raw:
        return None
    parsed = parse_date(raw)
    return to_iso(parsed) if parsed else raw.strip()


def _attribute_of(soup: Any, selector: str, attribute: str) -> Optional[str]:
    node = soup.select_one(selector)
    if node is None:
        return None
    value = (node.get(attribute) or "").strip()
    return value or None


def _language(soup: Any) -> str:
    html = soup.find("html")
    lang = html.get("lang") if html is not None else None
    if isinstance(lang, str) and lang.strip():
        return lang.strip().split("-")[0].lower()
    declared = meta_content(soup, 'meta[http-equiv="content-language"]')
    return declared or "en"


def _keywords(soup: Any) -> list[str]:
    raw: Any = meta_content(soup, 'meta[name="keywords"]')
    if not raw:
        tags = [
            (tag.get("content") or "").strip()
            for tag in soup.select('meta[property="article:tag"]')
        ]
        raw = ", ".join(tag for tag in tags if tag)
    if not raw:
        raw = jsonld_value(soup, "keywords")
        if not raw:
            about = jsonld_value(soup, "about")
            if isinstance(about, list):
                raw = ", ".join(
                    item["name"] for item in about if isinstance(item, dict) and item.get("name")
                )
    if isinstance(raw, list):
        raw = ", ".join(str(item) for item in raw)
    if not isinstance(raw, str):
        return []
    return [keyword.strip() for keyword in raw.split(",") if keyword.strip()]


def _images(soup: Any, url: Optional[str]) -> list[str]:
    sources = (
        [meta_content(soup, 'meta[property="og:image"]')],
        [meta_content(soup, 'meta[name="twitter:image"]', 'meta[property="twitter:image"]')],
        [img.get("src") for img in soup.select("article img[src], main img[src], .content img[src]")],
        [img.get("src") for img in soup.select("img[src]")],
    )
    images: list[str] = []
    for group in sources:
        for src in group:
            if not isinstance(src, str) or not is_valid_image_url(src.strip()):
                continue
            resolved = resolve_url(src.strip(), url)
            if resolved not in images:
                images.append(resolved)
        if len(images) >= MAX_METADATA_IMAGES:
            break
    return images[:MAX_METADATA_IMAGES]


def _links(soup: Any, url: Optional[str]) -> list[str]:
    links: list[str] = []
    for anchor in soup.select("a[href]"):
        href = (anchor.get("href") or "").strip()
        if not href or href.startswith("#") or not is_valid_link(href):
            continue
        resolved = resolve_url(href, url)
        if resolved not in links:
            links.append(resolved)
        if len(links) >= MAX_METADATA_LINKS:
            break
    return links


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class GeneralParser:
    def __init__(
        self,
        options: Optional[GeneralParserOptions] = None,
        *,
        max_candidates: Optional[int] = None,
    ) -> None:
        self.options = options or GeneralParserOptions()
        scorer_kwargs = {"min_content_length": self.options.min_content_length}
        if max_candidates is not None:
            scorer_kwargs["max_candidates"] = max_candidates
        self.scorer = ContentScorer(**scorer_kwargs)

    def parse(self, source: Any, url: Optional[str] = None) -> ParsedContent:
        """Parse raw HTML (or a document tree, which is copied) into ``ParsedContent``."""
        started = time.perf_counter()
        if isinstance(source, str):
            if not source.strip():
                raise InvalidInputError("Invalid HTML content provided", url=url)
            soup = parse_html(source)
        elif source is None:
            raise InvalidInputError("Invalid HTML content provided", url=url)
        else:
            soup = clone_document(source)

        metadata = self.extract_metadata(soup, url) if self.options.include_metadata else {}
        title = titles.extract_title(soup, url=url)
        self.clean_document(soup)

        if self.options.clean_html_only:
            text = collapse_whitespace(_body_of(soup).get_text(" "))
            return ParsedContent(
                url=url,
                title=title,
                content=text,
                metadata=metadata,
                word_count=len(text.split()),
                reading_time=calculate_reading_time(text),
                cleaned_html=_body_of(soup).decode_contents(),
                cleaned_full_html=str(soup.html or soup),
                strategy="clean_html_only",
            )

        candidate, strategy = resolve_field(
            "general.content", CONTENT_STRATEGIES, soup, self, validate=_has_text, url=url
        )
        content, node = candidate if candidate else (None, None)
        word_count = len(content.split()) if content else 0

        result = ParsedContent(
            url=url,
            title=title,
            content=content,
            metadata=metadata,
            word_count=word_count,
            reading_time=calculate_reading_time(content or ""),
            content_html=element_html(node) if node is not None else None,
            cleaned_html=_body_of(soup).decode_contents() if self.options.preserve_formatting else None,
            strategy=strategy,
        )
        # structlog treats the first positional argument as the ``event`` field; keep it keyword-only.
        logger.info(
            event="general_parser_complete",
            operation="general_parser.parse",
            url=url,
            strategy=strategy,
            word_count=word_count,
            elapsed_ms=int((time.perf_counter() - started) * 1000),
        )
        return result

    def extract_metadata(self, soup: Any, url: Optional[str] = None) -> dict[str, Any]:
        metadata: dict[str, Any] = {}
        description = _description(soup)
        if description:
            metadata["description"] = description
        author = _author(soup)
        if author:
            metadata["author"] = author
        published = _publish_date(soup)
        if published:
            metadata["publish_date"] = published
        metadata["language"] = _language(soup)
        keywords = _keywords(soup)
        if keywords:
            metadata["keywords"] = keywords
        images = _images(soup, url)
        if images:
            metadata["images"] = images
        if not self.options.remove_links:
            links = _links(soup, url)
            if links:
                metadata["links"] = links
        return metadata

    def clean_document(self, soup: Any) -> None:
        """Strip comments, chrome and empty elements from ``soup`` in place."""
        if Comment is not None:
            for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
                comment.extract()

        decompose_all(soup.find_all(list(REMOVE_TAGS)))
        decompose_all(
            [
                tag
                for tag in soup.find_all(True)
                if tag.name not in _PROTECTED_TAGS
                and (
                    _matches_patterns(_attribute_tokens(tag, "class"), _CLASS_REGEXES)
                    or _matches_patterns(_attribute_tokens(tag, "id"), _ID_REGEXES)
                )
            ]
        )
        decompose_all(
            soup.select('[style*="display:none"], [style*="display: none"], [hidden]')
        )
        decompose_all(
            [
                tag
                for tag in soup.find_all(["div", "span", "section", "aside"])
                if self._is_ui_block(tag)
            ]
        )
        decompose_all(
            [
                node
                for node in self.scorer.candidates(soup)
                if node.name not in _PROTECTED_TAGS and self.scorer.is_noise_region(node)
            ]
        )

        if self.options.remove_images:
            decompose_all(soup.find_all(["img", "picture", "figure"]))
        if self.options.remove_links and NavigableString is not None:
            for anchor in soup.find_all("a"):
                anchor.replace_with(NavigableString(anchor.get_text()))

        self._triage_footers(soup)
        self._strip_attributes(soup)
        self._remove_empty_elements(soup)

    @staticmethod
    def _is_ui_block(tag: Any) -> bool:
        if getattr(tag, "decomposed", False):
            return False
        text = tag.get_text().strip()
        if len(text) >= UI_BLOCK_MAX_LENGTH:
            return False
        return any(pattern.search(text) for pattern in _UI_PATTERNS)

    def _triage_footers(self, soup: Any) -> None:
        for footer in soup.select('footer, [class*="footer"], [id*="footer"]'):
            if getattr(footer, "decomposed", False) or footer.name in _STRUCTURAL_TAGS:
                continue
            if not has_valuable_footer_info(footer.get_text(" ")):
                footer.decompose()
                continue
            for selector in FOOTER_NOISE_SELECTORS:
                decompose_all(footer.select(selector))
            decompose_all(
                [
                    nav
                    for nav in footer.select("nav, .nav, .navigation, .menu")
                    if _FOOTER_NAVIGATION_ONLY.match(nav.get_text().strip())
                ]
            )

    def _strip_attributes(self, soup: Any) -> None:
        removed = [
            name
            for name, enabled in (
                ("class", self.options.remove_classes),
                ("id", self.options.remove_ids),
                ("style", self.options.remove_styles),
            )
            if enabled
        ]
        if not removed:
            return
        for tag in soup.find_all(True):
            for name in removed:
                if name in tag.attrs:
                    del tag[name]

    @staticmethod
    def _remove_empty_elements(soup: Any) -> None:
        while True:
            empties = [
                tag
                for tag in soup.find_all(True)
                if tag.name not in KEEP_EMPTY_TAGS
                and tag.name not in _STRUCTURAL_TAGS
                and tag.find(True) is None
                and not tag.get_text().strip()
            ]
            if not empties:
                return
            decompose_all(empties)


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


def parse(html: Any, url: Optional[str] = None, options: Optional[GeneralParserOptions] = None) -> ParsedContent:
    return GeneralParser(options).parse(html, url)


def parse_content(url: Optional[str], html: Any) -> ParsedContent:
    """Default extraction for arbitrary pages."""
    return parse(html, url, GeneralParserOptions(min_content_length=10))


def parse_all_content(url: Optional[str], html: Any) -> ParsedContent:
    return parse(html, url, GeneralParserOptions(min_content_length=1))


def parse_clean_content(url: Optional[str], html: Any) -> ParsedContent:
    return parse(
        html,
        url,
        GeneralParserOptions(
            min_content_length=10, remove_classes=True, remove_ids=True, remove_styles=True
        ),
    )


def parse_minimal_content(url: Optional[str], html: Any) -> ParsedContent:
    return parse(html, url, GeneralParserOptions(min_content_length=10, remove_classes=True))


def extract_everything(url: Optional[str], html: str) -> ParsedContent:
    """All body text with only script, style and noscript removed."""
    soup = parse_html(html)
    decompose_all(soup.find_all(["script", "style", "noscript"]))
    text = collapse_whitespace(_body_of(soup).get_text(" "))

    title_node = soup.find("title") or soup.find("h1")
    title = title_node.get_text(" ", strip=True) if title_node is not None else ""
    html_tag = soup.find("html")
    language = (html_tag.get("lang") if html_tag is not None else None) or "en"

    return ParsedContent(
        url=url,
        title=title or titles.UNTITLED,
        content=text,
        metadata={"language": language},
        word_count=len(text.split()),
        reading_time=calculate_reading_time(text),
        strategy="everything",
    )


def extract_text(html: Any, min_length: int = 100) -> Optional[str]:
    options = GeneralParserOptions(include_metadata=False, min_content_length=min_length)
    return GeneralParser(options).parse(html).content


def extract_title(html: Any) -> Optional[str]:
    return GeneralParser(GeneralParserOptions(include_metadata=False)).parse(html).title


def clean_html(html: Any, **options: Any) -> Optional[str]:
    """Full document HTML with noise removed and structure kept."""
    options["clean_html_only"] = True
    return GeneralParser(GeneralParserOptions(**options)).parse(html).cleaned_full_html or None


__all__ = [
    "CONTENT_SELECTORS",
    "CONTENT_STRATEGIES",
    "GeneralParser",
    "GeneralParserOptions",
    "ParsedContent",
    "WORDS_PER_MINUTE",
    "calculate_reading_time",
    "clean_html",
    "element_html",
    "element_text",
    "extract_everything",
    "extract_text",
    "extract_title",
    "has_valuable_footer_info",
    "is_likely_navigation",
    "parse",
    "parse_all_content",
    "parse_clean_content",
    "parse_content",
    "parse_minimal_content",
]
