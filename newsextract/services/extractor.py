"""Article extraction: one best value per field from a noisy page."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urljoin, urlparse

import structlog

try:
    from newspaper import Article, Config
except (
    ModuleNotFoundError
):  # pragma: no cover - optional dependency for offline test runs
    Article: Optional[type] = None  # type: ignore[assignment]
    Config: Optional[type] = None  # type: ignore[assignment]

from newsextract.config import ExtractorConfig
from newsextract.services.authors import AuthorContext, extract_authors
from newsextract.services.dates import extract_published_date
from newsextract.services.document import (
    clone_document,
    decode_source,
    decompose_all,
    meta_content,
    parse_html,
)
from newsextract.services.exceptions import InvalidInputError, ParseError
from newsextract.services.general_parser import (
    GeneralParser,
    GeneralParserOptions,
    element_text,
)
from newsextract.services.site_rules import SiteRule, rule_for
from newsextract.services.strategies import FieldStrategy, resolve_field
from newsextract.services.titles import extract_title
from newsextract.utils.text_cleaner import NoiseFilter

logger = structlog.get_logger(__name__)

STATUS_DONE = "Done"
STATUS_ERROR = "Error"
NO_CONTENT = "No Content"
NO_PARSER = "none used"

_REJECTED_IMAGE = re.compile(r"logo|favicon|icon|pdf", re.IGNORECASE)

# Publisher chrome removed from the working copy before content extraction.
NOISE_SELECTORS: tuple[str, ...] = (
    "p.News-Part",
    'div[style*="display:none"]',
    'div[style*="display: none"]',
    'span[style*="display:none"]',
    'span[style*="display: none"]',
    "section#check-also-box",
    "section#related_posts",
    "form#myForm3",
    "section#grid-more",
    "a#main-content",
    'a[id*="logo"]',
    "div#cf-content",
    "tbody#CycleTable-ExpertFeed",
    "div.ticker-news",
    "div.author-lead",
    "div.main-image__title",
)
NOISE_CLASS_FRAGMENTS: tuple[str, ...] = (
    "sidebar",
    "post-footer",
    "cli-privacy-content-text",
    "cli-privacy-overview",
    "related-content",
    "related-post",
    "copyrights",
    "widget-content",
    "modal-dialog",
    "jeg_postblock_9",
    "sectioncontent",
    "fc-ab-root",
    "author-bio",
)
NOISE_ID_FRAGMENTS: tuple[str, ...] = (
    "magone-labels",
    "mvp-post-add-wrap",
    "login-form",
    "cookie-law-info-bar",
    "car-insurance-quote-modal",
    "kommentarContainer",
    "lee-registration-wall",
)


@dataclass(frozen=True)
class ExtractionResult:
    url: str
    fqdn: str
    title: Optional[str]
    authors: Optional[list[str]]
    published_at: Optional[str]
    images: list[str]
    content: Optional[str]
    language: str
    sections: Optional[list[str]] = None
    parser: str = NO_PARSER
    cleaned_html: Optional[str] = None
    status: str = field(init=False)
    error_status: Optional[str] = field(init=False)

    def __post_init__(self) -> None:
        has_content = bool(self.content and self.content.strip())
        object.__setattr__(self, "status", STATUS_DONE if has_content else STATUS_ERROR)
        object.__setattr__(self, "error_status", None if has_content else NO_CONTENT)

    def to_payload(self) -> dict[str, Any]:
        """Wire representation used by the ``/parser-extension`` endpoint."""
        payload = {
            "article_title": self.title,
            "article_fqdn": self.fqdn,
            "article_section": self.sections,
            "article_authors": self.authors,
            "article_published_date": self.published_at,
            "article_images": list(self.images),
            "article_content": self.content,
            "article_language": self.language,
            "article_status": self.status,
            "article_error_status": self.error_status,
            "article_url": self.url,
            "article_parser": self.parser,
        }
        if self.cleaned_html is not None:
            payload["article_cleaned_html"] = self.cleaned_html
        return payload


def _extract_with_newspaper(url: str, html: str) -> dict:
    """Structured signals from newspaper3k: body text, top image, language, date."""
    if Article is None or Config is None:
        return {"error": "Newspaper3k is not installed.", "resolved_url": url}

    config = Config()
    config.memoize_articles = False
    config.fetch_images = False
    config.use_meta_language = True

    article = Article(url, config=config)
    article.set_html(html)
    article.download_state = 2  # type: ignore[attr-defined]
    try:
        article.parse()
    except Exception as exc:  # pragma: no cover - depends on newspaper internals
        return {
            "error": f"Newspaper failed to parse HTML: {exc}",
            "resolved_url": url,
        }

    meta_data = article.meta_data or {}
    article_meta = meta_data.get("article") if isinstance(meta_data, Mapping) else None
    published_time = (
        article_meta.get("published_time") if isinstance(article_meta, Mapping) else None
    )
    return {
        "text": article.text or "",
        "top_image": article.top_image or None,
        "meta_lang": article.meta_lang or None,
        "published_time": published_time
        or (article.publish_date.isoformat() if article.publish_date else None),
        "resolved_url": url,
        "parser": "newspaper3k",
    }


def filter_images(candidates: Iterable[Any]) -> list[str]:
    """Keep absolute http(s) URLs; a logo-like first image empties the list."""
    images: list[str] = []
    for candidate in candidates:
        if not isinstance(candidate, str):
            continue
        value = candidate.strip()
        if not value.lower().startswith(("http://", "https://")) or value in images:
            continue
        images.append(value)
    if images and _REJECTED_IMAGE.search(images[0]):
        return []
    return images


def _primary_language(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip().replace("_", "-").split("-")[0].lower()


class _ContentContext:
    """Inputs shared by the content strategies of one extraction call."""

    def __init__(
        self,
        extractor: "NewsExtractor",
        url: str,
        document: Any,
        cleaned: Any,
        signals: Mapping[str, Any],
        rule: Optional[SiteRule],
    ) -> None:
        self.extractor = extractor
        self.url = url
        self.document = document
        self.cleaned = cleaned
        self.signals = signals
        self.rule = rule

    def clean(self, text: Optional[str]) -> Optional[str]:
        return self.extractor.noise_filter.clean(text) or None


def _selector_text(tree: Any, rule: Optional[SiteRule]) -> Optional[str]:
    if rule is None or not rule.content_selectors:
        return None
    blocks = []
    for selector in rule.content_selectors:
        for node in tree.select(selector):
            text = element_text(node)
            if text:
                blocks.append(text)
    return "\n\n".join(blocks) or None


def _content_from_site_selectors(ctx: _ContentContext) -> Optional[str]:
    return ctx.clean(_selector_text(ctx.cleaned, ctx.rule))


def _content_from_newspaper(ctx: _ContentContext) -> Optional[str]:
    return ctx.clean(ctx.signals.get("text"))


def _content_from_general_parser(ctx: _ContentContext) -> Optional[str]:
    config = ctx.extractor.config
    parser = GeneralParser(
        GeneralParserOptions(
            min_content_length=config.min_content_length,
            include_metadata=False,
            preserve_formatting=False,
        ),
        max_candidates=config.max_scoring_candidates,
    )
    return ctx.clean(parser.parse(ctx.cleaned, ctx.url).content)


def _content_from_site_selectors_retry(ctx: _ContentContext) -> Optional[str]:
    return ctx.clean(_selector_text(ctx.document, ctx.rule))


CONTENT_STRATEGIES: tuple[FieldStrategy, ...] = (
    FieldStrategy("selector", _content_from_site_selectors),
    FieldStrategy("newspaper3k", _content_from_newspaper),
    FieldStrategy("general_parser", _content_from_general_parser),
    FieldStrategy("selector_retry", _content_from_site_selectors_retry),
)


class NewsExtractor:
    def __init__(self, config: Optional[ExtractorConfig] = None) -> None:
        self.config = config or ExtractorConfig.from_settings()
        self.noise_filter = NoiseFilter()
        self.link_exclusions = self._compile_link_exclusions(self.config.link_exclusion_patterns)

    @staticmethod
    def _compile_link_exclusions(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern, re.IGNORECASE))
            except re.error as exc:
                # structlog treats the first positional argument as the ``event`` field; keep it keyword-only.
                logger.warning(
                    event="link_exclusion_pattern_invalid",
                    operation="extractor.config",
                    pattern=pattern,
                    error=str(exc),
                )
        return tuple(compiled)

    def extract(
        self, url: str, html: Optional[str] = None, *, document: Any = None
    ) -> ExtractionResult:
        """Extract every article field from ``html`` (or a parsed ``document``).

        ``document`` is never mutated. Raises ``InvalidInputError`` when the
        URL or page source is missing; any other failure degrades the
        affected field instead of raising.
        """
        if not isinstance(url, str) or not url.strip():
            raise InvalidInputError("Invalid URL passed")
        url = url.strip()
        started = time.perf_counter()

        if document is None:
            if not html or not html.strip():
                raise InvalidInputError("No page source passed.", url=url)
            html = decode_source(html)
            document = parse_html(html)
        elif html is None:
            html = str(document)

        config = self.config
        domain = (urlparse(url).hostname or "").lower()
        rule = rule_for(url, config.site_rules)
        signals = self._newspaper_signals(url, html)

        title = extract_title(document, config.news_variables.invalid_title_keys, url=url)
        language = (
            _primary_language(signals.get("meta_lang"))
            or _primary_language(self._declared_language(document))
            or config.default_language
        )
        authors = extract_authors(
            AuthorContext(
                document,
                variables=config.author_variables,
                noise_threshold=config.noise_similarity_threshold,
                author_threshold=config.author_similarity_threshold,
                language=language,
            ),
            max_authors=config.max_authors,
            url=url,
        )
        published_at = extract_published_date(document, url, signals)
        images = self._images(document, signals) if config.include_images else []

        cleaned = self.clean_document(document, url, rule)
        ctx = _ContentContext(self, url, document, cleaned, signals, rule)
        content, parser = resolve_field(
            "content",
            CONTENT_STRATEGIES,
            ctx,
            validate=lambda text: len(text) >= config.min_content_length,
            url=url,
        )

        result = ExtractionResult(
            url=url,
            fqdn=domain,
            title=title,
            authors=authors,
            published_at=published_at,
            images=images,
            content=content,
            language=language,
            sections=self._sections(document),
            parser=parser or NO_PARSER,
            cleaned_html=str(cleaned.body or cleaned) if config.emit_cleaned_html else None,
        )
        # structlog uses the positional argument for the event name; keep ``event`` keyword-only.
        logger.info(
            event="extractor_pipeline_status",
            operation="extractor.pipeline",
            status="success" if result.status == STATUS_DONE else "failure",
            engine=result.parser,
            url=url,
            domain=domain,
            chars=len(content or ""),
            elapsed_ms=int((time.perf_counter() - started) * 1000),
        )
        return result

    def _newspaper_signals(self, url: str, html: str) -> Mapping[str, Any]:
        attempt_started = time.perf_counter()
        try:
            result = _extract_with_newspaper(url, html)
            if result.get("error"):
                raise ParseError(str(result["error"]), url=url)
        except Exception as exc:
            # structlog uses the positional argument for the event name; keep ``event`` keyword-only.
            logger.warning(
                event="extractor_attempt",
                operation="extractor.attempt",
                engine="newspaper3k",
                url=url,
                status="error",
                error_type=exc.__class__.__name__,
                error=str(exc),
                elapsed_ms=int((time.perf_counter() - attempt_started) * 1000),
            )
            return {}
        return result

    @staticmethod
    def _declared_language(document: Any) -> Optional[str]:
        html_tag = document.find("html")
        return html_tag.get("lang") if html_tag is not None else None

    @staticmethod
    def _images(document: Any, signals: Mapping[str, Any]) -> list[str]:
        top_image = signals.get("top_image")
        if isinstance(top_image, str):
            candidates = [top_image]
        elif isinstance(top_image, (list, tuple)):
            candidates = list(top_image)
        else:
            candidates = []
        if not any(isinstance(item, str) and item.strip() for item in candidates):
            candidates = [meta_content(document, 'meta[property="og:image"]')]
        return filter_images(candidates)

    @staticmethod
    def _sections(document: Any) -> Optional[list[str]]:
        value = meta_content(
            document,
            'meta[property="article:section"]',
            'meta[property="og:article:section"]',
        )
        if not value:
            return None
        sections = [section.strip() for section in value.split(",") if section.strip()]
        return sections or None

    def clean_document(self, document: Any, url: str, rule: Optional[SiteRule] = None) -> Any:
        """Copy of ``document`` with navigation, widgets and publisher chrome removed."""
        soup = clone_document(document)
        variables = self.config.news_variables

        decompose_all(soup.find_all(list(variables.tags_for_decompose)))
        decompose_all(soup.find_all("div", class_=list(variables.attr_invalid_keys)))
        decompose_all(soup.find_all("div", id=list(variables.attr_id_invalid_keys)))
        decompose_all(soup.select(", ".join(NOISE_SELECTORS)))
        decompose_all(
            soup.select(", ".join(f'div[class*="{fragment}"]' for fragment in NOISE_CLASS_FRAGMENTS))
        )
        decompose_all(
            soup.select(", ".join(f'div[id*="{fragment}"]' for fragment in NOISE_ID_FRAGMENTS))
        )

        if self.link_exclusions:
            decompose_all(
                [
                    anchor
                    for anchor in soup.find_all("a", href=True)
                    if any(
                        pattern.search(urljoin(url, anchor["href"]))
                        for pattern in self.link_exclusions
                    )
                ]
            )
        if rule is not None:
            for selector in rule.remove_selectors:
                decompose_all(soup.select(selector))
        if not self.config.include_links:
            for anchor in soup.find_all("a"):
                anchor.unwrap()
        return soup


def extract_article(
    url: str,
    html: Optional[str] = None,
    *,
    document: Any = None,
    config: Optional[ExtractorConfig] = None,
) -> ExtractionResult:
    return NewsExtractor(config).extract(url, html, document=document)


__all__ = [
    "CONTENT_STRATEGIES",
    "ExtractionResult",
    "NewsExtractor",
    "extract_article",
    "filter_images",
]
