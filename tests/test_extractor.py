import base64

import pytest

from newsextract.config import ExtractorConfig
from newsextract.services.exceptions import InvalidInputError
from newsextract.services.extractor import (
    ExtractionResult,
    NewsExtractor,
    extract_article,
    filter_images,
)

ARTICLE_URL = "https://example.com/news/council-budget"

FIRST = "The city council approved the new budget on Tuesday evening."
SECOND = "Officials said the plan adds funding for road repairs and schools."


def _extract(html, url=ARTICLE_URL, **config):
    return NewsExtractor(ExtractorConfig(**config)).extract(url, html)


def test_extracts_every_field(article_html):
    result = _extract(article_html)

    assert result.status == "Done"
    assert result.error_status is None
    assert result.parser == "general_parser"
    assert result.title == "Council approves 2024 budget"
    assert result.authors == ["Jane Reyes"]
    assert result.published_at == "2024-01-05T08:00:00+00:00"
    assert result.images == ["https://cdn.example.com/photo.jpg"]
    assert result.language == "en"
    assert result.sections == ["News", "Politics"]
    assert result.fqdn == "example.com"
    assert "The city council approved the 2024 budget on Friday" in result.content
    assert "Copyright 2024" not in result.content


def test_newspaper_signals_are_preferred(monkeypatch, article_html):
    monkeypatch.setattr(
        "newsextract.services.extractor._extract_with_newspaper",
        lambda url, html: {
            "text": f"{FIRST}\n\n{SECOND}",
            "top_image": "https://cdn.example.com/top.jpg",
            "meta_lang": "tl",
            "published_time": None,
            "resolved_url": url,
            "parser": "newspaper3k",
        },
    )
    result = _extract(article_html)

    assert result.parser == "newspaper3k"
    assert result.content == f"{FIRST}\n\n{SECOND}"
    assert result.images == ["https://cdn.example.com/top.jpg"]
    assert result.language == "tl"


def test_newspaper_failure_is_not_fatal(monkeypatch, article_html):
    def broken(url, html):
        raise RuntimeError("newspaper blew up")

    monkeypatch.setattr("newsextract.services.extractor._extract_with_newspaper", broken)
    result = _extract(article_html)
    assert result.status == "Done"
    assert result.parser == "general_parser"


def test_url_date_overrides_conflicting_metadata(article_html):
    result = _extract(article_html, url="https://example.com/2024/01/06/council-budget")
    assert result.published_at == "2024-01-06T00:00:00"


def test_logo_like_image_empties_the_list(article_html):
    html = article_html.replace(
        "https://cdn.example.com/photo.jpg", "https://cdn.example.com/site-logo.png"
    )
    assert _extract(html).images == []


def test_logo_first_in_top_image_list_empties_the_list(monkeypatch, article_html):
    monkeypatch.setattr(
        "newsextract.services.extractor._extract_with_newspaper",
        lambda url, html: {
            "top_image": ["https://cdn.x/logo.png", "https://cdn.x/photo.jpg"],
            "parser": "newspaper3k",
        },
    )
    assert _extract(article_html).images == []


def test_images_can_be_disabled(article_html):
    assert _extract(article_html, include_images=False).images == []


def test_page_without_content_reports_error():
    html = "<html><head><title>Short page</title></head><body><p>Too short.</p></body></html>"
    result = _extract(html)

    assert result.content is None
    assert result.status == "Error"
    assert result.error_status == "No Content"
    assert result.parser == "none used"
    assert result.title == "Short page"


def test_site_selectors_win_for_known_publisher():
    html = (
        "<html><body>"
        '<div class="articleBody articleContent">'
        f"<p>{FIRST}</p><p>{SECOND}</p>"
        "</div>"
        "</body></html>"
    )
    result = _extract(html, url="https://www.sunstar.com.ph/article/1987/council-budget")
    assert result.parser == "selector"
    assert result.content == f"{FIRST}\n\n{SECOND}"
    assert result.fqdn == "www.sunstar.com.ph"


def test_document_is_not_mutated(soup_factory, article_html):
    document = soup_factory(article_html)
    before = str(document)

    result = NewsExtractor(ExtractorConfig()).extract(ARTICLE_URL, document=document)

    assert result.status == "Done"
    assert str(document) == before


@pytest.mark.parametrize(
    "url, html",
    [
        ("", "<html></html>"),
        (None, "<html></html>"),
        (ARTICLE_URL, ""),
        (ARTICLE_URL, None),
    ],
)
def test_missing_input_is_rejected(url, html):
    with pytest.raises(InvalidInputError):
        NewsExtractor(ExtractorConfig()).extract(url, html)


def test_payload_keys(article_html):
    payload = _extract(article_html).to_payload()
    assert list(payload) == [
        "article_title",
        "article_fqdn",
        "article_section",
        "article_authors",
        "article_published_date",
        "article_images",
        "article_content",
        "article_language",
        "article_status",
        "article_error_status",
        "article_url",
        "article_parser",
    ]


def test_cleaned_html_is_emitted_on_request(article_html):
    payload = _extract(article_html, emit_cleaned_html=True).to_payload()
    assert payload["article_cleaned_html"].startswith("<body")
    assert "<nav" not in payload["article_cleaned_html"]


def test_link_exclusions_remove_matching_anchors(soup_factory):
    extractor = NewsExtractor(ExtractorConfig(link_exclusion_patterns=("(", r"/tag/")))
    document = soup_factory(
        '<body><p>Story <a href="/tag/budget">budget</a> <a href="/news/other">other</a></p></body>'
    )

    cleaned = extractor.clean_document(document, ARTICLE_URL)

    assert len(extractor.link_exclusions) == 1
    assert [anchor["href"] for anchor in cleaned.find_all("a")] == ["/news/other"]
    assert len(document.find_all("a")) == 2


def test_links_unwrapped_when_disabled(soup_factory):
    extractor = NewsExtractor(ExtractorConfig(include_links=False))
    document = soup_factory('<body><p>Read <a href="/more">the full report</a> now.</p></body>')

    cleaned = extractor.clean_document(document, ARTICLE_URL)

    assert cleaned.find("a") is None
    assert cleaned.p.get_text() == "Read the full report now."


def test_base64_source_is_decoded(article_html):
    encoded = base64.b64encode(article_html.encode("utf-8")).decode("ascii")
    result = _extract(encoded)
    assert result.title == "Council approves 2024 budget"
    assert result.status == "Done"


def test_filter_images():
    assert filter_images(
        ["/relative.jpg", "https://a.example/x.jpg", "https://a.example/x.jpg", None]
    ) == ["https://a.example/x.jpg"]
    assert filter_images(["https://a.example/favicon.ico", "https://a.example/x.jpg"]) == []
    assert filter_images([]) == []


def test_status_follows_content():
    blank = ExtractionResult(
        url=ARTICLE_URL,
        fqdn="example.com",
        title=None,
        authors=None,
        published_at=None,
        images=[],
        content="   ",
        language="en",
    )
    assert blank.status == "Error"
    assert blank.error_status == "No Content"


def test_extract_article_helper(article_html):
    result = extract_article(ARTICLE_URL, article_html, config=ExtractorConfig())
    assert result.title == "Council approves 2024 budget"
