import pytest

from newsextract.services import general_parser
from newsextract.services.exceptions import InvalidInputError
from newsextract.services.general_parser import (
    GeneralParser,
    GeneralParserOptions,
    calculate_reading_time,
    has_valuable_footer_info,
    is_likely_navigation,
)

PAGE_URL = "https://example.com/garden/tomatoes"

GARDEN_HTML = """
<html lang="en">
  <head>
    <title>Garden guide | Green Pages</title>
    <meta property="og:title" content="How to grow tomatoes at home">
    <meta name="description" content="A practical guide to growing tomatoes in small spaces.">
    <meta name="keywords" content="gardening, tomatoes, vegetables">
    <script>window.tracker = [];</script>
  </head>
  <body>
    <nav><a href="/">Home</a></nav>
    <div class="share-bar"><a href="https://facebook.com/greenpages">Facebook</a></div>
    <article>
      <h1>How to grow tomatoes at home</h1>
      <p class="lead">Tomatoes need at least six hours of direct sunlight and regular watering to thrive.</p>
      <p>Choose a deep container with drainage holes and fill it with rich potting mix.</p>
      <img src="/images/tomato.jpg">
      <a href="/guides/peppers">Read the pepper guide</a>
    </article>
  </body>
</html>
"""


def test_reading_time_has_a_one_minute_floor():
    assert calculate_reading_time("") == 1
    assert calculate_reading_time("word " * 400) == 2
    assert calculate_reading_time("word " * 1000) == 5


def test_parse_extracts_article_content():
    result = general_parser.parse(GARDEN_HTML, PAGE_URL)

    assert result.title == "How to grow tomatoes at home"
    assert result.strategy == "semantic_selectors"
    assert "Tomatoes need at least six hours" in result.content
    assert "Choose a deep container" in result.content
    assert "Facebook" not in result.content
    assert result.word_count == len(result.content.split())
    assert result.reading_time == 1
    assert "<p" in result.content_html


def test_parse_separates_paragraphs():
    result = general_parser.parse(GARDEN_HTML, PAGE_URL)
    paragraphs = result.content.split("\n\n")
    assert paragraphs[0] == "How to grow tomatoes at home"
    assert paragraphs[1].startswith("Tomatoes need")


def test_cleaned_html_drops_chrome():
    result = general_parser.parse(GARDEN_HTML, PAGE_URL)
    assert "share-bar" not in result.cleaned_html
    assert "<nav" not in result.cleaned_html
    assert "<script" not in result.cleaned_html


def test_metadata_is_read_before_cleaning():
    metadata = general_parser.parse(GARDEN_HTML, PAGE_URL).metadata

    assert metadata["description"] == "A practical guide to growing tomatoes in small spaces."
    assert metadata["keywords"] == ["gardening", "tomatoes", "vegetables"]
    assert metadata["language"] == "en"
    assert metadata["images"] == ["https://example.com/images/tomato.jpg"]
    assert "https://example.com/guides/peppers" in metadata["links"]
    assert "https://facebook.com/greenpages" in metadata["links"]


def test_metadata_can_be_skipped():
    result = general_parser.parse(
        GARDEN_HTML, PAGE_URL, GeneralParserOptions(include_metadata=False)
    )
    assert result.metadata == {}


def test_remove_links_keeps_anchor_text():
    result = general_parser.parse(
        GARDEN_HTML, PAGE_URL, GeneralParserOptions(remove_links=True)
    )
    assert "<a " not in result.content_html
    assert "Read the pepper guide" in result.content
    assert "links" not in result.metadata


def test_remove_images():
    result = general_parser.parse(
        GARDEN_HTML, PAGE_URL, GeneralParserOptions(remove_images=True)
    )
    assert "<img" not in result.content_html
    assert "<img" not in result.cleaned_html


def test_attribute_stripping_presets():
    assert 'class="lead"' in general_parser.parse_content(PAGE_URL, GARDEN_HTML).cleaned_html
    assert 'class="lead"' not in general_parser.parse_clean_content(PAGE_URL, GARDEN_HTML).cleaned_html
    assert 'class="lead"' not in general_parser.parse_minimal_content(PAGE_URL, GARDEN_HTML).cleaned_html


def test_parse_does_not_mutate_a_document(soup_factory):
    soup = soup_factory(GARDEN_HTML)
    before = str(soup)
    result = GeneralParser().parse(soup, PAGE_URL)
    assert "Tomatoes need" in result.content
    assert str(soup) == before


def test_loose_body_text_is_still_found():
    result = general_parser.parse_content(
        None, "<html><body>Loose text sitting directly in the body element.</body></html>"
    )
    assert result.content == "Loose text sitting directly in the body element."


def test_paragraphs_outside_containers_are_combined():
    html = (
        "<html><body>"
        "<p>The first paragraph is long enough to be kept as content.</p>"
        "<p>Next</p>"
        "<p>The second paragraph is also long enough to be kept here.</p>"
        "</body></html>"
    )
    result = general_parser.parse(html, None, GeneralParserOptions(min_content_length=60))
    assert result.strategy == "paragraphs"
    assert result.content == (
        "The first paragraph is long enough to be kept as content.\n\n"
        "The second paragraph is also long enough to be kept here."
    )


def test_wordpress_post_classes_do_not_remove_the_post():
    html = (
        "<html><body>"
        '<div class="post-42 post type-post status-publish hentry category-news tag-council">'
        "<p>The council approved the spending plan after a long and careful debate.</p>"
        "</div>"
        '<div class="tag-cloud"><a href="/tag/roads">Roads and bridges</a></div>'
        "</body></html>"
    )
    result = general_parser.parse(html)

    assert "hentry" in result.cleaned_html
    assert "tag-cloud" not in result.cleaned_html
    assert result.content == (
        "The council approved the spending plan after a long and careful debate."
    )


def test_empty_page_yields_no_content():
    result = general_parser.parse("<html><body></body></html>")
    assert result.content is None
    assert result.strategy is None
    assert result.content_html is None
    assert result.word_count == 0
    assert result.reading_time == 1


@pytest.mark.parametrize("source", ["", "   ", None])
def test_missing_input_is_rejected(source):
    with pytest.raises(InvalidInputError):
        GeneralParser().parse(source)


def test_clean_html_keeps_structure_without_chrome():
    cleaned = general_parser.clean_html(GARDEN_HTML)
    assert cleaned.startswith("<html")
    assert "<article>" in cleaned
    assert "<script" not in cleaned
    assert "share-bar" not in cleaned


def test_extract_text_and_title():
    text = general_parser.extract_text(GARDEN_HTML, min_length=20)
    assert "Choose a deep container" in text
    assert general_parser.extract_title(GARDEN_HTML) == "How to grow tomatoes at home"


def test_extract_everything_keeps_navigation_text():
    result = general_parser.extract_everything(PAGE_URL, GARDEN_HTML)
    assert result.strategy == "everything"
    assert result.title == "Garden guide | Green Pages"
    assert "Home" in result.content
    assert "window.tracker" not in result.content
    assert result.metadata == {"language": "en"}


def test_to_dict_round_trips_fields():
    payload = general_parser.parse(GARDEN_HTML, PAGE_URL).to_dict()
    assert payload["url"] == PAGE_URL
    assert set(payload) == {
        "url",
        "title",
        "content",
        "metadata",
        "word_count",
        "reading_time",
        "content_html",
        "cleaned_html",
        "cleaned_full_html",
        "strategy",
    }


def test_footer_helpers():
    assert has_valuable_footer_info("Copyright 2024 Green Pages Media") is True
    assert has_valuable_footer_info("Call 555-123-4567 for deliveries") is True
    assert has_valuable_footer_info("Home | Blog | FAQ") is False


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Next", True),
        ("  share ", True),
        ("42", True),
        ("ok", True),
        ("The council met on Friday evening.", False),
    ],
)
def test_is_likely_navigation(text, expected):
    assert is_likely_navigation(text) is expected
