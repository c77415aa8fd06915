import os

import pytest

try:
    from bs4 import BeautifulSoup
except ModuleNotFoundError:  # pragma: no cover - optional dependency in tests
    BeautifulSoup = None  # type: ignore[assignment]


ARTICLE_HTML = """
<html lang="en-US">
  <head>
    <title>Council approves budget | Daily Ledger</title>
    <meta property="og:title" content="Council approves 2024 budget">
    <meta name="author" content="Jane Reyes">
    <meta property="article:published_time" content="2024-01-05T08:00:00Z">
    <meta property="og:image" content="https://cdn.example.com/photo.jpg">
    <meta property="article:section" content="News, Politics">
  </head>
  <body>
    <nav><a href="/">Home</a> <a href="/news">News</a></nav>
    <article class="article-body">
      <h1>Council approves 2024 budget</h1>
      <p>The city council approved the 2024 budget on Friday after a lengthy debate.</p>
      <p>Council members voted eleven to two in favour of the spending plan for next year.</p>
    </article>
    <footer>Copyright 2024 Daily Ledger</footer>
  </body>
</html>
"""


@pytest.fixture(scope="session")
def app():
    from newsextract import create_app

    os.environ.setdefault("ENV", "development")
    app = create_app()
    app.config.update(TESTING=True)

    with app.app_context():
        yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def article_html():
    return ARTICLE_HTML


@pytest.fixture()
def soup_factory():
    def _make(html):
        return BeautifulSoup(html, "lxml")

    return _make


@pytest.fixture(autouse=True)
def disable_newspaper(monkeypatch):
    """Keep newspaper3k out of the default path so results are deterministic."""
    monkeypatch.setattr(
        "newsextract.services.extractor._extract_with_newspaper",
        lambda url, html: {"error": "newspaper disabled in tests"},
    )
    yield
