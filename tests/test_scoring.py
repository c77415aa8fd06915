from newsextract.services.scoring import ContentScorer, link_density

LONG_TEXT = "The council approved the budget after a long and careful debate today."


def test_score_counts_text_paragraphs_and_content_keywords(soup_factory):
    soup = soup_factory(f'<div class="story"><p>{"a" * 100}</p></div>')
    assert ContentScorer().score(soup.div) == 250.0


def test_score_penalises_noise_keywords_and_floors_at_zero(soup_factory):
    soup = soup_factory('<div class="sidebar"><p>short</p></div>')
    assert ContentScorer().score(soup.div) == 0.0


def test_link_heavy_block_is_penalised(soup_factory):
    links = " ".join(f'<a href="/{i}">link</a>' for i in range(5))
    soup = soup_factory(f"<div>{links}</div>")
    text = soup.div.get_text(" ", strip=True)

    assert link_density(soup.div) == 5 / max(len(text) / 100, 1)
    assert ContentScorer().score(soup.div) == 0.0


def test_select_best_prefers_highest_score(soup_factory):
    soup = soup_factory(
        f'<div id="one"><p>{LONG_TEXT}</p></div>'
        f'<div id="two" class="article"><p>{LONG_TEXT}</p><p>{LONG_TEXT}</p></div>'
    )
    scorer = ContentScorer()
    best = scorer.select_best(scorer.candidates(soup))
    assert best["id"] == "two"


def test_select_best_keeps_first_on_tie(soup_factory):
    soup = soup_factory(
        f'<section id="first"><p>{LONG_TEXT}</p></section>'
        f'<section id="second"><p>{LONG_TEXT}</p></section>'
    )
    scorer = ContentScorer()
    best = scorer.select_best(soup.find_all("section"))
    assert best["id"] == "first"


def test_select_best_returns_none_when_everything_is_short(soup_factory):
    soup = soup_factory("<div><p>tiny</p></div><div>also tiny</div>")
    scorer = ContentScorer(min_content_length=50)
    assert scorer.select_best(scorer.candidates(soup)) is None
    assert scorer.rank(scorer.candidates(soup)) == []


def test_candidates_are_capped(soup_factory):
    soup = soup_factory("".join(f"<div>{i}</div>" for i in range(10)))
    assert len(ContentScorer(max_candidates=3).candidates(soup)) == 3
    assert ContentScorer().candidates(None) == []


def test_is_noise_region(soup_factory):
    soup = soup_factory(
        '<div id="a" class="comment-list"><a href="/x">x</a></div>'
        '<div id="b" class="post-comments"><a href="/y">y</a></div>'
        '<div id="c"><a href="/z">z</a></div>'
    )
    scorer = ContentScorer()
    assert scorer.is_noise_region(soup.find(id="a")) is True
    assert scorer.is_noise_region(soup.find(id="b")) is False
    assert scorer.is_noise_region(soup.find(id="c")) is False
