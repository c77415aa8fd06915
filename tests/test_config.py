import json

from newsextract.config import ExtractorConfig, ExtractorSettings
from newsextract.services.site_rules import (
    DEFAULT_SITE_RULES,
    SiteRule,
    load_site_rules,
    normalise_domain,
    rule_for,
)


def test_settings_defaults():
    current = ExtractorSettings(_env_file=None)
    assert current.MIN_CONTENT_LENGTH == 50
    assert current.DEFAULT_LANGUAGE == "en"
    assert current.SITE_RULES_PATH is None


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("MIN_CONTENT_LENGTH", "120")
    monkeypatch.setenv("EMIT_CLEANED_HTML", "true")
    current = ExtractorSettings(_env_file=None)
    assert current.MIN_CONTENT_LENGTH == 120
    assert current.EMIT_CLEANED_HTML is True


def test_config_from_settings_and_overrides():
    current = ExtractorSettings(
        _env_file=None,
        MAX_AUTHORS=3,
        LINK_EXCLUSION_PATTERNS=" /tag/ , ,/category/ ",
    )
    config = ExtractorConfig.from_settings(current, min_content_length=10)

    assert config.max_authors == 3
    assert config.min_content_length == 10
    assert config.link_exclusion_patterns == ("/tag/", "/category/")
    assert config.site_rules is DEFAULT_SITE_RULES


def test_normalise_domain():
    assert normalise_domain("https://WWW.Example.com/a/b") == "example.com"
    assert normalise_domain("ph.news.yahoo.com") == "ph.news.yahoo.com"
    assert normalise_domain("") == ""


def test_rule_lookup_uses_parent_domains():
    assert rule_for("https://www.sunstar.com.ph/article/1") is DEFAULT_SITE_RULES["sunstar.com.ph"]
    assert rule_for("https://cebu.sunstar.com.ph/article/1") is DEFAULT_SITE_RULES["sunstar.com.ph"]
    assert rule_for("https://notsunstar.com.ph/article/1") is None
    assert rule_for("https://example.com/story") is None


def test_rules_file_merges_with_defaults(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(
        json.dumps({"www.example.com": {"content_selectors": "div.story p"}}),
        encoding="utf-8",
    )

    rules = load_site_rules(str(path))

    assert rules["example.com"] == SiteRule(content_selectors=("div.story p",))
    assert "sunstar.com.ph" in rules


def test_rules_file_can_replace_defaults(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(
        json.dumps(
            {
                "replace_defaults": True,
                "sites": {"example.com": {"remove_selectors": ["div.promo", "p.credit"]}},
            }
        ),
        encoding="utf-8",
    )

    rules = load_site_rules(str(path))

    assert list(rules) == ["example.com"]
    assert rules["example.com"].remove_selectors == ("div.promo", "p.credit")
