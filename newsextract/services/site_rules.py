"""Per-publisher selector table keyed by registrable domain."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

import structlog
from cachetools import LRUCache, cached

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SiteRule:
    content_selectors: tuple[str, ...] = ()
    remove_selectors: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> SiteRule:
        def _as_tuple(value: Any) -> tuple[str, ...]:
            if not value:
                return ()
            if isinstance(value, str):
                return (value,)
            return tuple(str(item) for item in value if item)

        return cls(
            content_selectors=_as_tuple(payload.get("content_selectors")),
            remove_selectors=_as_tuple(payload.get("remove_selectors")),
        )


_YAHOO_RULE = SiteRule(remove_selectors=("div.caas-body p:last-of-type",))

DEFAULT_SITE_RULES: Mapping[str, SiteRule] = MappingProxyType(
    {
        "sunstar.com.ph": SiteRule(
            content_selectors=("div.articleBody.articleContent p",)
        ),
        "showbizportal.net": SiteRule(content_selectors=("div#adsense-target",)),
        "therebelsweetheart.com": SiteRule(content_selectors=("div.entry-content",)),
        "lifeiskulayful.com": SiteRule(
            content_selectors=("div[itemprop='blogPost'] p",)
        ),
        "bilyonaryo.com": SiteRule(
            content_selectors=(
                "section.elementor-section.elementor-inner-section"
                ".elementor-element.elementor-element-68d3afca"
                ".elementor-section-boxed.elementor-section-height-default p",
            ),
        ),
        "headtopics.com": SiteRule(
            remove_selectors=("div.Video", "p.speech", "p.News-Part")
        ),
        "beamstart.com": SiteRule(remove_selectors=("div.col-sm-5",)),
        "ph.news.yahoo.com": _YAHOO_RULE,
        "ph.yahoo.com": _YAHOO_RULE,
    }
)


def normalise_domain(url: str) -> str:
    """Return the lower-cased host of ``url`` without a leading ``www.``."""
    parsed = urlparse(url if "//" in url else f"//{url}")
    domain = (parsed.hostname or "").lower()
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def _read_rules_file(path: str) -> Mapping[str, Any]:
    with Path(path).open(encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"Site rules file {path} must contain a JSON object.")
    return payload


@cached(cache=LRUCache(maxsize=8))
def load_site_rules(path: Optional[str] = None) -> Mapping[str, SiteRule]:
    """Return the selector table, optionally merged with a JSON override file.

    The file maps domains to ``{"content_selectors": [...],
    "remove_selectors": [...]}``. It may instead carry ``{"sites": {...},
    "replace_defaults": true}`` to discard the built-in table entirely.
    """
    if not path:
        return DEFAULT_SITE_RULES

    payload = _read_rules_file(path)
    replace_defaults = bool(payload.get("replace_defaults", False))
    sites = payload.get("sites", payload)

    rules: dict[str, SiteRule] = {} if replace_defaults else dict(DEFAULT_SITE_RULES)
    for domain, raw_rule in sites.items():
        if domain == "replace_defaults" or not isinstance(raw_rule, Mapping):
            continue
        rules[normalise_domain(domain)] = SiteRule.from_dict(raw_rule)

    # structlog treats the first positional argument as the ``event`` field; keep it keyword-only.
    logger.info(
        event="site_rules_loaded",
        operation="site_rules.load",
        path=path,
        domains=len(rules),
        replaced_defaults=replace_defaults,
    )
    return MappingProxyType(rules)


def rule_for(
    url_or_domain: str, rules: Optional[Mapping[str, SiteRule]] = None
) -> Optional[SiteRule]:
    """Look up the rule for a URL: exact domain first, then a parent domain."""
    table = DEFAULT_SITE_RULES if rules is None else rules
    domain = normalise_domain(url_or_domain)
    if not domain:
        return None
    if domain in table:
        return table[domain]
    for key, value in table.items():
        if domain.endswith(f".{key}"):
            return value
    return None


__all__ = [
    "DEFAULT_SITE_RULES",
    "SiteRule",
    "load_site_rules",
    "normalise_domain",
    "rule_for",
]
