from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from pydantic_settings import BaseSettings, SettingsConfigDict

from newsextract.services.site_rules import SiteRule, load_site_rules
from newsextract.services.variables import AuthorVariables, NewsVariables


class ExtractorSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    ENV: str = "development"
    MIN_CONTENT_LENGTH: int = 50
    INCLUDE_IMAGES: bool = True
    INCLUDE_LINKS: bool = True
    EMIT_CLEANED_HTML: bool = False
    DEFAULT_LANGUAGE: str = "en"
    NOISE_SIMILARITY_THRESHOLD: int = 70
    AUTHOR_SIMILARITY_THRESHOLD: int = 60
    MAX_SCORING_CANDIDATES: int = 2000
    MAX_AUTHORS: int = 2
    SITE_RULES_PATH: str | None = None
    LINK_EXCLUSION_PATTERNS: str = ""


settings = ExtractorSettings()


@dataclass(frozen=True)
class ExtractorConfig:
    """Per-extractor configuration; immutable once built."""

    min_content_length: int = 50
    include_images: bool = True
    include_links: bool = True
    emit_cleaned_html: bool = False
    default_language: str = "en"
    noise_similarity_threshold: int = 70
    author_similarity_threshold: int = 60
    max_scoring_candidates: int = 2000
    max_authors: int = 2
    link_exclusion_patterns: tuple[str, ...] = ()
    site_rules: Mapping[str, SiteRule] = field(default_factory=load_site_rules)
    news_variables: NewsVariables = field(default_factory=NewsVariables)
    author_variables: AuthorVariables = field(default_factory=AuthorVariables)

    @classmethod
    def from_settings(
        cls, source: ExtractorSettings | None = None, **overrides: Any
    ) -> ExtractorConfig:
        """Build a config from environment-backed settings plus explicit overrides."""
        current = source or settings
        patterns = tuple(
            pattern.strip()
            for pattern in current.LINK_EXCLUSION_PATTERNS.split(",")
            if pattern.strip()
        )
        config = cls(
            min_content_length=current.MIN_CONTENT_LENGTH,
            include_images=current.INCLUDE_IMAGES,
            include_links=current.INCLUDE_LINKS,
            emit_cleaned_html=current.EMIT_CLEANED_HTML,
            default_language=current.DEFAULT_LANGUAGE,
            noise_similarity_threshold=current.NOISE_SIMILARITY_THRESHOLD,
            author_similarity_threshold=current.AUTHOR_SIMILARITY_THRESHOLD,
            max_scoring_candidates=current.MAX_SCORING_CANDIDATES,
            max_authors=current.MAX_AUTHORS,
            link_exclusion_patterns=patterns,
            site_rules=load_site_rules(current.SITE_RULES_PATH),
        )
        if overrides:
            config = replace(config, **overrides)
        return config


__all__ = ["ExtractorConfig", "ExtractorSettings", "settings"]
