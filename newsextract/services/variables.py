"""Keyword tables consumed by the extractor.

These are configuration data: the extractor receives them through
``ExtractorConfig`` and never branches on individual entries.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NewsVariables:
    invalid_keys: tuple[str, ...] = (
        "privacy",
        "newsletter",
        "modal",
        "subscription",
        "related-articles",
        "recommended-posts",
        "asset-below",
        "card",
    )
    tags_for_decompose: tuple[str, ...] = (
        "script",
        "select",
        "form",
        "template",
        "button",
        "aside",
        "nav",
        "footer",
        "style",
        "noscript",
    )
    invalid_title_keys: tuple[str, ...] = (
        "page not found",
        "attention required!",
        "página no encontrada",
    )
    attr_invalid_keys: tuple[str, ...] = ("sidebar", "footer", "ads")
    attr_id_invalid_keys: tuple[str, ...] = ("cookie-law-info-bar", "login-form")


@dataclass(frozen=True)
class AuthorVariables:
    comment_keys: tuple[str, ...] = ("COMMENT",)
    footer_keys: tuple[str, ...] = ("FOOTER", "SOCIAL", "SHARE", "FACEBOOK", "TWITTER")
    author_keys: tuple[str, ...] = ("AUTHOR", "BYLINE")
    tags_for_decompose: tuple[str, ...] = ("nav", "script", "time", "footer", "table", "li")
    author_tags: tuple[str, ...] = ("span", "a", "p", "div")

    @property
    def noise_keys(self) -> tuple[str, ...]:
        return self.comment_keys + self.footer_keys


FULL_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
SHORT_MONTH_NAMES = tuple(name[:3] for name in FULL_MONTH_NAMES)
INVALID_AUTHOR_WORDS = ("Published", "Hours", "Ago")

ENGLISH_STOP_WORDS = frozenset(
    """
    a about above after again against all am an and any are aren't as at be
    because been before being below between both but by can't cannot could
    couldn't did didn't do does doesn't doing don't down during each few for
    from further had hadn't has hasn't have haven't having he he'd he'll he's
    her here here's hers herself him himself his how how's i i'd i'll i'm i've
    if in into is isn't it it's its itself let's me more most mustn't my
    myself no nor not of off on once only or other ought our ours ourselves
    out over own same shan't she she'd she'll she's should shouldn't so some
    such than that that's the their theirs them themselves then there there's
    these they they'd they'll they're they've this those through to too under
    until up very was wasn't we we'd we'll we're we've were weren't what
    what's when when's where where's which while who who's whom why why's
    with won't would wouldn't you you'd you'll you're you've your yours
    yourself yourselves
    """.split()
)

TAGALOG_STOP_WORDS = frozenset(
    """
    akin aking ako alin am amin aming ang ano anumang apat at atin ating ay
    bababa bago bakit bawat bilang dahil dalawa dapat din dito doon gagawin
    gayunman ginagawa ginawa ginawang gumawa gusto habang hanggang hindi huwag
    iba ibaba ibabaw ibig ikaw ilagay ilalim ilan inyong isa isang itaas ito
    iyo iyon iyong ka kahit kailangan kailanman kami kanila kanilang kanino
    kanya kanyang kapag kapwa karamihan katiyakan katulad kaya kaysa ko kong
    kulang kumuha kung laban lahat lamang likod lima maaari maaaring maging
    mahusay makita marami marapat masyado may mayroon mga minsan mismo mula
    muli na nabanggit naging nagkaroon nais nakita namin napaka narito nasaan
    ng ngayon ni nila nilang nito niya niyang noon o pa paano pababa paggawa
    pagitan pagkakaroon pagkatapos palabas pamamagitan panahon pangalawa para
    paraan pareho pataas pero pumunta pumupunta sa saan sabi sabihin sarili
    sila sino siya tatlo tayo tulad tungkol una walang
    """.split()
)

STOP_WORDS_BY_LANGUAGE = {
    "en": ENGLISH_STOP_WORDS,
    "tl": TAGALOG_STOP_WORDS,
}

CONTENT_KEYWORDS = ("content", "article", "post", "story", "text", "body")
NOISE_KEYWORDS = ("nav", "menu", "sidebar", "footer", "header", "ads", "comment")


__all__ = [
    "AuthorVariables",
    "CONTENT_KEYWORDS",
    "ENGLISH_STOP_WORDS",
    "FULL_MONTH_NAMES",
    "INVALID_AUTHOR_WORDS",
    "NOISE_KEYWORDS",
    "NewsVariables",
    "SHORT_MONTH_NAMES",
    "STOP_WORDS_BY_LANGUAGE",
    "TAGALOG_STOP_WORDS",
]
