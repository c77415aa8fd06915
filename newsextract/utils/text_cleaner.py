"""Helpers to strip residual markup, script and boilerplate from article text."""

from __future__ import annotations

import html
import re
import unicodedata
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

import structlog

logger = structlog.get_logger(__name__)

MIN_LINE_LENGTH = 20
# Upper bound on full pipeline re-runs while waiting for a fixed point.
MAX_CLEANING_ROUNDS = 4

_CONTROL_CHARS = {
    "\u200b",  # zero-width space
    "\u200c",  # zero-width non-joiner
    "\u200d",  # zero-width joiner
    "\ufeff",  # zero-width no-break space / BOM
}

_CSS_PROPERTIES = (
    r"(?:background(?:-[a-z]+)?|border(?:-[a-z]+)*|box-(?:sizing|shadow)|color|"
    r"cursor|display|float|clear|flex(?:-[a-z]+)?|font-(?:size|family|weight|style)|"
    r"height|width|max-(?:width|height)|min-(?:width|height)|justify-content|"
    r"align-items|line-height|letter-spacing|margin(?:-[a-z]+)?|opacity|outline|"
    r"overflow|padding(?:-[a-z]+)?|position|text-(?:align|decoration|transform|"
    r"shadow|overflow)|transform|transition|animation|vertical-align|visibility|"
    r"white-space|word-(?:wrap|break)|z-index|-webkit-[a-z-]+|-moz-[a-z-]+)"
)

_CSS_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"[.#@][a-zA-Z_][\w\-]*(?:[ \t]*[>,+~]?[ \t]*[.#]?[a-zA-Z_][\w\-]*){0,6}[ \t]*\{[^{}]*\}",
        r"\b" + _CSS_PROPERTIES + r"[ \t]*:[ \t]*[^;{}\n]{1,120};",
        r"url\([^)\n]*\)",
    )
)

_SCRIPT_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.MULTILINE)
    for pattern in (
        r"/\*[^*]*\*+(?:[^/*][^*]*\*+)*/",
        r"^[ \t]*//[^\n]*$",
        r"\bfunction\s*\w*\s*\([^)\n]*\)\s*\{[^{}]*\}",
        r"\([^)\n]*\)\s*=>\s*\{[^{}]*\}",
        r"\b(?:var|let|const)\s+\w+\s*=[^;\n]*;",
        r"\b\w+(?:\.\w+)+\s*=\s*[^;\n]+;",
        r"\b(?:document|window)\.[\w.]+\([^)\n]*\);?",
        r"\.(?:addEventListener|appendChild|insertBefore|insertAdjacentHTML|"
        r"querySelector(?:All)?|createElement|push)\([^)\n]*\);?",
        r"\b\w+\s*=\s*\w+\s*\|\|\s*\[\];?",
        r"\(\s*adsbygoogle\s*=\s*window\.adsbygoogle\s*\|\|\s*\[\]\)\.push\(\{\}\);?",
    )
)

# Boilerplate phrases; patterns ending in ``.*$`` strip the rest of the line.
_BOILERPLATE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE | re.MULTILINE)
    for pattern in (
        r"^advertisement$",
        r"\badvertisement\b",
        r"^sponsored content$",
        r"sign up for (?:our|the) newsletter.*$",
        r"sign up for.*$",
        r"stay up-to-date.*$",
        r"please enter a valid email address.*$",
        r"your email is safe with us.*$",
        r"need a wellness break\?.*$",
        r"^subscribe to .*$",
        r"^related (?:stories|articles|posts).*$",
        r"^(?:you may also like|recommended for you).*$",
        r"^read (?:more|next):.*$",
        r"^continue reading.*$",
        r"^share this (?:story|article|post).*$",
        r"^follow us on .*$",
        r"^comments?$",
        r"^\d+\s+\d+\s+\d+\s+\d+\s+\d+share.*$",
        r"facebook\s*twitter\s*pinterest\s*whatsapp",
        r"^filtered by:.*$",
        r"^tags?:.*$",
        r"^(?:categories?|filed under):.*$",
        r"^next story.*$",
        r"^(?:previous|next) (?:article|post|page).*$",
        r"view more.*$",
        r"most popular.*$",
        r"other stories.*$",
        r"loading content.*$",
        r"load more articles.*$",
        r"retry loading.*$",
        r"^page \d+ of \d+$",
    )
)

_SYMBOL_ONLY = re.compile(r"^[\d\W_×‹›◀▶]+$")
_CSS_SELECTOR_LINE = re.compile(r"^[.#][a-zA-Z_][\w\-]*\s*[>,{+~\s]")
_CSS_DECLARATION_LINE = re.compile(r"^[a-zA-Z\-]+\s*:\s*[^;{}]+;\s*$")
_BRACED_LINE = re.compile(r"\{[^}]*\}")
_SCRIPT_LINE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"\b(?:document|window)\.\w+",
        r"addEventListener|querySelector|createElement|innerHTML\s*=",
        r"block_tdi_\d+|tdBlocksArray|adsbygoogle",
        r"\b(?:const|var|let)\s+\w+\s*=",
        r"Array\.from\(|\.textContent\.trim\(\)|\.className\s*=|\.href\s*=",
        r"\bif\s*\(.*\)\s*\{|\belse\s*\{|\}\s*else",
        r"\bfunction\s*\w*\s*\(",
        r"\([^)]*\)\s*=>",
        r"^\s*=\s*[\"<]",
        r"\.tdi_\d+|\.wpb_wrapper|\.tdc-elements|\.vc_column|\.tdb_|\.td-",
        r"td_column_number|block_type|found_posts|header_color|max_num_pages",
        r"csell_|crowdyPage|OBR\.extern",
        r"@media\b",
    )
)


@dataclass(frozen=True)
class CleaningPass:
    name: str
    apply: Callable[[str], str]


def _strip_control_chars(text: str) -> str:
    for char in _CONTROL_CHARS:
        text = text.replace(char, "")
    return text


def _unescape_entities(text: str) -> str:
    # Each call peels one level of nested escaping (``&amp;lt;`` -> ``&lt;``).
    while True:
        unescaped = html.unescape(text)
        if unescaped == text:
            return text
        text = unescaped


def normalise_characters(text: str) -> str:
    text = _unescape_entities(text)
    text = unicodedata.normalize("NFKC", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\xa0", " ")
    return _strip_control_chars(text)


def _substitute_all(patterns: Iterable[re.Pattern[str]], text: str) -> str:
    for pattern in patterns:
        text = pattern.sub("", text)
    return text


def strip_css(text: str) -> str:
    return _substitute_all(_CSS_PATTERNS, text)


def strip_script(text: str) -> str:
    return _substitute_all(_SCRIPT_PATTERNS, text)


def strip_boilerplate(text: str) -> str:
    return _substitute_all(_BOILERPLATE_PATTERNS, text)


def is_noise_line(line: str) -> bool:
    """Return True when a single stripped line should be dropped."""
    if len(line) < MIN_LINE_LENGTH:
        return True
    if _SYMBOL_ONLY.match(line):
        return True
    if _CSS_SELECTOR_LINE.match(line) or _CSS_DECLARATION_LINE.match(line):
        return True
    if _BRACED_LINE.search(line):
        return True
    return any(pattern.search(line) for pattern in _SCRIPT_LINE_PATTERNS)


def filter_lines(text: str) -> str:
    kept = [line for line in text.split("\n") if not is_noise_line(line.strip())]
    return "\n".join(kept)


def collapse_whitespace(text: str | None) -> str:
    return " ".join((text or "").split())


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs; paragraphs end up one blank line apart."""
    lines = (re.sub(r"\s+", " ", line).strip() for line in text.split("\n"))
    return "\n\n".join(line for line in lines if line)


class NoiseFilter:
    """Ordered text-cleaning pipeline.

    Every pass is a pure ``str -> str`` function. A pass that raises is
    skipped and the text from before it carries on to the next pass, so
    ``clean`` itself never raises.
    """

    def __init__(self, extra_phrases: Sequence[str] = ()) -> None:
        self.extra_phrases = tuple(extra_phrases)
        passes = [
            CleaningPass("normalise_characters", normalise_characters),
            CleaningPass("strip_css", strip_css),
            CleaningPass("strip_script", strip_script),
            CleaningPass("strip_boilerplate", strip_boilerplate),
        ]
        if self.extra_phrases:
            passes.append(CleaningPass("strip_extra_phrases", self._strip_extra))
        passes.extend(
            [
                CleaningPass("filter_lines", filter_lines),
                CleaningPass("normalize_whitespace", normalize_whitespace),
            ]
        )
        self.passes: tuple[CleaningPass, ...] = tuple(passes)

    def _strip_extra(self, text: str) -> str:
        for phrase in self.extra_phrases:
            text = re.sub(phrase, "", text, flags=re.IGNORECASE | re.MULTILINE)
        return text

    def _run_once(self, text: str) -> str:
        for cleaning_pass in self.passes:
            try:
                text = cleaning_pass.apply(text)
            except Exception as exc:
                # structlog treats the first positional argument as the ``event`` field; keep it keyword-only.
                logger.warning(
                    event="noise_pass_failure",
                    operation="noise_filter.pass",
                    cleaning_pass=cleaning_pass.name,
                    error_type=exc.__class__.__name__,
                    error=str(exc),
                )
        return text

    def clean(self, text: str | None) -> str:
        if not text:
            return ""
        current = text
        for _ in range(MAX_CLEANING_ROUNDS):
            cleaned = self._run_once(current)
            if cleaned == current:
                break
            current = cleaned
        return current


_DEFAULT_FILTER = NoiseFilter()


def clean_text(raw_text: str | None) -> str:
    """Normalise extracted article text and remove markup and boilerplate noise."""
    return _DEFAULT_FILTER.clean(raw_text)


__all__ = [
    "CleaningPass",
    "MIN_LINE_LENGTH",
    "NoiseFilter",
    "clean_text",
    "collapse_whitespace",
    "filter_lines",
    "is_noise_line",
    "normalise_characters",
    "normalize_whitespace",
    "strip_boilerplate",
    "strip_css",
    "strip_script",
]
