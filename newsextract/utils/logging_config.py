import logging
import os
import sys
from typing import Any, Dict

import structlog

_LOGGING_INITIALISED = False

# Every rendered event carries these keys, ``None`` when unknown.
EXTRACTION_EVENT_FIELDS = (
    "event",
    "correlation_id",
    "url",
    "operation",
    "status",
    "elapsed_ms",
)
CONTEXT_FIELDS = ("correlation_id", "url", "endpoint", "domain")
# Events emitted once per strategy attempt; kept at DEBUG.
PER_ATTEMPT_EVENTS = frozenset({"extractor_attempt", "field_resolved"})
MAX_FIELD_LENGTH = 500
QUIET_LOGGERS = ("werkzeug", "newspaper", "urllib3", "PIL", "jieba")


def _add_extraction_fields(
    _: logging.Logger, __: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    context = structlog.contextvars.get_contextvars()
    for key in CONTEXT_FIELDS:
        if event_dict.get(key) is None and context.get(key) is not None:
            event_dict[key] = context[key]

    if "event" not in event_dict:
        event_dict["event"] = event_dict.get("message") or event_dict.get(
            "logger", "log.event"
        )
    for key in EXTRACTION_EVENT_FIELDS:
        event_dict.setdefault(key, None)
    return event_dict


def _truncate_long_values(
    _: logging.Logger, __: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Page markup and tracebacks from parsers can run to megabytes; clip them."""
    for key, value in event_dict.items():
        if key in {"event", "exception"} or not isinstance(value, str):
            continue
        if len(value) > MAX_FIELD_LENGTH:
            event_dict[key] = f"{value[:MAX_FIELD_LENGTH]}... [{len(value)} chars]"
    return event_dict


def _demote_attempt_events(
    _: logging.Logger, __: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    if event_dict.get("event") not in PER_ATTEMPT_EVENTS:
        return event_dict
    if event_dict.get("level") in {"warning", "error", "critical"}:
        return event_dict
    if logging.getLogger().getEffectiveLevel() > logging.DEBUG:
        raise structlog.DropEvent
    event_dict["level"] = "debug"
    return event_dict


def build_processors(log_format: str) -> list:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_extraction_fields,
        _demote_attempt_events,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _truncate_long_values,
    ]
    if log_format == "plain":
        processors.append(structlog.processors.UnicodeDecoder())
    return processors


def setup_logging(force: bool = False):
    """Route structlog and stdlib logging through one stdout handler.

    ``LOG_LEVEL`` sets the root level and ``LOG_FORMAT`` picks ``json``
    (default) or ``plain`` console rendering.
    """
    global _LOGGING_INITIALISED
    if _LOGGING_INITIALISED and not force:
        return

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_format = os.getenv("LOG_FORMAT", "json").strip().lower()
    if log_format not in {"json", "plain"}:
        log_format = "json"

    processors = build_processors(log_format)
    if log_format == "plain":
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer, foreign_pre_chain=processors, fmt="%(message)s"
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _LOGGING_INITIALISED = True
