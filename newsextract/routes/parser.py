import time
from typing import Any, Optional

import structlog
from flask import Blueprint, jsonify, request

from newsextract.services import general_parser
from newsextract.services.exceptions import InvalidInputError
from newsextract.services.extractor import extract_article
from newsextract.utils.correlation import (
    bind_extraction_context,
    correlation_id_from_headers,
    ensure_correlation_id,
)

bp = Blueprint("parser", __name__)

logger = structlog.get_logger(__name__)

INVALID_REQUEST = "Invalid Request Parameter"


def _read_body() -> tuple[Optional[str], Optional[str]]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return None, None
    url = body.get("url")
    raw_content = body.get("raw_content")
    if not isinstance(url, str) or not url.strip():
        url = None
    if not isinstance(raw_content, str) or not raw_content.strip():
        raw_content = None
    return url, raw_content


def _response(
    data: Any, status: str, error_message: Optional[str], started: float, code: int = 200
):
    return (
        jsonify(
            {
                "data": data,
                "status": status,
                "error_message": error_message,
                "processing_time_in_seconds": round(time.perf_counter() - started, 4),
            }
        ),
        code,
    )


@bp.route("/parser-extension", methods=["POST"])
def parser_extension():
    """Extract article fields from a page the caller already fetched."""
    started = time.perf_counter()
    ensure_correlation_id(correlation_id_from_headers(request.headers))
    url, raw_content = _read_body()
    bind_extraction_context(url, endpoint="parser_extension")

    if url is None or raw_content is None:
        return _response([], "Error", INVALID_REQUEST, started, 400)

    try:
        result = extract_article(url, raw_content)
    except InvalidInputError as exc:
        return _response([], "Error", str(exc), started, 400)
    except Exception as exc:
        # structlog uses the positional argument for the event name; keep ``event`` keyword-only.
        logger.exception(
            event="parser_extension_failed",
            operation="routes.parser_extension",
            url=url,
            error_type=exc.__class__.__name__,
        )
        payload = {"article_status": "Error", "article_error_status": str(exc)}
        return _response([payload], "Error", str(exc), started, 500)

    payload = result.to_payload()
    if result.status == "Done":
        return _response([payload], "Done", None, started)
    return _response(
        [payload], "Error", payload.get("article_error_status") or "Unknown error", started
    )


@bp.route("/general-parser", methods=["POST"])
def general_parser_view():
    """Clean text and metadata from any page, article or not."""
    started = time.perf_counter()
    ensure_correlation_id(correlation_id_from_headers(request.headers))
    url, raw_content = _read_body()
    bind_extraction_context(url, endpoint="general_parser")

    empty = {
        "url": url,
        "title": None,
        "content": None,
        "cleanedHtml": None,
        "description": None,
        "publishDate": None,
        "images": None,
    }
    if raw_content is None:
        return _response(empty, "Error", INVALID_REQUEST, started, 400)

    try:
        result = general_parser.parse_content(url, raw_content)
    except InvalidInputError as exc:
        return _response(empty, "Error", str(exc), started, 400)
    except Exception as exc:
        # structlog uses the positional argument for the event name; keep ``event`` keyword-only.
        logger.exception(
            event="general_parser_failed",
            operation="routes.general_parser",
            url=url,
            error_type=exc.__class__.__name__,
        )
        return _response(empty, "Error", str(exc), started, 500)

    data = {
        "url": url,
        "title": result.title,
        "content": result.content,
        "cleanedHtml": result.cleaned_html,
        "description": result.metadata.get("description"),
        "publishDate": result.metadata.get("publish_date"),
        "images": result.metadata.get("images"),
    }
    return _response(data, "Done", None, started)


@bp.route("/healthz")
def healthz():
    """Lightweight liveness probe."""
    return "ok", 200
