import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from newsextract.services.extractor import extract_article
from newsextract.services.general_parser import parse_content
from newsextract.utils.correlation import correlation_scope
from newsextract.utils.logging_config import setup_logging


def extract_file(path, url, general=False):
    """Run extraction over a saved HTML file and return the JSON-ready payload."""
    html = Path(path).read_text(encoding="utf-8", errors="replace")
    if general:
        return parse_content(url, html).to_dict()
    return extract_article(url, html).to_payload()


def main(argv=None):
    load_dotenv()
    setup_logging()

    parser = argparse.ArgumentParser(description="Extract article fields from a saved page.")
    parser.add_argument("path", help="Path to the HTML file.")
    parser.add_argument("--url", required=True, help="URL the page was fetched from.")
    parser.add_argument(
        "--general",
        action="store_true",
        help="Use the general-purpose parser instead of the article extractor.",
    )
    args = parser.parse_args(argv)

    if not Path(args.path).is_file():
        print(f"Error: {args.path} is not a file.", file=sys.stderr)
        return 1

    with correlation_scope(url=args.url, endpoint="extract_file"):
        payload = extract_file(args.path, args.url, general=args.general)
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
