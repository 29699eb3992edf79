from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace

from url_metadata.config import load_settings
from url_metadata.errors import UrlMetadataError, UsageError
from url_metadata.fetch import MetadataClient
from url_metadata.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="url-metadata",
        description="Fetch a web page and print its metadata as JSON.",
    )
    parser.add_argument("url", nargs="?", help="absolute URL of the page to inspect")
    parser.add_argument("--timeout", type=float, default=None, help="total request timeout in seconds")
    parser.add_argument("--log-level", default=None, help="logging level (default: $LOG_LEVEL or WARNING)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        configure_logging(args.log_level or settings.log_level)

        if not args.url:
            parser.print_usage(sys.stderr)
            raise UsageError("missing required URL argument")

        client = MetadataClient.from_settings(settings)
        if args.timeout is not None:
            client = replace(client, timeout_s=args.timeout)
        output = client.get(args.url).to_json()
    except (UrlMetadataError, ValueError, TypeError) as e:
        # pydantic ValidationError and json serialization failures are ValueError/TypeError.
        logger.debug("metadata lookup failed", exc_info=True)
        print(f"Error: {e}")
        return 1

    print(output)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
