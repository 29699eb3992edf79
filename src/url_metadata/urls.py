from __future__ import annotations

from dataclasses import replace

from url_metadata.models import MetadataRecord

ABSOLUTE_PREFIX = "http"


def has_absolute_prefix(candidate: str) -> bool:
    return candidate.startswith(ABSOLUTE_PREFIX)


def resolve_url(base_url: str, candidate: str) -> str:
    """
    Best-effort resolver for root-relative links.

    Only `/path` candidates are rewritten, against the scheme and host of `base_url`;
    anything else (including `../x` and `x.png`) is returned unchanged.
    """
    if not candidate or has_absolute_prefix(candidate):
        return candidate
    if candidate.startswith("/"):
        # "http://host:port/a/b" -> ["http:", "", "host:port", "a/b"]
        parts = base_url.split("/", 3)
        if len(parts) >= 3:
            return parts[0] + "//" + parts[2] + candidate
    return candidate


def resolve_relative_urls(record: MetadataRecord, base_url: str) -> MetadataRecord:
    return replace(
        record,
        image_url=resolve_url(base_url, record.image_url),
        favicon_url=resolve_url(base_url, record.favicon_url),
    )
