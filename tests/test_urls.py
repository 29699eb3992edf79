from __future__ import annotations

import pytest

from url_metadata.models import MetadataRecord
from url_metadata.urls import has_absolute_prefix, resolve_relative_urls, resolve_url


@pytest.mark.parametrize(
    ("base", "candidate", "expected"),
    [
        ("http://host:8080", "/favicon.ico", "http://host:8080/favicon.ico"),
        ("https://example.com/a/b/c", "/x.png", "https://example.com/x.png"),
        ("https://example.com/a/b/c", "https://cdn.test/x.png", "https://cdn.test/x.png"),
        ("https://example.com/a", "http://cdn.test/x.png", "http://cdn.test/x.png"),
        ("https://example.com/a", "", ""),
        ("https://example.com/a", "x.png", "x.png"),
        ("https://example.com/a", "../x.png", "../x.png"),
        ("example.com", "/x.png", "/x.png"),
        ("", "/x.png", "/x.png"),
    ],
)
def test_resolve_url(base: str, candidate: str, expected: str) -> None:
    assert resolve_url(base, candidate) == expected


def test_has_absolute_prefix() -> None:
    assert has_absolute_prefix("https://a")
    assert has_absolute_prefix("http://a")
    assert not has_absolute_prefix("/a")
    assert not has_absolute_prefix("//cdn.test/a")


def test_resolve_relative_urls_touches_image_and_favicon_only() -> None:
    record = MetadataRecord(url="https://example.com/p", title="/t", image_url="/i.png", favicon_url="/f.ico")
    resolved = resolve_relative_urls(record, record.url)
    assert resolved.image_url == "https://example.com/i.png"
    assert resolved.favicon_url == "https://example.com/f.ico"
    assert resolved.title == "/t"
    assert record.image_url == "/i.png"
