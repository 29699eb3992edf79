from url_metadata.config import Settings, load_settings
from url_metadata.errors import (
    FetchTimeoutError,
    NetworkError,
    ParseError,
    RequestConstructionError,
    UnexpectedStatusError,
    UrlMetadataError,
    UsageError,
)
from url_metadata.extract import extract_metadata
from url_metadata.fetch import MetadataClient, default_client, fetch_metadata
from url_metadata.html_tree import Node, NodeKind, parse_html
from url_metadata.models import MetadataRecord
from url_metadata.urls import resolve_url

__all__ = [
    "__version__",
    "FetchTimeoutError",
    "MetadataClient",
    "MetadataRecord",
    "NetworkError",
    "Node",
    "NodeKind",
    "ParseError",
    "RequestConstructionError",
    "Settings",
    "UnexpectedStatusError",
    "UrlMetadataError",
    "UsageError",
    "default_client",
    "extract_metadata",
    "fetch_metadata",
    "load_settings",
    "parse_html",
    "resolve_url",
]

__version__ = "0.1.0"
