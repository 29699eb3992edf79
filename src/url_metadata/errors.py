from __future__ import annotations


class UrlMetadataError(RuntimeError):
    pass


class UsageError(UrlMetadataError):
    pass


class RequestConstructionError(UrlMetadataError):
    pass


class NetworkError(UrlMetadataError):
    pass


class FetchTimeoutError(NetworkError):
    pass


class UnexpectedStatusError(UrlMetadataError):
    def __init__(self, status_code: int, url: str | None = None):
        self.status_code = status_code
        self.url = url
        super().__init__(f"unexpected status code: {status_code}")


class ParseError(UrlMetadataError):
    pass
