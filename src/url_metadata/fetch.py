from __future__ import annotations

import logging
import socket
import threading
import time
from dataclasses import dataclass
from typing import Any

import httpx

from url_metadata.config import DEFAULT_USER_AGENT, Settings
from url_metadata.errors import (
    FetchTimeoutError,
    NetworkError,
    RequestConstructionError,
    UnexpectedStatusError,
)
from url_metadata.extract import extract_metadata
from url_metadata.html_tree import parse_html
from url_metadata.models import MetadataRecord

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0


@dataclass(frozen=True)
class FetchedPage:
    url: str
    final_url: str
    encoding: str
    body: bytes


_CONNECTED_EVENTS = frozenset({"connection.connect_tcp.complete", "connection.start_tls.complete"})


class _DeadlineWatchdog:
    """
    Enforces a total time budget on a blocking httpx request.

    httpx timeouts apply per read, so a server trickling bytes can outlast them. The
    watchdog hooks the httpcore `trace` extension to learn the connection's socket and
    shuts it down once the deadline passes, unblocking whatever read is in flight.
    """

    def __init__(self, deadline: float) -> None:
        self._deadline = deadline
        self._sockets: list[socket.socket] = []
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()
        self.expired = threading.Event()

    def trace(self, event_name: str, info: dict[str, Any]) -> None:
        if event_name not in _CONNECTED_EVENTS:
            return
        stream = info.get("return_value")
        sock = stream.get_extra_info("socket") if stream is not None else None
        with self._lock:
            if sock is not None:
                self._sockets.append(sock)
            if self._timer is None:
                self._timer = threading.Timer(max(self._deadline - time.monotonic(), 0.0), self._expire)
                self._timer.daemon = True
                self._timer.start()

    def _expire(self) -> None:
        self.expired.set()
        with self._lock:
            sockets = list(self._sockets)
        for sock in sockets:
            try:
                # Plain socket.shutdown also works on an SSLSocket without unwrapping it.
                socket.socket.shutdown(sock, socket.SHUT_RDWR)
            except OSError:
                pass  # already closed

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()


@dataclass(frozen=True)
class MetadataClient:
    """
    Fetches a single page and extracts its metadata.

    `timeout_s` is a total budget covering connect, headers and body. `transport` lets
    callers (tests mostly) swap the network layer for an `httpx.MockTransport`.
    """

    timeout_s: float = DEFAULT_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT
    max_body_bytes: int | None = None
    transport: httpx.BaseTransport | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> MetadataClient:
        return cls(
            timeout_s=settings.timeout_s,
            user_agent=settings.user_agent,
            max_body_bytes=settings.max_body_bytes,
        )

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout_s,
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
            transport=self.transport,
        )

    def fetch(self, url: str) -> FetchedPage:
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        if not url:
            raise RequestConstructionError("creating request: empty URL")

        deadline = time.monotonic() + self.timeout_s
        watchdog = _DeadlineWatchdog(deadline)
        timed_out = f"timed out after {self.timeout_s}s fetching {url}"
        logger.debug("GET %s (timeout %.1fs)", url, self.timeout_s)
        try:
            with self._client() as client, client.stream(
                "GET", url, extensions={"trace": watchdog.trace}
            ) as r:
                if r.status_code != httpx.codes.OK:
                    logger.warning("Unexpected status %s for %s", r.status_code, url)
                    raise UnexpectedStatusError(r.status_code, url=url)

                body = bytearray()
                for chunk in r.iter_bytes():
                    body.extend(chunk)
                    if watchdog.expired.is_set() or time.monotonic() > deadline:
                        raise FetchTimeoutError(timed_out)
                    if self.max_body_bytes is not None and len(body) > self.max_body_bytes:
                        logger.warning("Response too large for %s, truncating at %d bytes", url, self.max_body_bytes)
                        del body[self.max_body_bytes :]
                        break
                # A shut-down connection can also look like a short, complete body.
                if watchdog.expired.is_set():
                    raise FetchTimeoutError(timed_out)

                logger.debug("Fetched %s -> %s (%d bytes)", url, r.url, len(body))
                return FetchedPage(
                    url=url,
                    final_url=str(r.url),
                    encoding=r.encoding or "utf-8",
                    body=bytes(body),
                )
        except httpx.TimeoutException as e:
            logger.warning("Timeout fetching %s: %s", url, e)
            raise FetchTimeoutError(timed_out) from e
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise RequestConstructionError(f"creating request for {url!r}: {e}") from e
        except httpx.RequestError as e:
            if watchdog.expired.is_set():
                logger.warning("Timeout fetching %s: %s", url, e)
                raise FetchTimeoutError(timed_out) from e
            logger.warning("Failed to fetch %s: %s", url, e)
            raise NetworkError(f"fetching URL: {e}") from e
        finally:
            watchdog.cancel()

    def get(self, url: str) -> MetadataRecord:
        page = self.fetch(url)
        tree = parse_html(page.body, encoding=page.encoding)
        return extract_metadata(tree, url)


def default_client() -> MetadataClient:
    return MetadataClient()


def fetch_metadata(
    url: str,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    client: MetadataClient | None = None,
) -> MetadataRecord:
    if client is None:
        client = MetadataClient(timeout_s=timeout_s)
    return client.get(url)
