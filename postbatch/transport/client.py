from __future__ import annotations

import codecs
import logging
from typing import Sequence
from urllib.parse import urlencode

import httpx

from .types import (
    TimeoutConfig,
    TransportDecodeError,
    TransportError,
    TransportTimeoutError,
)

DEFAULT_CHARSET = "utf-8"

log = logging.getLogger(__name__)


class HttpTransport:
    """Synchronous form POST client on top of `httpx.Client`.

    The response body is returned whatever the status code is; only network,
    protocol, timeout and decoding problems raise `TransportError`.
    """

    def __init__(
        self,
        timeouts: TimeoutConfig | None = None,
        *,
        charset: str = DEFAULT_CHARSET,
        response_charset: str = DEFAULT_CHARSET,
        client: httpx.Client | None = None,
    ) -> None:
        self.timeouts = timeouts or TimeoutConfig()
        self.charset = _check_charset(charset)
        self.response_charset = _check_charset(response_charset)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=_to_httpx(self.timeouts))

    def post(
        self,
        url: str,
        params: Sequence[tuple[str, str]],
        timeouts: TimeoutConfig | None = None,
    ) -> str:
        try:
            body = urlencode(list(params), encoding=self.charset).encode("ascii")
        except UnicodeEncodeError as exc:
            raise TransportError(
                f"{url}: parameters cannot be encoded as {self.charset}"
            ) from exc
        headers = {
            "Content-Type": f"application/x-www-form-urlencoded; charset={self.charset}"
        }
        effective = timeouts or self.timeouts

        try:
            response = self._client.post(
                url, content=body, headers=headers, timeout=_to_httpx(effective)
            )
        except httpx.TimeoutException as exc:
            raise TransportTimeoutError(f"{url}: timed out ({exc})") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"{url}: {exc}") from exc

        log.debug("POST %s -> %d (%d bytes)", url, response.status_code, len(response.content))

        try:
            return response.content.decode(self.response_charset)
        except UnicodeDecodeError as exc:
            raise TransportDecodeError(
                f"{url}: response is not valid {self.response_charset}"
            ) from exc

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _to_httpx(timeouts: TimeoutConfig) -> httpx.Timeout:
    socket = timeouts.socket_ms / 1000.0
    return httpx.Timeout(
        connect=timeouts.connect_ms / 1000.0,
        read=socket,
        write=socket,
        pool=timeouts.connection_request_ms / 1000.0,
    )


def _check_charset(charset: str) -> str:
    try:
        return codecs.lookup(charset).name
    except LookupError as exc:
        raise ValueError(f"Unknown charset: {charset}") from exc
