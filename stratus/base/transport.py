"""
Transport adapters.

The request pipeline only needs something that can POST a body to a URL
and hand back the status and raw bytes.  :class:`Transport` is that
contract; :class:`URLLib3Transport` is the default implementation, built on
botocore's pooled urllib3 session.

Adapters raise :class:`~stratus.base.exceptions.TransportError` for
connection, TLS and timeout failures.  They never inspect or decode the
response body and never retry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Protocol, runtime_checkable

from botocore.awsrequest import AWSRequest
from botocore.exceptions import BotoCoreError
from botocore.httpsession import URLLib3Session

from stratus.base.exceptions import TransportError


@dataclass(frozen=True)
class RawResponse:
    """Undecoded HTTP response: status code, body bytes and headers."""

    status: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@runtime_checkable
class Transport(Protocol):
    """Anything that can send one HTTP request and return the raw response."""

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
    ) -> RawResponse:
        """Send a single request.

        Raises:
            TransportError: If no response could be obtained.
        """
        ...


class URLLib3Transport:
    """Default adapter backed by botocore's ``URLLib3Session``.

    The session keeps a urllib3 connection pool, so one adapter can be
    shared by concurrent calls; pool size is bounded by
    ``max_pool_connections``.
    """

    def __init__(
        self,
        *,
        timeout: float = 60.0,
        verify: bool = True,
        max_pool_connections: int = 10,
    ) -> None:
        self._session = URLLib3Session(
            verify=verify,
            timeout=timeout,
            max_pool_connections=max_pool_connections,
        )

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
    ) -> RawResponse:
        request = AWSRequest(method=method, url=url, headers=dict(headers), data=body)
        try:
            response = self._session.send(request.prepare())
        except BotoCoreError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        return RawResponse(
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()
