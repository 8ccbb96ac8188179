"""Signed query-API request pipeline.

:class:`QueryClient` is the one place that talks to the endpoint.  For each
call it merges the protocol fields into the caller's parameters,
canonicalizes and signs them, POSTs the body through a
:class:`~stratus.base.transport.Transport`, and decodes the answer exactly
once.  It makes a single attempt and keeps no per-call state on the
instance.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable, Mapping

from stratus.aws.canonical import ParamValue, canonicalize
from stratus.aws.decoders import DecodedResponse, Decoder, ErrorDecoder, fault_from_record
from stratus.aws.signer import SIGNATURE_METHOD, SIGNATURE_VERSION, Signer
from stratus.base.config import EC2Config
from stratus.base.exceptions import DecodeError, ProviderError, TransportError
from stratus.base.logger import st_logger
from stratus.base.transport import RawResponse, Transport, URLLib3Transport

METHOD = "POST"
PATH = "/"
CONTENT_TYPE = "application/x-www-form-urlencoded"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Fields owned by the pipeline; callers may not supply them.
RESERVED_PARAMS = frozenset(
    {
        "Action",
        "AWSAccessKeyId",
        "SignatureMethod",
        "SignatureVersion",
        "Timestamp",
        "Version",
        "Signature",
    }
)

_error_decoder = ErrorDecoder()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QueryClient:
    """Signs and sends query-API requests for one credential and endpoint.

    Attributes:
        config: Frozen endpoint and credential settings.
        transport: Adapter used to reach the endpoint.
    """

    def __init__(
        self,
        config: EC2Config,
        transport: Transport | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Validated EC2 configuration.
            transport: Optional adapter; defaults to :class:`URLLib3Transport`.
            clock: Source of the current UTC time, read once per request.
        """
        self.config = config
        self.transport = transport or URLLib3Transport(timeout=config.timeout)
        self._signer = Signer(config.aws_secret_access_key)
        self._clock = clock

    def __repr__(self) -> str:
        return f"QueryClient(endpoint={self.config.endpoint!r})"

    def build_params(
        self, action: str, params: Mapping[str, ParamValue]
    ) -> dict[str, ParamValue]:
        """Merge protocol fields into *params*.

        Raises:
            ValueError: If *params* already uses a reserved field name.
        """
        clash = RESERVED_PARAMS.intersection(params)
        if clash:
            raise ValueError(f"Reserved parameter(s) supplied by caller: {', '.join(sorted(clash))}")
        merged = dict(params)
        merged.update(
            {
                "Action": action,
                "AWSAccessKeyId": self.config.aws_access_key_id,
                "SignatureMethod": SIGNATURE_METHOD,
                "SignatureVersion": SIGNATURE_VERSION,
                "Timestamp": self._clock().astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT),
                "Version": self.config.api_version,
            }
        )
        return merged

    def signed_body(self, action: str, params: Mapping[str, ParamValue]) -> str:
        """Return the canonical, signed body for one request."""
        body = canonicalize(self.build_params(action, params))
        return self._signer.sign(METHOD, self.config.host, PATH, body)

    def execute(
        self,
        action: str,
        params: Mapping[str, ParamValue],
        decoder: Decoder,
    ) -> DecodedResponse:
        """Perform one signed round trip and decode the result.

        Args:
            action: Provider action name (e.g. ``DescribeVolumes``).
            params: Business parameters, already using wire names.
            decoder: Decoder bound to *action*.

        Returns:
            The decoded, read-only record.

        Raises:
            TransportError: The endpoint could not be reached.
            ProviderError: The provider reported a fault.
            DecodeError: The response did not have the expected shape.
        """
        body = self.signed_body(action, params)
        host = self.config.host
        url = f"{self.config.endpoint}{PATH}"
        started = time.monotonic()
        try:
            response = self.transport.send(
                METHOD, url, {"Content-Type": CONTENT_TYPE}, body.encode("utf-8")
            )
        except (TransportError, OSError) as e:
            st_logger.error(
                f"{action} failed to reach {host}",
                provider="aws",
                service="ec2",
                operation=action,
                host=host,
            )
            raise TransportError(f"{action} to {host} failed: {e}", host=host, action=action) from e
        elapsed_ms = round((time.monotonic() - started) * 1000, 1)
        st_logger.info(
            f"{action} completed",
            provider="aws",
            service="ec2",
            operation=action,
            host=host,
            status=response.status,
            elapsed_ms=elapsed_ms,
        )
        if not response.ok:
            raise self._fault(response)
        try:
            return decoder.decode(response.body)
        except ProviderError as e:
            if e.status is None:
                e.status = response.status
            raise

    @staticmethod
    def _fault(response: RawResponse) -> ProviderError:
        try:
            record = _error_decoder.decode(response.body)
        except DecodeError:
            record = {}
        if record.get("Errors"):
            return fault_from_record(record, status=response.status)
        snippet = response.body[:200].decode("utf-8", errors="replace").strip()
        return ProviderError(f"HTTP{response.status}", snippet or None, status=response.status)
