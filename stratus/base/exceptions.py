"""
Stratus exception hierarchy.

Every failure surfaced by a client call is one of four kinds, all
inheriting from :class:`StratusError`.  None of them is recovered
internally: a call either returns a fully decoded record or raises
exactly one of these.
"""

from __future__ import annotations


# ── Base ──────────────────────────────────────────────────────────────
class StratusError(Exception):
    """Root exception for all Stratus errors."""


# ── Configuration ─────────────────────────────────────────────────────
class ConfigurationError(StratusError):
    """Missing or invalid credentials / endpoint settings.

    Raised while constructing a client, before any network activity.
    """


# ── Transport ─────────────────────────────────────────────────────────
class TransportError(StratusError):
    """Connection, TLS or timeout failure reaching the provider.

    Attributes:
        host: Host the request was addressed to.
        action: Provider action being invoked, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        host: str | None = None,
        action: str | None = None,
    ) -> None:
        super().__init__(message)
        self.host = host
        self.action = action


# ── Provider faults ───────────────────────────────────────────────────
class ProviderError(StratusError):
    """The provider answered but reported an application-level fault.

    Attributes:
        code: Provider fault code (e.g. ``InvalidVolume.NotFound``).
        message: Provider fault message.
        status: HTTP status of the response, if any.
        request_id: Provider request identifier, if one was returned.
    """

    def __init__(
        self,
        code: str | None,
        message: str | None,
        *,
        status: int | None = None,
        request_id: str | None = None,
    ) -> None:
        text = code or "UnknownError"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)
        self.code = code
        self.message = message
        self.status = status
        self.request_id = request_id


# ── Decoding ──────────────────────────────────────────────────────────
class DecodeError(StratusError):
    """The response body did not match the shape the decoder expects."""
