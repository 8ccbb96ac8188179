"""Query API request signing (signature version 2, HMAC-SHA256)."""

from __future__ import annotations

import base64
import hashlib
import hmac

from stratus.aws.canonical import encode

SIGNATURE_METHOD = "HmacSHA256"
SIGNATURE_VERSION = "2"


class Signer:
    """Computes the ``Signature`` parameter for a canonical body.

    The signature covers ``METHOD\\nHOST\\nPATH\\n`` followed by the
    canonical body, so it depends on every parameter including the
    request timestamp.  A signer holds nothing but the secret key and can
    be shared across threads.
    """

    def __init__(self, secret_key: str) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._key = secret_key.encode("utf-8")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(method={SIGNATURE_METHOD!r})"

    @staticmethod
    def string_to_sign(method: str, host: str, path: str, body: str) -> str:
        """Return the exact text the signature is computed over.

        A single trailing ``&`` separator on *body* is dropped; anything
        else is left untouched.
        """
        if body.endswith("&"):
            body = body[:-1]
        return f"{method.upper()}\n{host}\n{path}\n{body}"

    def signature(self, method: str, host: str, path: str, body: str) -> str:
        """Return the Base64 HMAC-SHA256 signature (not yet URL-encoded)."""
        digest = hmac.new(
            self._key,
            self.string_to_sign(method, host, path, body).encode("utf-8"),
            hashlib.sha256,
        ).digest()
        return base64.b64encode(digest).decode("ascii").rstrip("\n")

    def sign(self, method: str, host: str, path: str, body: str) -> str:
        """Return *body* with ``Signature=<value>`` appended as the last pair.

        Raises:
            ValueError: If *body* already carries a signature.
        """
        if body.endswith("&"):
            body = body[:-1]
        if body.startswith("Signature=") or "&Signature=" in body:
            raise ValueError("Existing signature in parameters")
        pair = f"Signature={encode(self.signature(method, host, path, body))}"
        return f"{body}&{pair}" if body else pair
