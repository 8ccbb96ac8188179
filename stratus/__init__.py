"""Stratus: signed query-API client for cloud compute.

Entry point for the library. Import :func:`universal_factory` to create
a compute client with a single call::

    from stratus import universal_factory

    ec2 = universal_factory("compute", "aws", {
        "aws_access_key_id": "...",
        "aws_secret_access_key": "...",
    })
    ec2.describe_volumes()
"""

from .base import (
    ConfigurationError,
    DecodeError,
    ProviderError,
    StratusError,
    TransportError,
)
from .factory import universal_factory

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "ProviderError",
    "StratusError",
    "TransportError",
    "universal_factory",
]
