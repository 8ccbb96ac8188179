"""Shared configuration, errors, logging and transport for all providers."""

from .config import EC2Config, GCPConfig, validate_config
from .exceptions import (
    ConfigurationError,
    DecodeError,
    ProviderError,
    StratusError,
    TransportError,
)
from .supported_services import existing_services, existing_cloud_providers
from .transport import RawResponse, Transport, URLLib3Transport


__all__ = [
    "ConfigurationError",
    "DecodeError",
    "EC2Config",
    "GCPConfig",
    "ProviderError",
    "RawResponse",
    "StratusError",
    "Transport",
    "TransportError",
    "URLLib3Transport",
    "existing_services",
    "existing_cloud_providers",
    "validate_config",
]
