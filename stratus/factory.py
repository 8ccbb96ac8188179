"""Universal service factory.

Provides :func:`universal_factory`, the single entry-point for creating
service clients.  The function dispatches to provider-specific factories
(AWS, GCP) based on ``cloud_provider``, validates the config for that
provider, and returns a typed instance via ``@overload`` signatures.
"""

from typing import overload, Literal, Any, Mapping

from stratus.base import existing_services, existing_cloud_providers
from stratus.base.config import validate_config
from stratus.aws.compute import Compute as EC2Compute
from stratus.aws.factory import SERVICE_REGISTRY as AWS_SERVICES
from stratus.gcp.compute import Compute as GCPCompute
from stratus.gcp.factory import SERVICE_REGISTRY as GCP_SERVICES


# Nested factory registry: cloud_provider -> service registry
_FACTORY_REGISTRY: dict[str, dict[str, type]] = {
    "aws": AWS_SERVICES,
    "gcp": GCP_SERVICES,
}


@overload
def universal_factory(
    service_name: Literal["compute"], cloud_provider: Literal["aws"], config: Mapping[str, Any]
) -> EC2Compute: ...


@overload
def universal_factory(
    service_name: Literal["compute"], cloud_provider: Literal["gcp"], config: Mapping[str, Any]
) -> GCPCompute: ...


def universal_factory(
    service_name: existing_services,
    cloud_provider: existing_cloud_providers,
    config: Mapping[str, Any],
) -> Any:
    """
    Create a service client for a cloud provider.
    Args:
        service_name: The name of the service (e.g. 'compute').
        cloud_provider: The cloud provider ('aws' or 'gcp').
        config: Configuration mapping used to build the provider config model.
    Returns:
        An instance of the requested service class.
    Raises:
        ValueError: If the cloud provider or service is not supported.
        ConfigurationError: If the config is invalid.
    """
    if cloud_provider not in _FACTORY_REGISTRY:
        raise ValueError(f"Unsupported cloud provider: {cloud_provider}")

    provider_services = _FACTORY_REGISTRY[cloud_provider]

    if service_name not in provider_services:
        raise ValueError(
            f"Unsupported service '{service_name}' for provider '{cloud_provider}'"
        )

    service_class = provider_services[service_name]
    config_obj = validate_config(cloud_provider, dict(config))
    return service_class(config_obj)


__all__ = ["universal_factory"]
