"""AWS service factory.

Maps service names to their AWS implementations.
``SERVICE_REGISTRY`` is consumed by :func:`stratus.factory.universal_factory`.
"""

from stratus.aws.compute import Compute


# Service registry for AWS
SERVICE_REGISTRY: dict[str, type] = {
    "compute": Compute,
}
