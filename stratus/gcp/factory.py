"""GCP service factory.

Maps service names to their GCP SDK implementations.
``SERVICE_REGISTRY`` is consumed by :func:`stratus.factory.universal_factory`.
"""

from stratus.gcp.compute import Compute


# Service registry for GCP
SERVICE_REGISTRY: dict[str, type] = {
    "compute": Compute,
}
