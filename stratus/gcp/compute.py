"""GCP Compute Engine backend-service operations.

Unlike EC2, this provider is reached through its RPC-over-HTTPS client
library, which handles authentication and encoding itself.  The wrappers
here only scope calls to the configured project and translate library
errors into the Stratus error kinds.
"""

from __future__ import annotations

from typing import Any, NoReturn

from google.api_core import exceptions as gcp_exceptions
from google.cloud import compute_v1

from stratus.base.async_support import AsyncMixin
from stratus.base.config import GCPConfig
from stratus.base.exceptions import ProviderError, TransportError
from stratus.base.logger import st_logger

# Failures where no usable answer came back from the endpoint.
_TRANSPORT_ERRORS: tuple[type[Exception], ...] = (
    gcp_exceptions.ServiceUnavailable,
    gcp_exceptions.DeadlineExceeded,
    gcp_exceptions.RetryError,
)

_HOST = "compute.googleapis.com"


def _handle(e: Exception, operation: str) -> NoReturn:
    st_logger.error(
        f"{operation} failed",
        provider="gcp",
        service="compute",
        operation=operation,
        host=_HOST,
    )
    if isinstance(e, _TRANSPORT_ERRORS):
        raise TransportError(f"{operation} failed: {e}", host=_HOST, action=operation) from e
    if isinstance(e, gcp_exceptions.GoogleAPICallError):
        raise ProviderError(
            type(e).__name__,
            e.message,
            status=int(e.code) if e.code is not None else None,
        ) from e
    raise ProviderError(type(e).__name__, str(e)) from e


def _to_dict(service: Any) -> dict[str, Any]:
    return {
        "name": service.name,
        "id": str(service.id) if service.id else "",
        "protocol": service.protocol,
        "port_name": service.port_name,
        "timeout_sec": service.timeout_sec,
        "health_checks": list(service.health_checks or []),
        "backends": [backend.group for backend in (service.backends or [])],
        "self_link": service.self_link,
    }


class Compute(AsyncMixin):
    """Backend services of one GCP project.

    Attributes:
        project_id: GCP project ID.
        client: Backend services client.
    """

    def __init__(self, config: GCPConfig) -> None:
        """Initialize the backend services client.

        Args:
            config: GCP configuration object containing project ID and credentials.
        """
        assert config.project_id is not None  # guaranteed by GCPConfig validator
        self.project_id: str = config.project_id
        self.client = compute_v1.BackendServicesClient(credentials=config.credentials)
        self._global_ops = compute_v1.GlobalOperationsClient(credentials=config.credentials)

    def _wait(self, operation: Any) -> None:
        """Block until a global operation completes."""
        self._global_ops.wait(project=self.project_id, operation=operation.name)

    def delete_backend_service(self, backend_service_name: str) -> None:
        """Delete a backend service and wait for the operation to finish.

        Raises:
            ProviderError: If the service does not exist or the API refuses.
            TransportError: If the API could not be reached.
        """
        try:
            op = self.client.delete(
                project=self.project_id, backend_service=backend_service_name
            )
            self._wait(op)
        except gcp_exceptions.GoogleAPIError as e:
            _handle(e, "delete_backend_service")

    def get_backend_service(self, backend_service_name: str) -> dict[str, Any]:
        """Return the details of one backend service."""
        try:
            service = self.client.get(
                project=self.project_id, backend_service=backend_service_name
            )
        except gcp_exceptions.GoogleAPIError as e:
            _handle(e, "get_backend_service")
        return _to_dict(service)

    def list_backend_services(self) -> list[dict[str, Any]]:
        """List the project's backend services."""
        try:
            return [_to_dict(s) for s in self.client.list(project=self.project_id)]
        except gcp_exceptions.GoogleAPIError as e:
            _handle(e, "list_backend_services")
