"""Provider entry point: one controller connection shared by all resource kinds."""
import logging
from typing import Any, Optional

import httpx

from .client.api import ControllerClient
from .config.provider import ProviderConfig, load_provider_config
from .exceptions import ConfigurationError, ProtocolError, RejectedRequestError
from .reconciler.engine import HTTP_OK, ResourceReconciler
from .resources import RESOURCE_SCHEMAS
from .utils.connection import with_retry

logger = logging.getLogger(__name__)


class Provider:
    """Builds reconcilers for a configured GNS3 controller.

    The configuration is passed in explicitly; nothing is looked up from
    global state.

    Usage:
        with Provider(ProviderConfig(host="http://localhost:3080")) as provider:
            provider.check_controller()
            docker = provider.reconciler("gns3_docker")
            docker.create(state)
    """

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config
        self.client = ControllerClient(config, transport=transport)
        self._reconcilers: dict[str, ResourceReconciler] = {}

    @classmethod
    def from_config_file(cls, config_path: Optional[str] = None) -> "Provider":
        return cls(load_provider_config(config_path))

    @property
    def resource_types(self) -> list[str]:
        return sorted(RESOURCE_SCHEMAS)

    def reconciler(self, resource_type: str) -> ResourceReconciler:
        """Get or create the reconciler for a resource type."""
        if resource_type not in self._reconcilers:
            schema = RESOURCE_SCHEMAS.get(resource_type)
            if schema is None:
                raise ConfigurationError(
                    f"Unknown resource type: {resource_type} "
                    f"(known: {', '.join(self.resource_types)})"
                )
            self._reconcilers[resource_type] = ResourceReconciler(schema, self.client)
        return self._reconcilers[resource_type]

    def check_controller(
        self,
        max_attempts: int = 3,
        min_wait: float = 1,
        max_wait: float = 10,
    ) -> dict[str, Any]:
        """Query the controller version, retrying on transport errors only.

        Returns:
            The version document, e.g. {"version": "2.2.43", "local": true}
        """
        @with_retry(max_attempts=max_attempts, min_wait=min_wait, max_wait=max_wait)
        def _version() -> dict[str, Any]:
            resp = self.client.version()
            if resp.status_code != HTTP_OK:
                raise RejectedRequestError("version", resp.status_code, resp.diagnostic)
            if not isinstance(resp.body, dict):
                raise ProtocolError("version response is not a JSON object", "version", resp.diagnostic)
            return resp.body

        version = _version()
        logger.info(f"Connected to GNS3 controller {self.config.host} (version {version.get('version', '?')})")
        return version

    def close(self) -> None:
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
