"""GNS3 topology provider.

Manages GNS3 topology nodes (clouds, switches, template instances, Docker
containers and QEMU VMs) by reconciling declared attributes against the
controller's REST API.
"""
from .config import ProviderConfig, load_provider_config
from .provider import Provider
from .reconciler import ResourceReconciler
from .resources import RESOURCE_SCHEMAS, ResourceData, ResourceState

__version__ = "0.1.0"

__all__ = [
    "Provider",
    "ProviderConfig",
    "load_provider_config",
    "ResourceReconciler",
    "ResourceData",
    "ResourceState",
    "RESOURCE_SCHEMAS",
]
