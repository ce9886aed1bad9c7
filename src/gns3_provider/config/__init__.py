"""Provider configuration."""
from .provider import ProviderConfig, load_provider_config

__all__ = ["ProviderConfig", "load_provider_config"]
