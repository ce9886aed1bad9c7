"""Provider configuration loaded from YAML and the environment."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV = "GNS3_CONFIG"
HOST_ENV = "GNS3_HOST"


@dataclass
class ProviderConfig:
    """Connection settings for one GNS3 controller."""
    host: str
    username: Optional[str] = None
    password: Optional[str] = None
    password_env: str = "GNS3_PASSWORD"
    # None keeps requests unbounded; a timeout leaves the remote outcome unknown
    timeout: Optional[float] = None
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        if not self.host:
            raise ConfigurationError("GNS3 controller host is required")
        if not self.host.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"GNS3 controller host must be an http(s) URL, got {self.host!r}"
            )
        self.host = self.host.rstrip("/")

    def get_password(self) -> str:
        """Get password from config or environment variable."""
        if self.password:
            return self.password
        return os.environ.get(self.password_env, "")

    @property
    def auth(self) -> Optional[tuple[str, str]]:
        if not self.username:
            return None
        return (self.username, self.get_password())


def _find_config() -> Optional[Path]:
    """Find the gns3.yaml config file, if any."""
    search_paths = [
        Path.cwd() / "configs" / "gns3.yaml",
        Path.cwd() / "gns3.yaml",
        Path.home() / ".config" / "gns3-provider" / "gns3.yaml",
        Path("/etc/gns3-provider/gns3.yaml"),
    ]

    for path in search_paths:
        if path.exists():
            return path
    return None


def load_provider_config(config_path: Optional[str] = None) -> ProviderConfig:
    """Load provider settings.

    Resolution order: explicit path, $GNS3_CONFIG, the standard search paths.
    $GNS3_HOST overrides the host from the file, or supplies it when no file
    exists.

    Raises:
        ConfigurationError: If the file is unreadable or no host is configured
    """
    path_str = config_path or os.environ.get(CONFIG_ENV)
    path = Path(path_str) if path_str else _find_config()

    data: dict = {}
    if path is not None:
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read provider config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Provider config {path} must be a mapping")
        # Accept both a bare mapping and one nested under "provider"
        data = dict(data.get("provider", data))
        logger.debug(f"Loaded provider config from {path}")

    env_host = os.environ.get(HOST_ENV)
    if env_host:
        data["host"] = env_host

    if not data.get("host"):
        raise ConfigurationError(
            f"No GNS3 controller host configured; set {HOST_ENV} or create configs/gns3.yaml"
        )

    try:
        return ProviderConfig(**data)
    except TypeError as e:
        raise ConfigurationError(f"Invalid provider config: {e}") from e
