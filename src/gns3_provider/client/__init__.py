"""Controller REST client."""
from .api import ApiResponse, ControllerClient

__all__ = ["ApiResponse", "ControllerClient"]
