"""Resource lifecycle reconciliation."""
from .engine import ResourceReconciler

__all__ = ["ResourceReconciler"]
