"""Accessor interface between the orchestrating layer and the reconciler.

The orchestrating layer owns persisted state. The reconciler only sees it
through ResourceState: it reads desired attributes and change flags, and
writes back computed attributes and the remote identity.
"""
import copy
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional


class ResourceState(ABC):
    """Read/write view of one resource instance."""

    # Desired state (read-only for the reconciler)
    @abstractmethod
    def get_declared(self, field: str) -> Any:
        """Value the user declared for ``field`` (None when not declared)."""
        pass

    @abstractmethod
    def is_declared(self, field: str) -> bool:
        """Presence flag: True if the user supplied a value for ``field``."""
        pass

    @abstractmethod
    def has_changed(self, field: str) -> bool:
        """True if ``field`` differs from the last applied state."""
        pass

    # Observed state (written by the reconciler)
    @abstractmethod
    def get_computed(self, field: str) -> Any:
        """Last value reported by the controller for ``field``."""
        pass

    @abstractmethod
    def set_computed(self, field: str, value: Any) -> None:
        pass

    @property
    @abstractmethod
    def identity(self) -> str:
        """Remote node ID; empty string when the node does not exist."""
        pass

    @abstractmethod
    def set_identity(self, identity: str) -> None:
        pass

    @abstractmethod
    def clear_identity(self) -> None:
        pass

    @property
    def exists(self) -> bool:
        return bool(self.identity)


class ResourceData(ResourceState):
    """In-memory ResourceState.

    ``changed`` lists the fields flagged as modified since the last apply;
    when omitted, every declared field counts as changed.
    """

    def __init__(
        self,
        declared: Optional[dict[str, Any]] = None,
        changed: Optional[Iterable[str]] = None,
        computed: Optional[dict[str, Any]] = None,
        identity: str = "",
    ):
        self._declared: dict[str, Any] = dict(declared or {})
        self._changed: Optional[set[str]] = set(changed) if changed is not None else None
        self._computed: dict[str, Any] = dict(computed or {})
        self._identity = identity

    def get_declared(self, field: str) -> Any:
        return copy.deepcopy(self._declared.get(field))

    def is_declared(self, field: str) -> bool:
        return field in self._declared and self._declared[field] is not None

    def has_changed(self, field: str) -> bool:
        if self._changed is None:
            return field in self._declared
        return field in self._changed

    def get_computed(self, field: str) -> Any:
        return self._computed.get(field)

    def set_computed(self, field: str, value: Any) -> None:
        self._computed[field] = value

    @property
    def identity(self) -> str:
        return self._identity

    def set_identity(self, identity: str) -> None:
        self._identity = identity

    def clear_identity(self) -> None:
        self._identity = ""

    # Helpers for embedding orchestrators

    def declare(self, field: str, value: Any) -> None:
        """Set a desired value and flag it as changed."""
        self._declared[field] = value
        if self._changed is not None:
            self._changed.add(field)

    def unset(self, field: str) -> None:
        """Drop a desired value; the field still counts as changed."""
        self._declared.pop(field, None)
        if self._changed is None:
            self._changed = set(self._declared)
        self._changed.add(field)

    def mark_applied(self) -> None:
        """Reset change flags after a successful apply."""
        self._changed = set()

    @property
    def computed(self) -> dict[str, Any]:
        return dict(self._computed)

    def __repr__(self) -> str:
        return f"ResourceData(identity={self._identity!r}, declared={self._declared!r})"
