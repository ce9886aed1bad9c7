"""Import key codec.

Canonical form is ``<project_id>/<node_id>``. The QEMU resource also accepts
the older ``<node_id>,<project_id>`` form, with the operands reversed.
"""
from dataclasses import dataclass

from ..exceptions import ImportKeyError

SEPARATOR = "/"
LEGACY_SEPARATOR = ","

CANONICAL_FORMAT = "<project_id>/<node_id>"
LEGACY_FORMAT = "<node_id>,<project_id>"


@dataclass(frozen=True)
class ImportKey:
    """Composite identifier of an existing node."""
    project_id: str
    node_id: str

    def encode(self) -> str:
        return f"{self.project_id}{SEPARATOR}{self.node_id}"

    def __str__(self) -> str:
        return self.encode()


def _split(raw: str, separator: str) -> tuple[str, str]:
    first, _, second = raw.partition(separator)
    return first.strip(), second.strip()


def decode_import_key(raw: str, allow_legacy: bool = False) -> ImportKey:
    """Parse an import key.

    Args:
        raw: Key supplied by the user
        allow_legacy: Also accept ``<node_id>,<project_id>``

    Raises:
        ImportKeyError: If the key matches no accepted form
    """
    accepted = [CANONICAL_FORMAT, LEGACY_FORMAT] if allow_legacy else [CANONICAL_FORMAT]
    if not isinstance(raw, str):
        raise ImportKeyError(repr(raw), accepted)

    if allow_legacy and LEGACY_SEPARATOR in raw:
        node_id, project_id = _split(raw, LEGACY_SEPARATOR)
    elif SEPARATOR in raw:
        project_id, node_id = _split(raw, SEPARATOR)
    else:
        raise ImportKeyError(raw, accepted)

    if not project_id or not node_id:
        raise ImportKeyError(raw, accepted)
    return ImportKey(project_id=project_id, node_id=node_id)
