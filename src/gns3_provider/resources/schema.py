"""Attribute schema for GNS3 resource kinds.

Each resource kind is a ResourceSchema: an ordered table of FieldSpec rows.
The table alone drives payload projection for create, the minimal delta for
update, and the projection of controller responses back onto state.
"""
import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from ..exceptions import ProtocolError, SchemaError
from .state import ResourceState

logger = logging.getLogger(__name__)

PROPERTIES = "properties"


class FieldType(str, Enum):
    """Value type of an attribute."""
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    STRING_LIST = "string_list"
    STRING_MAP = "string_map"


class Mutability(str, Enum):
    """How an attribute may change once the node exists."""
    IMMUTABLE = "immutable"  # Change forces destroy and recreate
    MUTABLE = "mutable"      # Sent as a partial update
    COMPUTED = "computed"    # Populated from responses only


# --- Typed accessors ---

def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)


def _is_string_map(value: Any) -> bool:
    return isinstance(value, dict) and all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    )


def _decode_int(value: Any) -> int:
    # JSON numbers may arrive as floats (e.g. 10.0)
    if _is_int(value):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise TypeError(f"expected integer, got {value!r}")


def _decode_checked(check: Callable[[Any], bool], kind: str) -> Callable[[Any], Any]:
    def decode(value: Any) -> Any:
        if not check(value):
            raise TypeError(f"expected {kind}, got {value!r}")
        return value
    return decode


@dataclass(frozen=True)
class TypedAccessor:
    """Validation and decoding for one FieldType."""
    check: Callable[[Any], bool]
    decode: Callable[[Any], Any]
    zero: Callable[[], Any]


ACCESSORS: dict[FieldType, TypedAccessor] = {
    FieldType.STRING: TypedAccessor(_is_string, _decode_checked(_is_string, "string"), str),
    FieldType.INT: TypedAccessor(_is_int, _decode_int, int),
    FieldType.BOOL: TypedAccessor(_is_bool, _decode_checked(_is_bool, "boolean"), bool),
    FieldType.STRING_LIST: TypedAccessor(
        _is_string_list, lambda v: list(_decode_checked(_is_string_list, "string list")(v)), list
    ),
    FieldType.STRING_MAP: TypedAccessor(
        _is_string_map, lambda v: dict(_decode_checked(_is_string_map, "string map")(v)), dict
    ),
}


@dataclass
class Attribute:
    """Resolved attribute value with an explicit presence flag."""
    value: Any = None
    present: bool = False


@dataclass(frozen=True)
class FieldSpec:
    """One row of a resource schema."""
    name: str
    type: FieldType
    mutability: Mutability = Mutability.MUTABLE
    required: bool = False
    default: Any = None
    wire_key: Optional[str] = None  # None: never sent or read back
    group: Optional[str] = None     # Nested wire object, e.g. "properties"
    implies: dict[str, Any] = field(default_factory=dict)  # Sent alongside when present
    encode: Optional[Callable[[Any], Any]] = None
    decode: Optional[Callable[[Any], Any]] = None
    description: str = ""

    @property
    def accessor(self) -> TypedAccessor:
        return ACCESSORS[self.type]

    @property
    def on_wire(self) -> bool:
        return self.wire_key is not None

    def resolve(self, state: ResourceState) -> Attribute:
        """Declared value, else default, else absent."""
        if state.is_declared(self.name):
            value = state.get_declared(self.name)
            if not self.accessor.check(value):
                raise SchemaError(
                    f"attribute {self.name!r} must be of type {self.type.value}, got {value!r}"
                )
            return Attribute(value, True)
        if self.default is not None:
            return Attribute(copy.deepcopy(self.default), True)
        return Attribute()

    def to_wire(self, value: Any) -> Any:
        if self.encode is not None:
            return self.encode(value)
        return copy.deepcopy(value)

    def from_wire(self, raw: Any) -> Any:
        if self.decode is not None:
            raw = self.decode(raw)
        return self.accessor.decode(raw)

    def empty_value(self) -> Any:
        """Value sent when a mutable field is changed to unset."""
        if self.default is not None:
            return copy.deepcopy(self.default)
        return self.accessor.zero()


@dataclass(frozen=True)
class ResourceSchema:
    """Declaration table for one resource kind."""
    resource_type: str
    fields: tuple[FieldSpec, ...]
    node_type: Optional[str] = None
    # Field naming the template to instantiate; set means create via the template endpoint
    template_field: Optional[str] = None
    # Boolean field that triggers the post-create start request
    start_field: Optional[str] = None
    # Wire values always sent on create, keyed like the payload
    create_constants: dict[str, Any] = field(default_factory=dict)
    # Accept "<node_id>,<project_id>" import keys as well
    legacy_import: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise SchemaError(f"{self.resource_type}: duplicate field names")

    def get_field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise SchemaError(f"{self.resource_type} has no attribute {name!r}")

    def resolve(self, state: ResourceState, name: str) -> Attribute:
        return self.get_field(name).resolve(state)

    def validate_required(self, state: ResourceState) -> None:
        """Raise SchemaError if any required attribute resolves absent."""
        missing = [
            f.name for f in self.fields
            if f.required and not f.resolve(state).present
        ]
        if missing:
            raise SchemaError(
                f"{self.resource_type}: missing required attribute(s): {', '.join(missing)}"
            )

    # --- Payload projection ---

    @staticmethod
    def _place(payload: dict, spec: FieldSpec, value: Any) -> None:
        target = payload
        if spec.group:
            target = payload.setdefault(spec.group, {})
        target[spec.wire_key] = spec.to_wire(value)
        for key, implied in spec.implies.items():
            target[key] = copy.deepcopy(implied)

    def create_payload(self, state: ResourceState) -> dict[str, Any]:
        """Project declared attributes onto the create request body.

        Computed and URL-only fields are excluded; absent optional fields are
        omitted rather than sent as zero.
        """
        self.validate_required(state)
        payload: dict[str, Any] = {}
        if self.node_type:
            payload["node_type"] = self.node_type

        for spec in self.fields:
            if not spec.on_wire or spec.mutability == Mutability.COMPUTED:
                continue
            attr = spec.resolve(state)
            if attr.present:
                self._place(payload, spec, attr.value)

        for key, value in self.create_constants.items():
            if isinstance(value, dict):
                group = payload.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    group.setdefault(sub_key, copy.deepcopy(sub_value))
            else:
                payload.setdefault(key, copy.deepcopy(value))
        return payload

    def update_payload(self, state: ResourceState) -> dict[str, Any]:
        """Minimal update body: only mutable wire fields flagged as changed.

        Nested-group changes are batched under their group key. An empty dict
        means there is nothing to send.
        """
        payload: dict[str, Any] = {}
        for spec in self.fields:
            if not spec.on_wire or not state.has_changed(spec.name):
                continue
            if spec.mutability == Mutability.IMMUTABLE:
                # Orchestrator must replace the node instead
                logger.warning(
                    f"{self.resource_type}: ignoring change to immutable attribute {spec.name!r}"
                )
                continue
            if spec.mutability != Mutability.MUTABLE:
                continue
            attr = spec.resolve(state)
            value = attr.value if attr.present else spec.empty_value()
            self._place(payload, spec, value)
        return payload

    def project_response(self, body: Any) -> dict[str, Any]:
        """Extract known attribute values from a controller response.

        Fields missing from the response (or null) are left out, so callers
        only overwrite what the controller actually reported.
        """
        if not isinstance(body, dict):
            raise ProtocolError(
                f"{self.resource_type}: expected a JSON object in response, got {type(body).__name__}",
                body=body,
            )
        values: dict[str, Any] = {}
        for spec in self.fields:
            if not spec.on_wire or spec.mutability == Mutability.IMMUTABLE:
                continue
            source = body.get(spec.group) if spec.group else body
            if not isinstance(source, dict):
                continue
            raw = source.get(spec.wire_key)
            if raw is None:
                continue
            try:
                values[spec.name] = spec.from_wire(raw)
            except (TypeError, ValueError) as e:
                raise ProtocolError(
                    f"{self.resource_type}: bad value for {spec.wire_key!r} in response: {e}",
                    body=body,
                ) from e
        return values
