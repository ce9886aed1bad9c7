"""Resource kinds, their schemas and the state accessor interface."""
from .import_id import ImportKey, decode_import_key
from .kinds import CLOUD, DOCKER, QEMU, SWITCH, TEMPLATE
from .schema import Attribute, FieldSpec, FieldType, Mutability, ResourceSchema
from .state import ResourceData, ResourceState

__all__ = [
    "Attribute",
    "FieldSpec",
    "FieldType",
    "Mutability",
    "ResourceSchema",
    "ResourceData",
    "ResourceState",
    "ImportKey",
    "decode_import_key",
    "RESOURCE_SCHEMAS",
]

# Resource type registry
RESOURCE_SCHEMAS: dict[str, ResourceSchema] = {
    schema.resource_type: schema
    for schema in (CLOUD, SWITCH, TEMPLATE, DOCKER, QEMU)
}
