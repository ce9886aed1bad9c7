"""Schema tables for the five GNS3 resource kinds."""
from typing import Any

from .schema import PROPERTIES, FieldSpec, FieldType, Mutability, ResourceSchema


def encode_environment(env: dict[str, str]) -> str:
    """Docker environment map -> one ``KEY=value`` line per variable."""
    return "\n".join(f"{key}={value}" for key, value in sorted(env.items()))


def decode_environment(raw: Any) -> Any:
    """Inverse of encode_environment. Values may contain commas and ``=``."""
    if not isinstance(raw, str):
        return raw
    env = {}
    for item in raw.splitlines():
        item = item.strip()
        if not item:
            continue
        key, _, value = item.partition("=")
        env[key.strip()] = value
    return env


# --- Shared rows ---

def _project_id() -> FieldSpec:
    return FieldSpec(
        "project_id", FieldType.STRING, Mutability.IMMUTABLE, required=True,
        description="ID of the project the node belongs to.",
    )


def _name(kind: str) -> FieldSpec:
    return FieldSpec(
        "name", FieldType.STRING, required=True, wire_key="name",
        description=f"Name of the {kind}.",
    )


def _compute_id() -> FieldSpec:
    return FieldSpec(
        "compute_id", FieldType.STRING, default="local", wire_key="compute_id",
        description="Compute the node runs on.",
    )


def _position() -> tuple[FieldSpec, FieldSpec]:
    return (
        FieldSpec("x", FieldType.INT, default=0, wire_key="x",
                  description="X position on the canvas."),
        FieldSpec("y", FieldType.INT, default=0, wire_key="y",
                  description="Y position on the canvas."),
    )


def _symbol(default: str) -> FieldSpec:
    return FieldSpec(
        "symbol", FieldType.STRING, default=default, wire_key="symbol",
        description="Symbol representing the node on the canvas.",
    )


def _node_id_alias(name: str) -> FieldSpec:
    return FieldSpec(
        name, FieldType.STRING, Mutability.COMPUTED, wire_key="node_id",
        description="Node ID assigned by the controller.",
    )


def _prop(name: str, type_: FieldType, default: Any = None, **kwargs: Any) -> FieldSpec:
    return FieldSpec(name, type_, default=default, wire_key=name, group=PROPERTIES, **kwargs)


# --- Tables ---

CLOUD = ResourceSchema(
    resource_type="gns3_cloud",
    node_type="cloud",
    description="Cloud node bridging the topology to external networks.",
    fields=(
        _project_id(),
        _name("cloud node"),
        _compute_id(),
        *_position(),
        _symbol(":/symbols/classic/cloud.svg"),
        _node_id_alias("cloud_id"),
    ),
)

SWITCH = ResourceSchema(
    resource_type="gns3_switch",
    node_type="ethernet_switch",
    description="Built-in Ethernet switch node.",
    fields=(
        _project_id(),
        _name("switch node"),
        _compute_id(),
        *_position(),
        _symbol(":/symbols/classic/ethernet_switch.svg"),
        _node_id_alias("switch_id"),
    ),
)

TEMPLATE = ResourceSchema(
    resource_type="gns3_template",
    template_field="template_id",
    start_field="start",
    description="Node instantiated from an existing controller template.",
    fields=(
        _project_id(),
        FieldSpec(
            "template_id", FieldType.STRING, Mutability.IMMUTABLE, required=True,
            description="Template to instantiate.",
        ),
        _name("template node"),
        _compute_id(),
        *_position(),
        FieldSpec("start", FieldType.BOOL, default=False,
                  description="Start the node after creation."),
    ),
)

DOCKER = ResourceSchema(
    resource_type="gns3_docker",
    node_type="docker",
    start_field="start",
    create_constants={PROPERTIES: {"console_type": "none"}},
    description="Container-backed node.",
    fields=(
        _project_id(),
        _name("Docker node"),
        _compute_id(),
        *_position(),
        _prop("image", FieldType.STRING, required=True, mutability=Mutability.IMMUTABLE,
              description="Docker image; must be available to the controller."),
        _prop("environment", FieldType.STRING_MAP,
              encode=encode_environment, decode=decode_environment,
              description="Environment variables."),
        _prop("extra_volumes", FieldType.STRING_LIST,
              description="Extra volume mappings, 'host_dir:container_dir'."),
        _prop("start_command", FieldType.STRING,
              description="Command run when the container starts."),
        FieldSpec("start", FieldType.BOOL, default=True,
                  description="Start the container after creation."),
        _node_id_alias("docker_id"),
    ),
)

QEMU = ResourceSchema(
    resource_type="gns3_qemu",
    node_type="qemu",
    start_field="start_vm",
    legacy_import=True,
    description="QEMU virtual machine node.",
    fields=(
        _project_id(),
        _name("QEMU VM"),
        _compute_id(),
        *_position(),
        _symbol(":/symbols/classic/computer.svg"),
        _prop("adapter_type", FieldType.STRING, "e1000"),
        _prop("adapters", FieldType.INT, 1),
        _prop("bios_image", FieldType.STRING),
        _prop("cdrom_image", FieldType.STRING),
        _prop("console", FieldType.INT, description="Console TCP port."),
        _prop("console_type", FieldType.STRING, "telnet"),
        _prop("cpus", FieldType.INT, 1),
        _prop("ram", FieldType.INT, 256, description="RAM in MB."),
        _prop("mac_address", FieldType.STRING),
        _prop("options", FieldType.STRING, description="Extra QEMU command line options."),
        _prop("platform", FieldType.STRING, description="Architecture, e.g. x86_64."),
        _prop("hda_disk_image", FieldType.STRING,
              implies={"hda_disk_interface": "virtio"}),
        FieldSpec("start_vm", FieldType.BOOL, default=False,
                  description="Start the VM after creation."),
    ),
)
