"""Generic lifecycle engine for GNS3 nodes.

One ResourceReconciler serves every resource kind; the kind's ResourceSchema
supplies all per-kind differences (payload shape, endpoint, start step,
import format).

Status policy per operation:

    create  POST   201        anything else rejected
    start   POST   200        anything else rejected (node already exists)
    read    GET    200        404 clears identity, not an error
    update  PUT    200        anything else rejected
    delete  DELETE 204        404 counts as success
"""
import logging
from typing import Any, Optional

from ..client.api import ApiResponse, ControllerClient
from ..exceptions import (
    MissingIdentityError,
    PartialCreateError,
    ProtocolError,
    ProviderError,
    RejectedRequestError,
    SchemaError,
)
from ..resources.import_id import decode_import_key
from ..resources.schema import ResourceSchema
from ..resources.state import ResourceData, ResourceState
from ..utils.logging_config import timed

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_CREATED = 201
HTTP_NO_CONTENT = 204
HTTP_NOT_FOUND = 404

PROJECT_FIELD = "project_id"


class ResourceReconciler:
    """Drives one resource instance through create/read/update/delete/import.

    Usage:
        reconciler = ResourceReconciler(DOCKER, client)
        state = ResourceData(declared={"project_id": "p1", "name": "web", "image": "nginx"})
        reconciler.create(state)
        reconciler.read(state)
    """

    def __init__(self, schema: ResourceSchema, client: ControllerClient):
        self.schema = schema
        self.client = client

    @property
    def resource_type(self) -> str:
        return self.schema.resource_type

    # --- Helpers ---

    def _project_id(self, state: ResourceState) -> str:
        """Declared project, falling back to the one recorded by import."""
        project_id = state.get_declared(PROJECT_FIELD) or state.get_computed(PROJECT_FIELD)
        if not project_id:
            raise SchemaError(f"{self.resource_type}: project_id is not set")
        return project_id

    def _require_identity(self, state: ResourceState, operation: str) -> str:
        if not state.exists:
            raise MissingIdentityError(
                f"{self.resource_type}: cannot {operation} a node without an ID; "
                "skip this call when the node is already absent"
            )
        return state.identity

    def _expect(self, resp: ApiResponse, status: int, operation: str) -> None:
        if resp.status_code != status:
            raise RejectedRequestError(
                f"{self.resource_type} {operation}", resp.status_code, resp.diagnostic
            )

    def _apply(self, state: ResourceState, values: dict[str, Any]) -> None:
        for name, value in values.items():
            state.set_computed(name, value)

    # --- Lifecycle ---

    @timed("create")
    def create(self, state: ResourceState) -> str:
        """Create the node and, if requested, start it.

        Identity is assigned as soon as the controller returns a node_id. Any
        later failure (unreadable response fields, start step) leaves it set
        and the raised error carries it: the node exists and was not rolled back.

        Returns:
            The controller-assigned node ID
        """
        payload = self.schema.create_payload(state)
        project_id = self._project_id(state)

        if self.schema.template_field:
            template_id = self.schema.resolve(state, self.schema.template_field).value
            resp = self.client.create_from_template(project_id, template_id, payload)
        else:
            resp = self.client.create_node(project_id, payload)
        self._expect(resp, HTTP_CREATED, "create")

        body = resp.body
        node_id = body.get("node_id") if isinstance(body, dict) else None
        if not isinstance(node_id, str) or not node_id:
            raise ProtocolError(
                f"{self.resource_type}: controller reported success but returned no node_id",
                operation="create",
                body=resp.diagnostic,
            )

        state.set_identity(node_id)
        try:
            values = self.schema.project_response(body)
        except ProtocolError as e:
            raise ProtocolError(
                f"node {node_id} was created but its response could not be read: {e}",
                operation="create",
                body=resp.diagnostic,
                identity=node_id,
            ) from e
        self._apply(state, values)
        logger.info(f"Created {self.resource_type} {node_id} in project {project_id}")

        if self.schema.start_field and self.schema.resolve(state, self.schema.start_field).value:
            try:
                self._start(project_id, node_id)
            except ProviderError as e:
                raise PartialCreateError(node_id, str(e)) from e

        return node_id

    def _start(self, project_id: str, node_id: str) -> None:
        resp = self.client.start_node(project_id, node_id)
        self._expect(resp, HTTP_OK, "start")
        logger.info(f"Started {self.resource_type} {node_id}")

    @timed("read")
    def read(self, state: ResourceState) -> Optional[dict[str, Any]]:
        """Refresh state from the controller.

        Returns the projected attributes, or None when the node is absent
        (identity empty, or the controller answered 404, in which case the
        identity is cleared so the orchestrator schedules recreation).
        """
        if not state.exists:
            return None
        node_id = state.identity
        project_id = self._project_id(state)

        resp = self.client.get_node(project_id, node_id)
        if resp.status_code == HTTP_NOT_FOUND:
            logger.info(f"{self.resource_type} {node_id} no longer exists; clearing ID")
            state.clear_identity()
            return None
        self._expect(resp, HTTP_OK, "read")

        values = self.schema.project_response(resp.body)
        self._apply(state, values)
        return values

    @timed("update")
    def update(self, state: ResourceState) -> bool:
        """Send changed mutable attributes, then re-read.

        Precondition: changes to immutable attributes were already handled by
        replacing the node; such changes are ignored here.

        Returns:
            False when there was nothing to send (no request made)
        """
        node_id = self._require_identity(state, "update")
        project_id = self._project_id(state)

        payload = self.schema.update_payload(state)
        if not payload:
            logger.debug(f"{self.resource_type} {node_id}: no changes to send")
            return False

        resp = self.client.update_node(project_id, node_id, payload)
        self._expect(resp, HTTP_OK, "update")
        logger.info(f"Updated {self.resource_type} {node_id}: {sorted(payload)}")

        self.read(state)
        return True

    @timed("delete")
    def delete(self, state: ResourceState) -> None:
        """Delete the node; a node that is already gone counts as deleted.

        Precondition: identity is set. The orchestrator must skip delete for
        instances whose identity is already empty.
        """
        node_id = self._require_identity(state, "delete")
        project_id = self._project_id(state)

        resp = self.client.delete_node(project_id, node_id)
        if resp.status_code == HTTP_NOT_FOUND:
            logger.info(f"{self.resource_type} {node_id} already absent")
        else:
            self._expect(resp, HTTP_NO_CONTENT, "delete")
            logger.info(f"Deleted {self.resource_type} {node_id}")
        state.clear_identity()

    def import_state(self, raw_key: str, state: Optional[ResourceState] = None) -> ResourceState:
        """Adopt an existing node from an import key without calling the controller.

        Only project_id and identity are populated; a later read fills in the
        remaining attributes.
        """
        key = decode_import_key(raw_key, allow_legacy=self.schema.legacy_import)
        if state is None:
            state = ResourceData()
        state.set_computed(PROJECT_FIELD, key.project_id)
        state.set_identity(key.node_id)
        logger.info(f"Imported {self.resource_type} {key}")
        return state
