"""HTTP client for the GNS3 controller REST API (v2).

The client only moves JSON over HTTP. It never retries and never decides
whether a status code is acceptable; that policy belongs to the caller.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..config.provider import ProviderConfig
from ..exceptions import EncodingError, ProtocolError, TransportError

logger = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    """Decoded controller response."""
    status_code: int
    body: Any = None
    text: str = ""

    @property
    def diagnostic(self) -> Any:
        """Parsed body when there is one, raw text otherwise."""
        return self.body if self.body is not None else self.text


def _seg(value: str) -> str:
    return quote(str(value), safe="")


class ControllerClient:
    """Thin request/response wrapper around the controller's project endpoints."""

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config
        self._http = httpx.Client(
            base_url=config.host,
            # Explicit None: httpx would otherwise apply its own 5s default
            timeout=httpx.Timeout(config.timeout),
            auth=config.auth,
            verify=config.verify_ssl,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    # Paths

    @staticmethod
    def nodes_path(project_id: str) -> str:
        return f"/v2/projects/{_seg(project_id)}/nodes"

    @staticmethod
    def node_path(project_id: str, node_id: str) -> str:
        return f"/v2/projects/{_seg(project_id)}/nodes/{_seg(node_id)}"

    @staticmethod
    def template_path(project_id: str, template_id: str) -> str:
        return f"/v2/projects/{_seg(project_id)}/templates/{_seg(template_id)}"

    # Transport

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[dict] = None,
        operation: str = "",
    ) -> ApiResponse:
        """Send one request and decode the response.

        Raises:
            EncodingError: payload is not JSON-serializable (nothing sent)
            TransportError: request failed or timed out
            ProtocolError: 2xx response whose body is not valid JSON
        """
        content = None
        headers = {}
        if payload is not None:
            try:
                content = json.dumps(payload)
            except (TypeError, ValueError) as e:
                raise EncodingError(f"failed to marshal {operation or 'request'} payload: {e}") from e
            headers["Content-Type"] = "application/json"

        logger.debug(f"{method} {path} payload={content}")
        try:
            resp = self._http.request(method, path, content=content, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"{operation or method} timed out after {self.config.timeout}s; "
                f"the remote outcome is unknown: {e}",
                operation=operation,
                timed_out=True,
            ) from e
        except httpx.TransportError as e:
            raise TransportError(
                f"failed to send {operation or method} request to {self.config.host}: {e}",
                operation=operation,
            ) from e

        text = resp.text
        body = None
        if resp.content:
            try:
                body = resp.json()
            except ValueError as e:
                if resp.is_success:
                    raise ProtocolError(
                        f"failed to decode {operation or method} response: {e}",
                        operation=operation,
                        body=text,
                    ) from e
                # Failing status: keep the raw text for diagnostics

        logger.debug(f"{method} {path} -> {resp.status_code}")
        return ApiResponse(status_code=resp.status_code, body=body, text=text)

    # Endpoints

    def create_node(self, project_id: str, payload: dict) -> ApiResponse:
        return self.request("POST", self.nodes_path(project_id), payload, operation="create")

    def create_from_template(self, project_id: str, template_id: str, payload: dict) -> ApiResponse:
        return self.request(
            "POST", self.template_path(project_id, template_id), payload, operation="create"
        )

    def get_node(self, project_id: str, node_id: str) -> ApiResponse:
        return self.request("GET", self.node_path(project_id, node_id), operation="read")

    def update_node(self, project_id: str, node_id: str, payload: dict) -> ApiResponse:
        return self.request("PUT", self.node_path(project_id, node_id), payload, operation="update")

    def delete_node(self, project_id: str, node_id: str) -> ApiResponse:
        return self.request("DELETE", self.node_path(project_id, node_id), operation="delete")

    def start_node(self, project_id: str, node_id: str) -> ApiResponse:
        return self.request(
            "POST", self.node_path(project_id, node_id) + "/start", operation="start"
        )

    def version(self) -> ApiResponse:
        return self.request("GET", "/v2/version", operation="version")

    # Lifecycle

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
