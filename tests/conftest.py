"""Shared fixtures: an in-memory GNS3 controller behind httpx.MockTransport."""
import copy
import itertools
import json
import re
from typing import Any, Optional, Union

import httpx
import pytest

from gns3_provider import Provider, ProviderConfig

HOST = "http://gns3.test:3080"

NODES_RE = re.compile(r"^/v2/projects/(?P<project>[^/]+)/nodes$")
NODE_RE = re.compile(r"^/v2/projects/(?P<project>[^/]+)/nodes/(?P<node>[^/]+)$")
START_RE = re.compile(r"^/v2/projects/(?P<project>[^/]+)/nodes/(?P<node>[^/]+)/start$")
TEMPLATE_RE = re.compile(r"^/v2/projects/(?P<project>[^/]+)/templates/(?P<template>[^/]+)$")


class FakeController:
    """Minimal stand-in for the GNS3 v2 controller API."""

    def __init__(self):
        self.nodes: dict[str, dict[str, Any]] = {}
        self.templates: dict[str, dict[str, Any]] = {
            "tmpl-router": {"node_type": "qemu", "properties": {"ram": 512}},
        }
        self.requests: list[httpx.Request] = []
        self.next_id: Optional[str] = None
        self._ids = itertools.count(1)
        self._overrides: list[tuple[str, str, Union[httpx.Response, Exception]]] = []

    # --- Test helpers ---

    def override(
        self, method: str, path_suffix: str, response: Union[httpx.Response, Exception]
    ) -> None:
        """Answer matching requests with a canned response or raise an exception."""
        self._overrides.append((method, path_suffix, response))

    def payloads(self, method: Optional[str] = None) -> list[Any]:
        return [
            json.loads(r.content) if r.content else None
            for r in self.requests
            if method is None or r.method == method
        ]

    def calls(self, method: str) -> list[str]:
        return [r.url.path for r in self.requests if r.method == method]

    def _new_id(self) -> str:
        if self.next_id:
            node_id, self.next_id = self.next_id, None
            return node_id
        return f"node-{next(self._ids)}"

    def _store(self, project_id: str, doc: dict[str, Any]) -> httpx.Response:
        doc = copy.deepcopy(doc)
        doc["node_id"] = self._new_id()
        doc["project_id"] = project_id
        doc.setdefault("properties", {})
        doc["status"] = "stopped"
        self.nodes[doc["node_id"]] = doc
        return httpx.Response(201, json=doc)

    # --- Transport handler ---

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        for method, suffix, response in self._overrides:
            if request.method == method and path.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                return response

        body = json.loads(request.content) if request.content else None

        if request.method == "GET" and path == "/v2/version":
            return httpx.Response(200, json={"version": "2.2.43", "local": True})

        match = NODES_RE.match(path)
        if match and request.method == "POST":
            return self._store(match["project"], body)

        match = TEMPLATE_RE.match(path)
        if match and request.method == "POST":
            template = self.templates.get(match["template"])
            if template is None:
                return httpx.Response(404, json={"message": "Template not found"})
            doc = copy.deepcopy(template)
            doc.update(body)
            return self._store(match["project"], doc)

        match = START_RE.match(path)
        if match and request.method == "POST":
            node = self.nodes.get(match["node"])
            if node is None:
                return httpx.Response(404, json={"message": "Node not found"})
            node["status"] = "started"
            return httpx.Response(200, json=node)

        match = NODE_RE.match(path)
        if match:
            node = self.nodes.get(match["node"])
            if node is None or node["project_id"] != match["project"]:
                return httpx.Response(404, json={"message": "Node not found"})
            if request.method == "GET":
                return httpx.Response(200, json=node)
            if request.method == "PUT":
                for key, value in body.items():
                    if key == "properties":
                        node["properties"].update(value)
                    else:
                        node[key] = value
                return httpx.Response(200, json=node)
            if request.method == "DELETE":
                del self.nodes[match["node"]]
                return httpx.Response(204)

        return httpx.Response(405, json={"message": f"{request.method} {path} not supported"})


@pytest.fixture
def controller():
    return FakeController()


@pytest.fixture
def config():
    return ProviderConfig(host=HOST)


@pytest.fixture
def provider(controller, config):
    p = Provider(config, transport=httpx.MockTransport(controller.handler))
    yield p
    p.close()
