"""
Consumer-side contract tests for the Task API.

Validates that the endpoints, verbs and field names hard-coded into
``TaskAPIClient`` still match the OpenAPI description of the Task API in
``contracts/``. The tests do **not** call a live service: they parse the
YAML contract, drive the client against a recording fake, and compare.

If the contract changes in a way that breaks the client (a renamed path,
a different verb, a new envelope status), these tests fail before any
integration test runs.

Key SDET Concepts Demonstrated:
- Consumer-driven contract testing against an OpenAPI specification
- ``$ref`` resolution for navigating nested schemas
- Enum synchronisation checks between duplicated types
- ``pytest.importorskip`` for optional-dependency gating
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import pytest

from shared.test_helpers import FakeResponse, envelope
from taskboard.client import TaskAPIClient
from taskboard.models import DraftTask, EnvelopeStatus

yaml = pytest.importorskip("yaml", reason="Install pyyaml for contract tests.")

pytestmark = pytest.mark.contract

SERVER = "http://localhost:3000/tasks"


def _contracts_dir() -> Path:
    """Return the absolute path to the repository's contracts directory."""
    return Path(__file__).resolve().parents[2] / "contracts"


@lru_cache(maxsize=1)
def _load_openapi_spec() -> dict[str, Any]:
    """Load and cache the Task API OpenAPI document."""
    with (_contracts_dir() / "task_api_openapi.yaml").open("r", encoding="utf-8") as contract_file:
        return yaml.safe_load(contract_file)


def _resolve_schema_ref(openapi_spec: dict[str, Any], schema: dict[str, Any]) -> dict[str, Any]:
    """
    Resolve a local ``$ref`` in an OpenAPI schema.

    Raises:
        AssertionError: If the reference is non-local.
    """
    if "$ref" not in schema:
        return schema
    ref = schema["$ref"]
    if not ref.startswith("#/"):
        raise AssertionError(f"Unexpected non-local schema reference: {ref}")
    node: Any = openapi_spec
    for part in ref[2:].split("/"):
        node = node[part]
    return node


def _contract_operations() -> set[tuple[str, str]]:
    """Return ``(VERB, path template)`` for every operation in the contract."""
    spec = _load_openapi_spec()
    return {
        (method.upper(), path)
        for path, operations in spec["paths"].items()
        for method in operations
        if method in {"get", "post", "put", "patch", "delete"}
    }


def _client_operations(monkeypatch) -> set[tuple[str, str]]:
    """Drive every client operation and record ``(VERB, path template)``."""
    sent: list[tuple[str, str]] = []

    def _fake_request(**kwargs):
        path = kwargs["url"][len(SERVER):]
        sent.append((kwargs["method"], path.replace("/7", "/{id}")))
        return FakeResponse(payload=envelope(None))

    monkeypatch.setattr("taskboard.client.requests.request", _fake_request)
    api = TaskAPIClient(SERVER)
    api.list_tasks()
    api.create(DraftTask("A", "B"))
    api.get_by_id(7)
    api.update(7, DraftTask("A", "B"))
    api.delete(7)
    return set(sent)


def test_client_routes_match_contract(monkeypatch):
    """Test that every client call is a declared operation and vice versa."""
    # Arrange
    expected = _contract_operations()

    # Act
    actual = _client_operations(monkeypatch)

    # Assert
    assert actual == expected


def test_contract_server_matches_default_config():
    """Test that the documented server root is the default TASK_API_URL."""
    # Arrange
    from taskboard.config import Config

    # Act
    servers = [server["url"] for server in _load_openapi_spec()["servers"]]

    # Assert
    assert Config.TASK_API_URL in servers


def test_envelope_status_enum_matches_contract():
    """Test that the client's envelope statuses stay in sync with the contract."""
    spec = _load_openapi_spec()

    contract_statuses = spec["components"]["schemas"]["EnvelopeStatus"]["enum"]

    assert sorted(status.value for status in EnvelopeStatus) == sorted(contract_statuses)


def test_task_input_fields_match_draft_payload():
    """Test that the draft payload sends exactly the fields the contract requires."""
    # Arrange
    spec = _load_openapi_spec()
    request_schema = spec["paths"]["/createTask"]["post"]["requestBody"]["content"][
        "application/json"
    ]["schema"]

    # Act
    task_input = _resolve_schema_ref(spec, request_schema)

    # Assert
    assert set(DraftTask("A", "B").to_payload()) == set(task_input["required"])


def test_task_schema_requires_fields_the_workflow_reads():
    """Test that the Task schema still declares id, title and description."""
    spec = _load_openapi_spec()

    task_schema = _resolve_schema_ref(spec, spec["components"]["schemas"]["Task"])

    assert {"id", "title", "description"}.issubset(task_schema["required"])
