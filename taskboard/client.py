"""
HTTP client for the remote Task API.

Maps the five logical task operations onto HTTP requests against a fixed
resource root and normalizes every response into a ``ResponseEnvelope``.
All operations share one request helper, so failures are reported the
same way no matter which endpoint produced them:

- no response at all        -> ``TransportError``
- non-2xx status            -> ``ProtocolError`` (carries the server message)
- 2xx but not an envelope   -> ``ProtocolError``
- 2xx envelope              -> returned, SUCCESS or FAILURE alike

There are no retries and no caching; every call hits the network. Each
call is bounded by the configured timeout.

Endpoints (relative to ``TASK_API_URL``):
    GET  /getAllTasks          - List all tasks
    POST /createTask           - Create a task
    GET  /getTaskByID/<id>     - Fetch one task (data is a one-element list)
    PUT  /updateTask/<id>      - Update a task
    PUT  /deleteTask/<id>      - Delete a task (verb is configurable)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import requests

from .errors import ProtocolError, TransportError
from .models import DraftTask, ResponseEnvelope

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5


def _response_message(response: requests.Response, default: str) -> str:
    """
    Extract a human-readable message from an error response if possible.

    Looks at the envelope ``message`` field first, then at a plain
    ``error`` field, and falls back to *default* when the body is not JSON
    or neither field holds text.
    """
    try:
        payload = response.json()
    except ValueError:
        return default
    if not isinstance(payload, dict):
        return default
    for key in ("message", "error"):
        message = payload.get(key)
        if isinstance(message, str) and message.strip():
            return message
    return default


class TaskAPIClient:
    """
    Stateless wrapper around the Task API endpoints.

    Attributes:
        base_url: Resource root, e.g. ``http://localhost:3000/tasks``.
        timeout: Seconds to wait for each response.
        delete_method: HTTP verb used by ``delete``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        delete_method: str = "PUT",
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.delete_method = delete_method.upper()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> TaskAPIClient:
        """Build a client from a Flask-style configuration mapping."""
        return cls(
            config["TASK_API_URL"],
            timeout=config.get("TASK_API_TIMEOUT", DEFAULT_TIMEOUT),
            delete_method=config.get("TASK_API_DELETE_METHOD", "PUT"),
        )

    def url_for(self, path: str) -> str:
        """Join the resource root with *path* without doubling slashes."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, operation: str, method: str, path: str, **kwargs) -> ResponseEnvelope:
        """
        Send one request and normalize the outcome.

        Args:
            operation: Logical operation name used in log lines.
            method: HTTP method.
            path: Endpoint path relative to the resource root.
            **kwargs: Forwarded to :func:`requests.request` (e.g. ``json``).

        Returns:
            The decoded envelope, whatever its status.

        Raises:
            TransportError: If no response was received.
            ProtocolError: If the status is not 2xx or the body is not an
                envelope.
        """
        url = self.url_for(path)
        try:
            response = requests.request(
                method=method,
                url=url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            logger.warning("%s %s timed out: %s", method, url, exc)
            raise TransportError(f"Error {operation}: request timed out", timeout=True) from exc
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"Error {operation}: service unavailable") from exc

        if not 200 <= response.status_code < 300:
            reason = getattr(response, "reason", None) or f"HTTP {response.status_code}"
            message = _response_message(response, f"Error: {reason}")
            logger.warning(
                "%s %s returned %s: %s", method, url, response.status_code, message
            )
            raise ProtocolError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("%s %s returned a non-JSON body", method, url)
            raise ProtocolError(f"Error {operation}: invalid JSON response") from exc

        try:
            return ResponseEnvelope.from_json(payload)
        except ProtocolError:
            logger.warning("%s %s returned a malformed envelope: %r", method, url, payload)
            raise

    def _task_path(self, prefix: str, task_id: Any) -> str:
        return f"{prefix}/{quote(str(task_id), safe='')}"

    def list_tasks(self) -> ResponseEnvelope:
        """GET every task; ``data`` is a list of task records."""
        return self._request("fetching tasks", "GET", "/getAllTasks")

    def create(self, draft: DraftTask) -> ResponseEnvelope:
        """POST a new task; ``data`` is the created record."""
        return self._request("creating task", "POST", "/createTask", json=draft.to_payload())

    def get_by_id(self, task_id: Any) -> ResponseEnvelope:
        """GET one task; by API convention ``data`` is a one-element list."""
        return self._request("fetching task", "GET", self._task_path("/getTaskByID", task_id))

    def update(self, task_id: Any, draft: DraftTask) -> ResponseEnvelope:
        """PUT new field values; ``data`` holds the (possibly partial) record."""
        return self._request(
            "updating task",
            "PUT",
            self._task_path("/updateTask", task_id),
            json=draft.to_payload(),
        )

    def delete(self, task_id: Any) -> ResponseEnvelope:
        """Request removal of a task; ``data`` is ``None``."""
        return self._request(
            "deleting task",
            self.delete_method,
            self._task_path("/deleteTask", task_id),
        )
