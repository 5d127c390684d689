"""
Data models for the task synchronization workflow.

Defines the task record mirrored from the remote API, the user-edited
draft, the response envelope every API call returns, and the single
explicit ``WorkflowState`` object that ties the collection, draft and edit
session together.

All models are plain dataclasses that convert to and from JSON-safe
dictionaries, so the state can live in a Flask session cookie or be built
directly in unit tests without any rendering layer.

Key Concepts Demonstrated:
- ``str``/``Enum`` dual inheritance for ergonomic comparison with JSON
- Invariants enforced in ``__post_init__``
- Field-wise merges that never drop server data
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import ApplicationFailure, ProtocolError


class EnvelopeStatus(str, Enum):
    """Outcome reported by the Task API inside every response body."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class WorkflowPhase(str, Enum):
    """
    Coarse UI state derived from ``WorkflowState``.

    Attributes:
        IDLE: Empty draft, no edit session.
        EDITING: Draft has content or an edit session is active.
        SUBMITTING: A create or update call is in flight.
    """

    IDLE = "idle"
    EDITING = "editing"
    SUBMITTING = "submitting"


def as_text(value: Any) -> str:
    """Coerce a server-sent field to text; ``None`` becomes empty."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def same_id(left: Any, right: Any) -> bool:
    """Compare task ids as text so ``1`` matches the URL segment ``"1"``."""
    if left is None or right is None:
        return False
    return str(left) == str(right)


@dataclass
class Task:
    """
    A task record as stored by the remote service.

    Attributes:
        id: Server-assigned identifier, opaque to the client.
        title: Short title.
        description: Longer description.
        extra: Any additional fields the server sent, kept verbatim.
    """

    id: Any
    title: str = ""
    description: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Task:
        """
        Build a task from an API payload.

        Raises:
            ProtocolError: If *data* is not a mapping carrying an ``id``.
        """
        if not isinstance(data, dict) or data.get("id") is None:
            raise ProtocolError(f"Malformed task record: {data!r}")
        extra = {
            key: value
            for key, value in data.items()
            if key not in ("id", "title", "description")
        }
        return cls(
            id=data["id"],
            title=as_text(data.get("title")),
            description=as_text(data.get("description")),
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.extra,
            "id": self.id,
            "title": self.title,
            "description": self.description,
        }

    def merged(self, data: dict[str, Any]) -> Task:
        """
        Return a copy with the fields present in *data* overwritten.

        Fields missing from *data* keep their current value; the id is
        immutable once assigned and is never taken from *data*.
        """
        combined = self.to_dict()
        combined.update(data)
        combined["id"] = self.id
        return Task.from_dict(combined)


@dataclass
class DraftTask:
    """The unsaved title/description pair being edited in the form."""

    title: str = ""
    description: str = ""

    FIELDS = ("title", "description")

    def is_complete(self) -> bool:
        """Return True when both fields have non-whitespace content."""
        return bool(self.title.strip()) and bool(self.description.strip())

    def to_payload(self) -> dict[str, str]:
        return {"title": self.title, "description": self.description}

    @classmethod
    def from_record(cls, data: Any) -> DraftTask:
        """
        Build a draft from the fields of a raw task record.

        Only ``title`` and ``description`` are read; the record need not
        carry an id.

        Raises:
            ProtocolError: If *data* is not a mapping.
        """
        if not isinstance(data, dict):
            raise ProtocolError(f"Malformed task record: {data!r}")
        return cls(
            title=as_text(data.get("title")),
            description=as_text(data.get("description")),
        )


@dataclass
class EditSession:
    """
    Tracks whether the draft creates a new task or edits an existing one.

    Invariant: an active session always names its target id.
    """

    active: bool = False
    target_id: Any = None

    def __post_init__(self) -> None:
        if self.active and self.target_id is None:
            raise ValueError("An active edit session requires a target id")
        if not self.active:
            self.target_id = None


@dataclass
class ResponseEnvelope:
    """
    The uniform ``{status, message, data}`` wrapper of every API response.

    Attributes:
        status: SUCCESS or FAILURE as reported by the server.
        message: Human-readable text, possibly empty.
        data: The payload; a task, a list of tasks, or ``None``.
    """

    status: EnvelopeStatus
    message: str = ""
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status is EnvelopeStatus.SUCCESS

    @classmethod
    def from_json(cls, payload: Any) -> ResponseEnvelope:
        """
        Validate a decoded JSON body and wrap it.

        Raises:
            ProtocolError: If the body is not a mapping or its ``status``
                is missing or unknown.
        """
        if not isinstance(payload, dict):
            raise ProtocolError("Response body is not a JSON object")
        try:
            status = EnvelopeStatus(payload.get("status"))
        except ValueError as exc:
            raise ProtocolError(
                f"Unknown envelope status: {payload.get('status')!r}"
            ) from exc
        message = payload.get("message")
        return cls(
            status=status,
            message=message if isinstance(message, str) else "",
            data=payload.get("data"),
        )

    def raise_for_failure(self) -> None:
        """Raise ``ApplicationFailure`` when the server reported FAILURE."""
        if not self.ok:
            raise ApplicationFailure(self.message)

    def tasks(self) -> list[Task]:
        """Interpret ``data`` as a list of tasks (a single record is wrapped)."""
        if self.data is None:
            return []
        if isinstance(self.data, dict):
            return [Task.from_dict(self.data)]
        if not isinstance(self.data, list):
            raise ProtocolError("Envelope data is not a task list")
        return [Task.from_dict(item) for item in self.data]


@dataclass
class WorkflowState:
    """
    Everything the task UI knows, in one serializable object.

    Attributes:
        tasks: Local mirror of the remote collection.
        draft: The form contents.
        edit: Create vs. update mode.
        submitting: True while a create/update call is outstanding.
    """

    tasks: list[Task] = field(default_factory=list)
    draft: DraftTask = field(default_factory=DraftTask)
    edit: EditSession = field(default_factory=EditSession)
    submitting: bool = False

    @property
    def phase(self) -> WorkflowPhase:
        if self.submitting:
            return WorkflowPhase.SUBMITTING
        if self.edit.active or self.draft.title or self.draft.description:
            return WorkflowPhase.EDITING
        return WorkflowPhase.IDLE

    def reset_form(self) -> None:
        """Return to Idle: empty draft, no edit session."""
        self.draft = DraftTask()
        self.edit = EditSession()

    def find(self, task_id: Any) -> Task | None:
        for task in self.tasks:
            if same_id(task.id, task_id):
                return task
        return None

    def replace(self, task_id: Any, task: Task) -> bool:
        for index, existing in enumerate(self.tasks):
            if same_id(existing.id, task_id):
                self.tasks[index] = task
                return True
        return False

    def remove(self, task_id: Any) -> int:
        """Drop every entry with *task_id*; return how many were removed."""
        before = len(self.tasks)
        self.tasks = [task for task in self.tasks if not same_id(task.id, task_id)]
        return before - len(self.tasks)

    def to_dict(self, *, include_tasks: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "draft": {"title": self.draft.title, "description": self.draft.description},
            "edit": {"active": self.edit.active, "target_id": self.edit.target_id},
            "submitting": self.submitting,
        }
        if include_tasks:
            data["tasks"] = [task.to_dict() for task in self.tasks]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> WorkflowState:
        """Rebuild a state from ``to_dict`` output; missing parts default."""
        if not data:
            return cls()
        draft = data.get("draft") or {}
        edit = data.get("edit") or {}
        return cls(
            tasks=[Task.from_dict(item) for item in data.get("tasks", [])],
            draft=DraftTask(
                title=str(draft.get("title", "")),
                description=str(draft.get("description", "")),
            ),
            edit=EditSession(
                active=bool(edit.get("active")) and edit.get("target_id") is not None,
                target_id=edit.get("target_id"),
            ),
            submitting=bool(data.get("submitting", False)),
        )
