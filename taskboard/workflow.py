"""
Client-side task synchronization workflow.

``TaskWorkflow`` owns a ``WorkflowState`` and drives it through the
form's state machine::

    Idle --(type / begin_edit)--> Editing(Create | Update(id))
         --(submit)--> Submitting --> Idle            (success)
                                  --> Editing         (any failure)

Every terminal outcome of begin-edit, submit and delete, and every failed
load, produces exactly one notification through the ``notify`` callable
(``notify(category, message)`` with category ``"success"`` or
``"error"``). Failures never escape: the UI always returns to an
interactive state.

Recovery policy: a FAILURE envelope and a client-side exception are
treated alike; the draft and edit mode are kept so the user can retry.

Known limitation: overlapping mutations against the same task resolve
"last response wins" in local state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .client import TaskAPIClient
from .errors import ApplicationFailure, ProtocolError, TaskAPIError, ValidationError
from .models import DraftTask, EditSession, ResponseEnvelope, Task, WorkflowState, same_id

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]

FILL_ALL_FIELDS = "Please fill out all fields."
TASK_CREATED = "Task created successfully!"
TASK_UPDATED = "Task updated successfully!"
TASK_DELETED = "Task deleted successfully!"
TASK_NOT_FOUND = "Task not found."
GENERIC_SUBMIT_ERROR = "Something went wrong. Please try again."
FETCH_TASK_ERROR = "Failed to fetch task details."
LOAD_TASKS_ERROR = "Failed to load tasks."
DELETE_FAILED = "Failed to delete the task."
DELETE_ERROR = "An error occurred while deleting the task."


class TaskWorkflow:
    """
    Reconciles the local task collection and form with the remote API.

    Args:
        client: The Task API client.
        notify: Callable receiving ``(category, message)`` for every
            user-visible outcome.
        state: Initial state; a fresh Idle state when omitted.
    """

    def __init__(
        self,
        client: TaskAPIClient,
        notify: Notifier,
        state: WorkflowState | None = None,
    ):
        self.client = client
        self.notify = notify
        self.state = state if state is not None else WorkflowState()

    def _error_message(self, error: TaskAPIError, default: str) -> str:
        # Only server-authored text is shown; transport and decoding details are logged.
        if isinstance(error, ApplicationFailure):
            return error.message or default
        if isinstance(error, ProtocolError) and error.status_code is not None:
            return error.message or default
        return default

    # -----------------------------------------------------------------
    # Loading
    # -----------------------------------------------------------------

    def initialize(self) -> bool:
        """
        Replace the local collection with the server's task list.

        Returns:
            True when the collection was refreshed.
        """
        try:
            envelope = self.client.list_tasks()
            envelope.raise_for_failure()
            tasks = envelope.tasks()
        except TaskAPIError as error:
            logger.error("Failed to fetch tasks: %s", error.message)
            self.notify("error", self._error_message(error, LOAD_TASKS_ERROR))
            return False

        self.state.tasks = tasks
        logger.info("Loaded %d tasks", len(tasks))

        edit = self.state.edit
        if edit.active and self.state.find(edit.target_id) is None:
            logger.info("Edit target %s no longer exists; resetting form", edit.target_id)
            self.state.reset_form()
        return True

    # -----------------------------------------------------------------
    # Form editing
    # -----------------------------------------------------------------

    def begin_edit(self, task_id: Any) -> bool:
        """
        Load a task into the draft and switch to update mode.

        On any failure the draft and mode are left untouched and a single
        error notification is emitted.
        """
        try:
            envelope = self.client.get_by_id(task_id)
        except TaskAPIError as error:
            logger.error("Error fetching task %s: %s", task_id, error.message)
            self.notify("error", self._error_message(error, FETCH_TASK_ERROR))
            return False

        if not envelope.ok:
            self.notify("error", envelope.message or TASK_NOT_FOUND)
            return False

        # The id is known from the request, so a record without one still fills the form.
        records = envelope.data
        if isinstance(records, dict):
            records = [records]
        if not records:
            self.notify("error", TASK_NOT_FOUND)
            return False

        try:
            if not isinstance(records, list):
                raise ProtocolError("Envelope data is not a task list")
            draft = DraftTask.from_record(records[0])
        except ProtocolError as error:
            logger.error("Malformed task %s: %s", task_id, error.message)
            self.notify("error", FETCH_TASK_ERROR)
            return False

        self.state.draft = draft
        self.state.edit = EditSession(active=True, target_id=task_id)
        return True

    def edit_field(self, name: str, value: str) -> None:
        """Set one draft field; no validation happens until submit."""
        if name not in DraftTask.FIELDS:
            raise ValueError(f"Unknown draft field: {name}")
        setattr(self.state.draft, name, value)

    def reset(self) -> None:
        """Abandon the draft and return to create mode."""
        self.state.reset_form()

    # -----------------------------------------------------------------
    # Submission
    # -----------------------------------------------------------------

    def _validate(self) -> None:
        if not self.state.draft.is_complete():
            raise ValidationError(FILL_ALL_FIELDS)

    def submit(self) -> bool:
        """
        Create or update a task from the draft.

        Returns:
            True when the server confirmed the change and the form was
            reset to Idle.
        """
        try:
            self._validate()
        except ValidationError as error:
            self.notify("error", error.message)
            return False

        edit = self.state.edit
        draft = self.state.draft
        self.state.submitting = True
        try:
            if edit.active:
                envelope = self.client.update(edit.target_id, draft)
                envelope.raise_for_failure()
                self._apply_update(edit.target_id, envelope.data)
                message = TASK_UPDATED
            else:
                envelope = self.client.create(draft)
                envelope.raise_for_failure()
                self._apply_create(envelope)
                message = envelope.message or TASK_CREATED
        except ApplicationFailure as error:
            logger.warning("Task submit rejected: %s", error.message)
            self.notify("error", self._error_message(error, GENERIC_SUBMIT_ERROR))
            return False
        except TaskAPIError as error:
            logger.error("Failed to add/update task: %s", error.message)
            self.notify("error", self._error_message(error, GENERIC_SUBMIT_ERROR))
            return False
        finally:
            self.state.submitting = False

        self.notify("success", message)
        self.state.reset_form()
        return True

    def _apply_create(self, envelope: ResponseEnvelope) -> None:
        # The server has already stored the task; an unreadable echo must not
        # turn into an error, or a retry would create a duplicate.
        try:
            created = envelope.tasks()
        except ProtocolError as error:
            created = []
            logger.warning("Create response carried a malformed task: %s", error.message)
        if len(created) == 1:
            self.state.tasks.append(created[0])
        else:
            logger.warning(
                "Create succeeded without a usable task record; it will appear on the next load"
            )

    def _apply_update(self, task_id: Any, data: Any) -> None:
        if isinstance(data, list):
            data = data[0] if data else None
        fields = data if isinstance(data, dict) else {}
        existing = self.state.find(task_id)
        if existing is None:
            # Not loaded locally yet; keep whatever the server returned.
            if fields:
                self.state.tasks.append(Task.from_dict({**fields, "id": task_id}))
            return
        self.state.replace(task_id, existing.merged(fields))

    # -----------------------------------------------------------------
    # Deletion
    # -----------------------------------------------------------------

    def delete(self, task_id: Any) -> bool:
        """
        Remove a task remotely, then locally.

        If the deleted task is the one currently being edited, the form is
        reset so the edit session never points at a missing record.
        """
        try:
            envelope = self.client.delete(task_id)
            envelope.raise_for_failure()
        except ApplicationFailure as error:
            logger.warning("Delete of task %s rejected: %s", task_id, error.message)
            self.notify("error", self._error_message(error, DELETE_FAILED))
            return False
        except TaskAPIError as error:
            logger.error("Failed to delete task %s: %s", task_id, error.message)
            self.notify("error", self._error_message(error, DELETE_ERROR))
            return False

        self.state.remove(task_id)
        if self.state.edit.active and same_id(self.state.edit.target_id, task_id):
            self.state.reset_form()
        self.notify("success", TASK_DELETED)
        return True
