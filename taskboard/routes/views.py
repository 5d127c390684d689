"""
HTML view routes for the taskboard frontend.

Each route builds a ``TaskWorkflow`` for the current request, restores the
draft and edit session from the signed session cookie, runs exactly one
workflow operation, stores the form state back and then renders or
redirects. Workflow notifications are turned into flash messages.

The task collection itself is never kept in the cookie: it is reloaded
from the Task API every time the index page renders.

Routes:
    GET  /                      - Task form and list
    POST /tasks                 - Submit the form (create or update)
    POST /tasks/<id>/edit       - Load a task into the form
    POST /tasks/<id>/delete     - Delete a task
    POST /tasks/cancel          - Clear the form
    GET  /health                - Liveness probe
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, flash, redirect, render_template, request, session, url_for

from ..client import TaskAPIClient
from ..models import DraftTask, WorkflowState
from ..workflow import TaskWorkflow

logger = logging.getLogger(__name__)

views_bp = Blueprint("views", __name__)

FORM_SESSION_KEY = "task_form"


# =====================================================================
# Helper Functions
# =====================================================================


def _flash_notifier(category: str, message: str) -> None:
    """Forward a workflow notification to the flash message channel."""
    flash(message, category)


def _load_workflow() -> TaskWorkflow:
    """
    Build a workflow for this request.

    The form part of the state comes from the session cookie; the API
    client is configured from the application config.
    """
    state = WorkflowState.from_dict(session.get(FORM_SESSION_KEY))
    client = TaskAPIClient.from_config(current_app.config)
    return TaskWorkflow(client, _flash_notifier, state)


def _save_workflow(workflow: TaskWorkflow) -> None:
    """Persist the draft and edit session for the next request."""
    session[FORM_SESSION_KEY] = workflow.state.to_dict(include_tasks=False)


# =====================================================================
# Routes
# =====================================================================


@views_bp.route("/health", methods=["GET"])
def health_check():
    """Return service health status for liveness probes."""
    return {"status": "healthy", "service": "frontend"}, 200


@views_bp.route("/")
def index():
    """
    Render the task form and the task list.

    Loading the page initializes the workflow, which refreshes the task
    collection from the API. A failed load still renders the page with an
    empty list and an error flash.
    """
    workflow = _load_workflow()
    loaded = workflow.initialize()
    _save_workflow(workflow)

    state = workflow.state
    return (
        render_template(
            "index.html",
            tasks=state.tasks,
            draft=state.draft,
            edit=state.edit,
            phase=state.phase.value,
        ),
        200 if loaded else 502,
    )


@views_bp.route("/tasks", methods=["POST"])
def submit_task():
    """
    Handle form submission.

    Copies the submitted fields into the draft and submits it. On any
    failure the draft is kept so the form is redisplayed with the user's
    input.
    """
    workflow = _load_workflow()
    for name in DraftTask.FIELDS:
        workflow.edit_field(name, request.form.get(name, ""))
    workflow.submit()
    _save_workflow(workflow)
    return redirect(url_for("views.index"))


@views_bp.route("/tasks/<task_id>/edit", methods=["POST"])
def edit_task(task_id: str):
    """Load the task into the form and switch the form to update mode."""
    workflow = _load_workflow()
    workflow.begin_edit(task_id)
    _save_workflow(workflow)
    return redirect(url_for("views.index"))


@views_bp.route("/tasks/<task_id>/delete", methods=["POST"])
def delete_task(task_id: str):
    """Delete the task; an open edit of the same task is discarded."""
    workflow = _load_workflow()
    workflow.delete(task_id)
    _save_workflow(workflow)
    return redirect(url_for("views.index"))


@views_bp.route("/tasks/cancel", methods=["POST"])
def cancel_edit():
    """Clear the form and return to create mode."""
    workflow = _load_workflow()
    workflow.reset()
    _save_workflow(workflow)
    return redirect(url_for("views.index"))
