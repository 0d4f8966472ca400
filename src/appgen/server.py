"""FastAPI web server wrapping a single iteration controller."""

import logging

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from .backends import get_collaborators
from .config import get_public_url
from .controller import IterationController, Outcome
from .core import Version
from .export import artifact_url, format_usage, history_to_json, history_to_markdown

logger = logging.getLogger(__name__)

app = FastAPI(title="appgen", version="0.1.0")

# Controller for this process (created on first request)
_controller: IterationController | None = None

_STATUS_CODES = {"ok": 200, "ignored": 200, "busy": 409, "rejected": 400, "failed": 502}


def _get_controller() -> IterationController:
    """Lazily create and cache the controller."""
    global _controller
    if _controller is None:
        generator, store = get_collaborators()
        _controller = IterationController(generator, store)
        logger.info("Started session %s", _controller.session_id)
    return _controller


def _version_to_dict(version: Version) -> dict:
    """Convert a Version dataclass to a JSON-serializable dict."""
    return {
        "version": version.version_label,
        "session_id": version.session_id,
        "feedback": version.feedback,
        "usage": version.usage.to_dict() if version.usage else None,
    }


def _state_to_dict(controller: IterationController) -> dict:
    current = controller.history.current()
    return {
        "session_id": controller.session_id,
        "mode": controller.mode,
        "history_index": controller.history.index,
        "versions": [_version_to_dict(v) for v in controller.history],
        "query": controller.query,
        "current_html": controller.current_html,
        "current_feedback": controller.current_feedback,
        "can_share": controller.share_reference() is not None,
        "usage_summary": format_usage(current.usage) if current else "",
        "busy": controller.busy,
        "unpersisted": [v.version_label for v in controller.unpersisted],
    }


def _outcome_to_dict(outcome: Outcome) -> dict:
    data = {
        "status": outcome.status,
        "version": _version_to_dict(outcome.version) if outcome.version else None,
        "persisted": outcome.persisted,
    }
    if outcome.error:
        data["error"] = outcome.error
    if outcome.category:
        data["category"] = outcome.category
    return data


# ── Routes ───────────────────────────────────────────────────────


@app.get("/api/state")
async def get_state():
    """Return the session's mode, history and displayed content."""
    return _state_to_dict(_get_controller())


@app.post("/api/submit")
async def submit(text: str = Body(..., embed=True)):
    """Submit the input box: a query first, feedback afterwards."""
    outcome = await _get_controller().submit(text)
    return JSONResponse(_outcome_to_dict(outcome), status_code=_STATUS_CODES[outcome.status])


@app.post("/api/navigate/{direction}")
async def navigate(direction: str):
    """Move to the previous or next version."""
    if direction not in ("previous", "next"):
        raise HTTPException(status_code=400, detail=f"Unknown direction: {direction}")
    controller = _get_controller()
    controller.navigate(direction)
    return _state_to_dict(controller)


@app.get("/api/prompt")
async def get_prompt():
    """Return the prompt for the current state."""
    return PlainTextResponse(_get_controller().prompt())


@app.get("/api/preview")
async def preview():
    """Return the displayed HTML."""
    return HTMLResponse(_get_controller().current_html)


@app.get("/api/share")
async def share():
    """Return a link to the stored copy of the displayed version."""
    reference = _get_controller().share_reference()
    if reference is None:
        raise HTTPException(status_code=404, detail="No version to share yet")
    session_id, version = reference
    return {
        "session_id": session_id,
        "version": version,
        "url": artifact_url(get_public_url(), session_id, version),
    }


@app.get("/api/export")
async def export_history(
    format: str = Query("md", description="Export format: md or json"),
):
    """Download the session's versions as Markdown or JSON."""
    controller = _get_controller()
    versions = list(controller.history)
    filename = f"appgen-{controller.session_id}"

    if format == "json":
        content = history_to_json(controller.session_id, controller.query, versions)
        return Response(
            content=content,
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{filename}.json"'},
        )
    else:
        content = history_to_markdown(controller.session_id, controller.query, versions)
        return Response(
            content=content,
            media_type="text/markdown",
            headers={"Content-Disposition": f'attachment; filename="{filename}.md"'},
        )


@app.post("/api/persist/retry")
async def retry_persistence():
    """Store versions whose earlier save failed."""
    controller = _get_controller()
    stored = await controller.retry_persistence()
    return {"stored": stored, "remaining": [v.version_label for v in controller.unpersisted]}
