from __future__ import annotations

import os
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from tailor_ai.anthropic import ToolRegistry
from tailor_ai.base.constants import STREAM_MEDIA_TYPE
from tailor_ai.config.defaults import SERVICE_CORS_DEFAULT_ORIGINS

from .app_parts.app_core import (
    CompletionBody,
    error_response,
    open_stream,
    run_completion,
    stream_text,
    to_completion_payload,
    validate_body,
)

COMPLETION_ROUTE = "/api/ai/claude"
STREAM_ROUTE = "/api/ai/claude-stream"

STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "X-Content-Type-Options": "nosniff",
}


app = FastAPI(title="Tailor AI Completion Service", version="0.1.0")

# Handlers for tool_use requests; register with
# ``app.state.tool_registry.register(name, handler)``.
app.state.tool_registry = ToolRegistry()


# ---------------------------------------------------------------------------
# CORS configuration
# ---------------------------------------------------------------------------

cors_origins_env = os.getenv("TAILOR_AI_CORS_ORIGINS", SERVICE_CORS_DEFAULT_ORIGINS)
allow_origins = [o.strip() for o in cors_origins_env.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> Dict[str, Any]:
    """Check the health status of the service."""
    return {"ok": True}


# ---------------------------------------------------------------------------
# Completion endpoints
# ---------------------------------------------------------------------------


@app.post(COMPLETION_ROUTE)
async def post_completion(body: CompletionBody, request: Request):
    """Run a completion through the direct path and return camelCase JSON.

    Returns 400 when neither ``prompt`` nor ``messages`` is given. Failures
    map to ``{"error", "message"}`` with the error's status when it carries
    one, otherwise 429/401/500 by classification.
    """
    if (invalid := validate_body(body)) is not None:
        return invalid
    try:
        result = await run_completion(body, request.app.state.tool_registry)
    except Exception as exc:  # noqa: BLE001 - rendered as an error response
        return error_response(exc, COMPLETION_ROUTE)
    return JSONResponse(content=to_completion_payload(result))


@app.post(STREAM_ROUTE)
async def post_completion_stream(body: CompletionBody):
    """Stream text deltas as ``text/plain``.

    The provider stream is opened before the response starts, so open
    failures still get a JSON error body and status. Failures after the
    first byte end the body early.
    """
    if (invalid := validate_body(body)) is not None:
        return invalid
    try:
        stream = await open_stream(body)
    except Exception as exc:  # noqa: BLE001 - rendered as an error response
        return error_response(exc, STREAM_ROUTE)
    return StreamingResponse(stream_text(stream), media_type=STREAM_MEDIA_TYPE, headers=STREAM_HEADERS)


__all__ = ["app", "COMPLETION_ROUTE", "STREAM_ROUTE"]
