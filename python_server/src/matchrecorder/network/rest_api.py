"""Operator REST API — FastAPI app exposing the command surface.

Every endpoint requires a bearer token whose uid is listed in
``operator_uids`` of the recorder config.

Usage::

    from matchrecorder.network.rest_api import create_app

    app = create_app(services)
    # Start with uvicorn as an asyncio task alongside the tick loop
"""

from __future__ import annotations

import logging
from typing import Any, Optional, TYPE_CHECKING

from fastapi import Body, Depends, FastAPI, HTTPException
from pydantic import ValidationError

from matchrecorder.network.jwt_auth import get_current_uid

if TYPE_CHECKING:
    from matchrecorder.main import Services

log = logging.getLogger(__name__)


def create_app(services: "Services") -> FastAPI:
    """Factory: create and return the operator API.

    The ``services`` reference is captured by closure so endpoints can
    reach the controller without global state.
    """
    app = FastAPI(title="Match Recorder", version="1.0.0")

    async def get_operator_uid(uid: int = Depends(get_current_uid)) -> int:
        if uid not in services.config.operator_uids:
            log.warning("Rejected command from non-operator uid %d", uid)
            raise HTTPException(status_code=403, detail="Operator privileges required")
        return uid

    @app.get("/api/status")
    async def status(uid: int = Depends(get_operator_uid)) -> dict[str, Any]:
        return services.controller.status()

    @app.get("/api/recordings")
    async def recordings(uid: int = Depends(get_operator_uid)) -> dict[str, Any]:
        return {"recordings": services.controller.list_recordings()}

    async def dispatch(body: dict[str, Any], uid: int) -> dict[str, Any]:
        try:
            response = await services.router.route(body, uid)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
        if response is None:
            raise HTTPException(status_code=404, detail=f"Unknown command: {body.get('type', '')!r}")
        return response

    @app.post("/api/commands")
    async def command(
        body: dict[str, Any] = Body(...),
        uid: int = Depends(get_operator_uid),
    ) -> dict[str, Any]:
        return await dispatch(body, uid)

    @app.post("/api/commands/{cmd_type}")
    async def typed_command(
        cmd_type: str,
        body: Optional[dict[str, Any]] = Body(None),
        uid: int = Depends(get_operator_uid),
    ) -> dict[str, Any]:
        # path segment wins over any "type" in the body
        return await dispatch({**(body or {}), "type": cmd_type}, uid)

    return app
