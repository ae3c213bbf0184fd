"""WebSocket endpoint relaying browser sessions to the realtime API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket

from ..session import RealtimeSession

router = APIRouter()

logger = logging.getLogger(__name__)


@router.websocket("/realtime")
async def realtime_socket(websocket: WebSocket) -> None:
    state = websocket.app.state
    await websocket.accept()
    logger.info("websocket_connected", extra={"backend": state.settings.backend})
    session = RealtimeSession(
        websocket,
        state.client_factory,
        settings=state.settings,
        store=state.store,
        prompts=state.prompts,
    )
    await session.run()
