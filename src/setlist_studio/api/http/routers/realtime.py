"""Realtime UI channel.

Browsers keep one WebSocket open per page for live updates. The channel
answers keep-alive pings and otherwise stays quiet until the client leaves.
Frames that are not JSON text are ignored.
"""

import json
from datetime import datetime, timezone

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger

router = APIRouter(tags=["realtime"])


@router.websocket("/_blazor")
async def realtime_channel(websocket: WebSocket) -> None:
    await websocket.accept()
    await websocket.send_json(
        {"type": "connected", "timestamp": datetime.now(timezone.utc).isoformat()}
    )
    logger.debug("Realtime channel opened")

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break

            text = frame.get("text")
            if text is None:
                logger.debug("Ignoring binary frame on realtime channel")
                continue
            try:
                message = json.loads(text)
            except ValueError:
                logger.debug("Ignoring malformed frame on realtime channel")
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        pass
    logger.debug("Realtime channel closed")
