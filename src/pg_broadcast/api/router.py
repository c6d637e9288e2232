"""WebSocket endpoint streaming round events to connected clients."""

import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from src.pg_broadcast.application.hub import Broadcaster
from src.pg_round.api.dependencies import get_broadcaster

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stream"])


@router.websocket("/ws")
async def stream_events(
    websocket: WebSocket,
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> None:
    await websocket.accept()
    sub = broadcaster.subscribe()

    async def _pump() -> None:
        while True:
            frame = await sub.next_frame()
            await websocket.send_json(frame)

    async def _drain() -> None:
        # Inbound messages carry nothing the server needs; reading them is
        # how a client disconnect is observed.
        while True:
            await websocket.receive_text()

    pump = asyncio.create_task(_pump())
    drain = asyncio.create_task(_drain())
    try:
        done, pending = await asyncio.wait({pump, drain}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.warning("websocket stream ended: %r", exc)
    finally:
        broadcaster.unsubscribe(sub)
