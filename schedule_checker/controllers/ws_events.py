import asyncio
import json
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from schedule_checker import db, state
from schedule_checker.bus import EventBus
from schedule_checker.config import get_settings
from schedule_checker.errors import DatabaseError, ServiceUnavailableError

logger = logging.getLogger("schedule_checker.ws")
router = APIRouter()


@router.websocket("/ws/events/{event_id}")
async def websocket_event_updates(websocket: WebSocket, event_id: str):
    try:
        event = await db.get_event(event_id)
    except (DatabaseError, ServiceUnavailableError) as e:
        logger.warning("ws store unavailable event=%s err=%s", event_id, e.detail)
        # 1013: try again later
        await websocket.close(code=1013)
        return
    if not event:
        await websocket.close(code=4404)
        return
    await websocket.accept()
    logger.debug("ws subscribe event=%s", event_id)

    channel = EventBus.event_channel(event_id)
    pubsub = state.redis_client.pubsub()
    await pubsub.subscribe(channel)
    heartbeat_sec = get_settings().events.ws_heartbeat_sec

    async def send_updates():
        try:
            async for message in pubsub.listen():
                if message["type"] == "message":
                    await websocket.send_text(message["data"])
        except Exception as e:
            logger.debug("ws forwarder stopped event=%s err=%r", event_id, e)

    async def heartbeat():
        try:
            while True:
                await asyncio.sleep(heartbeat_sec)
                await websocket.send_text(json.dumps({"type": "ping"}))
        except Exception as e:
            logger.debug("ws heartbeat stopped event=%s err=%r", event_id, e)

    update_task = asyncio.create_task(send_updates())
    heartbeat_task = asyncio.create_task(heartbeat())

    try:
        # Clients only listen; inbound frames are drained so disconnects are noticed
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        update_task.cancel()
        heartbeat_task.cancel()
        await pubsub.unsubscribe(channel)
        if hasattr(pubsub, "aclose"):
            await pubsub.aclose()
        else:
            await pubsub.close()
        logger.debug("ws unsubscribe event=%s", event_id)
