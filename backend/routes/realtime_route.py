import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlmodel import Session

from models.common import get_session
from services.friendship import FRIENDSHIPS_TABLE, friend_ids
from services.messages import MESSAGES_TABLE
from services.notifications import NOTIFICATIONS_TABLE
from services.presence import PRESENCE_TABLE
from services.realtime import feed

logger = logging.getLogger("matchup.realtime")

router = APIRouter()


async def _relay(websocket: WebSocket, subscription):
    async for change in subscription:
        await websocket.send_json(change.to_dict())


@router.websocket("/realtime")
async def realtime(websocket: WebSocket, session: Session = Depends(get_session)):
    """Relay change signals relevant to the signed-in user.

    Only {table, key, event} is sent: the client re-fetches what changed.
    The presence filter is the friend list at connection time, clients
    reconnect after a friendship change to pick up new friends.
    """
    user_id = websocket.session.get("user_id")
    if not user_id:
        await websocket.close(code=1008)
        return

    subscription = feed.subscribe_many(
        {
            PRESENCE_TABLE: friend_ids(session, user_id=user_id),
            FRIENDSHIPS_TABLE: [user_id],
            MESSAGES_TABLE: [user_id],
            NOTIFICATIONS_TABLE: [user_id],
        }
    )
    await websocket.accept()
    relay = asyncio.create_task(_relay(websocket, subscription))
    try:
        while True:
            # clients only listen, reading is how a disconnect is noticed
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug(f"Realtime connection of {user_id} closed")
    finally:
        subscription.close()
        relay.cancel()
        await asyncio.gather(relay, return_exceptions=True)
