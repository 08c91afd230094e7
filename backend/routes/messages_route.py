from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from models.auth import User
from models.common import get_session
from routes.deps import current_user
from services import inbox, messages
from utils import time_it

router = APIRouter(prefix="/messages", tags=["messages"])


class NewMessage(BaseModel):
    content: str


@router.get("/conversations")
@time_it
async def list_conversations(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return {"conversations": messages.list_conversations(session, user_id=user.id)}


@router.get("/inbox")
@time_it
async def get_inbox(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return inbox.inbox(session, user_id=user.id)


@router.get("/unread")
async def unread_count(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return {"unread": messages.unread_count(session, user_id=user.id)}


@router.get("/badges")
async def badges(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return inbox.badges(session, user_id=user.id)


@router.get("/{partner_id}")
async def get_conversation(
    partner_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    rows = messages.get_conversation(session, user_id=user.id, partner_id=partner_id)
    return {"messages": [messages.message_to_dict(m) for m in rows]}


@router.post("/{partner_id}")
async def send_message(
    partner_id: str,
    payload: NewMessage,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    message = messages.send_message(
        session, sender=user, receiver_id=partner_id, content=payload.content
    )
    return {"message": messages.message_to_dict(message)}


@router.post("/{partner_id}/read")
async def mark_conversation_read(
    partner_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    marked = messages.mark_conversation_read(
        session, user_id=user.id, partner_id=partner_id
    )
    return {"marked": marked}
