from fastapi import APIRouter, Depends
from sqlmodel import Session

from models.auth import User
from models.common import get_session
from routes.deps import current_user
from services import notifications

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    limit: int | None = None,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    rows = notifications.list_notifications(session, user_id=user.id, limit=limit)
    return {"notifications": [n.to_dict() for n in rows]}


@router.get("/unread")
async def unread_count(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return {"unread": notifications.unread_count(session, user_id=user.id)}


@router.post("/read")
async def mark_all_read(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return {"marked": notifications.mark_all_read(session, user_id=user.id)}


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    notification = notifications.mark_read(
        session, notification_id=notification_id, user_id=user.id
    )
    return {"notification": notification.to_dict()}


@router.delete("")
async def delete_all(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return {"deleted": notifications.delete_all(session, user_id=user.id)}


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    notifications.delete_notification(
        session, notification_id=notification_id, user_id=user.id
    )
    return {"message": "Notification deleted"}
