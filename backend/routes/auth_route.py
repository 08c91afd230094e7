import tomllib

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlmodel import Session

from models.auth import User
from models.common import get_session
from models.presence import PresenceStatus
from routes.deps import current_user, get_current_user, get_current_user_id
from services import auth, presence
from settings import PROJECT_PATH

router = APIRouter()


def get_version() -> str:
    with open(PROJECT_PATH / "pyproject.toml", "rb") as f:
        pyproject = tomllib.load(f)
    return pyproject["project"]["version"]


@router.get("/")
async def index():
    return {"version": get_version(), "status": "ok"}


class SignUpPayload(BaseModel):
    email: str
    password: str
    username: str
    first_name: str
    last_name: str
    skills: list[str] = []
    positions: list[str] = []


class SignInPayload(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = None
    location: str | None = None
    avatar_url: str | None = None


@router.post("/auth/signup")
async def sign_up(
    payload: SignUpPayload,
    request: Request,
    session: Session = Depends(get_session),
):
    user = auth.sign_up(session, **payload.model_dump())
    request.session["user_id"] = user.id
    presence.mark_presence(session, user_id=user.id, status=PresenceStatus.online)
    return {"user": auth.user_to_dict(user)}


@router.post("/auth/signin")
async def sign_in(
    payload: SignInPayload,
    request: Request,
    session: Session = Depends(get_session),
):
    user = auth.sign_in(session, email=payload.email, password=payload.password)
    request.session["user_id"] = user.id
    presence.mark_presence(session, user_id=user.id, status=PresenceStatus.online)
    return {"user": auth.user_to_dict(user)}


@router.post("/auth/signout")
async def sign_out(request: Request, session: Session = Depends(get_session)):
    user_id = get_current_user_id(request)
    if user_id:
        presence.mark_presence(session, user_id=user_id, status=PresenceStatus.offline)
    request.session.clear()
    return {"message": "Signed out"}


@router.get("/user/me")
async def get_current_user_info(
    user: User | None = Depends(get_current_user),
):
    if not user:
        return {"user": None}
    return {"user": auth.user_to_dict(user)}


@router.patch("/user/me")
async def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    user = auth.update_profile(session, user=user, **payload.model_dump())
    return {"user": auth.user_to_dict(user)}
