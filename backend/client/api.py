"""Async HTTP client of the Matchup API"""

import logging
from typing import Any

import httpx

import settings
from exceptions import RemoteError

logger = logging.getLogger("matchup.client")


def exception_from_response(response: httpx.Response, prefix=None) -> RemoteError:
    """Create a RemoteError from a failed httpx response"""
    try:
        detail = response.json().get("detail") or response.text
    except ValueError:
        detail = response.text
    return RemoteError(
        f"{prefix}: {detail}" if prefix else detail,
        remote_status=response.status_code,
    )


class MatchupClient:
    """One signed-in (or anonymous) user talking to the API.

    The session cookie set at sign-in lives in the underlying httpx client,
    so one MatchupClient is one account.
    """

    def __init__(self, base_url: str | None = None, timeout: float = 10.0, **kwargs):
        self.client = httpx.AsyncClient(
            base_url=base_url or settings.API_URL,
            timeout=timeout,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            **kwargs,
        )

    async def close(self):
        """Explicitly close the HTTP client"""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteError(f"{method} {url} failed: {e}") from e
        if response.is_error:
            raise exception_from_response(response, f"{method} {url} failed")
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(
                f"{method} {url} returned no JSON", remote_status=response.status_code
            ) from e

    # Auth
    async def sign_up(self, **profile) -> dict:
        return (await self.request("POST", "/auth/signup", json=profile))["user"]

    async def sign_in(self, email: str, password: str) -> dict:
        payload = {"email": email, "password": password}
        return (await self.request("POST", "/auth/signin", json=payload))["user"]

    async def sign_out(self):
        await self.request("POST", "/auth/signout")

    async def me(self) -> dict | None:
        return (await self.request("GET", "/user/me"))["user"]

    async def update_profile(self, **changes) -> dict:
        return (await self.request("PATCH", "/user/me", json=changes))["user"]

    # Users
    async def search_users(self, query: str, limit: int | None = None) -> list[dict]:
        params = {"q": query}
        if limit:
            params["limit"] = limit
        return (await self.request("GET", "/users/search", params=params))["users"]

    async def user_profile(self, user_id: str) -> dict:
        return await self.request("GET", f"/users/{user_id}")

    # Presence
    async def heartbeat(self, status: str = "online") -> dict:
        return await self.request(
            "POST", "/presence/heartbeat", json={"status": status}
        )

    async def online_friends(self) -> list[dict]:
        return (await self.request("GET", "/presence/friends"))["online"]

    async def online_count(self) -> int:
        return (await self.request("GET", "/presence/count"))["online"]

    async def user_presence(self, user_id: str) -> dict:
        return await self.request("GET", f"/presence/user/{user_id}")

    # Friendship
    async def friendship_status(self, identifier: str) -> dict:
        return await self.request("GET", f"/friendship/status/{identifier}")

    async def send_friend_request(self, identifier: str) -> dict:
        return (await self.request("POST", f"/friendship/request/{identifier}"))[
            "friendship"
        ]

    async def accept_friend_request(self, friendship_id: int) -> dict:
        return (await self.request("POST", f"/friendship/accept/{friendship_id}"))[
            "friendship"
        ]

    async def decline_friend_request(self, friendship_id: int) -> dict:
        return (await self.request("POST", f"/friendship/decline/{friendship_id}"))[
            "friendship"
        ]

    async def remove_friend(self, friendship_id: int):
        await self.request("DELETE", f"/friendship/{friendship_id}")

    async def friends(self) -> list[dict]:
        return (await self.request("GET", "/friendship/list"))["friends"]

    async def pending_requests(self) -> list[dict]:
        return (await self.request("GET", "/friendship/pending"))["pending"]

    # Messages
    async def conversations(self) -> list[dict]:
        return (await self.request("GET", "/messages/conversations"))["conversations"]

    async def conversation(self, partner_id: str) -> list[dict]:
        return (await self.request("GET", f"/messages/{partner_id}"))["messages"]

    async def send_message(self, partner_id: str, content: str) -> dict:
        response = await self.request(
            "POST", f"/messages/{partner_id}", json={"content": content}
        )
        return response["message"]

    async def mark_conversation_read(self, partner_id: str) -> int:
        return (await self.request("POST", f"/messages/{partner_id}/read"))["marked"]

    async def inbox(self) -> dict:
        return await self.request("GET", "/messages/inbox")

    async def badges(self) -> dict:
        return await self.request("GET", "/messages/badges")

    # Notifications
    async def notifications(self, limit: int | None = None) -> list[dict]:
        params = {"limit": limit} if limit else None
        response = await self.request("GET", "/notifications", params=params)
        return response["notifications"]

    async def mark_notification_read(self, notification_id: int) -> dict:
        response = await self.request("POST", f"/notifications/{notification_id}/read")
        return response["notification"]

    async def mark_all_notifications_read(self) -> int:
        return (await self.request("POST", "/notifications/read"))["marked"]

    async def delete_notification(self, notification_id: int):
        await self.request("DELETE", f"/notifications/{notification_id}")

    async def delete_all_notifications(self) -> int:
        return (await self.request("DELETE", "/notifications"))["deleted"]

    # Statistics
    async def my_statistics(self) -> list[dict]:
        return (await self.request("GET", "/stats/me"))["statistics"]

    async def report_game(self, **game) -> dict:
        return (await self.request("POST", "/stats/games", json=game))["game"]

    async def save_questionnaire(self, sport: str, answers: dict) -> dict:
        response = await self.request(
            "POST", f"/stats/questionnaire/{sport}", json={"answers": answers}
        )
        return response["statistics"]

    async def leaderboard(self, sport: str, order_by: str = "rating") -> dict:
        return await self.request(
            "GET", f"/stats/leaderboard/{sport}", params={"order_by": order_by}
        )

    async def game_history(
        self, user_id: str | None = None, sport: str | None = None
    ) -> list[dict]:
        params = {"sport": sport} if sport else None
        url = f"/stats/{user_id}/history" if user_id else "/stats/me/history"
        return (await self.request("GET", url, params=params))["games"]

    async def achievements(
        self, user_id: str | None = None, sport: str | None = None
    ) -> list[dict]:
        params = {"sport": sport} if sport else None
        url = f"/stats/{user_id}/achievements" if user_id else "/stats/me/achievements"
        return (await self.request("GET", url, params=params))["achievements"]
