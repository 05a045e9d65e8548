from datetime import date
from typing import Any

from gitlab_review_bridge.infrastructure.providers.vcs.clients.gitlab_http_client import GitLabHttpClient


class GitLabUserService:
    def __init__(self, client: GitLabHttpClient):
        self.client = client

    async def find_users(self, username: str) -> list[dict[str, Any]]:
        # Single page on purpose: more than one hit is already an ambiguity.
        return await self.client.get("users", params={"username": username, "per_page": 100})

    async def list_events(self, user_id: int, after: date | None = None) -> list[dict[str, Any]]:
        params = {"after": after.strftime("%Y-%m-%d")} if after else None
        return await self.client.get_all(f"users/{user_id}/events", params=params)
