from typing import Any

from gitlab_review_bridge.infrastructure.providers.vcs.clients.gitlab_http_client import GitLabHttpClient


class GitLabMrService:
    def __init__(self, client: GitLabHttpClient):
        self.client = client

    def _mr_path(self, project_id: int, mr_iid: int) -> str:
        return f"projects/{project_id}/merge_requests/{mr_iid}"

    async def get_mr_details(self, project_id: int, mr_iid: int) -> dict[str, Any]:
        return await self.client.get(self._mr_path(project_id, mr_iid))

    async def get_mr_changes(self, project_id: int, mr_iid: int) -> list[dict[str, Any]]:
        data = await self.client.get(f"{self._mr_path(project_id, mr_iid)}/changes")
        return data.get("changes") or []

    async def list_discussions(self, project_id: int, mr_iid: int) -> list[dict[str, Any]]:
        return await self.client.get_all(f"{self._mr_path(project_id, mr_iid)}/discussions")

    async def create_note(self, project_id: int, mr_iid: int, body: str) -> dict[str, Any]:
        return await self.client.post(f"{self._mr_path(project_id, mr_iid)}/notes", {"body": body})

    async def create_discussion(
        self, project_id: int, mr_iid: int, body: str, position: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"body": body}
        if position:
            payload["position"] = position
        return await self.client.post(f"{self._mr_path(project_id, mr_iid)}/discussions", payload)

    async def reply_to_discussion(
        self, project_id: int, mr_iid: int, discussion_id: str, body: str
    ) -> dict[str, Any]:
        path = f"{self._mr_path(project_id, mr_iid)}/discussions/{discussion_id}/notes"
        return await self.client.post(path, {"body": body})

    async def list_mrs(self, project_id: int, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return await self.client.get_all(f"projects/{project_id}/merge_requests", params=params)

    async def update_reviewers(self, project_id: int, mr_iid: int, reviewer_ids: list[int]) -> dict[str, Any]:
        return await self.client.put(self._mr_path(project_id, mr_iid), {"reviewer_ids": reviewer_ids})
