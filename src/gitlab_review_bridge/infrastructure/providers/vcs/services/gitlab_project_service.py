import urllib.parse
from typing import Any

from gitlab_review_bridge.infrastructure.providers.vcs.clients.gitlab_http_client import GitLabHttpClient

# Developer access level: projects the token holder can push to and review.
DEVELOPER_ACCESS_LEVEL = 30


class GitLabProjectService:
    def __init__(self, client: GitLabHttpClient):
        self.client = client

    async def get_project(self, project_path: str) -> dict[str, Any]:
        """
        Fetches a project by its path (group/project) or numeric id.
        """
        encoded_path = urllib.parse.quote(str(project_path), safe="")
        return await self.client.get(f"projects/{encoded_path}")

    async def list_member_projects(self) -> list[dict[str, Any]]:
        params = {
            "membership": "true",
            "min_access_level": DEVELOPER_ACCESS_LEVEL,
            "order_by": "last_activity_at",
            "sort": "desc",
        }
        return await self.client.get_all("projects", params=params)

    async def list_members(self, project_id: int) -> list[dict[str, Any]]:
        return await self.client.get_all(f"projects/{project_id}/members")

    async def list_releases(self, project_id: int) -> list[dict[str, Any]]:
        return await self.client.get_all(f"projects/{project_id}/releases")

    async def get_raw_file(self, project_id: int, file_path: str, ref: str) -> str:
        encoded_path = urllib.parse.quote(file_path, safe="")
        return await self.client.get_text(
            f"projects/{project_id}/repository/files/{encoded_path}/raw", params={"ref": ref}
        )
