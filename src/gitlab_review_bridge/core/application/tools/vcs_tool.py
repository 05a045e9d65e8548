from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from gitlab_review_bridge.core.domain.merge_request import (
    DiffPosition,
    Discussion,
    MergeRequestRef,
    MergeRequestSummary,
    ProjectSummary,
)
from gitlab_review_bridge.core.domain.merge_request.merge_request_details import (
    MergeRequestDetails,
)


class VcsTool(ABC):
    """Abstract tool contract for the merge-request review workflow.

    Every operation addressed by ``(project_path, mr_iid)`` has a ``*_from_url``
    twin that accepts the merge request web URL instead.
    """

    async def close(self) -> None:
        """Release underlying connections (no-op by default)."""
        return

    # ── Merge request review ──

    @abstractmethod
    async def get_merge_request_details(self, project_path: str, mr_iid: int) -> MergeRequestDetails:
        """Fetch MR metadata together with raw and parsed per-file diffs."""

    @abstractmethod
    async def get_merge_request_discussions(self, project_path: str, mr_iid: int) -> list[Discussion]:
        """Fetch every discussion thread on the MR."""

    @abstractmethod
    async def get_file_content(self, project_path: str, file_path: str, sha: str) -> str:
        """Return the raw content of ``file_path`` at revision ``sha``."""

    @abstractmethod
    async def add_comment_to_merge_request(
        self,
        project_path: str,
        mr_iid: int,
        comment_body: str,
        discussion_id: str | None = None,
        position: DiffPosition | None = None,
    ) -> dict[str, Any]:
        """Reply to a discussion, open an inline discussion, or post a general note."""

    @abstractmethod
    async def assign_reviewers_to_merge_request(
        self, project_path: str, mr_iid: int, reviewer_ids: list[int]
    ) -> dict[str, Any]:
        """Replace the MR reviewers with ``reviewer_ids``."""

    # ── Projects ──

    @abstractmethod
    async def list_projects(self) -> list[ProjectSummary]:
        """List projects the token holder can push to, most recently active first."""

    @abstractmethod
    async def filter_projects_by_name(self, project_name: str) -> list[ProjectSummary]:
        """Case-insensitive substring search over the project list."""

    @abstractmethod
    async def list_merge_requests(self, project_path: str) -> list[MergeRequestSummary]:
        """List the merge requests of a project."""

    @abstractmethod
    async def list_project_members(self, project_path: str) -> list[dict[str, Any]]:
        """List direct members of a project."""

    @abstractmethod
    async def list_project_members_by_project_name(self, project_name: str) -> list[dict[str, Any]]:
        """List members of the project whose short name is exactly ``project_name``."""

    @abstractmethod
    async def get_releases(self, project_path: str) -> list[dict[str, Any]]:
        """List the releases of a project."""

    @abstractmethod
    async def filter_releases_since_version(
        self, project_path: str, since_version: str
    ) -> list[dict[str, Any]]:
        """Releases whose tag is greater than or equal to ``since_version``."""

    # ── Users ──

    @abstractmethod
    async def get_user_id_by_username(self, username: str) -> int:
        """Resolve a username to exactly one user id."""

    @abstractmethod
    async def get_user_activities(self, user_id: int, since_date: date | None = None) -> list[dict[str, Any]]:
        """List contribution events of a user, optionally after ``since_date``."""

    # ── URL convenience ──

    async def get_merge_request_details_from_url(self, mr_url: str) -> MergeRequestDetails:
        ref = MergeRequestRef.from_url(mr_url)
        return await self.get_merge_request_details(ref.project_path, ref.mr_iid)

    async def get_merge_request_discussions_from_url(self, mr_url: str) -> list[Discussion]:
        ref = MergeRequestRef.from_url(mr_url)
        return await self.get_merge_request_discussions(ref.project_path, ref.mr_iid)

    async def get_file_content_from_mr_url(self, mr_url: str, file_path: str, sha: str) -> str:
        ref = MergeRequestRef.from_url(mr_url)
        return await self.get_file_content(ref.project_path, file_path, sha)

    async def add_comment_to_merge_request_from_url(
        self,
        mr_url: str,
        comment_body: str,
        discussion_id: str | None = None,
        position: DiffPosition | None = None,
    ) -> dict[str, Any]:
        ref = MergeRequestRef.from_url(mr_url)
        return await self.add_comment_to_merge_request(
            ref.project_path, ref.mr_iid, comment_body, discussion_id, position
        )

    async def assign_reviewers_to_merge_request_from_url(
        self, mr_url: str, reviewer_ids: list[int]
    ) -> dict[str, Any]:
        ref = MergeRequestRef.from_url(mr_url)
        return await self.assign_reviewers_to_merge_request(ref.project_path, ref.mr_iid, reviewer_ids)

    async def list_project_members_from_mr_url(self, mr_url: str) -> list[dict[str, Any]]:
        ref = MergeRequestRef.from_url(mr_url)
        return await self.list_project_members(ref.project_path)
