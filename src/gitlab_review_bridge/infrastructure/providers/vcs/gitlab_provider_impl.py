from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import Any

from semver import Version

from gitlab_review_bridge.core.application.tools import VcsTool
from gitlab_review_bridge.core.domain.merge_request import (
    DiffPosition,
    Discussion,
    MergeRequestSummary,
    ProjectSummary,
)
from gitlab_review_bridge.core.domain.merge_request.merge_request_details import (
    MergeRequestDetails,
)
from gitlab_review_bridge.core.exceptions import (
    AmbiguousUserError,
    DomainError,
    ProjectNotFoundError,
    ProviderError,
    UserNotFoundError,
)
from gitlab_review_bridge.infrastructure.configuration.gitlab_settings import GitLabSettings
from gitlab_review_bridge.infrastructure.observability.logger_factory_service import get_logger
from gitlab_review_bridge.infrastructure.providers.vcs.cache.project_list_cache import (
    ProjectListCache,
)
from gitlab_review_bridge.infrastructure.providers.vcs.clients.gitlab_http_client import (
    PROVIDER,
    GitLabHttpClient,
)
from gitlab_review_bridge.infrastructure.providers.vcs.mappers.gitlab_diff_mapper import to_file_diffs
from gitlab_review_bridge.infrastructure.providers.vcs.mappers.gitlab_response_mapper import (
    map_discussion,
    map_merge_request_details,
    map_merge_request_summary,
    map_project_summary,
)
from gitlab_review_bridge.infrastructure.providers.vcs.services.gitlab_mr_service import GitLabMrService
from gitlab_review_bridge.infrastructure.providers.vcs.services.gitlab_project_service import (
    GitLabProjectService,
)
from gitlab_review_bridge.infrastructure.providers.vcs.services.gitlab_user_service import (
    GitLabUserService,
)

logger = get_logger(__name__)


class GitLabProviderImpl(VcsTool):
    def __init__(
        self,
        http_client: GitLabHttpClient,
        settings: GitLabSettings,
        project_cache: ProjectListCache | None = None,
    ):
        self.client = http_client
        self._logger = logger
        self._project_cache = project_cache or ProjectListCache(settings.project_cache_ttl_seconds)

        # Initialize internal services
        self.mr_service = GitLabMrService(http_client)
        self.project_service = GitLabProjectService(http_client)
        self.user_service = GitLabUserService(http_client)

    async def close(self) -> None:
        await self.client.close()

    async def _resolve_project(self, project_path: str) -> dict[str, Any]:
        return await self.project_service.get_project(project_path)

    # ── Merge request review ──

    async def get_merge_request_details(self, project_path: str, mr_iid: int) -> MergeRequestDetails:
        self._logger.info("Fetching MR details", project_path=project_path, mr_iid=mr_iid)
        with self._errors(f"get_merge_request_details({project_path}!{mr_iid})"):
            project = await self._resolve_project(project_path)
            merge_request = await self.mr_service.get_mr_details(project["id"], mr_iid)
            changes = await self.mr_service.get_mr_changes(project["id"], mr_iid)
            file_diffs = to_file_diffs(changes)
            details = map_merge_request_details(project, merge_request, file_diffs)
        self._logger.info("MR details ready", mr_iid=mr_iid, files=len(details.file_diffs))
        return details

    async def get_merge_request_discussions(self, project_path: str, mr_iid: int) -> list[Discussion]:
        self._logger.info("Fetching MR discussions", project_path=project_path, mr_iid=mr_iid)
        with self._errors(f"get_merge_request_discussions({project_path}!{mr_iid})"):
            project = await self._resolve_project(project_path)
            raw = await self.mr_service.list_discussions(project["id"], mr_iid)
            return [map_discussion(item) for item in raw]

    async def get_file_content(self, project_path: str, file_path: str, sha: str) -> str:
        self._logger.info("Fetching file content", project_path=project_path, file_path=file_path, ref=sha)
        with self._errors(f"get_file_content({file_path}@{sha})"):
            project = await self._resolve_project(project_path)
            return await self.project_service.get_raw_file(project["id"], file_path, sha)

    async def add_comment_to_merge_request(
        self,
        project_path: str,
        mr_iid: int,
        comment_body: str,
        discussion_id: str | None = None,
        position: DiffPosition | None = None,
    ) -> dict[str, Any]:
        with self._errors(f"add_comment_to_merge_request({project_path}!{mr_iid})"):
            project = await self._resolve_project(project_path)
            if discussion_id:
                self._logger.info("Replying to discussion", mr_iid=mr_iid, discussion_id=discussion_id)
                return await self.mr_service.reply_to_discussion(
                    project["id"], mr_iid, discussion_id, comment_body
                )
            if position is not None:
                self._logger.info(
                    "Posting inline comment",
                    mr_iid=mr_iid,
                    new_path=position.new_path,
                    new_line=position.new_line,
                    old_line=position.old_line,
                )
                return await self.mr_service.create_discussion(
                    project["id"], mr_iid, comment_body, position.to_payload()
                )
            self._logger.info("Posting general comment", mr_iid=mr_iid)
            return await self.mr_service.create_note(project["id"], mr_iid, comment_body)

    async def assign_reviewers_to_merge_request(
        self, project_path: str, mr_iid: int, reviewer_ids: list[int]
    ) -> dict[str, Any]:
        self._logger.info("Assigning reviewers", mr_iid=mr_iid, reviewer_ids=reviewer_ids)
        with self._errors(f"assign_reviewers_to_merge_request({project_path}!{mr_iid})"):
            project = await self._resolve_project(project_path)
            return await self.mr_service.update_reviewers(project["id"], mr_iid, reviewer_ids)

    # ── Projects ──

    async def list_projects(self) -> list[ProjectSummary]:
        cached = self._project_cache.get()
        if cached is not None:
            return cached

        self._logger.info("Refreshing project list")
        with self._errors("list_projects"):
            raw = await self.project_service.list_member_projects()
            projects = [map_project_summary(item) for item in raw]
        self._project_cache.store(projects)
        return projects

    async def filter_projects_by_name(self, project_name: str) -> list[ProjectSummary]:
        projects = await self.list_projects()
        return [project for project in projects if project.matches(project_name)]

    async def list_merge_requests(self, project_path: str) -> list[MergeRequestSummary]:
        with self._errors(f"list_merge_requests({project_path})"):
            project = await self._resolve_project(project_path)
            raw = await self.mr_service.list_mrs(project["id"])
            return [map_merge_request_summary(item) for item in raw]

    async def list_project_members(self, project_path: str) -> list[dict[str, Any]]:
        with self._errors(f"list_project_members({project_path})"):
            project = await self._resolve_project(project_path)
            return await self.project_service.list_members(project["id"])

    async def list_project_members_by_project_name(self, project_name: str) -> list[dict[str, Any]]:
        projects = await self.list_projects()
        match = next((project for project in projects if project.name == project_name), None)
        if match is None:
            raise ProjectNotFoundError(project_name)
        return await self.list_project_members(match.path_with_namespace)

    async def get_releases(self, project_path: str) -> list[dict[str, Any]]:
        with self._errors(f"get_releases({project_path})"):
            project = await self._resolve_project(project_path)
            return await self.project_service.list_releases(project["id"])

    async def filter_releases_since_version(
        self, project_path: str, since_version: str
    ) -> list[dict[str, Any]]:
        releases = await self.get_releases(project_path)
        return [
            release
            for release in releases
            if _is_at_least(release.get("tag_name"), since_version)
        ]

    # ── Users ──

    async def get_user_id_by_username(self, username: str) -> int:
        with self._errors(f"get_user_id_by_username({username})"):
            users = await self.user_service.find_users(username)

        if not users:
            raise UserNotFoundError(username)
        if len(users) > 1:
            raise AmbiguousUserError(
                username, [f"{user.get('username')} ({user.get('name')})" for user in users]
            )
        return users[0]["id"]

    async def get_user_activities(self, user_id: int, since_date: date | None = None) -> list[dict[str, Any]]:
        with self._errors(f"get_user_activities({user_id})"):
            return await self.user_service.list_events(user_id, since_date)

    @contextmanager
    def _errors(self, context: str) -> Iterator[None]:
        """Log failures with the operation context; wrap unexpected ones in ProviderError."""
        try:
            yield
        except ProviderError as error:
            self._logger.error(
                f"GitLab operation failed [{context}]",
                error_type=type(error).__name__,
                error_code=error.status_code,
                error_details=error.message,
                error_retryable=error.retryable,
            )
            raise
        except DomainError:
            raise
        except (KeyError, TypeError, ValueError) as error:
            self._logger.error(f"Unexpected GitLab payload [{context}]", error_type=type(error).__name__, error_details=repr(error))
            raise ProviderError(
                provider=PROVIDER,
                message=f"Unexpected response while running {context}: {error!r}",
                retryable=False,
            ) from error


def _is_at_least(tag_name: str | None, since_version: str) -> bool:
    try:
        return _parse_version(tag_name) >= _parse_version(since_version)
    except (ValueError, TypeError) as error:
        logger.warning(
            f"Could not parse version {tag_name} or {since_version}: {error}",
            tag_name=tag_name,
            since_version=since_version,
        )
        return False


def _parse_version(value: str | None) -> Version:
    """Strict semver (major.minor.patch); a leading ``v`` or ``=`` is tolerated."""
    if not isinstance(value, str):
        raise TypeError(f"Expected a version string, got {value!r}")
    return Version.parse(value.strip().lstrip("v="))
