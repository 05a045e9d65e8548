"""MCP server exposing the merge-request review operations as tools."""

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date
from typing import Annotated, Any

from mcp.server.fastmcp import Context, FastMCP
from pydantic import BaseModel, Field
from pydantic_core import to_jsonable_python

from gitlab_review_bridge.core.application.tools import VcsTool
from gitlab_review_bridge.core.domain.diff import parse_diff
from gitlab_review_bridge.core.domain.merge_request import DiffPosition, MergeRequestRef
from gitlab_review_bridge.core.exceptions import (
    AmbiguousUserError,
    ConfigurationError,
    DiffParseError,
    InvalidMergeRequestUrlError,
    ProjectNotFoundError,
    ProviderError,
    UserNotFoundError,
)
from gitlab_review_bridge.infrastructure.configuration.gitlab_settings import GitLabSettings
from gitlab_review_bridge.infrastructure.observability.logger_factory_service import get_logger
from gitlab_review_bridge.infrastructure.providers.vcs.clients.gitlab_http_client import (
    GitLabHttpClient,
)
from gitlab_review_bridge.infrastructure.providers.vcs.gitlab_provider_impl import GitLabProviderImpl

logger = get_logger(__name__)


@dataclass(frozen=True)
class AppContext:
    provider: VcsTool


def build_provider(settings: GitLabSettings) -> VcsTool:
    return GitLabProviderImpl(GitLabHttpClient(settings), settings)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[AppContext]:  # noqa: ARG001
    provider = build_provider(GitLabSettings())
    try:
        yield AppContext(provider=provider)
    finally:
        await provider.close()


mcp = FastMCP(
    name="GitLab Review Bridge",
    instructions=(
        "Merge request review tools for GitLab: MR details with parsed diff hunks,"
        " discussions, file content, inline comments, projects, members, releases and users."
    ),
    lifespan=lifespan,
)


class InlinePosition(BaseModel):
    """Where an inline comment is anchored. Use new_line for added lines, old_line for removed ones."""

    base_sha: str
    start_sha: str
    head_sha: str
    old_path: str
    new_path: str
    new_line: int | None = None
    old_line: int | None = None

    def to_domain(self) -> DiffPosition:
        return DiffPosition(**self.model_dump())


MrUrl = Annotated[
    str | None,
    Field(description="Merge request web URL, e.g. https://gitlab.com/group/project/-/merge_requests/12"),
]
ProjectPath = Annotated[str | None, Field(description="Project path, e.g. 'group/sub/project'")]
MrIid = Annotated[int | None, Field(description="Merge request IID (project-scoped number)")]


def _provider(ctx: Context) -> VcsTool:
    return ctx.request_context.lifespan_context.provider


def _ref(mr_url: str | None, project_path: str | None, mr_iid: int | None) -> MergeRequestRef:
    if mr_url:
        return MergeRequestRef.from_url(mr_url)
    if project_path and mr_iid is not None:
        return MergeRequestRef(project_path=project_path, mr_iid=mr_iid)
    raise ValueError("Provide either mr_url or both project_path and mr_iid.")


def _ok(data: Any) -> str:
    return json.dumps(to_jsonable_python(data), indent=2, ensure_ascii=False)


def _err(error: Exception) -> str:
    detail: dict[str, Any] = {"error": str(error)}
    if isinstance(error, ProviderError):
        detail["status_code"] = error.status_code
        detail["retryable"] = error.retryable
        if error.status_code in (401, 403):
            detail["hint"] = "Check GITLAB_TOKEN permissions. Token needs 'api' scope."
        elif error.status_code == 404:
            detail["hint"] = "Verify the project path, MR IID or file path exists."
        elif error.status_code == 429:
            detail["hint"] = "Rate limited. Wait before retrying."
    elif isinstance(error, InvalidMergeRequestUrlError):
        detail["hint"] = "Expected https://<host>/<group>/<project>/-/merge_requests/<iid>."
    elif isinstance(error, ProjectNotFoundError):
        detail["hint"] = "Use gitlab_filter_projects_by_name to find the exact project name."
    elif isinstance(error, (UserNotFoundError, AmbiguousUserError)):
        detail["hint"] = "Pass the exact GitLab username."
    elif isinstance(error, ConfigurationError):
        detail["hint"] = "Set GITLAB_BASE_URL and GITLAB_TOKEN."
    return json.dumps(detail, indent=2, ensure_ascii=False)


async def _run(operation: str, call: Any) -> str:
    try:
        return _ok(await call)
    except Exception as error:  # noqa: BLE001
        logger.warning("Tool call failed", tool=operation, error_type=type(error).__name__, error_details=str(error))
        return _err(error)


# ════════════════════════════════════════════════════════════════════
# Diffs
# ════════════════════════════════════════════════════════════════════


@mcp.tool()
def gitlab_parse_diff(
    diff_text: Annotated[str, Field(description="Unified diff text of a single file")],
    strict: Annotated[bool, Field(description="Reject malformed '@@' hunk headers")] = False,
) -> str:
    """Parse unified diff text into hunks with old/new line numbers for every line."""
    try:
        return _ok(parse_diff(diff_text, strict=strict))
    except DiffParseError as error:
        return _err(error)


# ════════════════════════════════════════════════════════════════════
# Merge requests
# ════════════════════════════════════════════════════════════════════


@mcp.tool()
async def gitlab_get_merge_request_details(
    ctx: Context, mr_url: MrUrl = None, project_path: ProjectPath = None, mr_iid: MrIid = None
) -> str:
    """Get MR metadata, diff refs, raw per-file diffs and parsed hunks."""
    try:
        ref = _ref(mr_url, project_path, mr_iid)
    except ValueError as error:
        return _err(error)
    return await _run(
        "gitlab_get_merge_request_details",
        _provider(ctx).get_merge_request_details(ref.project_path, ref.mr_iid),
    )


@mcp.tool()
async def gitlab_get_merge_request_discussions(
    ctx: Context, mr_url: MrUrl = None, project_path: ProjectPath = None, mr_iid: MrIid = None
) -> str:
    """List the discussion threads of a merge request, including inline positions."""
    try:
        ref = _ref(mr_url, project_path, mr_iid)
    except ValueError as error:
        return _err(error)
    return await _run(
        "gitlab_get_merge_request_discussions",
        _provider(ctx).get_merge_request_discussions(ref.project_path, ref.mr_iid),
    )


@mcp.tool()
async def gitlab_get_file_content(
    ctx: Context,
    file_path: Annotated[str, Field(description="Repository file path", min_length=1)],
    sha: Annotated[str, Field(description="Commit SHA, branch or tag", min_length=1)],
    mr_url: MrUrl = None,
    project_path: ProjectPath = None,
) -> str:
    """Get the raw content of a file at a given revision."""
    try:
        path = project_path or MergeRequestRef.from_url(mr_url or "").project_path
    except ValueError as error:
        return _err(error)
    return await _run("gitlab_get_file_content", _provider(ctx).get_file_content(path, file_path, sha))


@mcp.tool()
async def gitlab_add_comment(
    ctx: Context,
    comment_body: Annotated[str, Field(description="Markdown comment", min_length=1)],
    mr_url: MrUrl = None,
    project_path: ProjectPath = None,
    mr_iid: MrIid = None,
    discussion_id: Annotated[str | None, Field(description="Reply into this discussion")] = None,
    position: Annotated[InlinePosition | None, Field(description="Anchor for an inline comment")] = None,
) -> str:
    """Reply to a discussion, open an inline discussion, or post a general MR comment."""
    try:
        ref = _ref(mr_url, project_path, mr_iid)
    except ValueError as error:
        return _err(error)
    return await _run(
        "gitlab_add_comment",
        _provider(ctx).add_comment_to_merge_request(
            ref.project_path,
            ref.mr_iid,
            comment_body,
            discussion_id=discussion_id,
            position=position.to_domain() if position else None,
        ),
    )


@mcp.tool()
async def gitlab_assign_reviewers(
    ctx: Context,
    reviewer_ids: Annotated[list[int], Field(description="GitLab user ids")],
    mr_url: MrUrl = None,
    project_path: ProjectPath = None,
    mr_iid: MrIid = None,
) -> str:
    """Set the reviewers of a merge request."""
    try:
        ref = _ref(mr_url, project_path, mr_iid)
    except ValueError as error:
        return _err(error)
    return await _run(
        "gitlab_assign_reviewers",
        _provider(ctx).assign_reviewers_to_merge_request(ref.project_path, ref.mr_iid, reviewer_ids),
    )


@mcp.tool()
async def gitlab_list_merge_requests(
    ctx: Context,
    project_path: Annotated[str, Field(description="Project path, e.g. 'group/project'", min_length=1)],
) -> str:
    """List the merge requests of a project."""
    return await _run("gitlab_list_merge_requests", _provider(ctx).list_merge_requests(project_path))


# ════════════════════════════════════════════════════════════════════
# Projects
# ════════════════════════════════════════════════════════════════════


@mcp.tool()
async def gitlab_list_projects(ctx: Context) -> str:
    """List projects with developer access or above, most recently active first (cached)."""
    return await _run("gitlab_list_projects", _provider(ctx).list_projects())


@mcp.tool()
async def gitlab_filter_projects_by_name(
    ctx: Context,
    project_name: Annotated[str, Field(description="Case-insensitive name fragment", min_length=1)],
) -> str:
    """Find projects whose name or namespaced name contains the fragment."""
    return await _run("gitlab_filter_projects_by_name", _provider(ctx).filter_projects_by_name(project_name))


@mcp.tool()
async def gitlab_list_project_members(
    ctx: Context,
    project_path: ProjectPath = None,
    mr_url: MrUrl = None,
    project_name: Annotated[str | None, Field(description="Exact project name")] = None,
) -> str:
    """List project members by project path, MR URL or exact project name."""
    provider = _provider(ctx)
    if project_name:
        return await _run(
            "gitlab_list_project_members", provider.list_project_members_by_project_name(project_name)
        )
    try:
        path = project_path or MergeRequestRef.from_url(mr_url or "").project_path
    except ValueError as error:
        return _err(error)
    return await _run("gitlab_list_project_members", provider.list_project_members(path))


@mcp.tool()
async def gitlab_get_releases(
    ctx: Context,
    project_path: Annotated[str, Field(description="Project path, e.g. 'group/project'", min_length=1)],
    since_version: Annotated[
        str | None, Field(description="Only releases with a tag >= this version, e.g. '1.4.0'")
    ] = None,
) -> str:
    """List project releases, optionally only those since a version."""
    provider = _provider(ctx)
    if since_version:
        return await _run(
            "gitlab_get_releases", provider.filter_releases_since_version(project_path, since_version)
        )
    return await _run("gitlab_get_releases", provider.get_releases(project_path))


# ════════════════════════════════════════════════════════════════════
# Users
# ════════════════════════════════════════════════════════════════════


@mcp.tool()
async def gitlab_get_user_id(
    ctx: Context,
    username: Annotated[str, Field(description="Exact GitLab username", min_length=1)],
) -> str:
    """Resolve a username to its numeric user id."""
    return await _run("gitlab_get_user_id", _provider(ctx).get_user_id_by_username(username))


@mcp.tool()
async def gitlab_get_user_activities(
    ctx: Context,
    user_id: Annotated[int, Field(description="GitLab user id")],
    since_date: Annotated[str | None, Field(description="ISO date YYYY-MM-DD")] = None,
) -> str:
    """List a user's contribution events, optionally after a date."""
    try:
        after = date.fromisoformat(since_date) if since_date else None
    except ValueError as error:
        return _err(error)
    return await _run("gitlab_get_user_activities", _provider(ctx).get_user_activities(user_id, after))
