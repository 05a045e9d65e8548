"""Maps GitLab REST payloads onto the bridge's domain value objects."""

from __future__ import annotations

from typing import Any

from gitlab_review_bridge.core.domain.merge_request import (
    AuthorRef,
    DiffPosition,
    Discussion,
    FileDiff,
    MergeRequestSummary,
    Note,
    NoteAuthor,
    ProjectSummary,
)
from gitlab_review_bridge.core.domain.merge_request.merge_request_details import (
    MergeRequestDetails,
)
from gitlab_review_bridge.infrastructure.providers.vcs.mappers.gitlab_diff_mapper import (
    build_diff_for_prompt,
    parse_file_diffs,
)


def map_project_summary(data: dict[str, Any]) -> ProjectSummary:
    return ProjectSummary(
        id=data["id"],
        name=data.get("name", ""),
        name_with_namespace=data.get("name_with_namespace", ""),
        path_with_namespace=data.get("path_with_namespace", ""),
        last_activity_at=data.get("last_activity_at", ""),
    )


def map_merge_request_summary(data: dict[str, Any]) -> MergeRequestSummary:
    author = data.get("author") or {}
    return MergeRequestSummary(
        id=data["id"],
        iid=data["iid"],
        title=data.get("title", ""),
        author=AuthorRef(name=author.get("name", ""), username=author.get("username", "")),
        updated_at=data.get("updated_at", ""),
        web_url=data.get("web_url", ""),
        project_id=data.get("project_id"),
    )


def map_position(data: dict[str, Any] | None) -> DiffPosition | None:
    if not data:
        return None
    return DiffPosition(
        base_sha=data.get("base_sha", ""),
        start_sha=data.get("start_sha", ""),
        head_sha=data.get("head_sha", ""),
        old_path=data.get("old_path", ""),
        new_path=data.get("new_path", ""),
        position_type=data.get("position_type", "text"),
        new_line=data.get("new_line"),
        old_line=data.get("old_line"),
    )


def map_note(data: dict[str, Any]) -> Note:
    author = data.get("author") or {}
    return Note(
        id=data["id"],
        body=data.get("body", ""),
        author=NoteAuthor(username=author.get("username", ""), name=author.get("name")),
        system=bool(data.get("system", False)),
        position=map_position(data.get("position")),
    )


def map_discussion(data: dict[str, Any]) -> Discussion:
    return Discussion(
        id=str(data["id"]),
        notes=tuple(map_note(note) for note in data.get("notes") or []),
        posted_as_inline=data.get("individual_note"),
    )


def map_merge_request_details(
    project: dict[str, Any],
    merge_request: dict[str, Any],
    file_diffs: list[FileDiff],
) -> MergeRequestDetails:
    diff_refs = merge_request.get("diff_refs") or {}
    author = merge_request.get("author") or {}
    return MergeRequestDetails(
        project_path=project.get("path_with_namespace", ""),
        mr_iid=str(merge_request["iid"]),
        project_id=merge_request.get("project_id", project.get("id")),
        title=merge_request.get("title", ""),
        author_name=author.get("name", ""),
        web_url=merge_request.get("web_url", ""),
        source_branch=merge_request.get("source_branch", ""),
        target_branch=merge_request.get("target_branch", ""),
        base_sha=diff_refs.get("base_sha", ""),
        start_sha=diff_refs.get("start_sha", ""),
        head_sha=diff_refs.get("head_sha", ""),
        file_diffs=tuple(file_diffs),
        diff_for_prompt=build_diff_for_prompt(file_diffs),
        parsed_diffs=tuple(parse_file_diffs(file_diffs)),
    )
