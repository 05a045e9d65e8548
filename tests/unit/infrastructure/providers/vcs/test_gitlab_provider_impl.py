"""Unit tests: GitLabProviderImpl with its REST services mocked out."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from gitlab_review_bridge.core.domain.merge_request import DiffPosition, MergeRequestRef
from gitlab_review_bridge.core.exceptions import (
    AmbiguousUserError,
    InvalidMergeRequestUrlError,
    ProjectNotFoundError,
    ProviderError,
    UserNotFoundError,
)
from gitlab_review_bridge.infrastructure.providers.vcs.cache.project_list_cache import ProjectListCache
from gitlab_review_bridge.infrastructure.providers.vcs.gitlab_provider_impl import GitLabProviderImpl

MR_URL = "https://gitlab.example.com/acme/backend/payments-api/-/merge_requests/7"
PROJECT = {
    "id": 42,
    "name": "payments-api",
    "name_with_namespace": "Acme / Backend / payments-api",
    "path_with_namespace": "acme/backend/payments-api",
    "last_activity_at": "2024-05-01T10:00:00Z",
}
OTHER_PROJECT = {
    "id": 43,
    "name": "payments-web",
    "name_with_namespace": "Acme / Frontend / payments-web",
    "path_with_namespace": "acme/frontend/payments-web",
    "last_activity_at": "2024-04-01T10:00:00Z",
}


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider(settings, clock):
    http_client = MagicMock()
    http_client.close = AsyncMock()
    impl = GitLabProviderImpl(http_client, settings, project_cache=ProjectListCache(3600, clock=clock))
    impl.mr_service = AsyncMock()
    impl.project_service = AsyncMock()
    impl.user_service = AsyncMock()
    impl.project_service.get_project.return_value = PROJECT
    return impl


# ══════════════════════════════════════════════════════════════════════
# Merge request review
# ══════════════════════════════════════════════════════════════════════


class TestMergeRequestDetails:
    async def test_assembles_details_from_project_mr_and_changes(self, provider):
        provider.mr_service.get_mr_details.return_value = {
            "iid": 7,
            "project_id": 42,
            "title": "Add refunds",
            "author": {"name": "Ana Lima"},
            "web_url": MR_URL,
            "source_branch": "feature/refunds",
            "target_branch": "main",
            "diff_refs": {"base_sha": "b", "start_sha": "s", "head_sha": "h"},
        }
        provider.mr_service.get_mr_changes.return_value = [
            {"old_path": "a.py", "new_path": "a.py", "diff": "@@ -1,2 +1,3 @@\n x\n-y\n+z\n+w"}
        ]

        details = await provider.get_merge_request_details("acme/backend/payments-api", 7)

        provider.project_service.get_project.assert_awaited_once_with("acme/backend/payments-api")
        provider.mr_service.get_mr_details.assert_awaited_once_with(42, 7)
        provider.mr_service.get_mr_changes.assert_awaited_once_with(42, 7)
        assert details.project_path == "acme/backend/payments-api"
        assert details.mr_iid == "7"
        assert details.head_sha == "h"
        assert [line.new_line for line in details.parsed_diffs[0].hunks[0].lines] == [1, None, 2, 3]

    async def test_url_variant_resolves_reference(self, provider):
        provider.get_merge_request_details = AsyncMock(return_value="details")

        assert await provider.get_merge_request_details_from_url(MR_URL) == "details"
        provider.get_merge_request_details.assert_awaited_once_with("acme/backend/payments-api", 7)

    async def test_url_variant_rejects_bad_url(self, provider):
        with pytest.raises(InvalidMergeRequestUrlError, match="^Failed to parse GitLab MR URL:"):
            await provider.get_merge_request_details_from_url("https://gitlab.example.com/acme/api/issues/3")

    async def test_provider_errors_propagate(self, provider):
        provider.project_service.get_project.side_effect = ProviderError(
            provider="GitLab", message="not found", status_code=404
        )

        with pytest.raises(ProviderError) as exc:
            await provider.get_merge_request_details("acme/missing", 1)

        assert exc.value.status_code == 404

    async def test_malformed_payload_is_wrapped(self, provider):
        provider.mr_service.get_mr_details.return_value = {"title": "no iid"}
        provider.mr_service.get_mr_changes.return_value = []

        with pytest.raises(ProviderError, match="Unexpected response"):
            await provider.get_merge_request_details("acme/backend/payments-api", 7)


class TestDiscussionsAndFiles:
    async def test_discussions_are_mapped(self, provider):
        provider.mr_service.list_discussions.return_value = [
            {"id": "abc", "individual_note": True, "notes": [{"id": 1, "body": "hi", "author": {"username": "ana"}}]}
        ]

        discussions = await provider.get_merge_request_discussions_from_url(MR_URL)

        assert discussions[0].id == "abc"
        assert discussions[0].posted_as_inline is True
        assert discussions[0].notes[0].author.username == "ana"

    async def test_file_content_uses_resolved_project_id(self, provider):
        provider.project_service.get_raw_file.return_value = "content"

        assert await provider.get_file_content_from_mr_url(MR_URL, "src/a.py", "h") == "content"
        provider.project_service.get_raw_file.assert_awaited_once_with(42, "src/a.py", "h")


# ══════════════════════════════════════════════════════════════════════
# Comments and reviewers
# ══════════════════════════════════════════════════════════════════════


class TestAddComment:
    POSITION = DiffPosition(
        base_sha="b", start_sha="s", head_sha="h", old_path="a.py", new_path="a.py", new_line=12
    )

    async def test_reply_wins_over_position(self, provider):
        await provider.add_comment_to_merge_request(
            "acme/backend/payments-api", 7, "agreed", discussion_id="d1", position=self.POSITION
        )

        provider.mr_service.reply_to_discussion.assert_awaited_once_with(42, 7, "d1", "agreed")
        provider.mr_service.create_discussion.assert_not_awaited()
        provider.mr_service.create_note.assert_not_awaited()

    async def test_position_opens_inline_discussion(self, provider):
        await provider.add_comment_to_merge_request("acme/backend/payments-api", 7, "nit", position=self.POSITION)

        provider.mr_service.create_discussion.assert_awaited_once_with(
            42,
            7,
            "nit",
            {
                "base_sha": "b",
                "start_sha": "s",
                "head_sha": "h",
                "position_type": "text",
                "old_path": "a.py",
                "new_path": "a.py",
                "new_line": 12,
            },
        )

    async def test_plain_comment_is_a_general_note(self, provider):
        provider.mr_service.create_note.return_value = {"id": 99}

        result = await provider.add_comment_to_merge_request_from_url(MR_URL, "Looks good")

        assert result == {"id": 99}
        provider.mr_service.create_note.assert_awaited_once_with(42, 7, "Looks good")

    async def test_assign_reviewers(self, provider):
        await provider.assign_reviewers_to_merge_request_from_url(MR_URL, [3, 5])

        provider.mr_service.update_reviewers.assert_awaited_once_with(42, 7, [3, 5])


# ══════════════════════════════════════════════════════════════════════
# Projects
# ══════════════════════════════════════════════════════════════════════


class TestProjects:
    async def test_project_list_is_cached_until_ttl(self, provider, clock):
        provider.project_service.list_member_projects.return_value = [PROJECT, OTHER_PROJECT]

        first = await provider.list_projects()
        clock.now += 3599
        second = await provider.list_projects()
        clock.now += 1
        await provider.list_projects()

        assert first is second
        assert [project.id for project in first] == [42, 43]
        assert provider.project_service.list_member_projects.await_count == 2

    async def test_filter_by_name_is_case_insensitive_on_both_names(self, provider):
        provider.project_service.list_member_projects.return_value = [PROJECT, OTHER_PROJECT]

        assert [p.id for p in await provider.filter_projects_by_name("PAYMENTS")] == [42, 43]
        assert [p.id for p in await provider.filter_projects_by_name("frontend")] == [43]
        assert await provider.filter_projects_by_name("mobile") == []

    async def test_members_by_exact_project_name(self, provider):
        provider.project_service.list_member_projects.return_value = [PROJECT, OTHER_PROJECT]
        provider.project_service.list_members.return_value = [{"id": 3, "username": "ana"}]

        members = await provider.list_project_members_by_project_name("payments-api")

        assert members == [{"id": 3, "username": "ana"}]
        provider.project_service.get_project.assert_awaited_once_with("acme/backend/payments-api")

    async def test_members_by_unknown_project_name(self, provider):
        provider.project_service.list_member_projects.return_value = [PROJECT]

        with pytest.raises(ProjectNotFoundError, match="Project with name payments not found."):
            await provider.list_project_members_by_project_name("payments")

    async def test_members_from_mr_url(self, provider):
        provider.project_service.list_members.return_value = []

        assert await provider.list_project_members_from_mr_url(MR_URL) == []
        provider.project_service.list_members.assert_awaited_once_with(42)

    async def test_list_merge_requests(self, provider):
        provider.mr_service.list_mrs.return_value = [
            {"id": 1, "iid": 7, "title": "Add refunds", "author": {"name": "Ana", "username": "ana"}}
        ]

        (summary,) = await provider.list_merge_requests("acme/backend/payments-api")

        assert summary.iid == 7
        assert summary.author.name == "Ana"


class TestReleases:
    async def test_since_version_filters_and_skips_invalid_tags(self, provider):
        provider.project_service.list_releases.return_value = [
            {"tag_name": "2.0.0"},
            {"tag_name": "1.4.0"},
            {"tag_name": "1.3.9"},
            {"tag_name": "nightly"},
            {"name": "untagged"},
        ]

        releases = await provider.filter_releases_since_version("acme/backend/payments-api", "1.4.0")

        assert releases == [{"tag_name": "2.0.0"}, {"tag_name": "1.4.0"}]

    async def test_prefixed_tags_are_understood(self, provider):
        provider.project_service.list_releases.return_value = [{"tag_name": "v1.10.0"}, {"tag_name": "=v1.9.0"}]

        releases = await provider.filter_releases_since_version("acme/backend/payments-api", "1.10.0")

        assert releases == [{"tag_name": "v1.10.0"}]

    @pytest.mark.parametrize("tag_name", ["1.2", "v1.2", "1.2.3.4", "2024.1", None])
    async def test_non_semver_tags_are_excluded(self, provider, tag_name):
        provider.project_service.list_releases.return_value = [{"tag_name": tag_name}, {"tag_name": "3.0.0"}]

        releases = await provider.filter_releases_since_version("acme/backend/payments-api", "1.0.0")

        assert releases == [{"tag_name": "3.0.0"}]

    async def test_pre_releases_sort_before_their_release(self, provider):
        provider.project_service.list_releases.return_value = [{"tag_name": "2.0.0-rc.1"}, {"tag_name": "2.0.0"}]

        releases = await provider.filter_releases_since_version("acme/backend/payments-api", "2.0.0")

        assert releases == [{"tag_name": "2.0.0"}]

    async def test_unparsable_since_version_matches_nothing(self, provider):
        provider.project_service.list_releases.return_value = [{"tag_name": "2.0.0"}]

        assert await provider.filter_releases_since_version("acme/backend/payments-api", "1.4") == []


# ══════════════════════════════════════════════════════════════════════
# Users
# ══════════════════════════════════════════════════════════════════════


class TestUsers:
    async def test_single_match_returns_id(self, provider):
        provider.user_service.find_users.return_value = [{"id": 9, "username": "ana", "name": "Ana"}]

        assert await provider.get_user_id_by_username("ana") == 9

    async def test_no_match(self, provider):
        provider.user_service.find_users.return_value = []

        with pytest.raises(UserNotFoundError, match="User with username 'ghost' not found."):
            await provider.get_user_id_by_username("ghost")

    async def test_several_matches_are_ambiguous(self, provider):
        provider.user_service.find_users.return_value = [
            {"id": 9, "username": "ana", "name": "Ana"},
            {"id": 10, "username": "ana2", "name": "Ana Dos"},
        ]

        with pytest.raises(AmbiguousUserError) as exc:
            await provider.get_user_id_by_username("ana")

        assert str(exc.value) == (
            "Multiple users found matching 'ana': ana (Ana), ana2 (Ana Dos). Please be more specific."
        )

    async def test_activities_pass_date_through(self, provider):
        provider.user_service.list_events.return_value = [{"action_name": "pushed to"}]

        events = await provider.get_user_activities(9, date(2024, 1, 31))

        assert events == [{"action_name": "pushed to"}]
        provider.user_service.list_events.assert_awaited_once_with(9, date(2024, 1, 31))


async def test_close_closes_http_client(provider):
    await provider.close()

    provider.client.close.assert_awaited_once()


def test_mr_url_resolves_to_project_path_and_iid():
    assert MergeRequestRef.from_url(MR_URL) == MergeRequestRef("acme/backend/payments-api", 7)
