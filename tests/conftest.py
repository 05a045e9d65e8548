from typing import Any

import pytest
from pydantic import SecretStr

from gitlab_review_bridge.infrastructure.common.retry.retry_policy import RetryPolicy
from gitlab_review_bridge.infrastructure.configuration.gitlab_settings import GitLabSettings
from gitlab_review_bridge.infrastructure.providers.vcs.clients.gitlab_http_client import (
    GitLabHttpClient,
)

GITLAB_URL = "https://gitlab.example.com"
API = f"{GITLAB_URL}/api/v4"


def make_settings(**overrides: Any) -> GitLabSettings:
    defaults: dict[str, Any] = {
        "GITLAB_BASE_URL": GITLAB_URL,
        "GITLAB_TOKEN": SecretStr("glpat-test-token"),
        "GITLAB_MAX_ATTEMPTS": 1,
    }
    defaults.update(overrides)
    return GitLabSettings(_env_file=None, **defaults)  # type: ignore[call-arg]


@pytest.fixture
def settings() -> GitLabSettings:
    return make_settings()


@pytest.fixture
async def http_client(settings: GitLabSettings):
    client = GitLabHttpClient(settings, retry_policy=RetryPolicy(max_attempts=1))
    yield client
    await client.close()


@pytest.fixture
def settings_factory():
    return make_settings
