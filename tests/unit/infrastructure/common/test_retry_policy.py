from unittest.mock import AsyncMock

import pytest

from gitlab_review_bridge.core.exceptions import ProviderError
from gitlab_review_bridge.infrastructure.common.retry.retry_policy import RetryPolicy

NO_WAIT = RetryPolicy(max_attempts=3, initial_wait=0, max_wait=0, jitter=0)


def _error(retryable: bool) -> ProviderError:
    return ProviderError(provider="GitLab", message="boom", retryable=retryable, status_code=503)


async def test_returns_first_success():
    fn = AsyncMock(return_value="ok")

    assert await NO_WAIT.run(fn) == "ok"
    assert fn.await_count == 1


async def test_retries_retryable_errors_until_success():
    fn = AsyncMock(side_effect=[_error(True), _error(True), "ok"])

    assert await NO_WAIT.run(fn) == "ok"
    assert fn.await_count == 3


async def test_reraises_last_error_when_attempts_run_out():
    fn = AsyncMock(side_effect=_error(True))

    with pytest.raises(ProviderError):
        await NO_WAIT.run(fn)

    assert fn.await_count == 3


async def test_non_retryable_provider_error_fails_fast():
    fn = AsyncMock(side_effect=_error(False))

    with pytest.raises(ProviderError):
        await NO_WAIT.run(fn)

    assert fn.await_count == 1


async def test_other_exceptions_are_not_retried():
    fn = AsyncMock(side_effect=KeyError("id"))

    with pytest.raises(KeyError):
        await NO_WAIT.run(fn)

    assert fn.await_count == 1


async def test_forwards_arguments_and_awaits_coroutine_functions():
    attempts = []

    async def fetch(path, *, page):
        attempts.append((path, page))
        if len(attempts) < 2:
            raise _error(True)
        return {"path": path, "page": page}

    assert await NO_WAIT.run(fetch, "projects/1", page=2) == {"path": "projects/1", "page": 2}
    assert attempts == [("projects/1", 2), ("projects/1", 2)]
