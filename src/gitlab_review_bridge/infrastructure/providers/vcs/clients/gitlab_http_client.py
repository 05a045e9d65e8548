from __future__ import annotations

import logging
from typing import Any

import httpx

from gitlab_review_bridge.core.exceptions import ProviderError
from gitlab_review_bridge.infrastructure.common.retry.retry_policy import RetryPolicy
from gitlab_review_bridge.infrastructure.configuration.gitlab_settings import GitLabSettings
from gitlab_review_bridge.infrastructure.observability.redaction_service import redact_text

logger = logging.getLogger(__name__)

PROVIDER = "GitLab"
_RETRYABLE_STATUS = {429, 500, 502, 503, 504}
# Writes that are never re-sent after a 5xx or transport failure; only 429 is retried.
_NON_IDEMPOTENT_METHODS = {"POST"}
_ERROR_CODES = {
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    422: "unprocessable",
    429: "rate_limited",
}


class GitLabHttpClient:
    """Thin async wrapper over the GitLab REST API v4.

    Paths are relative to ``<base_url>/api/v4/``. HTTP and transport failures
    surface as ProviderError; retryable ones go through the RetryPolicy.
    """

    def __init__(self, settings: GitLabSettings, retry_policy: RetryPolicy | None = None):
        self.settings = settings
        self._validate_config()
        self._retry = retry_policy or RetryPolicy(max_attempts=settings.max_attempts)
        self._client = httpx.AsyncClient(
            base_url=settings.api_url,
            headers=self._get_headers(),
            timeout=settings.timeout_seconds,
        )

    def _validate_config(self):
        self.settings.validate_gitlab_credentials()

    def _get_headers(self) -> dict[str, str]:
        token = self.settings.token.get_secret_value() if self.settings.token else ""
        return {
            "Accept": "application/json",
            "PRIVATE-TOKEN": token,
        }

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._request("GET", path, params=params)
        return response.json()

    async def get_text(self, path: str, params: dict[str, Any] | None = None) -> str:
        response = await self._request("GET", path, params=params)
        return response.text

    async def get_all(self, path: str, params: dict[str, Any] | None = None) -> list[Any]:
        """Follow ``X-Next-Page`` until the last page and return the concatenated items."""
        query = {"per_page": self.settings.per_page, **(params or {})}
        items: list[Any] = []
        page = 1
        while True:
            response = await self._request("GET", path, params={**query, "page": page})
            items.extend(response.json())
            next_page = response.headers.get("x-next-page", "").strip()
            if not next_page:
                return items
            page = int(next_page)

    async def post(self, path: str, json_data: dict[str, Any]) -> Any:
        response = await self._request("POST", path, json=json_data)
        return response.json()

    async def put(self, path: str, json_data: dict[str, Any]) -> Any:
        response = await self._request("PUT", path, json=json_data)
        return response.json()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        return await self._retry.run(self._send, method, path, **kwargs)

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("[GitLab] %s %s failed: %s", method, path, exc)
            raise ProviderError(
                provider=PROVIDER,
                message=f"Connection failure on {method} {path}: {exc}",
                retryable=method not in _NON_IDEMPOTENT_METHODS,
            ) from exc

        if response.is_error:
            raise self._to_provider_error(method, path, response)
        return response

    @staticmethod
    def _to_provider_error(method: str, path: str, response: httpx.Response) -> ProviderError:
        status = response.status_code
        body = redact_text(response.text[:500])
        logger.error("[GitLab] %s %s returned %s: %s", method, path, status, body)
        return ProviderError(
            provider=PROVIDER,
            message=f"{method} {path} failed: {body or response.reason_phrase}",
            retryable=_is_retryable(method, status),
            status_code=status,
            error_code=_ERROR_CODES.get(status),
        )


def _is_retryable(method: str, status: int) -> bool:
    if method in _NON_IDEMPOTENT_METHODS:
        return status == 429
    return status in _RETRYABLE_STATUS
