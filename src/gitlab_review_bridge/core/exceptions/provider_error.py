from __future__ import annotations

from dataclasses import dataclass

from gitlab_review_bridge.core.exceptions.infra_error import InfraError


@dataclass(frozen=False)
class ProviderError(InfraError):
    provider: str
    message: str
    retryable: bool = False
    status_code: int | None = None
    error_code: str | None = None

    def __str__(self) -> str:
        code = f" status={self.status_code}" if self.status_code is not None else ""
        return f"{self.provider}: {self.message}{code}"
