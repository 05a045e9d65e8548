from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from gitlab_review_bridge.core.exceptions import ConfigurationError


class GitLabSettings(BaseSettings):
    """Settings for the GitLab API connection and the MCP server that exposes it."""

    # ── Core GitLab settings ──
    base_url: str = Field(default="https://gitlab.com", alias="GITLAB_BASE_URL")
    token: SecretStr | None = Field(default=None, alias="GITLAB_TOKEN")
    timeout_seconds: float = Field(default=10.0, alias="GITLAB_TIMEOUT_SECONDS", gt=0)
    per_page: int = Field(default=100, alias="GITLAB_PER_PAGE", ge=1, le=100)
    max_attempts: int = Field(default=3, alias="GITLAB_MAX_ATTEMPTS", ge=1)
    project_cache_ttl_seconds: float = Field(
        default=24 * 60 * 60, alias="PROJECT_CACHE_TTL_SECONDS", ge=0
    )

    # ── MCP server configuration ──
    mcp_transport: Literal["stdio", "streamable-http"] = Field(default="stdio", alias="MCP_TRANSPORT")
    mcp_host: str = Field(default="127.0.0.1", alias="MCP_HOST")
    mcp_port: int = Field(default=8000, alias="MCP_PORT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/v4/"

    def validate_gitlab_credentials(self) -> None:
        if self.token is None or not self.token.get_secret_value().strip():
            raise ConfigurationError("GITLAB_TOKEN is required to call the GitLab API.")
