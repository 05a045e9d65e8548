import uvicorn

from gitlab_review_bridge.infrastructure.configuration.gitlab_settings import GitLabSettings
from gitlab_review_bridge.infrastructure.entrypoints.mcp import mcp
from gitlab_review_bridge.infrastructure.observability.logger_factory_service import configure_logging
from gitlab_review_bridge.infrastructure.observability.logging import CorrelationMiddleware


def run():
    """Start the MCP server on the configured transport (stdio by default)."""
    settings = GitLabSettings()
    configure_logging(settings.log_level)

    if settings.mcp_transport == "streamable-http":
        uvicorn.run(
            CorrelationMiddleware(mcp.streamable_http_app()),
            host=settings.mcp_host,
            port=settings.mcp_port,
            log_level=settings.log_level.lower(),
        )
        return

    mcp.run(transport="stdio")


if __name__ == "__main__":
    run()
