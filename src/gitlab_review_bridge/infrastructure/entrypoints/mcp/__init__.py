from gitlab_review_bridge.infrastructure.entrypoints.mcp.gitlab_mcp_server import mcp

__all__ = ["mcp"]
