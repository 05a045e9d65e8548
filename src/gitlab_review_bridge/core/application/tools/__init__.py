from gitlab_review_bridge.core.application.tools.vcs_tool import VcsTool

__all__ = ["VcsTool"]
