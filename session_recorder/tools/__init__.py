"""Agent-facing session management tools."""

from .session_tools import SESSION_TOOLS, SessionTools

__all__ = ["SESSION_TOOLS", "SessionTools"]
