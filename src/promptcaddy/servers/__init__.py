"""MCP protocol server for prompts."""

from .stdio import PromptServer, ServerState, build_tool

__all__ = ["PromptServer", "ServerState", "build_tool"]
