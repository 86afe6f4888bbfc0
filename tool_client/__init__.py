"""
Tool Client Layer

Talks to a tool server over TCP. No tool logic lives here.
"""

from .client import ToolClient, ToolClientError, ToolCallTimeout

__all__ = ["ToolClient", "ToolClientError", "ToolCallTimeout"]
