"""
Tool Server

Exposes a registry of named tools over TCP using newline-delimited JSON.
All tools are auto-discovered via registry.py
"""

from .base import Tool, ToolParameter, ToolError, ValidationError, ExecutionError
from .dispatcher import Dispatcher
from .registry import ToolRegistry, get_registry
from .server import ToolServer

__all__ = [
    "Tool",
    "ToolParameter",
    "ToolError",
    "ValidationError",
    "ExecutionError",
    "Dispatcher",
    "ToolRegistry",
    "get_registry",
    "ToolServer",
]
