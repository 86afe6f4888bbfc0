"""
Message Dispatcher

Resolves `{tool, params}` to a registry entry, runs it, and normalizes the
outcome into a single response payload. Dispatch never raises: every
failure becomes `{"error": <message>}`.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as EnvelopeValidationError

from .base import ToolError
from .protocol import ToolRequest, error_envelope
from .registry import ToolRegistry, get_registry

logger = logging.getLogger(__name__)

UNDEFINED = "undefined"


def display_name(tool: Any) -> str:
    """Render a requested tool name the way JavaScript interpolates it."""
    if tool is None:
        return "null"
    if isinstance(tool, bool):
        return "true" if tool else "false"
    return str(tool)


class Dispatcher:
    """Routes decoded requests to tools in a ToolRegistry."""

    def __init__(self, registry: Optional[ToolRegistry] = None):
        self.registry = registry if registry is not None else get_registry()

    async def handle_message(self, message: Any) -> Dict[str, Any]:
        """
        Dispatch one decoded JSON request value.

        A value that is not an object, or an object without a `tool` key,
        names no tool and is answered `Tool undefined not found`.
        """
        try:
            request = ToolRequest.model_validate(message)
        except EnvelopeValidationError:
            logger.warning(f"Request is not an object: {message!r}")
            return error_envelope(f"Tool {UNDEFINED} not found")

        if "tool" not in request.model_fields_set:
            return error_envelope(f"Tool {UNDEFINED} not found")

        return await self.dispatch(request.tool, request.params)

    async def dispatch(self, tool: Any, params: Any) -> Dict[str, Any]:
        """
        Run `tool` with `params`.

        Returns the tool's result mapping on success, or an error envelope
        for unknown tools and for any exception raised by the tool.
        """
        definition = self.registry.lookup(tool)

        if definition is None:
            logger.warning(f"Tool {tool!r} not found")
            return error_envelope(f"Tool {display_name(tool)} not found")

        if definition.handler is None:
            return error_envelope(f"Tool {tool} has no handler")

        logger.debug(f"Dispatching {tool} with params: {params!r}")

        try:
            return await definition.handler(params)
        except ToolError as e:
            logger.error(f"Error in tool {tool}: {e.message}")
            return error_envelope(e.message)
        except Exception as e:
            logger.exception(f"Unexpected error in tool {tool}")
            return error_envelope(str(e) or "Unknown error")
