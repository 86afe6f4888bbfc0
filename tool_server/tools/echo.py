"""
Echo Tool

Returns the message it was given; handy for connectivity checks.
Never fails: a null message comes back as null and an absent one is
left out of the result.
"""

from typing import Any, Dict, List

from ..base import Tool, ToolParameter


class EchoTool(Tool):
    """A simple echo tool that returns the input."""

    @property
    def name(self) -> str:
        return "echo"

    @property
    def description(self) -> str:
        return "A simple echo tool that returns the input"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="message",
                type="string",
                description="Message to send back",
                required=False
            )
        ]

    def validate(self, params: Any) -> Dict[str, Any]:
        validated = super().validate(params)
        # Keep an explicit null apart from a missing key
        if not params or "message" not in params:
            validated.pop("message")
        return validated

    async def execute(self, **kwargs) -> Dict[str, Any]:
        if "message" not in kwargs:
            return {}
        return {"message": kwargs["message"]}
