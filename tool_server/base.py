"""
Tool Base Classes

Provides the common tool interface, parameter validation, and the error
types that the dispatcher turns into `{"error": ...}` responses.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ToolParameter:
    """Definition of a tool parameter."""
    name: str
    type: str
    description: str
    required: bool = True
    default: Any = None


@dataclass
class ToolDefinition:
    """Registry entry for a tool."""
    name: str
    description: str
    parameters: List[ToolParameter] = field(default_factory=list)
    handler: Optional[Callable] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": [
                {
                    "name": p.name,
                    "type": p.type,
                    "description": p.description,
                    "required": p.required,
                }
                for p in self.parameters
            ],
        }


class ToolError(Exception):
    """Base exception for tool errors. `message` is sent to the client."""
    def __init__(self, message: str, tool_name: str = None, details: Dict = None):
        self.message = message
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ToolError):
    """Raised when tool input validation fails."""
    pass


class ExecutionError(ToolError):
    """Raised when tool execution fails."""
    pass


class Tool(ABC):
    """
    Abstract base class for tools.

    Subclasses implement:
    - name: Tool identifier used on the wire
    - description: What the tool does
    - parameters: List of ToolParameter definitions
    - execute(): The actual tool logic

    Tools are stateless; one instance is shared by every connection.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for the tool."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        pass

    @property
    def parameters(self) -> List[ToolParameter]:
        """List of parameters the tool accepts."""
        return []

    def validate(self, params: Any) -> Dict[str, Any]:
        """
        Validate request params against the declared parameters.

        `None` is treated as an empty mapping. Undeclared keys are dropped.
        Raises ValidationError if validation fails.
        """
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ValidationError("params must be an object", tool_name=self.name)

        validated = {}

        for param in self.parameters:
            value = params.get(param.name)

            if value is None:
                if param.required:
                    raise ValidationError(
                        f"Missing required parameter: {param.name}",
                        tool_name=self.name
                    )
                value = param.default

            validated[param.name] = value

        return validated

    @abstractmethod
    async def execute(self, **kwargs) -> Dict[str, Any]:
        """
        Execute the tool with validated parameters.
        Returns the result mapping sent verbatim to the client.
        """
        pass

    async def run(self, params: Any) -> Dict[str, Any]:
        """
        Public entry point: validate and execute.

        Errors propagate to the caller; the dispatcher is the one place
        that converts them into error envelopes.
        """
        validated = self.validate(params)
        return await self.execute(**validated)

    def to_definition(self) -> ToolDefinition:
        """Convert tool to ToolDefinition for registry."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
            handler=self.run,
        )
