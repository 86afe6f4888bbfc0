"""
Calculator Tool

Basic arithmetic on two numbers.
"""

import operator
from typing import Any, Dict, List

from ..base import Tool, ToolParameter, ExecutionError, ValidationError

OPERATIONS = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
}


def _is_number(value: Any) -> bool:
    # bool is an int subclass but not a JSON number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class CalculateTool(Tool):
    """Performs basic mathematical operations."""

    @property
    def name(self) -> str:
        return "calculate"

    @property
    def description(self) -> str:
        return "Performs basic mathematical operations"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="operation",
                type="string",
                description="One of 'add', 'subtract', 'multiply', 'divide'",
                required=True
            ),
            ToolParameter(
                name="a",
                type="number",
                description="Left operand",
                required=True
            ),
            ToolParameter(
                name="b",
                type="number",
                description="Right operand",
                required=True
            )
        ]

    async def execute(self, operation: str, a: Any, b: Any, **kwargs) -> Dict[str, Any]:
        func = OPERATIONS.get(operation) if isinstance(operation, str) else None
        if func is None:
            raise ExecutionError("Invalid operation", tool_name=self.name)

        if not (_is_number(a) and _is_number(b)):
            raise ValidationError("Operands must be numbers", tool_name=self.name)

        if operation == "divide" and b == 0:
            raise ExecutionError("Division by zero", tool_name=self.name)

        return {"result": func(a, b)}
