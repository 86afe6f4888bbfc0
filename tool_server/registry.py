"""
Tool Registry

Maps tool names to their definitions. The default registry discovers and
registers every tool in the tool_server/tools/ package; it is built once at
startup and only read afterwards, so connections share it without locking.
"""

import importlib
import inspect
import logging
import pkgutil
from typing import Any, Dict, List, Optional

from .base import Tool, ToolDefinition

logger = logging.getLogger(__name__)

TOOLS_PACKAGE = "tool_server.tools"


class ToolRegistry:
    """Flat name -> ToolDefinition mapping."""

    def __init__(self):
        self._tools: Dict[str, ToolDefinition] = {}

    def register(self, tool) -> ToolDefinition:
        """
        Register a Tool instance or a ToolDefinition.
        An existing entry with the same name is overwritten.
        """
        definition = tool.to_definition() if isinstance(tool, Tool) else tool
        if definition.name in self._tools:
            logger.warning(f"Overwriting registered tool: {definition.name}")
        self._tools[definition.name] = definition
        return definition

    def lookup(self, name: str) -> Optional[ToolDefinition]:
        """Returns None if tool not found."""
        if not isinstance(name, str):
            return None
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools.keys())

    def definitions(self) -> Dict[str, ToolDefinition]:
        return self._tools.copy()

    def describe(self) -> List[Dict[str, Any]]:
        """Tool listing: name, description and declared parameters."""
        return [definition.to_dict() for definition in self._tools.values()]

    def discover(self, package: str = TOOLS_PACKAGE) -> int:
        """
        Import every public module of `package` and register each concrete
        Tool subclass defined there. Returns the number of tools registered.
        """
        module = importlib.import_module(package)
        count = 0

        for _, module_name, _ in pkgutil.iter_modules(module.__path__):
            if module_name.startswith("_"):
                continue

            full_module_name = f"{package}.{module_name}"
            try:
                tool_module = importlib.import_module(full_module_name)
            except Exception as e:
                logger.error(f"Failed to load tool module {module_name}: {e}")
                continue
            logger.debug(f"Loaded tool module: {full_module_name}")

            for name, obj in inspect.getmembers(tool_module, inspect.isclass):
                if (
                    issubclass(obj, Tool)
                    and obj is not Tool
                    and not inspect.isabstract(obj)
                    and obj.__module__ == full_module_name
                ):
                    try:
                        definition = self.register(obj())
                    except Exception as e:
                        logger.error(f"Failed to instantiate tool {name}: {e}")
                        continue
                    logger.debug(f"Registered tool: {definition.name} ({module_name})")
                    count += 1

        logger.info(f"Tool discovery complete. Total tools: {len(self._tools)}")
        return count

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


# Default registry, populated on first use
_default_registry: Optional[ToolRegistry] = None


def get_registry() -> ToolRegistry:
    """Return the default registry, discovering tools on first call."""
    global _default_registry

    if _default_registry is None:
        registry = ToolRegistry()
        registry.discover()
        _default_registry = registry

    return _default_registry


def reset_registry() -> None:
    """Reset the default registry (mainly for testing)."""
    global _default_registry
    _default_registry = None
