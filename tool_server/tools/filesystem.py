"""
File System Tools

Directory listing, name search and whole-file read/write. Blocking file
system calls run in a worker thread so the event loop keeps serving other
connections while they complete.
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

from ..base import Tool, ToolParameter, ExecutionError, ValidationError

logger = logging.getLogger(__name__)


def _require_path(path: Any, tool_name: str) -> str:
    # Integers would be taken as file descriptors by os.scandir and open
    if not isinstance(path, str):
        raise ValidationError("path must be a string", tool_name=tool_name)
    return path


def _scan_directory(path: str) -> List[Dict[str, Any]]:
    """Entries of `path` in OS order; symlinks are not followed."""
    with os.scandir(path) as entries:
        return [
            {"name": entry.name, "isDirectory": entry.is_dir(follow_symlinks=False)}
            for entry in entries
        ]


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
        return f.read()


def _write_text(path: str, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


class ListDirTool(Tool):
    """List the contents of a directory."""

    @property
    def name(self) -> str:
        return "listDir"

    @property
    def description(self) -> str:
        return "Lists the contents of a directory"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="Directory to list",
                required=True
            )
        ]

    async def execute(self, path: str, **kwargs) -> Dict[str, Any]:
        path = _require_path(path, self.name)
        try:
            items = await asyncio.to_thread(_scan_directory, path)
        except (OSError, TypeError, ValueError) as e:
            raise ExecutionError(f"Failed to list directory: {e}", tool_name=self.name)

        return {"items": items}


class SearchFilesTool(Tool):
    """Find directory entries whose name contains a substring."""

    @property
    def name(self) -> str:
        return "searchFiles"

    @property
    def description(self) -> str:
        return "Searches for files matching a pattern"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="Directory to search (not recursive)",
                required=True
            ),
            ToolParameter(
                name="pattern",
                type="string",
                description="Substring the entry name must contain",
                required=True
            )
        ]

    async def execute(self, path: str, pattern: str, **kwargs) -> Dict[str, Any]:
        path = _require_path(path, self.name)
        try:
            entries = await asyncio.to_thread(_scan_directory, path)
        except (OSError, TypeError, ValueError) as e:
            raise ExecutionError(f"Failed to search files: {e}", tool_name=self.name)

        pattern = str(pattern)
        matches = [
            {
                "name": entry["name"],
                "isDirectory": entry["isDirectory"],
                "path": os.path.normpath(os.path.join(path, entry["name"])),
            }
            for entry in entries
            if pattern in entry["name"]
        ]

        return {"matches": matches}


class FileContentTool(Tool):
    """Read or write a whole UTF-8 text file."""

    @property
    def name(self) -> str:
        return "fileContent"

    @property
    def description(self) -> str:
        return "Read or write file content"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="operation",
                type="string",
                description="'read' or 'write'",
                required=True
            ),
            ToolParameter(
                name="path",
                type="string",
                description="File path",
                required=True
            ),
            ToolParameter(
                name="content",
                type="string",
                description="Text to write (required for 'write')",
                required=False
            )
        ]

    async def execute(
        self,
        operation: str,
        path: str,
        content: Optional[str] = None,
        **kwargs
    ) -> Dict[str, Any]:
        path = _require_path(path, self.name)

        try:
            if operation == "read":
                text = await asyncio.to_thread(_read_text, path)
                return {"content": text}

            if operation == "write" and content is not None:
                if not isinstance(content, str):
                    raise ValueError("content must be a string")
                await asyncio.to_thread(_write_text, path, content)
                logger.info(f"Wrote {len(content)} characters to {path}")
                return {"success": True}

            raise ValueError("Invalid operation or missing content for write")

        except (OSError, TypeError, ValueError) as e:
            raise ExecutionError(f"File operation failed: {e}", tool_name=self.name)
