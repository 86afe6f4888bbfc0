"""
Tool Client

Async client for the newline-delimited JSON tool server. Requests on one
connection are answered in order, so call() sends a line and reads the
next line back.
"""

import asyncio
import json
import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Configuration
TOOL_SERVER_HOST = os.getenv("TOOL_SERVER_HOST", "127.0.0.1")
TOOL_SERVER_PORT = int(os.getenv("TOOL_SERVER_PORT", "3000"))
DEFAULT_TIMEOUT = 5.0

# Responses can carry whole files
STREAM_LIMIT = 16 * 1024 * 1024


class ToolClientError(Exception):
    """Raised when the client cannot talk to the server."""
    pass


class ToolCallTimeout(ToolClientError):
    """Raised when no response arrives within the timeout."""
    pass


class ToolClient:
    """
    One persistent connection to a tool server.

    Usage:
        async with ToolClient(port=3000) as client:
            response = await client.call("echo", {"message": "hi"})
    """

    def __init__(
        self,
        host: str = TOOL_SERVER_HOST,
        port: int = TOOL_SERVER_PORT,
        timeout: float = DEFAULT_TIMEOUT
    ):
        self.host = host
        self.port = port
        self.timeout = timeout
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    async def connect(self) -> None:
        if self.connected:
            return
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port, limit=STREAM_LIMIT),
                timeout=self.timeout
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise ToolClientError(
                f"Cannot connect to tool server at {self.host}:{self.port}: {e}"
            ) from e
        logger.info(f"Connected to tool server at {self.host}:{self.port}")

    async def send_raw(self, data: bytes) -> None:
        """Write bytes as-is (no framing added)."""
        if not self.connected:
            raise ToolClientError("Not connected")
        self._writer.write(data)
        await self._writer.drain()

    async def read_response(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        """Read and decode the next response line."""
        if self._reader is None:
            raise ToolClientError("Not connected")
        try:
            line = await asyncio.wait_for(
                self._reader.readline(),
                timeout=self.timeout if timeout is None else timeout
            )
        except asyncio.TimeoutError:
            raise ToolCallTimeout("Request timed out")

        if not line:
            raise ToolClientError("Connection closed by server")
        return json.loads(line)

    async def call(
        self,
        tool: str,
        params: Any = None,
        timeout: Optional[float] = None
    ) -> Dict[str, Any]:
        """Invoke a tool and return the raw response envelope."""
        request = {"tool": tool, "params": params if params is not None else {}}
        data = json.dumps(request, ensure_ascii=False).encode("utf-8") + b"\n"

        async with self._lock:
            await self.send_raw(data)
            return await self.read_response(timeout)

    async def close(self) -> None:
        if self._writer is None:
            return
        writer, self._writer, self._reader = self._writer, None, None
        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionResetError, BrokenPipeError):
            pass
        logger.info("Disconnected from tool server")

    async def __aenter__(self) -> "ToolClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
