"""Shared fixtures: a freshly discovered registry and a live server."""

import asyncio
import json
from typing import Any, Dict, Tuple

import pytest
import pytest_asyncio

from tool_server.registry import ToolRegistry
from tool_server.server import ToolServer

READ_TIMEOUT = 5.0


@pytest.fixture
def registry() -> ToolRegistry:
    """Registry populated from tool_server.tools."""
    reg = ToolRegistry()
    reg.discover()
    return reg


@pytest_asyncio.fixture
async def server(registry):
    """ToolServer bound to an ephemeral localhost port."""
    srv = ToolServer(
        host="127.0.0.1",
        port=0,
        registry=registry,
        shutdown_grace_seconds=1.0,
    )
    await srv.start()
    yield srv
    await srv.stop()


async def open_raw(server: ToolServer) -> Tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    return await asyncio.open_connection("127.0.0.1", server.port)


async def read_json_line(reader: asyncio.StreamReader) -> Dict[str, Any]:
    line = await asyncio.wait_for(reader.readline(), timeout=READ_TIMEOUT)
    assert line.endswith(b"\n"), f"Expected a full line, got {line!r}"
    return json.loads(line)
