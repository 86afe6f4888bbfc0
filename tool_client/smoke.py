#!/usr/bin/env python3
"""
Smoke test against a running tool server.

Runs one request per tool family and prints each response.

Usage:
    python -m tool_client.smoke --port 3000
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .client import TOOL_SERVER_HOST, TOOL_SERVER_PORT, ToolClient, ToolClientError

logger = logging.getLogger(__name__)


def build_checks(scratch_file: str) -> List[Tuple[str, str, Dict[str, Any]]]:
    """(label, tool, params) in execution order."""
    return [
        ("echo", "echo", {"message": "Hello, tool server!"}),
        ("file content (write)", "fileContent", {
            "operation": "write",
            "path": scratch_file,
            "content": "Hello from the tool server!",
        }),
        ("file content (read)", "fileContent", {
            "operation": "read",
            "path": scratch_file,
        }),
        ("system info", "systemInfo", {}),
        ("JSON validation", "jsonProcess", {
            "operation": "validate",
            "data": {"name": "John", "age": 30},
            "schema": {"name": "string", "age": "number"},
        }),
        ("JSON transformation", "jsonProcess", {
            "operation": "transform",
            "data": {"oldName": "John", "age": 30},
            "transformations": [
                {"operation": "rename", "path": "oldName", "newPath": "name"},
                {
                    "operation": "add",
                    "path": "createdAt",
                    "value": datetime.now(timezone.utc).isoformat(),
                },
            ],
        }),
    ]


async def run_checks(host: str, port: int, scratch_file: str) -> int:
    """Returns the number of checks that came back with an error."""
    failures = 0

    async with ToolClient(host=host, port=port) as client:
        print(f"Connected to tool server at {host}:{port}")

        for label, tool, params in build_checks(scratch_file):
            print(f"\nTesting {label}:")
            response = await client.call(tool, params)
            print(json.dumps(response, indent=2, ensure_ascii=False))
            if "error" in response:
                failures += 1

    return failures


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Smoke test a running tool server")
    parser.add_argument("--host", type=str, default=TOOL_SERVER_HOST,
                        help=f"Server host (default: {TOOL_SERVER_HOST})")
    parser.add_argument("--port", type=int, default=TOOL_SERVER_PORT,
                        help=f"Server port (default: {TOOL_SERVER_PORT})")
    parser.add_argument("--scratch-file", type=str, default="test.txt",
                        help="File used by the write/read checks (default: test.txt)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        failures = asyncio.run(run_checks(args.host, args.port, args.scratch_file))
    except ToolClientError as e:
        print(f"Error during tests: {e}")
        return 1

    print(f"\n{failures} check(s) returned an error")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
