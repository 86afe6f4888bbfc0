#!/usr/bin/env python3
"""
Tool Server Entrypoint

TCP server that exposes all registered tools over newline-delimited JSON.
Tools are automatically discovered via registry.py

Usage:
    python -m tool_server --port 3000
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional, Set

from .config import ServerSettings
from .connection import handle_connection
from .dispatcher import Dispatcher
from .registry import ToolRegistry, get_registry

logger = logging.getLogger(__name__)


class ToolServer:
    """
    Listener that accepts TCP connections and serves each one in its own
    task. Connections share only the (read-only) tool registry.
    """

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 3000,
        registry: Optional[ToolRegistry] = None,
        shutdown_grace_seconds: float = 5.0,
    ):
        self.host = host
        self.requested_port = port
        self.registry = registry if registry is not None else get_registry()
        self.dispatcher = Dispatcher(self.registry)
        self.shutdown_grace_seconds = shutdown_grace_seconds
        self._server: Optional[asyncio.AbstractServer] = None
        self._connections: Set[asyncio.Task] = set()

    @property
    def port(self) -> int:
        """Bound port (differs from the requested one when that was 0)."""
        if self._server is None or not self._server.sockets:
            return self.requested_port
        return self._server.sockets[0].getsockname()[1]

    @property
    def active_connections(self) -> int:
        return len(self._connections)

    async def start(self) -> None:
        """Bind and start accepting. Raises OSError if the bind fails."""
        self._server = await asyncio.start_server(
            self._on_connect, self.host, self.requested_port
        )

        logger.info(f"Tool server starting with {len(self.registry)} tools")
        for name in self.registry.names():
            logger.info(f"  - {name}")
        logger.info(f"Tool server listening on {self.host}:{self.port}")

    async def _on_connect(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        task = asyncio.current_task()
        self._connections.add(task)
        try:
            await handle_connection(reader, writer, self.dispatcher)
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Unhandled error in connection handler")
        finally:
            self._connections.discard(task)

    async def stop(self) -> None:
        """
        Stop accepting, give open connections the grace period to finish,
        then cancel whatever is left.
        """
        if self._server is None:
            return

        logger.info("Shutting down server...")
        self._server.close()

        pending = set(self._connections)
        if pending:
            logger.info(f"Waiting for {len(pending)} open connection(s)")
            _, pending = await asyncio.wait(pending, timeout=self.shutdown_grace_seconds)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        await self._server.wait_closed()
        self._server = None
        logger.info("Server shut down successfully")

    async def __aenter__(self) -> "ToolServer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()


async def run(settings: ServerSettings) -> None:
    """Serve until SIGINT/SIGTERM."""
    server = ToolServer(
        host=settings.host,
        port=settings.port,
        shutdown_grace_seconds=settings.shutdown_grace_seconds,
    )
    await server.start()

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # No loop signal support on this platform; KeyboardInterrupt still works
            pass

    try:
        await stop_event.wait()
    finally:
        await server.stop()


def parse_args(argv: Optional[List[str]] = None) -> ServerSettings:
    settings = ServerSettings.from_env()

    parser = argparse.ArgumentParser(description="Newline-delimited JSON tool server")
    parser.add_argument("--host", type=str, default=settings.host,
                        help=f"Interface to bind (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port,
                        help=f"TCP port to listen on (default: {settings.port})")
    parser.add_argument("--log-level", type=str, default=settings.log_level,
                        help=f"Logging level (default: {settings.log_level})")
    args = parser.parse_args(argv)

    return settings.model_copy(update={
        "host": args.host,
        "port": args.port,
        "log_level": args.log_level.upper(),
    })


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    settings = parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        asyncio.run(run(settings))
    except OSError as e:
        logger.error(f"Failed to start server on {settings.host}:{settings.port}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")

    return 0


if __name__ == "__main__":
    sys.exit(main())
