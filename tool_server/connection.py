"""
Connection Handling

Drives one client connection: reads chunks, frames them into lines,
dispatches each request in order and writes one response line per request.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from .dispatcher import Dispatcher
from .framing import MessageFramer
from .protocol import INVALID_MESSAGE_FORMAT, decode_line, encode_message, error_envelope

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024

# Raised when the peer has gone away under us
TRANSPORT_ERRORS = (ConnectionResetError, BrokenPipeError, ConnectionAbortedError)


class Connection:
    """State owned by a single client connection."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        dispatcher: Dispatcher,
    ):
        self.reader = reader
        self.writer = writer
        self.dispatcher = dispatcher
        self.framer = MessageFramer()
        self.peer = writer.get_extra_info("peername")
        self.requests_handled = 0

    async def serve(self) -> None:
        """Serve requests until the peer closes or the transport fails."""
        logger.info(f"Client connected: {self.peer}")
        try:
            while True:
                chunk = await self.reader.read(READ_CHUNK_SIZE)
                if not chunk:
                    break

                logger.debug(f"Received data from {self.peer}: {chunk!r}")

                for line in self.framer.feed(chunk):
                    response = await self.process_line(line)
                    await self.send(response)

        except TRANSPORT_ERRORS as e:
            logger.warning(f"Socket error on {self.peer}: {e}")
        except asyncio.CancelledError:
            logger.info(f"Connection task cancelled: {self.peer}")
            raise
        finally:
            remainder = self.framer.clear()
            if remainder.strip():
                logger.debug(f"Discarding unterminated data from {self.peer}: {remainder!r}")
            await self.close()
            logger.info(
                f"Client disconnected: {self.peer} "
                f"({self.requests_handled} requests handled)"
            )

    async def process_line(self, line: bytes) -> Dict[str, Any]:
        """Decode and dispatch one framed line."""
        try:
            message = decode_line(line)
        except ValueError as e:
            logger.error(f"Error processing message from {self.peer}: {e}")
            return error_envelope(INVALID_MESSAGE_FORMAT)

        logger.debug(f"Processing message: {message!r}")
        response = await self.dispatcher.handle_message(message)
        self.requests_handled += 1
        return response

    async def send(self, payload: Any) -> None:
        try:
            data = encode_message(payload)
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize response for {self.peer}: {e}")
            data = encode_message(error_envelope(f"Response serialization failed: {e}"))

        logger.debug(f"Sending response to {self.peer}: {data!r}")
        self.writer.write(data)
        await self.writer.drain()

    async def close(self) -> None:
        if self.writer.is_closing():
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except TRANSPORT_ERRORS as e:
            logger.debug(f"Error while closing {self.peer}: {e}")


async def handle_connection(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    dispatcher: Optional[Dispatcher] = None,
) -> None:
    """asyncio.start_server callback: one Connection per accepted socket."""
    connection = Connection(reader, writer, dispatcher or Dispatcher())
    await connection.serve()
