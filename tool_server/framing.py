"""
Newline Framing

Splits an arbitrarily chunked byte stream into newline-terminated messages.
One MessageFramer belongs to exactly one connection.
"""

from typing import List

DELIMITER = b"\n"


class MessageFramer:
    """
    Per-connection receive buffer.

    feed() appends a chunk and returns every complete, non-blank line in
    receipt order. The bytes after the last delimiter stay buffered until a
    later chunk completes them. Bytes are buffered (not text) so a UTF-8
    sequence split across reads is decoded only once whole.
    """

    def __init__(self):
        self._buffer = b""

    @property
    def pending(self) -> bytes:
        """Unterminated remainder waiting for more data."""
        return self._buffer

    def feed(self, chunk: bytes) -> List[bytes]:
        self._buffer += chunk

        if DELIMITER not in self._buffer:
            return []

        *lines, self._buffer = self._buffer.split(DELIMITER)
        return [line for line in lines if line.strip()]

    def clear(self) -> bytes:
        """Drop and return the unterminated remainder."""
        remainder, self._buffer = self._buffer, b""
        return remainder
