"""Encoding of replies and parsing of commands in the RESP wire format."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import BinaryIO, Sequence, Union

SIMPLE_STRING_PREFIX = b"+"
ERROR_PREFIX = b"-"
INTEGER_PREFIX = b":"
BULK_STRING_PREFIX = b"$"
ARRAY_PREFIX = b"*"

CRLF = b"\r\n"
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"
_INTEGER = re.compile(r"[+-]?[0-9]+")


class ProtocolError(Exception):
    """Raised when incoming data does not follow the protocol."""


@dataclass(frozen=True)
class SimpleString:
    """A reply sent as a simple status string."""

    text: str


@dataclass(frozen=True)
class ErrorReply:
    """A reply sent as an error message."""

    message: str


Reply = Union[SimpleString, ErrorReply, int, str, None, Sequence[str]]


def _encode(text: str) -> bytes:
    return text.encode(_ENCODING, _ERRORS)


class RespEncoder:
    """Writes protocol replies to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def _emit(self, data: bytes) -> None:
        self._stream.write(data)
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()

    @staticmethod
    def _bulk(text: str) -> bytes:
        payload = _encode(text)
        return BULK_STRING_PREFIX + str(len(payload)).encode() + CRLF + payload + CRLF

    def write_simple_string(self, text: str) -> None:
        self._emit(SIMPLE_STRING_PREFIX + _encode(text) + CRLF)

    def write_error(self, message: str) -> None:
        self._emit(ERROR_PREFIX + _encode(message) + CRLF)

    def write_integer(self, value: int) -> None:
        self._emit(INTEGER_PREFIX + str(int(value)).encode() + CRLF)

    def write_bulk_string(self, text: str) -> None:
        self._emit(self._bulk(text))

    def write_null_bulk_string(self) -> None:
        self._emit(BULK_STRING_PREFIX + b"-1" + CRLF)

    def write_array(self, items: Sequence[str]) -> None:
        header = ARRAY_PREFIX + str(len(items)).encode() + CRLF
        self._emit(header + b"".join(self._bulk(item) for item in items))

    def write_reply(self, reply: Reply) -> None:
        """Write any reply value, choosing the wire type from its Python type."""
        if isinstance(reply, SimpleString):
            self.write_simple_string(reply.text)
        elif isinstance(reply, ErrorReply):
            self.write_error(reply.message)
        elif reply is None:
            self.write_null_bulk_string()
        elif isinstance(reply, int):
            self.write_integer(reply)
        elif isinstance(reply, str):
            self.write_bulk_string(reply)
        elif isinstance(reply, (list, tuple)):
            self.write_array(list(reply))
        else:
            raise TypeError(f"cannot encode reply of type {type(reply).__name__}")


class RespParser:
    """Reads commands, sent as arrays of bulk strings, from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def parse_command(self) -> list[str]:
        """Read one command; raise EOFError when the stream ends cleanly."""
        first = self._stream.read(1)
        if not first:
            raise EOFError("connection closed")
        if first != ARRAY_PREFIX:
            raise ProtocolError(f"expected array type, got {first.decode('latin-1')}")
        return self._parse_array()

    def _parse_array(self) -> list[str]:
        try:
            length_text = self._read_line()
        except (EOFError, ProtocolError) as exc:
            raise ProtocolError(f"failed to read array length: {exc}") from exc

        length = self._parse_int(length_text, "invalid array length")
        if length <= 0:
            return []

        elements = []
        for index in range(length):
            try:
                elements.append(self._parse_bulk_string())
            except (EOFError, ProtocolError) as exc:
                raise ProtocolError(f"failed to parse element {index}: {exc}") from exc
        return elements

    def _parse_bulk_string(self) -> str:
        prefix = self._stream.read(1)
        if not prefix:
            raise ProtocolError("failed to read bulk string type: EOF")
        if prefix != BULK_STRING_PREFIX:
            raise ProtocolError(f"expected bulk string type, got {prefix.decode('latin-1')}")

        try:
            length_text = self._read_line()
        except (EOFError, ProtocolError) as exc:
            raise ProtocolError(f"failed to read bulk string length: {exc}") from exc

        length = self._parse_int(length_text, "invalid bulk string length")
        if length == -1:
            return ""
        if length < 0:
            raise ProtocolError(f"invalid bulk string length: {length}")

        try:
            content = self._read_exact(length)
        except EOFError as exc:
            raise ProtocolError(f"failed to read bulk string content: {exc}") from exc
        try:
            terminator = self._read_exact(2)
        except EOFError as exc:
            raise ProtocolError(f"failed to read CRLF after bulk string: {exc}") from exc
        if terminator != CRLF:
            raise ProtocolError(f"expected CRLF, got {terminator!r}")

        return content.decode(_ENCODING, _ERRORS)

    @staticmethod
    def _parse_int(text: str, message: str) -> int:
        if not _INTEGER.fullmatch(text):
            raise ProtocolError(f"{message}: {text}")
        return int(text)

    def _read_exact(self, count: int) -> bytes:
        chunks = []
        remaining = count
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                raise EOFError("unexpected EOF")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def _read_line(self) -> str:
        line = bytearray()
        while True:
            byte = self._stream.read(1)
            if not byte:
                raise EOFError("EOF")
            if byte == b"\r":
                following = self._stream.read(1)
                if not following:
                    raise EOFError("EOF")
                if following != b"\n":
                    raise ProtocolError(
                        f"expected \\n after \\r, got {following.decode('latin-1')}"
                    )
                return line.decode("latin-1")
            line += byte