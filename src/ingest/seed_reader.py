"""Incremental seed file reader.

This module parses a seed source that holds either one JSON object or
a JSON array of objects. Records are emitted as soon as each top-level
element closes, so only the element being parsed is held in memory.
"""

from __future__ import annotations

import asyncio
import codecs
import json
from pathlib import Path
import re
from typing import AsyncIterator, BinaryIO, Iterator

from core.constants import DEFAULT_READ_CHUNK_BYTES
from core.errors import SeedParseError, SeedReadError
from core.types import Seed
from ingest.buffer_codec import decode_buffers

_WHITESPACE = re.compile(r"[ \t\n\r]*")
# Longest token tail that can still complete with more input ("false", "\uXXX").
_INCOMPLETE_TAIL_CHARS = 6
_UNTERMINATED_STRING = "Unterminated string"

_EXPECT_TOP_LEVEL = "expect_top_level"
_EXPECT_SINGLE_OBJECT = "expect_single_object"
_EXPECT_FIRST_ELEMENT = "expect_first_element"
_EXPECT_ELEMENT = "expect_element"
_EXPECT_SEPARATOR = "expect_separator"
_DONE = "done"


class SeedStreamParser:
    """Push parser turning byte chunks into decoded seed records.

    The unread text is kept in ``_buffer`` with ``_pos`` marking the scan
    position; consumed text is dropped once per ``feed``.
    """

    def __init__(self, source_id: str) -> None:
        self._source_id = source_id
        self._decoder = json.JSONDecoder()
        self._text_decoder = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""
        self._pos = 0
        self._offset = 0
        self._state = _EXPECT_TOP_LEVEL
        self._closed = False

    @property
    def done(self) -> bool:
        """Return whether the top-level value has been fully read."""
        return self._state == _DONE

    @property
    def pending_chars(self) -> int:
        """Return how many characters are buffered for the element in progress."""
        return len(self._buffer) - self._pos

    def feed(self, chunk: bytes) -> list[Seed]:
        """Consume a chunk of raw bytes.

        Args:
            chunk: Next bytes of the source stream.

        Returns:
            Seeds completed by this chunk, in stream order.

        Raises:
            SeedParseError: If the stream is not valid seed JSON.
        """
        if self._closed:
            raise self._error("data fed after end of stream")
        self._buffer += self._decode_text(chunk, final=False)
        records = self._drain(final=False)
        self._compact()
        return records

    def close(self) -> list[Seed]:
        """Signal end of stream and return any remaining seeds.

        Raises:
            SeedParseError: If the stream ended before the top-level value closed.
        """
        self._closed = True
        self._buffer += self._decode_text(b"", final=True)
        records = self._drain(final=True)
        self._compact()
        if self._state == _EXPECT_TOP_LEVEL:
            raise self._error("source is empty")
        if self._state != _DONE:
            raise self._error("unexpected end of stream")
        return records

    def _decode_text(self, chunk: bytes, final: bool) -> str:
        try:
            return self._text_decoder.decode(chunk, final)
        except UnicodeDecodeError as error:
            raise self._error(f"invalid UTF-8 ({error.reason})") from error

    def _drain(self, final: bool) -> list[Seed]:
        records: list[Seed] = []
        while True:
            self._pos = _WHITESPACE.match(self._buffer, self._pos).end()
            if self._pos >= len(self._buffer):
                return records
            head = self._buffer[self._pos]
            if self._state == _DONE:
                raise self._error("unexpected data after top-level value")
            if self._state == _EXPECT_TOP_LEVEL:
                if head == "[":
                    self._pos += 1
                    self._state = _EXPECT_FIRST_ELEMENT
                elif head == "{":
                    self._state = _EXPECT_SINGLE_OBJECT
                else:
                    raise self._error("expected a JSON object or array at top level")
                continue
            if head == "]" and self._state in (_EXPECT_FIRST_ELEMENT, _EXPECT_SEPARATOR):
                self._pos += 1
                self._state = _DONE
                continue
            if self._state == _EXPECT_SEPARATOR:
                if head != ",":
                    raise self._error("expected ',' or ']' between array elements")
                self._pos += 1
                self._state = _EXPECT_ELEMENT
                continue
            if head != "{":
                raise self._error("array elements must be JSON objects")
            seed = self._decode_object(final)
            if seed is None:
                return records
            records.append(decode_buffers(seed))
            if self._state == _EXPECT_SINGLE_OBJECT:
                self._state = _DONE
            else:
                self._state = _EXPECT_SEPARATOR

    def _decode_object(self, final: bool) -> Seed | None:
        """Decode one complete object at the scan position, or None if incomplete.

        Before end of stream an error only means "incomplete" when it sits
        at the end of the buffered text; anything earlier is a syntax error.
        """
        try:
            value, end = self._decoder.raw_decode(self._buffer, self._pos)
        except json.JSONDecodeError as error:
            if not final and self._is_incomplete(error):
                return None
            raise SeedParseError(
                self._source_id,
                f"{error.msg} at offset {self._offset + error.pos}",
            ) from error
        self._pos = end
        return value

    def _is_incomplete(self, error: json.JSONDecodeError) -> bool:
        if error.msg.startswith(_UNTERMINATED_STRING):
            return True
        text_end = len(self._buffer.rstrip(" \t\n\r"))
        return text_end - error.pos <= _INCOMPLETE_TAIL_CHARS

    def _compact(self) -> None:
        if self._pos:
            self._buffer = self._buffer[self._pos :]
            self._offset += self._pos
            self._pos = 0

    def _error(self, reason: str) -> SeedParseError:
        position = self._offset + self._pos
        return SeedParseError(self._source_id, f"{reason} at offset {position}")


def iter_seed_stream(
    stream: BinaryIO,
    source_id: str,
    chunk_size: int = DEFAULT_READ_CHUNK_BYTES,
) -> Iterator[Seed]:
    """Lazily yield decoded seeds from a binary stream.

    Args:
        stream: Readable binary file-like object.
        source_id: Source name used in parse errors.
        chunk_size: Bytes requested per read.

    Yields:
        Decoded seed records in stream order.

    Raises:
        SeedParseError: If the stream is not valid seed JSON.
    """
    parser = SeedStreamParser(source_id)
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield from parser.feed(chunk)
    yield from parser.close()


async def aiter_seed_file(
    path: Path,
    chunk_size: int = DEFAULT_READ_CHUNK_BYTES,
) -> AsyncIterator[Seed]:
    """Asynchronously yield decoded seeds from a seed file.

    File reads run in a worker thread so the event loop keeps serving
    other sources while a read is pending.

    Args:
        path: Seed file path.
        chunk_size: Bytes requested per read.

    Yields:
        Decoded seed records in file order.

    Raises:
        SeedReadError: If the file cannot be opened or read.
        SeedParseError: If the file is not valid seed JSON.
    """
    parser = SeedStreamParser(str(path))
    try:
        handle = await asyncio.to_thread(open, path, "rb")
    except OSError as error:
        raise SeedReadError(
            f"Failed to open seed source {path}: {error}. "
            "Check file permissions and retry."
        ) from error
    try:
        while True:
            chunk = await _read_chunk(handle, path, chunk_size)
            if not chunk:
                break
            for seed in parser.feed(chunk):
                yield seed
        for seed in parser.close():
            yield seed
    finally:
        handle.close()


async def _read_chunk(handle: BinaryIO, path: Path, chunk_size: int) -> bytes:
    try:
        return await asyncio.to_thread(handle.read, chunk_size)
    except OSError as error:
        raise SeedReadError(
            f"Failed to read seed source {path}: {error}. "
            "Check the file is still available and retry."
        ) from error
