"""Framed, pointer-based binary structs as exchanged on the horizontal API.

A message is one root struct serialised into a single segment of 8-byte
words and preceded by a segment table.  A struct consists of a data section
holding fixed-width little-endian scalars and a pointer section whose
entries point to nested structs or to byte blobs.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Optional, Union

WORD = 8
MAX_SEGMENTS = 512
MAX_MESSAGE_BYTES = 64 * 1024 * 1024
MAX_NESTING = 64
MAX_TRAVERSAL_WORDS = MAX_MESSAGE_BYTES // WORD

_STRUCT_POINTER = 0
_LIST_POINTER = 1
_FAR_POINTER = 2
_BYTE_ELEMENTS = 2


class DecodeError(ValueError):
    """A frame could not be decoded."""


@dataclass(frozen=True)
class ObjectSize:
    """Size of a struct: data section in bytes and number of pointers."""

    data_size: int = 0
    pointer_count: int = 0

    def __post_init__(self) -> None:
        if self.data_size < 0 or self.data_size % WORD:
            raise ValueError("data size must be a non-negative multiple of 8")
        if self.data_size // WORD > 0xFFFF:
            raise ValueError("data section too large")
        if not 0 <= self.pointer_count <= 0xFFFF:
            raise ValueError("pointer count must be between 0 and 65535")

    @property
    def data_words(self) -> int:
        return self.data_size // WORD

    @property
    def words(self) -> int:
        """Total number of words the struct occupies."""
        return self.data_words + self.pointer_count


# Type identifiers and layouts of the horizontal API structs.
PUSH_MSG_TYPE_ID = 0xCD222B580AE1B939
CONN_REQ_TYPE_ID = 0xE56584347DF7156C
CONN_CHALL_TYPE_ID = 0xA38EEFC82DCB0278
CONN_POW_TYPE_ID = 0xB34A08EB7D9097C1
POW_REQ_TYPE_ID = 0xC35970A9753697F2
POW_CHALL_TYPE_ID = 0xB28DED8511E59511
POW_POW_TYPE_ID = 0xC496AE3C75B714D3

PUSH_MSG_SIZE = ObjectSize(8, 1)
CONN_REQ_SIZE = ObjectSize(0, 0)
CONN_CHALL_SIZE = ObjectSize(0, 1)
CONN_POW_SIZE = ObjectSize(8, 1)
POW_REQ_SIZE = ObjectSize(0, 0)
POW_CHALL_SIZE = ObjectSize(0, 1)
POW_POW_SIZE = ObjectSize(8, 1)

# Field positions: scalars by byte offset, blobs by pointer index.
PUSH_TTL_OFFSET = 0
PUSH_GOSSIP_TYPE_OFFSET = 2
PUSH_MESSAGE_ID_OFFSET = 4
PUSH_PAYLOAD_POINTER = 0
NONCE_OFFSET = 0
COOKIE_POINTER = 0

Pointer = Union[None, bytes, "WireStruct"]

_SCALARS = {1: "<B", 2: "<H", 8: "<Q"}


@dataclass
class WireStruct:
    """A struct with a data section and a pointer section."""

    size: ObjectSize
    data_section: bytearray = field(default_factory=bytearray)
    pointers: list = field(default_factory=list)

    def __post_init__(self) -> None:
        data = bytearray(self.data_section)
        if len(data) > self.size.data_size:
            raise ValueError("data section larger than the struct size")
        data.extend(bytes(self.size.data_size - len(data)))
        self.data_section = data
        pointers = list(self.pointers)
        if len(pointers) > self.size.pointer_count:
            raise ValueError("more pointers than the struct size allows")
        pointers.extend([None] * (self.size.pointer_count - len(pointers)))
        self.pointers = pointers

    # scalars

    def _read(self, offset: int, width: int) -> int:
        if offset < 0:
            raise IndexError("negative offset")
        if offset + width > len(self.data_section):
            # fields beyond the data section read as their default
            return 0
        return struct.unpack_from(_SCALARS[width], self.data_section, offset)[0]

    def _write(self, offset: int, width: int, value: int) -> None:
        if offset < 0 or offset + width > len(self.data_section):
            raise IndexError("offset outside the data section")
        if not 0 <= value < 1 << (8 * width):
            raise ValueError(f"value {value} does not fit in {width} bytes")
        struct.pack_into(_SCALARS[width], self.data_section, offset, value)

    def read_uint8(self, offset: int) -> int:
        return self._read(offset, 1)

    def write_uint8(self, offset: int, value: int) -> None:
        self._write(offset, 1, value)

    def read_uint16(self, offset: int) -> int:
        return self._read(offset, 2)

    def write_uint16(self, offset: int, value: int) -> None:
        self._write(offset, 2, value)

    def read_uint64(self, offset: int) -> int:
        return self._read(offset, 8)

    def write_uint64(self, offset: int, value: int) -> None:
        self._write(offset, 8, value)

    # pointers

    def _pointer(self, index: int) -> Pointer:
        if index < 0:
            raise IndexError("negative pointer index")
        if index >= len(self.pointers):
            return None
        return self.pointers[index]

    def _set_pointer(self, index: int, value: Pointer) -> None:
        if not 0 <= index < len(self.pointers):
            raise IndexError("pointer index outside the pointer section")
        self.pointers[index] = value

    def has_pointer(self, index: int) -> bool:
        """Tell whether the pointer at ``index`` is set."""
        return self._pointer(index) is not None

    def read_data(self, index: int) -> bytes:
        """Return the blob at ``index``; empty if unset or not a blob."""
        value = self._pointer(index)
        return bytes(value) if isinstance(value, (bytes, bytearray)) else b""

    def write_data(self, index: int, value: Optional[bytes]) -> None:
        """Point ``index`` at a copy of ``value`` (None clears the pointer)."""
        self._set_pointer(index, None if value is None else bytes(value))

    def read_struct(self, index: int) -> Optional["WireStruct"]:
        """Return the struct at ``index``, or None if unset or not a struct."""
        value = self._pointer(index)
        return value if isinstance(value, WireStruct) else None

    def write_struct(self, index: int, value: Optional["WireStruct"]) -> None:
        self._set_pointer(index, value)


# encoding


def _struct_pointer(offset: int, size: ObjectSize) -> int:
    return (
        _STRUCT_POINTER
        | ((offset & 0x3FFFFFFF) << 2)
        | (size.data_words << 32)
        | (size.pointer_count << 48)
    )


def _place(buf: bytearray, pos: int, value: Pointer, depth: int) -> None:
    if value is None:
        return
    if depth > MAX_NESTING:
        raise ValueError("structs nested too deeply")
    if isinstance(value, WireStruct):
        size = value.size
        if size.words == 0:
            # zero-sized structs point at themselves to stay distinct from null
            struct.pack_into("<Q", buf, pos, _struct_pointer(-1, size))
            return
        start = len(buf)
        buf.extend(bytes(size.words * WORD))
        struct.pack_into("<Q", buf, pos, _struct_pointer((start - pos - WORD) // WORD, size))
        buf[start : start + size.data_size] = value.data_section
        pointer_base = start + size.data_size
        for i, child in enumerate(value.pointers):
            _place(buf, pointer_base + i * WORD, child, depth + 1)
        return
    if isinstance(value, (bytes, bytearray)):
        length = len(value)
        if length >= 1 << 29:
            raise ValueError("blob too large")
        start = len(buf)
        buf.extend(value)
        buf.extend(bytes(-length % WORD))
        offset = (start - pos - WORD) // WORD
        word = (
            _LIST_POINTER
            | ((offset & 0x3FFFFFFF) << 2)
            | (_BYTE_ELEMENTS << 32)
            | (length << 35)
        )
        struct.pack_into("<Q", buf, pos, word)
        return
    raise TypeError(f"cannot encode {type(value).__name__}")


def encode_message(root: WireStruct) -> bytes:
    """Serialise ``root`` into a framed single-segment message."""
    segment = bytearray(WORD)
    _place(segment, 0, root, 0)
    return struct.pack("<II", 0, len(segment) // WORD) + bytes(segment)


# decoding


def _header_length(segment_count: int) -> int:
    length = 4 + 4 * segment_count
    return length + (-length % WORD)


def _parse_header(frame: bytes) -> tuple[int, list[int]]:
    if len(frame) < 4:
        raise DecodeError("frame too short for a segment table")
    count = struct.unpack_from("<I", frame, 0)[0] + 1
    if count > MAX_SEGMENTS:
        raise DecodeError(f"too many segments ({count})")
    header = _header_length(count)
    if len(frame) < 4 + 4 * count:
        raise DecodeError("truncated segment table")
    sizes = list(struct.unpack_from(f"<{count}I", frame, 4))
    return header, sizes


class _Reader:
    def __init__(self, segment: bytes) -> None:
        self.segment = segment
        self.words = len(segment) // WORD
        self.budget = MAX_TRAVERSAL_WORDS

    def _spend(self, words: int) -> None:
        self.budget -= max(words, 1)
        if self.budget < 0:
            raise DecodeError("traversal limit exceeded")

    def pointer(self, pos: int, depth: int) -> Pointer:
        if depth > MAX_NESTING:
            raise DecodeError("structs nested too deeply")
        word = struct.unpack_from("<Q", self.segment, pos * WORD)[0]
        if word == 0:
            return None
        kind = word & 3
        raw = (word >> 2) & 0x3FFFFFFF
        offset = raw - (1 << 30) if raw & (1 << 29) else raw
        target = pos + 1 + offset
        if kind == _STRUCT_POINTER:
            size = ObjectSize(((word >> 32) & 0xFFFF) * WORD, word >> 48)
            self._spend(size.words)
            if size.words == 0:
                return WireStruct(size)
            if target < 0 or target + size.words > self.words:
                raise DecodeError("struct pointer out of bounds")
            start = target * WORD
            data = self.segment[start : start + size.data_size]
            base = target + size.data_words
            pointers = [
                self.pointer(base + i, depth + 1) for i in range(size.pointer_count)
            ]
            return WireStruct(size, bytearray(data), pointers)
        if kind == _LIST_POINTER:
            element = (word >> 32) & 7
            if element != _BYTE_ELEMENTS:
                raise DecodeError(f"unsupported list element size {element}")
            length = word >> 35
            words = (length + WORD - 1) // WORD
            self._spend(words)
            if target < 0 or target + words > self.words:
                raise DecodeError("list pointer out of bounds")
            start = target * WORD
            return bytes(self.segment[start : start + length])
        if kind == _FAR_POINTER:
            raise DecodeError("far pointers are not supported")
        raise DecodeError("capability pointers are not supported")


def decode_message(frame: bytes) -> WireStruct:
    """Parse a framed message and return its root struct.

    A null root yields an empty struct.  Raises :class:`DecodeError` if the
    frame is malformed.
    """
    frame = bytes(frame)
    header, sizes = _parse_header(frame)
    total = header + sum(sizes) * WORD
    if len(frame) != total:
        raise DecodeError(f"frame is {len(frame)} bytes, expected {total}")
    if sizes[0] == 0:
        raise DecodeError("first segment is empty")
    segment = frame[header : header + sizes[0] * WORD]
    root = _Reader(segment).pointer(0, 0)
    if root is None:
        return WireStruct(ObjectSize())
    if not isinstance(root, WireStruct):
        raise DecodeError("root is not a struct")
    return root


def _read_exact(reader: BinaryIO, count: int, allow_eof: bool = False) -> bytes:
    chunks = bytearray()
    while len(chunks) < count:
        chunk = reader.read(count - len(chunks))
        if not chunk:
            if allow_eof and not chunks:
                raise EOFError("end of stream")
            raise DecodeError("stream ended within a frame")
        chunks.extend(chunk)
    return bytes(chunks)


def read_frame(reader: BinaryIO) -> bytes:
    """Read one complete frame from a binary stream.

    Raises :class:`EOFError` if the stream ends before a frame starts and
    :class:`DecodeError` if it ends within one or the frame is too large.
    """
    first = _read_exact(reader, 4, allow_eof=True)
    count = struct.unpack("<I", first)[0] + 1
    if count > MAX_SEGMENTS:
        raise DecodeError(f"too many segments ({count})")
    rest = _read_exact(reader, _header_length(count) - 4)
    sizes = struct.unpack_from(f"<{count}I", rest, 0)
    body_length = sum(sizes) * WORD
    if body_length > MAX_MESSAGE_BYTES:
        raise DecodeError("message too large")
    return first + rest + _read_exact(reader, body_length)