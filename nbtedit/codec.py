"""Binary NBT codec.

The wire format is a *named tag*: one type-code byte and, unless the code is
End, a length-prefixed name followed by the payload of that type.  All
numbers are big-endian.  This module works on already decompressed bytes;
see :mod:`nbtedit.files` for the gzip layer.
"""
from __future__ import annotations

import logging
import struct
from typing import Any, Callable, Dict, List as PyList, Tuple, Union

from .errors import DecodeError, MalformedLength, TruncatedStream, UnknownTagType
from .tags import (
    ArrayTag,
    ByteArrayTag,
    ByteTag,
    CompoundTag,
    DoubleTag,
    FloatingTag,
    FloatTag,
    IntArrayTag,
    IntegralTag,
    IntTag,
    ListTag,
    LongArrayTag,
    LongTag,
    ShortTag,
    StringTag,
    Tag,
    TagType,
)

logger = logging.getLogger(__name__)

# Minecraft refuses compounds and lists nested deeper than this.
MAX_DEPTH = 512

MAX_STRING_BYTES = 0xFFFF

STRING_ERRORS = "surrogateescape"

_SCALAR_FORMATS: Dict[TagType, Tuple[str, type]] = {
    TagType.BYTE: (">b", ByteTag),
    TagType.SHORT: (">h", ShortTag),
    TagType.INT: (">i", IntTag),
    TagType.LONG: (">q", LongTag),
    TagType.FLOAT: (">f", FloatTag),
    TagType.DOUBLE: (">d", DoubleTag),
}

_ARRAY_FORMATS: Dict[TagType, Tuple[str, int, type]] = {
    TagType.BYTE_ARRAY: ("b", 1, ByteArrayTag),
    TagType.INT_ARRAY: ("i", 4, IntArrayTag),
    TagType.LONG_ARRAY: ("q", 8, LongArrayTag),
}

# Smallest number of bytes one payload of each type can occupy; used to reject
# list lengths the remaining input cannot possibly satisfy.
_MIN_PAYLOAD: Dict[TagType, int] = {
    TagType.BYTE: 1,
    TagType.SHORT: 2,
    TagType.INT: 4,
    TagType.LONG: 8,
    TagType.FLOAT: 4,
    TagType.DOUBLE: 8,
    TagType.BYTE_ARRAY: 4,
    TagType.STRING: 2,
    TagType.LIST: 5,
    TagType.COMPOUND: 1,
    TagType.INT_ARRAY: 4,
    TagType.LONG_ARRAY: 4,
}


def _tag_type(code: int) -> TagType:
    try:
        return TagType(code)
    except ValueError:
        raise UnknownTagType(code) from None


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------


class Reader:
    """Cursor over an in-memory byte buffer."""

    def __init__(self, data: bytes) -> None:
        self.data = memoryview(data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def read(self, size: int) -> bytes:
        if size > self.remaining:
            raise TruncatedStream(size, self.remaining)
        chunk = self.data[self.offset:self.offset + size].tobytes()
        self.offset += size
        return chunk

    def unpack(self, fmt: str) -> Any:
        return struct.unpack(fmt, self.read(struct.calcsize(fmt)))[0]

    def read_type(self) -> TagType:
        return _tag_type(self.unpack(">B"))

    def read_length(self) -> int:
        length = self.unpack(">i")
        if length < 0:
            raise MalformedLength(f"negative length {length}")
        return length

    def read_string(self) -> str:
        length = self.unpack(">H")
        return self.read(length).decode("utf-8", STRING_ERRORS)


def _read_scalar(reader: Reader, type_id: TagType, depth: int) -> Tag:
    fmt, cls = _SCALAR_FORMATS[type_id]
    return cls(reader.unpack(fmt))


def _read_array(reader: Reader, type_id: TagType, depth: int) -> Tag:
    code, width, cls = _ARRAY_FORMATS[type_id]
    length = reader.read_length()
    # read() checks the byte count before anything is allocated
    raw = reader.read(length * width)
    return cls(struct.unpack(f">{length}{code}", raw))


def _read_string(reader: Reader, type_id: TagType, depth: int) -> Tag:
    return StringTag(reader.read_string())


def _check_depth(depth: int) -> None:
    if depth > MAX_DEPTH:
        raise DecodeError(f"tags nested deeper than {MAX_DEPTH} levels")


# Container readers call each other through _READERS directly so that one
# nesting level costs one Python frame.


def _read_list(reader: Reader, type_id: TagType, depth: int) -> Tag:
    _check_depth(depth)
    element_type = reader.read_type()
    length = reader.read_length()
    if element_type is TagType.END:
        if length:
            raise MalformedLength(f"list of end with length {length}")
        return ListTag(TagType.END)
    needed = length * _MIN_PAYLOAD[element_type]
    if needed > reader.remaining:
        raise TruncatedStream(needed, reader.remaining)
    read = _READERS[element_type]
    items = []
    for _ in range(length):
        items.append(read(reader, element_type, depth + 1))
    return ListTag(element_type, tuple(items))


def _read_compound(reader: Reader, type_id: TagType, depth: int) -> Tag:
    _check_depth(depth)
    entries: Dict[str, Tag] = {}
    while True:
        child_type = reader.read_type()
        if child_type is TagType.END:
            break
        name = reader.read_string()
        if name in entries:
            logger.warning("duplicate compound key %r at offset %d, keeping the last value", name, reader.offset)
        entries[name] = _READERS[child_type](reader, child_type, depth + 1)
    return CompoundTag(entries)


_READERS: Dict[TagType, Callable[[Reader, TagType, int], Tag]] = {
    TagType.BYTE: _read_scalar,
    TagType.SHORT: _read_scalar,
    TagType.INT: _read_scalar,
    TagType.LONG: _read_scalar,
    TagType.FLOAT: _read_scalar,
    TagType.DOUBLE: _read_scalar,
    TagType.BYTE_ARRAY: _read_array,
    TagType.STRING: _read_string,
    TagType.LIST: _read_list,
    TagType.COMPOUND: _read_compound,
    TagType.INT_ARRAY: _read_array,
    TagType.LONG_ARRAY: _read_array,
}


def read_payload(reader: Reader, type_id: TagType, depth: int = 0) -> Tag:
    """Read the bare payload of a ``type_id`` tag at the reader's cursor."""
    if type_id is TagType.END:
        raise DecodeError("end tag has no payload")
    return _READERS[type_id](reader, type_id, depth)


def decode_named(data: bytes) -> Tuple[str, Tag]:
    """Decode the single named tag at the start of ``data``."""
    reader = Reader(data)
    type_id = reader.read_type()
    if type_id is TagType.END:
        raise DecodeError("root tag is end")
    name = reader.read_string()
    tag = read_payload(reader, type_id)
    if reader.remaining:
        logger.warning("ignoring %d trailing bytes after the root tag", reader.remaining)
    logger.debug("decoded root %s %r from %d bytes", type_id.display_name, name, reader.offset)
    return name, tag


def decode(data: bytes) -> Tag:
    """Decode the root tag of ``data``, discarding its name."""
    return decode_named(data)[1]


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------


def _pack_string(value: str) -> bytes:
    raw = value.encode("utf-8", STRING_ERRORS)
    if len(raw) > MAX_STRING_BYTES:
        raise MalformedLength(f"string of {len(raw)} bytes exceeds {MAX_STRING_BYTES}")
    return struct.pack(">H", len(raw)) + raw


def _write_scalar(tag: Union[IntegralTag, FloatingTag], out: PyList[bytes]) -> None:
    fmt, _ = _SCALAR_FORMATS[tag.type_id]
    out.append(struct.pack(fmt, tag.value))


def _write_array(tag: ArrayTag, out: PyList[bytes]) -> None:
    code, _, _ = _ARRAY_FORMATS[tag.type_id]
    values = tag.values
    out.append(struct.pack(f">i{len(values)}{code}", len(values), *values))


def _write_string(tag: StringTag, out: PyList[bytes]) -> None:
    out.append(_pack_string(tag.value))


def _write_list(tag: ListTag, out: PyList[bytes]) -> None:
    items = tag.items
    element_type = tag.element_type if items else TagType.END
    out.append(struct.pack(">Bi", element_type, len(items)))
    if items:
        write = _WRITERS[element_type]
        for item in items:
            write(item, out)


def _write_compound(tag: CompoundTag, out: PyList[bytes]) -> None:
    for name, child in tag.items():
        out.append(bytes([child.type_id]))
        out.append(_pack_string(name))
        _WRITERS[child.type_id](child, out)
    out.append(bytes([TagType.END]))


_WRITERS: Dict[TagType, Callable[[Any, PyList[bytes]], None]] = {
    TagType.BYTE: _write_scalar,
    TagType.SHORT: _write_scalar,
    TagType.INT: _write_scalar,
    TagType.LONG: _write_scalar,
    TagType.FLOAT: _write_scalar,
    TagType.DOUBLE: _write_scalar,
    TagType.BYTE_ARRAY: _write_array,
    TagType.STRING: _write_string,
    TagType.LIST: _write_list,
    TagType.COMPOUND: _write_compound,
    TagType.INT_ARRAY: _write_array,
    TagType.LONG_ARRAY: _write_array,
}


def write_payload(tag: Tag, out: PyList[bytes]) -> None:
    _WRITERS[tag.type_id](tag, out)


def encode(tag: Tag, name: str = "") -> bytes:
    """Encode ``tag`` as the root named tag of a file."""
    out: PyList[bytes] = [bytes([tag.type_id]), _pack_string(name)]
    write_payload(tag, out)
    return b"".join(out)
