"""Conversion between nbtedit tags and :mod:`nbtlib` tag objects.

nbtlib is used for what it does well (SNBT text) and, in the tests, as an
independent implementation of the wire format; the editor itself works on
the immutable tags from :mod:`nbtedit.tags`.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import nbtlib
from nbtlib import (
    Byte,
    ByteArray,
    Compound,
    Double,
    Float,
    Int,
    IntArray,
    List as NbtList,
    Long,
    LongArray,
    Short,
    String,
)

from .errors import TagValueError
from .tags import (
    ArrayTag,
    CompoundTag,
    FloatingTag,
    IntegralTag,
    ListTag,
    StringTag,
    Tag,
    TagType,
)

NBTLIB_CLASSES: Dict[TagType, Any] = {
    TagType.BYTE: Byte,
    TagType.SHORT: Short,
    TagType.INT: Int,
    TagType.LONG: Long,
    TagType.FLOAT: Float,
    TagType.DOUBLE: Double,
    TagType.BYTE_ARRAY: ByteArray,
    TagType.STRING: String,
    TagType.LIST: NbtList,
    TagType.COMPOUND: Compound,
    TagType.INT_ARRAY: IntArray,
    TagType.LONG_ARRAY: LongArray,
}


def to_nbtlib(tag: Tag) -> Any:
    if isinstance(tag, CompoundTag):
        return Compound({name: to_nbtlib(child) for name, child in tag.items()})
    if isinstance(tag, ListTag):
        if len(tag) == 0:
            return NbtList([])
        subtype = NBTLIB_CLASSES[tag.element_type]
        return NbtList[subtype]([to_nbtlib(item) for item in tag])
    if isinstance(tag, ArrayTag):
        return NBTLIB_CLASSES[tag.type_id](list(tag.values))
    if isinstance(tag, (IntegralTag, FloatingTag, StringTag)):
        return NBTLIB_CLASSES[tag.type_id](tag.value)
    raise TagValueError(f"cannot convert {type(tag).__name__}")


def to_snbt(tag: Tag, indent: Optional[int] = None) -> str:
    """Render ``tag`` as stringified NBT, the syntax used by Minecraft commands.

    nbtlib serializes recursively, so a tree nested close to the decoder's
    depth limit can exhaust the interpreter stack.
    """
    try:
        return nbtlib.serialize_tag(to_nbtlib(tag), indent=indent)
    except RecursionError:
        raise TagValueError("tree is nested too deeply to render as SNBT") from None
