"""Human-readable tree rendering used by ``ls`` and ``show``."""
from __future__ import annotations

from typing import List as PyList, Optional, Tuple

from .tags import (
    ArrayTag,
    ByteTag,
    CompoundTag,
    FloatingTag,
    IntegralTag,
    ListTag,
    StringTag,
    Tag,
)


def summarize(tag: Tag) -> str:
    """One-line description of a tag, without its children."""
    if isinstance(tag, CompoundTag):
        return f"compound[{len(tag)}]"
    if isinstance(tag, ListTag):
        return f"list[{len(tag)}] {tag.element_type.display_name}"
    if isinstance(tag, ArrayTag):
        return f"array[{len(tag)}] {tag.element_type.display_name}"
    if isinstance(tag, ByteTag):
        unsigned = tag.value & 0xFF
        if 31 < unsigned < 127:
            return f"0x{unsigned:02x} '{chr(unsigned)}'"
        return f"0x{unsigned:02x}"
    if isinstance(tag, IntegralTag):
        # hex shows the two's complement at the tag's own width
        return f"0x{tag.value & ((1 << tag.bits) - 1):x} / {tag.value}"
    if isinstance(tag, FloatingTag):
        return f"{tag.value:g} / {tag.value.hex()}"
    if isinstance(tag, StringTag):
        return f'"{tag.value}"'
    return f"unknown type {type(tag).__name__}"


def children(tag: Tag) -> PyList[Tuple[str, Tag]]:
    if isinstance(tag, CompoundTag):
        return list(tag.items())
    result = []
    for key in tag.child_keys():
        _, child = tag.resolve(key)
        result.append((f"[{key}]", child))
    return result


def render(tag: Tag, max_depth: Optional[int] = None) -> str:
    """Render ``tag`` as a box-drawn tree.

    ``max_depth`` limits how many levels of children are expanded; ``None``
    expands everything and ``1`` lists only the immediate children.
    """
    lines: PyList[str] = []
    _render(tag, "", "", max_depth, lines)
    return "\n".join(lines)


def _render(tag: Tag, head: str, prefix: str, depth: Optional[int], lines: PyList[str]) -> None:
    lines.append(head + summarize(tag))
    if depth is not None and depth <= 0:
        return
    entries = children(tag)
    next_depth = None if depth is None else depth - 1
    for index, (label, child) in enumerate(entries):
        if index == len(entries) - 1:
            _render(child, f"{prefix}└{label}: ", prefix + "  ", next_depth, lines)
        else:
            _render(child, f"{prefix}├{label}: ", prefix + "│ ", next_depth, lines)
