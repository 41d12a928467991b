"""Immutable in-memory representation of NBT tags.

Every tag kind is a frozen dataclass carrying its exact wire width, so a value
that was decoded as a ``Short`` re-encodes as a ``Short`` no matter what its
magnitude is.  Containers never change in place: ``without`` and ``replace``
return a new container that shares every untouched child with the old one.
"""
from __future__ import annotations

import re
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import (
    Any,
    ClassVar,
    Dict,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Tuple,
    Type,
    Union,
)

from .errors import NotContainer, PathNotFound, TagValueError

PathComponent = Union[str, int]

_INDEX_RE = re.compile(r"[0-9]+\Z")


class TagType(IntEnum):
    END = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12

    @property
    def display_name(self) -> str:
        return self.name.lower().replace("_", "-")


# -----------------------------------------------------------------------------
# Base class
# -----------------------------------------------------------------------------


class Tag:
    """Common behaviour of every tag kind.

    Scalars inherit the container operations below, which all fail with
    :class:`NotContainer`.
    """

    type_id: ClassVar[TagType]

    @property
    def type_name(self) -> str:
        return self.type_id.display_name

    @property
    def is_container(self) -> bool:
        return False

    def child_keys(self) -> Tuple[PathComponent, ...]:
        return ()

    def resolve(self, component: PathComponent) -> Tuple[PathComponent, "Tag"]:
        """Return the normalised key for ``component`` and the child stored there."""
        raise NotContainer(self.type_name)

    def without(self, key: PathComponent) -> "Tag":
        raise NotContainer(self.type_name)

    def replace(self, key: PathComponent, child: "Tag") -> "Tag":
        raise NotContainer(self.type_name)


def _check_integral(value: Any, bits: int, kind: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TagValueError(f"{kind} needs an integer, got {type(value).__name__}")
    low = -(1 << (bits - 1))
    high = (1 << (bits - 1)) - 1
    if not low <= value <= high:
        raise TagValueError(f"{kind} value {value} outside [{low}, {high}]")


def _parse_index(component: PathComponent, length: int) -> int:
    if isinstance(component, int) and not isinstance(component, bool):
        index = component
    elif isinstance(component, str) and _INDEX_RE.match(component):
        index = int(component)
    else:
        raise PathNotFound(component)
    if not 0 <= index < length:
        raise PathNotFound(component)
    return index


# -----------------------------------------------------------------------------
# Scalars
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class IntegralTag(Tag):
    value: int

    bits: ClassVar[int] = 0

    def __post_init__(self) -> None:
        _check_integral(self.value, self.bits, type(self).__name__)


@dataclass(frozen=True)
class ByteTag(IntegralTag):
    type_id: ClassVar[TagType] = TagType.BYTE
    bits: ClassVar[int] = 8


@dataclass(frozen=True)
class ShortTag(IntegralTag):
    type_id: ClassVar[TagType] = TagType.SHORT
    bits: ClassVar[int] = 16


@dataclass(frozen=True)
class IntTag(IntegralTag):
    type_id: ClassVar[TagType] = TagType.INT
    bits: ClassVar[int] = 32


@dataclass(frozen=True)
class LongTag(IntegralTag):
    type_id: ClassVar[TagType] = TagType.LONG
    bits: ClassVar[int] = 64


@dataclass(frozen=True, eq=False)
class FloatingTag(Tag):
    """Floating point payload, rounded to its wire precision on construction.

    Equality compares the packed bit pattern, so NaN payloads read from two
    identical files compare equal.
    """

    value: float

    fmt: ClassVar[str] = ">d"

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TagValueError(f"{type(self).__name__} needs a number, got {type(self.value).__name__}")
        try:
            packed = struct.pack(self.fmt, self.value)
        except (OverflowError, struct.error) as exc:
            raise TagValueError(f"{type(self).__name__} cannot hold {self.value!r}") from exc
        object.__setattr__(self, "value", struct.unpack(self.fmt, packed)[0])

    def packed(self) -> bytes:
        return struct.pack(self.fmt, self.value)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.packed() == other.packed()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.packed()))


@dataclass(frozen=True, eq=False)
class FloatTag(FloatingTag):
    type_id: ClassVar[TagType] = TagType.FLOAT
    fmt: ClassVar[str] = ">f"


@dataclass(frozen=True, eq=False)
class DoubleTag(FloatingTag):
    type_id: ClassVar[TagType] = TagType.DOUBLE
    fmt: ClassVar[str] = ">d"


@dataclass(frozen=True)
class StringTag(Tag):
    value: str

    type_id: ClassVar[TagType] = TagType.STRING

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TagValueError(f"StringTag needs a str, got {type(self.value).__name__}")


# -----------------------------------------------------------------------------
# Arrays
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ArrayTag(Tag):
    """Fixed-width integer array.  Elements are addressed as scalar tags.

    Elements can be removed but have no children, so nothing is ever rebuilt
    through an array and it keeps the failing ``replace`` of :class:`Tag`.
    """

    values: Tuple[int, ...] = ()

    element_class: ClassVar[Type[IntegralTag]] = IntegralTag

    def __post_init__(self) -> None:
        values = tuple(self.values)
        for value in values:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TagValueError(f"{type(self).__name__} holds integers only")
        if values:
            # Range-check the extremes; every element then fits.
            _check_integral(min(values), self.element_class.bits, type(self).__name__)
            _check_integral(max(values), self.element_class.bits, type(self).__name__)
        object.__setattr__(self, "values", values)

    @property
    def element_type(self) -> TagType:
        return self.element_class.type_id

    @property
    def is_container(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[int]:
        return iter(self.values)

    def child_keys(self) -> Tuple[PathComponent, ...]:
        return tuple(range(len(self.values)))

    def resolve(self, component: PathComponent) -> Tuple[PathComponent, Tag]:
        index = _parse_index(component, len(self.values))
        return index, self.element_class(self.values[index])

    def without(self, key: PathComponent) -> "ArrayTag":
        index = _parse_index(key, len(self.values))
        return type(self)(self.values[:index] + self.values[index + 1:])


@dataclass(frozen=True)
class ByteArrayTag(ArrayTag):
    type_id: ClassVar[TagType] = TagType.BYTE_ARRAY
    element_class: ClassVar[Type[IntegralTag]] = ByteTag

    def __post_init__(self) -> None:
        if isinstance(self.values, (bytes, bytearray, memoryview)):
            raw = bytes(self.values)
            object.__setattr__(self, "values", struct.unpack(f">{len(raw)}b", raw))
        super().__post_init__()


@dataclass(frozen=True)
class IntArrayTag(ArrayTag):
    type_id: ClassVar[TagType] = TagType.INT_ARRAY
    element_class: ClassVar[Type[IntegralTag]] = IntTag


@dataclass(frozen=True)
class LongArrayTag(ArrayTag):
    type_id: ClassVar[TagType] = TagType.LONG_ARRAY
    element_class: ClassVar[Type[IntegralTag]] = LongTag


# -----------------------------------------------------------------------------
# List and Compound
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ListTag(Tag):
    """Homogeneous sequence; the element type is recorded once for the list.

    An empty list always carries element type ``END``, which is what gets
    written to disk for it.
    """

    element_type: TagType
    items: Tuple[Tag, ...] = ()

    type_id: ClassVar[TagType] = TagType.LIST

    def __post_init__(self) -> None:
        items = tuple(self.items)
        try:
            element_type = TagType(self.element_type)
        except ValueError as exc:
            raise TagValueError(f"unknown list element type {self.element_type!r}") from exc
        if not items:
            element_type = TagType.END
        elif element_type is TagType.END:
            raise TagValueError("a list of End cannot hold elements")
        for item in items:
            if not isinstance(item, Tag) or item.type_id is not element_type:
                raise TagValueError(
                    f"list of {element_type.display_name} cannot hold {getattr(item, 'type_name', type(item).__name__)}"
                )
        object.__setattr__(self, "element_type", element_type)
        object.__setattr__(self, "items", items)

    @classmethod
    def of(cls, items: Iterable[Tag]) -> "ListTag":
        """Build a list whose element type is taken from its first item."""
        items = tuple(items)
        return cls(items[0].type_id if items else TagType.END, items)

    @property
    def is_container(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Tag:
        return self.items[index]

    def child_keys(self) -> Tuple[PathComponent, ...]:
        return tuple(range(len(self.items)))

    def resolve(self, component: PathComponent) -> Tuple[PathComponent, Tag]:
        index = _parse_index(component, len(self.items))
        return index, self.items[index]

    def without(self, key: PathComponent) -> "ListTag":
        index = _parse_index(key, len(self.items))
        return ListTag(self.element_type, self.items[:index] + self.items[index + 1:])

    def replace(self, key: PathComponent, child: Tag) -> "ListTag":
        index = _parse_index(key, len(self.items))
        return ListTag(self.element_type, self.items[:index] + (child,) + self.items[index + 1:])


@dataclass(frozen=True, eq=False)
class CompoundTag(Tag):
    """Insertion-ordered mapping from name to tag.

    Accepts a mapping or an iterable of ``(name, tag)`` pairs; a repeated name
    keeps its first position and its last value.  Equality ignores order.
    """

    entries: Tuple[Tuple[str, Tag], ...] = ()

    type_id: ClassVar[TagType] = TagType.COMPOUND

    def __post_init__(self) -> None:
        source = self.entries.items() if isinstance(self.entries, Mapping) else self.entries
        index: Dict[str, Tag] = {}
        for name, tag in source:
            if not isinstance(name, str):
                raise TagValueError(f"compound keys are strings, got {type(name).__name__}")
            if not isinstance(tag, Tag):
                raise TagValueError(f"compound value for {name!r} is not a tag")
            index[name] = tag
        object.__setattr__(self, "entries", tuple(index.items()))
        object.__setattr__(self, "_index", index)

    def __eq__(self, other: object) -> bool:
        if type(other) is not CompoundTag:
            return NotImplemented
        return self._index == other._index  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash(frozenset(self._index.items()))

    @property
    def is_container(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __getitem__(self, name: str) -> Tag:
        return self._index[name]

    def get(self, name: str, default: Optional[Tag] = None) -> Optional[Tag]:
        return self._index.get(name, default)

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._index)

    def items(self) -> Tuple[Tuple[str, Tag], ...]:
        return self.entries

    def with_entry(self, name: str, tag: Tag) -> "CompoundTag":
        """Return a copy with ``name`` set, keeping its position if it exists."""
        return CompoundTag(self.entries + ((name, tag),))

    def child_keys(self) -> Tuple[PathComponent, ...]:
        return self.keys()

    def resolve(self, component: PathComponent) -> Tuple[PathComponent, Tag]:
        key = str(component)
        if key not in self._index:
            raise PathNotFound(component)
        return key, self._index[key]

    def without(self, key: PathComponent) -> "CompoundTag":
        name, _ = self.resolve(key)
        return CompoundTag(tuple(entry for entry in self.entries if entry[0] != name))

    def replace(self, key: PathComponent, child: Tag) -> "CompoundTag":
        name, _ = self.resolve(key)
        return self.with_entry(str(name), child)
