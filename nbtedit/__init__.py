"""Read, navigate, edit and rewrite Minecraft NBT files."""
from __future__ import annotations

from .codec import decode, decode_named, encode
from .errors import (
    DecodeError,
    MalformedLength,
    NBTError,
    NavigationError,
    NotContainer,
    PathNotFound,
    TagValueError,
    TokenizeError,
    TruncatedStream,
    UnknownTagType,
    UsageError,
)
from .navigation import NavigationState
from .tags import (
    ByteArrayTag,
    ByteTag,
    CompoundTag,
    DoubleTag,
    FloatTag,
    IntArrayTag,
    IntTag,
    ListTag,
    LongArrayTag,
    LongTag,
    ShortTag,
    StringTag,
    Tag,
    TagType,
)

__version__ = "0.1.0"
