"""Exception hierarchy shared by the codec, the navigation engine and the shell."""
from __future__ import annotations


class NBTError(Exception):
    """Base class for every error raised by nbtedit."""


class TagValueError(NBTError, ValueError):
    """A tag was built with a payload outside its exact width or type."""


# -----------------------------------------------------------------------------
# Decode errors abort the whole read
# -----------------------------------------------------------------------------


class DecodeError(NBTError):
    """The byte stream is not a well formed named tag."""


class MalformedLength(DecodeError):
    """A length field is negative or cannot be honoured."""


class UnknownTagType(DecodeError):
    """A type code outside 0-12 was read."""

    def __init__(self, code: int) -> None:
        super().__init__(f"unknown tag type {code}")
        self.code = code


class TruncatedStream(DecodeError):
    """Fewer bytes remain than a field demands."""

    def __init__(self, needed: int, available: int) -> None:
        super().__init__(f"truncated stream: needed {needed} bytes, {available} available")
        self.needed = needed
        self.available = available


# -----------------------------------------------------------------------------
# Navigation errors leave the state untouched
# -----------------------------------------------------------------------------


class NavigationError(NBTError):
    pass


class PathNotFound(NavigationError):
    def __init__(self, component: object) -> None:
        super().__init__(f"path not found: {component}")
        self.component = component


class NotContainer(NavigationError):
    def __init__(self, type_name: str) -> None:
        super().__init__(f"not on a list/array/compound ({type_name})")
        self.type_name = type_name


# -----------------------------------------------------------------------------
# Shell errors
# -----------------------------------------------------------------------------


class TokenizeError(NBTError):
    """Unterminated quote or trailing backslash on a command line."""


class UsageError(NBTError):
    """A command was given the wrong arguments."""
