"""Reading and writing gzip-framed NBT files."""
from __future__ import annotations

import gzip
import logging
import os
import shutil
import zlib
from typing import Union

from . import codec
from .errors import DecodeError
from .tags import Tag

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

GZIP_MAGIC = b"\x1f\x8b"


def read_bytes(path: PathLike) -> bytes:
    """Return the decompressed contents of ``path``.

    Files without the gzip magic number are returned as they are; some
    Minecraft files (``servers.dat`` for one) are stored uncompressed.
    """
    with open(path, "rb") as handle:
        magic = handle.read(2)
        handle.seek(0)
        if magic == GZIP_MAGIC:
            try:
                with gzip.GzipFile(fileobj=handle, mode="rb") as stream:
                    data = stream.read()
            except (EOFError, zlib.error) as exc:
                raise DecodeError(f"damaged gzip stream: {exc}") from exc
        else:
            logger.info("%s is not gzip-compressed, reading it as raw NBT", path)
            data = handle.read()
    logger.debug("read %d bytes from %s", len(data), path)
    return data


def read_file(path: PathLike) -> Tag:
    return codec.decode(read_bytes(path))


def write_bytes(path: PathLike, data: bytes) -> None:
    """Write ``data`` gzip-compressed to ``path``.

    The file is built next to the target under a ``.tmp`` name and moved over
    it only once complete, so a failed write leaves the old file intact.
    """
    target = os.fspath(path)
    tmp = target + ".tmp"
    try:
        with gzip.open(tmp, "wb") as stream:
            stream.write(data)
        if os.path.exists(target):
            shutil.copymode(target, tmp)
        os.replace(tmp, target)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    logger.debug("wrote %d bytes to %s", len(data), target)


def write_file(path: PathLike, tag: Tag) -> None:
    # Encode before opening so an encoding error leaves the file untouched.
    write_bytes(path, codec.encode(tag))
