"""Split a command line into words.

Whitespace separates words except inside double quotes.  A backslash makes
the next character literal, inside or outside quotes.  ``""`` yields an
empty word, which is how an empty compound key is named.
"""
from __future__ import annotations

from typing import List as PyList

from .errors import TokenizeError


def split_words(line: str) -> PyList[str]:
    words: PyList[str] = []
    current: PyList[str] = []
    in_word = False
    quoting = False
    escaped = False

    for char in line:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = in_word = True
        elif char == '"':
            quoting = not quoting
            in_word = True
        elif char.isspace() and not quoting:
            if in_word:
                words.append("".join(current))
                current = []
                in_word = False
        else:
            current.append(char)
            in_word = True

    if escaped:
        raise TokenizeError("unterminated backslash")
    if quoting:
        raise TokenizeError("unterminated quote")
    if in_word:
        words.append("".join(current))
    return words
