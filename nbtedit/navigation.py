"""Position tracking and copy-on-write editing over an immutable tag tree.

A :class:`NavigationState` is a value: every operation returns a new state
and a failing operation raises before anything is built, so the caller's
state is never half-updated.  ``position_stack`` is derived from ``tree`` and
``path``; after an edit it is recomputed by replaying ``path`` against the
rebuilt tree.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List as PyList, Sequence, Tuple

from . import codec
from .errors import NavigationError, UsageError
from .tags import ArrayTag, CompoundTag, ListTag, PathComponent, Tag

logger = logging.getLogger(__name__)

Path = Tuple[PathComponent, ...]


def replay(tree: Tag, path: Sequence[PathComponent]) -> Tuple[Tag, ...]:
    """Resolve ``path`` from ``tree``; the result lists the current node first."""
    stack: PyList[Tag] = [tree]
    for component in path:
        _, child = stack[-1].resolve(component)
        stack.append(child)
    return tuple(reversed(stack))


def rebuild(root: Tag, path: Sequence[PathComponent], new_node: Tag) -> Tag:
    """Return a copy of ``root`` with the node at ``path`` swapped for ``new_node``.

    Only the ancestors along ``path`` are copied; every other subtree is shared.
    """
    if not path:
        return new_node
    key, child = root.resolve(path[0])
    return root.replace(key, rebuild(child, path[1:], new_node))


def split_path(text: str) -> Tuple[bool, PyList[str]]:
    """Split a ``/``-separated path into (is_absolute, components).

    ``.`` and empty components are dropped; ``..`` is kept for the caller.
    """
    parts = [part for part in text.split("/") if part not in ("", ".")]
    return text.startswith("/"), parts


def format_path(path: Sequence[PathComponent]) -> str:
    return "/" + "/".join(str(component) for component in path)


@dataclass(frozen=True)
class NavigationState:
    tree: Tag
    path: Path = ()
    position_stack: Tuple[Tag, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))
        if not self.position_stack:
            object.__setattr__(self, "position_stack", replay(self.tree, self.path))

    # ------------------------------------------------------------------
    # Construction and persistence
    # ------------------------------------------------------------------
    @classmethod
    def load(cls, data: bytes) -> "NavigationState":
        """Decode ``data`` into a fresh state positioned at the root."""
        return cls(codec.decode(data))

    def save(self) -> bytes:
        return codec.encode(self.tree)

    def compare(self, other_tree: Tag) -> bool:
        """True when ``other_tree`` is structurally equal to the tree, in any key order."""
        return next(differences(self.tree, other_tree), None) is None

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    @property
    def current(self) -> Tag:
        return self.position_stack[0]

    @property
    def at_root(self) -> bool:
        return not self.path

    def descend(self, component: PathComponent) -> "NavigationState":
        key, child = self.current.resolve(component)
        return NavigationState(self.tree, self.path + (key,), (child,) + self.position_stack)

    def ascend(self) -> "NavigationState":
        if self.at_root:
            return self
        return NavigationState(self.tree, self.path[:-1], self.position_stack[1:])

    def to_root(self) -> "NavigationState":
        return NavigationState(self.tree)

    def names_child(self, word: str) -> bool:
        """True when ``word`` taken whole is a key of the current node."""
        if word == "..":
            return False
        try:
            self.current.resolve(word)
        except NavigationError:
            return False
        return True

    def change_directory(self, target: str) -> "NavigationState":
        """Follow a ``/``-separated path; fails as a whole if any step fails.

        A target that is itself a key of the current node is that key, so
        names holding ``/`` or spelled ``.`` stay reachable.
        """
        if self.names_child(target):
            return self.descend(target)
        absolute, parts = split_path(target)
        state = self.to_root() if absolute else self
        for part in parts:
            state = state.ascend() if part == ".." else state.descend(part)
        return state

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def delete(self, component: PathComponent) -> "NavigationState":
        """Remove ``component`` from the current node."""
        return self.delete_path((component,))

    def delete_path(self, components: Sequence[PathComponent]) -> "NavigationState":
        """Remove the last of ``components`` from the node the others lead to.

        The tree is rebuilt from the edited node up to the root and the current
        position is then replayed against the new tree.
        """
        if not components:
            raise UsageError("nothing to delete")
        node = self.current
        keys: PyList[PathComponent] = []
        for component in components[:-1]:
            key, node = node.resolve(component)
            keys.append(key)
        edited = node.without(components[-1])
        tree = rebuild(self.tree, self.path + tuple(keys), edited)
        logger.debug("deleted %r under %s", components[-1], format_path(self.path + tuple(keys)))
        return NavigationState(tree, self.path)

    def remove(self, target: str) -> "NavigationState":
        """Delete a node named by a relative ``/``-separated path, or by its whole key."""
        if self.names_child(target):
            return self.delete(target)
        absolute, parts = split_path(target)
        if absolute or ".." in parts:
            raise UsageError("rm takes a path below the current node")
        if not parts:
            raise UsageError("need a path to remove")
        return self.delete_path(parts)


# -----------------------------------------------------------------------------
# Structural comparison
# -----------------------------------------------------------------------------


def differences(left: Tag, right: Tag, path: Path = ()) -> Iterator[Tuple[Path, str]]:
    """Yield ``(path, reason)`` for every place where two trees disagree.

    The walk keeps its own stack, so trees as deep as the decoder accepts are
    compared without touching the interpreter's recursion limit.
    """
    pending: PyList[Tuple[Path, Tag, Tag]] = [(path, left, right)]
    while pending:
        where, a, b = pending.pop()
        if type(a) is not type(b):
            yield where, f"type {a.type_name} != {b.type_name}"
        elif isinstance(a, CompoundTag) and isinstance(b, CompoundTag):
            for key in a:
                if key not in b:
                    yield where + (key,), "only on the left"
            for key in b:
                if key not in a:
                    yield where + (key,), "only on the right"
            shared = [key for key in a if key in b]
            pending.extend((where + (key,), a[key], b[key]) for key in reversed(shared))
        elif isinstance(a, ListTag) and isinstance(b, ListTag):
            if a.element_type is not b.element_type:
                yield where, "list element type"
            elif len(a) != len(b):
                yield where, f"length {len(a)} != {len(b)}"
            else:
                pending.extend((where + (index,), a[index], b[index]) for index in reversed(range(len(a))))
        elif isinstance(a, ArrayTag) and isinstance(b, ArrayTag):
            if len(a) != len(b):
                yield where, f"length {len(a)} != {len(b)}"
            else:
                for index, (x, y) in enumerate(zip(a.values, b.values)):
                    if x != y:
                        yield where + (index,), "value"
        elif a != b:
            yield where, "value"
