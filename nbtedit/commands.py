"""Command dispatcher for the interactive shell.

A :class:`Session` owns the single :class:`NavigationState` being edited and
the file it came from.  Every command line is tokenized, looked up in
:data:`COMMANDS` and run; a failing command prints ``error: ...`` and leaves
the session exactly as it was.
"""
from __future__ import annotations

import argparse
import itertools
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List as PyList, Optional, Sequence, TextIO, Tuple

from . import files
from .errors import NBTError, TokenizeError, UsageError
from .interop import to_snbt
from .navigation import NavigationState, differences, format_path
from .render import render
from .tokenize import split_words

logger = logging.getLogger(__name__)

# Maximum number of differing paths ``cmp`` lists.
CMP_REPORT_LIMIT = 10

Handler = Callable[["Session", argparse.Namespace], None]


class _CommandParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing and exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(f"{self.prog}: {message}")

    def exit(self, status: int = 0, message: Optional[str] = None) -> None:  # type: ignore[override]
        raise UsageError(message or f"{self.prog}: exited with status {status}")


@dataclass
class Command:
    name: str
    summary: str
    handler: Handler
    parser: argparse.ArgumentParser
    needs_tree: bool = True


COMMANDS: Dict[str, Command] = {}


def command(
    name: str,
    summary: str,
    *,
    arguments: Sequence[Tuple[Tuple[str, ...], Dict[str, Any]]] = (),
    needs_tree: bool = True,
) -> Callable[[Handler], Handler]:
    """Register the decorated function as the handler for ``name``."""

    def register(handler: Handler) -> Handler:
        parser = _CommandParser(prog=name, description=summary, add_help=False)
        for flags, options in arguments:
            parser.add_argument(*flags, **options)
        COMMANDS[name] = Command(name, summary, handler, parser, needs_tree)
        return handler

    return register


def non_negative(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        value = -1
    if value < 0:
        raise argparse.ArgumentTypeError(f"{text!r} is not a non-negative integer")
    return value


# -----------------------------------------------------------------------------
# Session
# -----------------------------------------------------------------------------


@dataclass
class Session:
    state: Optional[NavigationState] = None
    file_path: Optional[str] = None
    out: TextIO = field(default_factory=lambda: sys.stdout)

    def write(self, text: str) -> None:
        self.out.write(text + "\n")

    @property
    def tree_state(self) -> NavigationState:
        if self.state is None:
            raise UsageError("no file loaded")
        return self.state

    def execute(self, line: str) -> None:
        """Run one command line, reporting any failure on ``out``."""
        try:
            words = split_words(line)
        except TokenizeError as exc:
            self.write(f"error: {exc}")
            return
        if not words:
            return

        name, args = words[0], words[1:]
        entry = COMMANDS.get(name)
        if entry is None:
            self.write(f"unknown command: {name}")
            return

        logger.debug("running %s %r", name, args)
        try:
            options = entry.parser.parse_args(args)
            if entry.needs_tree and self.state is None:
                raise UsageError("no file loaded")
            entry.handler(self, options)
        except (NBTError, OSError) as exc:
            logger.debug("%s failed", name, exc_info=True)
            self.write(f"error: {exc}")

    def run(self, lines: Sequence[str]) -> None:
        for line in lines:
            self.execute(line)


# -----------------------------------------------------------------------------
# Navigation commands
# -----------------------------------------------------------------------------


@command("cd", "change the current node (.. ascends, a leading / starts at the root)",
         arguments=[(("path",), {})])
def cmd_cd(session: Session, options: argparse.Namespace) -> None:
    session.state = session.tree_state.change_directory(options.path)


@command("ls", "list the children of the current node")
def cmd_ls(session: Session, options: argparse.Namespace) -> None:
    session.write(render(session.tree_state.current, max_depth=1))


@command("pwd", "print the path of the current node")
def cmd_pwd(session: Session, options: argparse.Namespace) -> None:
    session.write(format_path(session.tree_state.path))


@command("show", "print the current node recursively",
         arguments=[(("-d", "--depth"), {"type": non_negative, "default": None, "help": "levels to expand"})])
def cmd_show(session: Session, options: argparse.Namespace) -> None:
    session.write(render(session.tree_state.current, max_depth=options.depth))


@command("snbt", "print the current node as SNBT text",
         arguments=[(("--indent",), {"type": non_negative, "default": None})])
def cmd_snbt(session: Session, options: argparse.Namespace) -> None:
    session.write(to_snbt(session.tree_state.current, indent=options.indent))


# -----------------------------------------------------------------------------
# Editing and file commands
# -----------------------------------------------------------------------------


@command("rm", "delete a node below the current one", arguments=[(("path",), {})])
def cmd_rm(session: Session, options: argparse.Namespace) -> None:
    session.state = session.tree_state.remove(options.path)


@command("load", "replace the tree with the contents of a file",
         arguments=[(("file",), {})], needs_tree=False)
def cmd_load(session: Session, options: argparse.Namespace) -> None:
    state = NavigationState.load(files.read_bytes(options.file))
    session.state = state
    session.file_path = options.file
    logger.info("loaded %s", options.file)


@command("save", "write the tree to a file (default: the file it was loaded from)",
         arguments=[(("file",), {"nargs": "?", "default": None})])
def cmd_save(session: Session, options: argparse.Namespace) -> None:
    target = options.file or session.file_path
    if not target:
        raise UsageError("save needs a file name")
    files.write_bytes(target, session.tree_state.save())
    session.file_path = target
    session.write(f"saved to {target}")


@command("cmp", "compare the tree with the contents of a file", arguments=[(("file",), {})])
def cmd_cmp(session: Session, options: argparse.Namespace) -> None:
    state = session.tree_state
    other = files.read_file(options.file)
    if state.compare(other):
        session.write("equal")
        return
    session.write("different")
    for path, reason in itertools.islice(differences(state.tree, other), CMP_REPORT_LIMIT):
        session.write(f"  {format_path(path)}: {reason}")


@command("help", "list the available commands", needs_tree=False)
def cmd_help(session: Session, options: argparse.Namespace) -> None:
    lines: PyList[str] = []
    for entry in COMMANDS.values():
        usage = entry.parser.format_usage().strip()
        if usage.startswith("usage: "):
            usage = usage[len("usage: "):]
        lines.append(f"{usage:<32} {entry.summary}")
    session.write("\n".join(lines))
