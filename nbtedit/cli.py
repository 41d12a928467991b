"""Command-line NBT inspector and editor.

Loads one Minecraft NBT file (gzip-compressed or raw) and either prints the
whole tree, runs the commands given with ``-e``, or starts an interactive
shell in which the tree can be walked with ``cd``/``ls`` and damaged entries
removed with ``rm`` before the file is written back with ``save``.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional, Sequence

from . import files
from .commands import Session, non_negative
from .errors import NBTError
from .navigation import NavigationState
from .render import render

logger = logging.getLogger(__name__)

PROMPT = "> "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nbtedit",
        description="Inspect and repair Minecraft NBT files.",
    )
    parser.add_argument("file", nargs="?", help="NBT file to open; the shell can also load one later")
    parser.add_argument("-i", "--interactive", action="store_true", help="start an interactive shell")
    parser.add_argument(
        "-e",
        "--exec",
        metavar="CMD",
        action="append",
        default=[],
        help="run a shell command; may be given several times",
    )
    parser.add_argument(
        "-d", "--depth", type=non_negative, default=None, help="levels to print when neither -i nor -e is given"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    return parser


def run_shell(session: Session, read_line: Callable[[str], str] = input) -> None:
    """Read and execute commands until end of input."""
    while True:
        try:
            line = read_line(PROMPT)
        except EOFError:
            session.write("Goodbye.")
            return
        except KeyboardInterrupt:
            session.write("")
            continue
        session.execute(line)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.file is None and not (args.interactive or args.exec):
        parser.error("a file is required unless -i or -e is given")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    session = Session()
    if args.file is not None:
        try:
            session.state = NavigationState.load(files.read_bytes(args.file))
        except (NBTError, OSError) as exc:
            logger.debug("failed to open %s", args.file, exc_info=True)
            print(f"error: {args.file}: {exc}", file=sys.stderr)
            return 1
        session.file_path = args.file

    if args.exec:
        session.run(args.exec)
    if args.interactive:
        run_shell(session)
    elif not args.exec:
        session.write(render(session.state.tree, max_depth=args.depth))
    return 0


if __name__ == "__main__":
    sys.exit(main())
