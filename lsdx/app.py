"""Command-line interface definition."""

from __future__ import annotations

import argparse
from typing import Iterator, Sequence

VERSION = "0.1.0"

WHEN_CHOICES = ("always", "auto", "never")
ICON_THEME_CHOICES = ("fancy", "unicode")
SIZE_CHOICES = ("default", "short", "bytes")
SORT_CHOICES = ("size", "time", "version", "extension")
GROUP_DIRS_CHOICES = ("none", "first", "last")
BLOCK_CHOICES = (
    "permission",
    "user",
    "group",
    "size",
    "date",
    "name",
    "inode",
    "links",
)

# Values used by the command when an option is not given on the command line.
# parse_args leaves such options as None so that the configuration file can
# still take precedence over them.
DEFAULTS = {
    "color": "auto",
    "icon": "auto",
    "icon_theme": "fancy",
    "size": "default",
    "date": "date",
    "ignore_glob": [""],
}

_MISSING = "missing format specifier"
_DATE_HINT = "possible values: date, relative, +date-time-format"

_PADDED_SPECIFIERS = frozenset("CdefGgHIjklMmSsUuVWwYy")
_PLAIN_SPECIFIERS = frozenset("AaBbCcDdeFfGgHhIjklMmnPpRrSsTtUuVvWwXxYyZz+%")
_PRECISIONS = frozenset("369")


class ArgumentError(ValueError):
    """Raised when the command line is invalid."""


def _expect(chars: Iterator[str], allowed: frozenset[str] | str, prefix: str) -> None:
    c = next(chars, None)
    if c is None:
        raise ArgumentError(_MISSING)
    if c not in allowed:
        raise ArgumentError(f"invalid format specifier: {prefix}{c}")


def validate_time_format(formatter: str) -> None:
    """Check a strftime-like format string, raising ArgumentError on a bad specifier."""
    chars = iter(formatter)
    for ch in chars:
        if ch != "%":
            continue
        spec = next(chars, None)
        if spec is None:
            raise ArgumentError(_MISSING)
        if spec == ".":
            n = next(chars, None)
            if n is None:
                raise ArgumentError(_MISSING)
            if n == "f":
                continue
            if n in _PRECISIONS:
                _expect(chars, "f", f"%.{n}")
            else:
                raise ArgumentError(f"invalid format specifier: %.{n}")
        elif spec in ":#":
            _expect(chars, "z", f"%{spec}")
        elif spec in "-_0":
            _expect(chars, _PADDED_SPECIFIERS, f"%{spec}")
        elif spec in _PLAIN_SPECIFIERS:
            continue
        elif spec in _PRECISIONS:
            _expect(chars, "f", f"%{spec}")
        else:
            raise ArgumentError(f"invalid format specifier: %{spec}")


def validate_date_argument(arg: str) -> None:
    """Accept ``date``, ``relative`` or ``+<format>``; raise ArgumentError otherwise."""
    if arg.startswith("+"):
        validate_time_format(arg)
    elif arg not in ("date", "relative"):
        raise ArgumentError(_DATE_HINT)


def _date_value(arg: str) -> str:
    try:
        validate_date_argument(arg)
    except ArgumentError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return arg


def _blocks_value(arg: str) -> list[str]:
    items = arg.split(",")
    for item in items:
        if item not in BLOCK_CHOICES:
            choices = ", ".join(BLOCK_CHOICES)
            raise argparse.ArgumentTypeError(
                f"invalid value {item!r} (possible values: {choices})"
            )
    return items


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise ArgumentError(message)


class _Once(argparse.Action):
    """Store an option that may be given at most once."""

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest) != self.default:
            parser.error(f"argument {option_string}: was provided more than once")
        setattr(namespace, self.dest, self.const if self.nargs == 0 else values)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``lsd`` command."""
    p = _Parser(
        prog="lsd",
        description="An ls command with a lot of pretty colors and some other stuff.",
        add_help=False,
    )
    p.add_argument("--help", action="help", help="Prints help information")
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    p.add_argument("files", nargs="*", default=["."], metavar="FILE")

    p.add_argument(
        "-a", "--all", dest="display", action="store_const", const="all",
        help="Do not ignore entries starting with .",
    )
    p.add_argument(
        "-A", "--almost-all", dest="display", action="store_const", const="almost-all",
        help="Do not list implied . and ..",
    )
    p.add_argument(
        "--color", choices=WHEN_CHOICES, default=None, help="When to use terminal colours"
    )
    p.add_argument("--count", action="store_true", help="Count how many files are listed")
    p.add_argument("--icon", choices=WHEN_CHOICES, default=None, help="When to print the icons")
    p.add_argument(
        "--icon-theme", choices=ICON_THEME_CHOICES, default=None,
        help="Whether to use fancy or unicode icons",
    )
    p.add_argument(
        "-F", "--classify", dest="indicators", action="store_true",
        help="Append indicator (one of */=>@|) at the end of the file names",
    )
    p.add_argument(
        "-l", "--long", action="store_true", help="Display extended file metadata as a table"
    )
    p.add_argument(
        "--ignore-config", action=_Once, nargs=0, const=True, default=False,
        help="Ignore the configuration file",
    )
    p.add_argument(
        "--config-file", action=_Once, default=None, metavar="config-file",
        help="Provide a custom lsd configuration file",
    )
    p.add_argument("-1", "--oneline", action="store_true", help="Display one entry per line")
    p.add_argument("-R", "--recursive", action="store_true", help="Recurse into directories")
    p.add_argument(
        "-h", "--human-readable", dest="human_readable", action="store_true",
        help="For ls compatibility purposes ONLY, currently set by default",
    )
    p.add_argument(
        "--tree", action="store_true",
        help="Recurse into directories and present the result as a tree",
    )
    p.add_argument(
        "--depth", default=None, metavar="num",
        help="Stop recursing into directories after reaching specified depth",
    )
    p.add_argument(
        "-d", "--directory-only", action=_Once, nargs=0, const=True, default=False,
        help="Display directories themselves, and not their contents "
        "(recursively when used with --tree)",
    )
    p.add_argument("--size", choices=SIZE_CHOICES, default=None, help="How to display size")
    p.add_argument(
        "--total-size", action="store_true", help="Display the total size of directories"
    )
    p.add_argument(
        "--date", type=_date_value, default=None,
        help="How to display date [possible values: date, relative, +date-time-format]",
    )
    p.add_argument(
        "-t", "--timesort", dest="sort", action="store_const", const="time",
        help="Sort by time modified",
    )
    p.add_argument(
        "-S", "--sizesort", dest="sort", action="store_const", const="size",
        help="Sort by size",
    )
    p.add_argument(
        "-X", "--extensionsort", dest="sort", action="store_const", const="extension",
        help="Sort by file extension",
    )
    p.add_argument(
        "-v", "--versionsort", dest="sort", action="store_const", const="version",
        help="Natural sort of (version) numbers within text",
    )
    p.add_argument(
        "--sort", dest="sort", choices=SORT_CHOICES, metavar="WORD",
        help="sort by WORD instead of name",
    )
    p.add_argument("-r", "--reverse", action="store_true", help="Reverse the order of the sort")
    p.add_argument(
        "--group-dirs", choices=GROUP_DIRS_CHOICES, default=None,
        help="Sort the directories then the files",
    )
    p.add_argument(
        "--blocks", type=_blocks_value, action="extend", default=None,
        help="Specify the blocks that will be displayed and in what order",
    )
    p.add_argument(
        "--classic", action=_Once, nargs=0, const=True, default=False,
        help="Enable classic mode (display output similar to ls)",
    )
    p.add_argument("--no-symlink", action="store_true", help="Do not display symlink target")
    p.add_argument(
        "-I", "--ignore-glob", action="append", default=None, metavar="pattern",
        help="Do not display files/directories with names matching the glob pattern(s). "
        "More than one can be specified by repeating the argument",
    )
    p.add_argument(
        "-i", "--inode", action="store_true", help="Display the index number of each file"
    )
    p.add_argument(
        "-L", "--dereference", action="store_true",
        help="When showing file information for a symbolic link, show information for "
        "the file the link references rather than for the link itself",
    )
    return p


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse the command line, raising ArgumentError when it is invalid.

    Options with a default in DEFAULTS are left as None when not given.
    """
    ns = build_parser().parse_intermixed_args(argv)
    if ns.recursive and ns.tree:
        raise ArgumentError("argument --recursive cannot be used with --tree")
    if ns.directory_only and ns.recursive:
        raise ArgumentError("argument --directory-only cannot be used with --recursive")
    if ns.directory_only and ns.depth is not None:
        raise ArgumentError("argument --directory-only cannot be used with --depth")
    return ns