"""Colouring of listing elements from a theme and the LS_COLORS environment."""

from __future__ import annotations

import enum
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from lsdx.theme import Color, Theme, default_dark, theme_from_path

_CSI = "\x1b["

# SGR parameter for each text attribute, in the order they are emitted.
_ATTRIBUTE_CODES = {
    "bold": 1,
    "dim": 2,
    "italic": 3,
    "underlined": 4,
    "slow_blink": 5,
    "rapid_blink": 6,
    "reverse": 7,
    "hidden": 8,
    "crossed_out": 9,
}
_CODE_ATTRIBUTES = {code: name for name, code in _ATTRIBUTE_CODES.items()}

_BASIC_COLORS = (
    "black",
    "dark_red",
    "dark_green",
    "dark_yellow",
    "dark_blue",
    "dark_magenta",
    "dark_cyan",
    "white",
)

_INDICATORS = frozenset(
    {
        "no", "fi", "rs", "di", "ln", "mh", "pi", "so", "do", "bd", "cd", "or",
        "su", "sg", "ca", "tw", "ow", "st", "ex", "mi", "lc", "rc", "ec",
    }
)

_DEFAULT_LS_COLORS = (
    "rs=0:lc=\x1b[:rc=m:cl=\x1b[K:ex=01;32:sg=30;43:su=37;41:di=01;34:st=37;44:"
    "ow=34;42:tw=30;42:ln=01;36:bd=01;33:cd=01;33:do=01;35:pi=33:so=01;35:"
)

_SUID_BACKGROUND = Color(ansi=124)  # Red3


class ThemeOption(enum.Enum):
    """How to colour the output; a custom theme is given as a file name instead."""

    NO_COLOR = "no-color"
    DEFAULT = "default"
    NO_LSCOLORS = "no-lscolors"


class ElemKind(enum.Enum):
    FILE = enum.auto()
    SYMLINK = enum.auto()
    BROKEN_SYMLINK = enum.auto()
    MISSING_SYMLINK_TARGET = enum.auto()
    DIR = enum.auto()
    PIPE = enum.auto()
    BLOCK_DEVICE = enum.auto()
    CHAR_DEVICE = enum.auto()
    SOCKET = enum.auto()
    SPECIAL = enum.auto()
    READ = enum.auto()
    WRITE = enum.auto()
    EXEC = enum.auto()
    EXEC_STICKY = enum.auto()
    NO_ACCESS = enum.auto()
    DAY_OLD = enum.auto()
    HOUR_OLD = enum.auto()
    OLDER = enum.auto()
    USER = enum.auto()
    GROUP = enum.auto()
    NON_FILE = enum.auto()
    FILE_LARGE = enum.auto()
    FILE_MEDIUM = enum.auto()
    FILE_SMALL = enum.auto()
    INODE = enum.auto()
    LINKS = enum.auto()
    COUNT = enum.auto()
    TREE_EDGE = enum.auto()


_SIMPLE_COLORS: dict[ElemKind, Callable[[Theme], Color]] = {
    ElemKind.SYMLINK: lambda t: t.file_type.symlink.default,
    ElemKind.BROKEN_SYMLINK: lambda t: t.file_type.symlink.broken,
    ElemKind.MISSING_SYMLINK_TARGET: lambda t: t.file_type.symlink.missing_target,
    ElemKind.PIPE: lambda t: t.file_type.pipe,
    ElemKind.BLOCK_DEVICE: lambda t: t.file_type.block_device,
    ElemKind.CHAR_DEVICE: lambda t: t.file_type.char_device,
    ElemKind.SOCKET: lambda t: t.file_type.socket,
    ElemKind.SPECIAL: lambda t: t.file_type.special,
    ElemKind.READ: lambda t: t.permission.read,
    ElemKind.WRITE: lambda t: t.permission.write,
    ElemKind.EXEC: lambda t: t.permission.exec,
    ElemKind.EXEC_STICKY: lambda t: t.permission.exec_sticky,
    ElemKind.NO_ACCESS: lambda t: t.permission.no_access,
    ElemKind.DAY_OLD: lambda t: t.date.day_old,
    ElemKind.HOUR_OLD: lambda t: t.date.hour_old,
    ElemKind.OLDER: lambda t: t.date.older,
    ElemKind.USER: lambda t: t.user,
    ElemKind.GROUP: lambda t: t.group,
    ElemKind.NON_FILE: lambda t: t.size.none,
    ElemKind.FILE_LARGE: lambda t: t.size.large,
    ElemKind.FILE_MEDIUM: lambda t: t.size.medium,
    ElemKind.FILE_SMALL: lambda t: t.size.small,
    ElemKind.TREE_EDGE: lambda t: t.tree_edge,
}


@dataclass(frozen=True)
class Elem:
    """An element of the listing; ``exec``, ``uid`` and ``valid`` refine some kinds."""

    kind: ElemKind
    exec: bool = False
    uid: bool = False
    valid: bool = False

    def has_suid(self) -> bool:
        return self.kind in (ElemKind.FILE, ElemKind.DIR) and self.uid

    def get_color(self, theme: Theme) -> Color:
        kind = self.kind
        if kind is ElemKind.FILE:
            f = theme.file_type.file
            if self.exec:
                return f.exec_uid if self.uid else f.exec_no_uid
            return f.uid_no_exec if self.uid else f.no_exec_no_uid
        if kind is ElemKind.DIR:
            d = theme.file_type.dir
            return d.uid if self.uid else d.no_uid
        # Inode and count colours are deliberately picked crosswise.
        if kind is ElemKind.INODE:
            return theme.inode.invalid if self.valid else theme.inode.valid
        if kind is ElemKind.COUNT:
            return theme.count.invalid if self.valid else theme.count.valid
        if kind is ElemKind.LINKS:
            return theme.links.valid if self.valid else theme.links.invalid
        return _SIMPLE_COLORS[kind](theme)

    def indicator(self) -> str | None:
        """The LS_COLORS indicator that styles this element, if any."""
        kind = self.kind
        if kind is ElemKind.FILE:
            if self.uid:
                return None
            return "ex" if self.exec else "fi"
        if kind is ElemKind.DIR:
            return None if self.uid else "di"
        if kind in (ElemKind.INODE, ElemKind.LINKS, ElemKind.COUNT):
            return "so" if self.valid else "no"
        return {
            ElemKind.SYMLINK: "ln",
            ElemKind.PIPE: "pi",
            ElemKind.SOCKET: "so",
            ElemKind.BLOCK_DEVICE: "bd",
            ElemKind.CHAR_DEVICE: "cd",
            ElemKind.BROKEN_SYMLINK: "or",
            ElemKind.MISSING_SYMLINK_TARGET: "mi",
        }.get(kind)


@dataclass(frozen=True)
class Style:
    """Foreground, background and text attributes applied to a piece of text."""

    foreground: Color | None = None
    background: Color | None = None
    attributes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        unknown = set(self.attributes) - _ATTRIBUTE_CODES.keys()
        if unknown:
            raise ValueError(f"unknown attribute: {sorted(unknown)[0]}")
        object.__setattr__(self, "attributes", frozenset(self.attributes))

    def apply(self, text: str) -> str:
        """Wrap ``text`` in the escape sequences for this style."""
        out = []
        if self.background is not None:
            out.append(f"{_CSI}{self.background.bg_code()}m")
        if self.foreground is not None:
            out.append(f"{_CSI}{self.foreground.fg_code()}m")
        ordered = sorted(self.attributes, key=_ATTRIBUTE_CODES.__getitem__)
        out.extend(f"{_CSI}{_ATTRIBUTE_CODES[a]}m" for a in ordered)
        out.append(text)
        if ordered:
            out.append(f"{_CSI}0m")
        else:
            if self.background is not None:
                out.append(f"{_CSI}49m")
            if self.foreground is not None:
                out.append(f"{_CSI}39m")
        return "".join(out)


def _parse_extended(codes: list[int], pos: int) -> tuple[Color, int] | None:
    """Parse ``5;n`` or ``2;r;g;b`` after a 38/48 code; return the colour and next index."""
    if pos < len(codes) and codes[pos] == 5 and pos + 1 < len(codes):
        if 0 <= codes[pos + 1] <= 255:
            return Color(ansi=codes[pos + 1]), pos + 2
        return None
    if pos < len(codes) and codes[pos] == 2 and pos + 3 < len(codes):
        rgb = tuple(codes[pos + 1 : pos + 4])
        if all(0 <= c <= 255 for c in rgb):
            return Color(rgb=rgb), pos + 4
    return None


def _parse_style(sequence: str) -> Style | None:
    if not sequence:
        return Style()
    try:
        codes = [int(part) if part else 0 for part in sequence.split(";")]
    except ValueError:
        return None
    fg: Color | None = None
    bg: Color | None = None
    attrs: set[str] = set()
    pos = 0
    while pos < len(codes):
        code = codes[pos]
        pos += 1
        if code == 0:
            fg, bg, attrs = None, None, set()
        elif code in _CODE_ATTRIBUTES:
            attrs.add(_CODE_ATTRIBUTES[code])
        elif 30 <= code <= 37:
            fg = Color(name=_BASIC_COLORS[code - 30])
        elif 40 <= code <= 47:
            bg = Color(name=_BASIC_COLORS[code - 40])
        elif 90 <= code <= 97:
            fg = Color(ansi=code - 90 + 8)
        elif 100 <= code <= 107:
            bg = Color(ansi=code - 100 + 8)
        elif code == 39:
            fg = None
        elif code == 49:
            bg = None
        elif code in (38, 48):
            parsed = _parse_extended(codes, pos)
            if parsed is None:
                return None
            color, pos = parsed
            if code == 38:
                fg = color
            else:
                bg = color
    return Style(foreground=fg, background=bg, attributes=frozenset(attrs))


class LsColors:
    """Styles from an LS_COLORS specification."""

    def __init__(
        self,
        indicators: dict[str, Style] | None = None,
        suffixes: list[tuple[str, Style]] | None = None,
    ) -> None:
        self.indicators = dict(indicators or {})
        self.suffixes = list(suffixes or [])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LsColors):
            return NotImplemented
        return self.indicators == other.indicators and self.suffixes == other.suffixes

    def __repr__(self) -> str:
        return f"LsColors(indicators={self.indicators!r}, suffixes={self.suffixes!r})"

    def style_for_indicator(self, indicator: str) -> Style | None:
        return self.indicators.get(indicator)

    def _has(self, indicator: str) -> bool:
        return indicator in self.indicators

    def _style_for_name(self, name: str) -> Style | None:
        lowered = name.lower()
        for suffix, style in reversed(self.suffixes):
            if lowered.endswith(suffix):
                return style
        return None

    def _indicator_for(self, path: Path, st: os.stat_result | None) -> str:
        if st is None:
            return "no"
        mode = st.st_mode
        if stat.S_ISREG(mode):
            if mode & stat.S_ISUID and self._has("su"):
                return "su"
            if mode & stat.S_ISGID and self._has("sg"):
                return "sg"
            if mode & 0o111 and self._has("ex"):
                return "ex"
            if st.st_nlink > 1 and self._has("mh"):
                return "mh"
            return "fi"
        if stat.S_ISDIR(mode):
            sticky = bool(mode & stat.S_ISVTX)
            other_writable = bool(mode & stat.S_IWOTH)
            if sticky and other_writable and self._has("tw"):
                return "tw"
            if other_writable and self._has("ow"):
                return "ow"
            if sticky and self._has("st"):
                return "st"
            return "di"
        if stat.S_ISLNK(mode):
            if self._has("or") and not path.exists():
                return "or"
            return "ln"
        if stat.S_ISFIFO(mode):
            return "pi"
        if stat.S_ISSOCK(mode):
            return "so"
        if stat.S_ISBLK(mode):
            return "bd"
        if stat.S_ISCHR(mode):
            return "cd"
        return "no"

    def style_for_path(self, path: str | os.PathLike[str]) -> Style | None:
        """The style for a file, from its type and, for plain files, its name."""
        p = Path(path)
        try:
            st: os.stat_result | None = p.lstat()
        except OSError:
            st = None
        indicator = self._indicator_for(p, st)
        if indicator in ("fi", "no"):
            by_name = self._style_for_name(os.fsdecode(p.name))
            if by_name is not None:
                return by_name
        return self.style_for_indicator(indicator)


def parse_ls_colors(value: str) -> LsColors:
    """Parse an LS_COLORS value; malformed entries are skipped."""
    indicators: dict[str, Style] = {}
    suffixes: list[tuple[str, Style]] = []
    for entry in value.split(":"):
        key, sep, sequence = entry.partition("=")
        if not sep:
            continue
        style = _parse_style(sequence)
        if style is None:
            continue
        if key.startswith("*"):
            suffixes.append((key[1:].lower(), style))
        elif key in _INDICATORS:
            indicators[key] = style
    return LsColors(indicators, suffixes)


def ls_colors_from_env() -> LsColors | None:
    """LsColors from the LS_COLORS environment variable, or None when it is unset."""
    value = os.environ.get("LS_COLORS")
    return None if value is None else parse_ls_colors(value)


class Colors:
    """Chooses the style of each element from a theme and LS_COLORS."""

    def __init__(self, theme_option: ThemeOption | str) -> None:
        self.theme: Theme | None
        self.lscolors: LsColors | None
        if theme_option is ThemeOption.NO_COLOR:
            self.theme = None
        elif isinstance(theme_option, ThemeOption):
            self.theme = default_dark()
        else:
            self.theme = theme_from_path(theme_option) or default_dark()

        if theme_option in (ThemeOption.NO_COLOR, ThemeOption.NO_LSCOLORS):
            self.lscolors = None
        else:
            self.lscolors = ls_colors_from_env() or parse_ls_colors(_DEFAULT_LS_COLORS)

    def colorize(self, text: str, elem: Elem) -> str:
        return self._style(elem).apply(text)

    def colorize_using_path(
        self, text: str, path: str | os.PathLike[str], elem: Elem
    ) -> str:
        if self.lscolors is not None:
            style = self.lscolors.style_for_path(path)
            if style is not None:
                return style.apply(text)
        return self.colorize(text, elem)

    def _style(self, elem: Elem) -> Style:
        if self.lscolors is not None:
            indicator = elem.indicator()
            if indicator is not None:
                return self.lscolors.style_for_indicator(indicator) or Style()
        return self._style_default(elem)

    def _style_default(self, elem: Elem) -> Style:
        if self.theme is None:
            return Style()
        background = _SUID_BACKGROUND if elem.has_suid() else None
        return Style(foreground=elem.get_color(self.theme), background=background)