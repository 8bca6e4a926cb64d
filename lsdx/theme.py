"""Colour themes and their YAML representation."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any

import yaml

from lsdx import config_file

_NAMED = {
    "black": 0,
    "dark_red": 1,
    "dark_green": 2,
    "dark_yellow": 3,
    "dark_blue": 4,
    "dark_magenta": 5,
    "dark_cyan": 6,
    "grey": 7,
    "dark_grey": 8,
    "red": 9,
    "green": 10,
    "yellow": 11,
    "blue": 12,
    "magenta": 13,
    "cyan": 14,
    "white": 15,
}
_RESET = "reset"
_ANSI_RE = re.compile(r"ansi_\(\s*(\d+)\s*\)")
_RGB_RE = re.compile(r"rgb_\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)")


class ThemeError(ValueError):
    """Raised when a theme document is malformed."""


@dataclass(frozen=True)
class Color:
    """A terminal colour: a named colour, a 256-colour index or an RGB triple."""

    name: str | None = None
    ansi: int | None = None
    rgb: tuple[int, int, int] | None = None

    def __post_init__(self) -> None:
        given = [v for v in (self.name, self.ansi, self.rgb) if v is not None]
        if len(given) != 1:
            raise ThemeError("a colour needs exactly one of name, ansi or rgb")
        if self.name is not None and self.name != _RESET and self.name not in _NAMED:
            raise ThemeError(f"unknown colour name: {self.name}")
        if self.ansi is not None and not 0 <= self.ansi <= 255:
            raise ThemeError(f"colour index out of range: {self.ansi}")
        if self.rgb is not None and (
            len(self.rgb) != 3 or not all(0 <= c <= 255 for c in self.rgb)
        ):
            raise ThemeError(f"invalid rgb colour: {self.rgb}")

    def _tail(self) -> str:
        if self.rgb is not None:
            r, g, b = self.rgb
            return f"2;{r};{g};{b}"
        index = self.ansi if self.ansi is not None else _NAMED[self.name]
        return f"5;{index}"

    def fg_code(self) -> str:
        """SGR parameters selecting this colour as foreground."""
        return "39" if self.name == _RESET else f"38;{self._tail()}"

    def bg_code(self) -> str:
        """SGR parameters selecting this colour as background."""
        return "49" if self.name == _RESET else f"48;{self._tail()}"


def parse_color(value: Any) -> Color:
    """Build a Color from a YAML scalar: an index, a name, ``ansi_(n)`` or ``rgb_(r,g,b)``."""
    if isinstance(value, int) and not isinstance(value, bool):
        if not 0 <= value <= 255:
            raise ThemeError(f"colour index out of range: {value}")
        return Color(ansi=value)
    if isinstance(value, str):
        if value == _RESET or value in _NAMED:
            return Color(name=value)
        if match := _ANSI_RE.fullmatch(value):
            return Color(ansi=int(match.group(1)))
        if match := _RGB_RE.fullmatch(value):
            return Color(rgb=tuple(int(g) for g in match.groups()))
    raise ThemeError(f"invalid colour: {value!r}")


@dataclass
class Permission:
    read: Color
    write: Color
    exec: Color
    exec_sticky: Color
    no_access: Color


@dataclass
class File:
    exec_uid: Color
    uid_no_exec: Color
    exec_no_uid: Color
    no_exec_no_uid: Color


@dataclass
class Dir:
    uid: Color
    no_uid: Color


@dataclass
class Symlink:
    default: Color
    broken: Color
    missing_target: Color


@dataclass
class FileType:
    file: File
    dir: Dir
    pipe: Color
    symlink: Symlink
    block_device: Color
    char_device: Color
    socket: Color
    special: Color


@dataclass
class Date:
    hour_old: Color
    day_old: Color
    older: Color


@dataclass
class Size:
    none: Color
    small: Color
    medium: Color
    large: Color


@dataclass
class INode:
    valid: Color
    invalid: Color


@dataclass
class Links:
    valid: Color
    invalid: Color


@dataclass
class Count:
    valid: Color
    invalid: Color


def _default_file_type() -> FileType:
    return default_dark().file_type


@dataclass
class Theme:
    user: Color
    group: Color
    permission: Permission
    date: Date
    size: Size
    inode: INode
    tree_edge: Color
    links: Links
    count: Count
    file_type: FileType = field(default_factory=_default_file_type, metadata={"skip": True})


_TYPES: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        Color,
        Permission,
        File,
        Dir,
        Symlink,
        FileType,
        Date,
        Size,
        INode,
        Links,
        Count,
        Theme,
    )
}


def default_dark() -> Theme:
    """The built-in dark theme."""
    a = lambda n: Color(ansi=n)  # noqa: E731
    return Theme(
        user=a(230),
        group=a(187),
        permission=Permission(
            read=Color(name="dark_green"),
            write=Color(name="dark_yellow"),
            exec=Color(name="dark_red"),
            exec_sticky=a(5),
            no_access=a(245),
        ),
        file_type=FileType(
            file=File(exec_uid=a(40), uid_no_exec=a(184), exec_no_uid=a(40), no_exec_no_uid=a(184)),
            dir=Dir(uid=a(33), no_uid=a(33)),
            pipe=a(44),
            symlink=Symlink(default=a(44), broken=a(124), missing_target=a(124)),
            block_device=a(44),
            char_device=a(172),
            socket=a(44),
            special=a(44),
        ),
        date=Date(hour_old=a(40), day_old=a(42), older=a(36)),
        size=Size(none=a(245), small=a(229), medium=a(216), large=a(172)),
        inode=INode(valid=a(13), invalid=a(245)),
        count=Count(valid=a(55), invalid=a(245)),
        links=Links(valid=a(13), invalid=a(245)),
        tree_edge=a(245),
    )


def _field_type(f: Any) -> Any:
    return _TYPES.get(f.type) if isinstance(f.type, str) else f.type


def _build(cls: type, data: Any, where: str) -> Any:
    if not isinstance(data, dict):
        raise ThemeError(f"{where or 'theme'}: expected a mapping, found {data!r}")
    wanted = {
        f.name.replace("_", "-"): f for f in fields(cls) if not f.metadata.get("skip")
    }
    for key in data:
        if key not in wanted:
            raise ThemeError(f"unknown field `{key}`")
    values = {}
    for key, f in wanted.items():
        path = f"{where}.{key}" if where else key
        if key not in data:
            raise ThemeError(f"missing field `{path}`")
        hint = _field_type(f)
        if hint is Color:
            try:
                values[f.name] = parse_color(data[key])
            except ThemeError as exc:
                raise ThemeError(f"{path}: {exc}") from exc
        elif hint is not None and is_dataclass(hint):
            values[f.name] = _build(hint, data[key], path)
    return cls(**values)


def theme_from_yaml(text: str) -> Theme:
    """Parse a theme document, raising ThemeError when it is invalid."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ThemeError(str(exc)) from exc
    return _build(Theme, data, "")


def _load(path: Path, file: str) -> Theme | None:
    text = path.read_bytes().decode("utf-8", errors="replace")
    try:
        return theme_from_yaml(text)
    except ThemeError as exc:
        print(f"Theme file {file} format error: {exc}.", file=sys.stderr)
        return None


def theme_from_path(file: str) -> Theme | None:
    """Load a theme file; relative names are looked up in the themes directory.

    A ``.yaml`` file is tried first, then ``.yml``. Problems are reported on
    stderr and give None.
    """
    real = config_file.expand_home(file)
    if real is None:
        print(f"Not a valid theme file path: {file}.", file=sys.stderr)
        return None
    if real.is_absolute():
        path = real
    else:
        base = config_file.config_file_path()
        if base is None:
            return None
        path = base / "themes" / real
    try:
        return _load(path.with_suffix(".yaml"), file)
    except OSError:
        pass
    try:
        return _load(path.with_suffix(".yml"), file)
    except OSError as exc:
        print(f"Not a valid theme: {path}, {exc}.", file=sys.stderr)
        return None