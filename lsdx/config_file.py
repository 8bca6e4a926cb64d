"""Loading and validating the YAML configuration file."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Any, Callable

import yaml

CONF_DIR = "lsd"
CONF_FILE_NAME = "config"
YAML_LONG_EXT = "yaml"

COLOR_WHEN = ("always", "auto", "never")
ICON_WHEN = ("always", "auto", "never")
ICON_THEMES = ("fancy", "unicode")
DISPLAYS = ("all", "almost-all", "directory-only")
LAYOUTS = ("grid", "tree", "oneline")
SIZES = ("default", "short", "bytes")
SORT_COLUMNS = ("extension", "name", "time", "size", "version")
DIR_GROUPINGS = ("first", "last", "none")


class ConfigError(ValueError):
    """Raised when a configuration document is malformed."""


@dataclass
class ColorSection:
    when: str | None = None
    theme: str | None = None


@dataclass
class IconsSection:
    when: str | None = None
    theme: str | None = None
    separator: str | None = None


@dataclass
class RecursionSection:
    enabled: bool | None = None
    depth: int | None = None


@dataclass
class SortingSection:
    column: str | None = None
    reverse: bool | None = None
    dir_grouping: str | None = None


@dataclass
class Config:
    """Optional configuration items; ``None`` means "not set"."""

    classic: bool | None = None
    blocks: list[str] | None = None
    color: ColorSection | None = None
    date: str | None = None
    dereference: bool | None = None
    display: str | None = None
    icons: IconsSection | None = None
    ignore_globs: list[str] | None = None
    indicators: bool | None = None
    layout: str | None = None
    recursion: RecursionSection | None = None
    size: str | None = None
    sorting: SortingSection | None = None
    no_symlink: bool | None = None
    total_size: bool | None = None
    symlink_arrow: str | None = None


DEFAULT_CONFIG = """---
# == Classic ==
# Shorthand overriding some options to behave like `ls`.
classic: false

# == Blocks ==
# Columns and their order in the long and tree layouts.
blocks:
  - permission
  - user
  - group
  - size
  - date
  - name

# == Color ==
color:
  # Possible values: never, auto, always
  when: auto
  # Possible values: default, no-color, no-lscolors, <theme-file-name>
  theme: default

# == Date ==
# Possible values: date, relative, +<date_format>
# date: date

# == Dereference ==
dereference: false

# == Display ==
# Possible values: all, almost-all, directory-only
# display: all

# == Icons ==
icons:
  # Possible values: always, auto, never
  when: auto
  # Possible values: fancy, unicode
  theme: fancy
  # The string between the icons and the name.
  separator: " "

# == Ignore Globs ==
# ignore-globs:
#   - .git

# == Indicators ==
indicators: false

# == Layout ==
# Possible values: grid, tree, oneline
layout: grid

# == Recursion ==
recursion:
  enabled: false
  # depth: 3

# == Size ==
# Possible values: default, short, bytes
size: default

# == Sorting ==
sorting:
  # Possible values: extension, name, time, size, version
  column: name
  reverse: false
  # Possible values: first, last, none
  dir-grouping: none

# == No Symlink ==
no-symlink: false

# == Total size ==
total-size: false

# == Symlink arrow ==
symlink-arrow: \u21d2
"""

_Parser = Callable[[str, Any], Any]


def _error(message: str) -> None:
    print(message, file=sys.stderr)


def _bool(key: str, value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    raise ConfigError(f"{key}: expected a boolean, found {value!r}")


def _string(key: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise ConfigError(f"{key}: expected a string, found {value!r}")


def _strings(key: str, value: Any) -> list[str] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ConfigError(f"{key}: expected a sequence, found {value!r}")
    return [_string(key, item) for item in value]


def _uint(key: str, value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"{key}: expected a non-negative integer, found {value!r}")
    return value


def _choice(*choices: str) -> _Parser:
    def parse(key: str, value: Any) -> str | None:
        if value is None:
            return None
        if value not in choices:
            expected = ", ".join(f"`{c}`" for c in choices)
            raise ConfigError(f"{key}: unknown variant `{value}`, expected one of {expected}")
        return value

    return parse


def _section(cls: type, spec: dict[str, tuple[str, _Parser]]) -> _Parser:
    def parse(key: str, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, dict):
            raise ConfigError(f"{key}: expected a mapping, found {value!r}")
        values = {
            attr: parser(f"{key}.{name}", value[name])
            for name, (attr, parser) in spec.items()
            if name in value
        }
        return cls(**values)

    return parse


_TOP_LEVEL: dict[str, tuple[str, _Parser]] = {
    "classic": ("classic", _bool),
    "blocks": ("blocks", _strings),
    "color": (
        "color",
        _section(
            ColorSection,
            {"when": ("when", _choice(*COLOR_WHEN)), "theme": ("theme", _string)},
        ),
    ),
    "date": ("date", _string),
    "dereference": ("dereference", _bool),
    "display": ("display", _choice(*DISPLAYS)),
    "icons": (
        "icons",
        _section(
            IconsSection,
            {
                "when": ("when", _choice(*ICON_WHEN)),
                "theme": ("theme", _choice(*ICON_THEMES)),
                "separator": ("separator", _string),
            },
        ),
    ),
    "ignore-globs": ("ignore_globs", _strings),
    "indicators": ("indicators", _bool),
    "layout": ("layout", _choice(*LAYOUTS)),
    "recursion": (
        "recursion",
        _section(
            RecursionSection,
            {"enabled": ("enabled", _bool), "depth": ("depth", _uint)},
        ),
    ),
    "size": ("size", _choice(*SIZES)),
    "sorting": (
        "sorting",
        _section(
            SortingSection,
            {
                "column": ("column", _choice(*SORT_COLUMNS)),
                "reverse": ("reverse", _bool),
                "dir-grouping": ("dir_grouping", _choice(*DIR_GROUPINGS)),
            },
        ),
    ),
    "no-symlink": ("no_symlink", _bool),
    "total-size": ("total_size", _bool),
    "symlink-arrow": ("symlink_arrow", _string),
}


def from_yaml(text: str) -> Config:
    """Parse a configuration document, raising ConfigError when it is invalid."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(str(exc)) from exc
    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"expected a mapping at the top level, found {data!r}")
    unknown = [str(key) for key in data if key not in _TOP_LEVEL]
    if unknown:
        raise ConfigError(f"unknown field `{unknown[0]}`")
    values = {
        attr: parser(name, data[name])
        for name, (attr, parser) in _TOP_LEVEL.items()
        if name in data
    }
    return Config(**values)


def from_file(path: str | os.PathLike[str]) -> Config | None:
    """Read a configuration file; report problems on stderr and return None."""
    try:
        raw = Path(path).read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        _error(f"Can not open config file {path}: {exc}.")
        return None
    try:
        return from_yaml(raw.decode("utf-8", errors="replace"))
    except ConfigError as exc:
        _error(f"Configuration file {path} format error, {exc}.")
        return None


def builtin() -> Config:
    """The configuration that ships with the program."""
    return from_yaml(DEFAULT_CONFIG)


def load_default() -> Config:
    """The user's configuration file if it is usable, otherwise the built-in one."""
    directory = config_file_path()
    if directory is not None:
        config = from_file(directory / f"{CONF_FILE_NAME}.{YAML_LONG_EXT}")
        if config is not None:
            return config
    return builtin()


def config_file_path() -> Path | None:
    """The directory holding the configuration, following platform conventions."""
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) / CONF_DIR if appdata else None
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg) / CONF_DIR
    try:
        return Path.home() / ".config" / CONF_DIR
    except (RuntimeError, KeyError) as exc:
        _error(f"Can not open config file: {exc}.")
        return None


def expand_home(path: str | os.PathLike[str]) -> Path | None:
    """Replace a leading ``~`` component with the home directory.

    Returns None when the home directory cannot be determined.
    """
    p = PurePath(path)
    if not p.parts or p.parts[0] != "~":
        return Path(p)
    try:
        home = Path.home()
    except (RuntimeError, KeyError):
        return None
    rest = p.parts[1:]
    if not rest:
        return home
    if home == Path("/"):
        return Path(*rest)
    return home.joinpath(*rest)