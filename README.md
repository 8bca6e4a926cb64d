# lsdx

The pieces behind a colourful `ls`: a YAML configuration file, colour
themes, command-line option parsing, `LS_COLORS` support and the grid and
tree layouts that arrange entries in the terminal.

Requires Python 3.10 or later; depends on `pyyaml` and `wcwidth`.

## Modules

| Module | What it holds |
| --- | --- |
| `lsdx.config_file` | `Config` and its sections, YAML loading, configuration paths |
| `lsdx.theme` | `Color`, `Theme` and its parts, the built-in dark theme, theme files |
| `lsdx.flags` | `configure`, which settles one setting from its sources |
| `lsdx.app` | the argument parser and date-format validation |
| `lsdx.color` | `Elem`, `Style`, `LsColors` and `Colors` for colouring text |
| `lsdx.display` | `Grid`, `Cell`, `tree_prefix` and `get_visible_width` |

## Configuration

```python
from lsdx.config_file import ConfigError, builtin, from_yaml

config = from_yaml("classic: true")
assert config.classic is True

defaults = builtin()
print(defaults.blocks)         # ['permission', 'user', 'group', 'size', 'date', 'name']
print(defaults.symlink_arrow)  # '⇒'

try:
    from_yaml("display: bad")
except ConfigError as err:
    print("bad configuration:", err)
```

`from_yaml` raises `ConfigError` for invalid YAML, unknown keys, values of
the wrong type and values outside the allowed choices. Keys use kebab case
(`ignore-globs`, `no-symlink`, `dir-grouping`, ...); unset items are `None`.

`from_file(path)` returns `None` for a missing file, and reports any other
read or format problem on stderr before returning `None`.
`config_file_path()` gives the configuration directory: `$XDG_CONFIG_HOME/lsd`
or `~/.config/lsd`, or `%APPDATA%\lsd` on Windows. `load_default()` reads
`config.yaml` from there and falls back to `builtin()`. `expand_home(path)`
replaces a leading `~` with the home directory.

## Themes

```python
from lsdx.theme import ThemeError, default_dark, parse_color, theme_from_yaml

theme = default_dark()
print(theme.user.fg_code())         # 38;5;230
print(parse_color("rgb_(1,2,3)").bg_code())  # 48;2;1;2;3
```

A colour in a theme document is a 256-colour index, a name (`black`,
`dark_red`, ..., `white`, or `reset`), `ansi_(n)` or `rgb_(r,g,b)`.
`theme_from_yaml(text)` requires every field and rejects unknown ones,
raising `ThemeError`; file-type colours are not read from the document and
come from the dark theme. `theme_from_path(file)` loads `<file>.yaml`, or
`<file>.yml` when that cannot be read; a relative name is looked up under
`themes/` in the configuration directory. Problems are reported on stderr
and give `None`.

## Command-line options

```python
from lsdx.app import ArgumentError, parse_args, validate_time_format

options = parse_args(["--tree", "--blocks", "size,name"])
print(options.tree, options.blocks)  # True ['size', 'name']

validate_time_format("+%Y-%m-%d %.3f")   # accepted
try:
    validate_time_format("+%Q")
except ArgumentError as err:
    print(err)   # invalid format specifier: %Q
```

`build_parser()` returns the `argparse` parser for `lsd`; `-h` means
`--human-readable`, help is `--help`. `parse_args` raises `ArgumentError`
for invalid input and for `--recursive` with `--tree`, or `--directory-only`
with `--recursive` or `--depth`. Options with an entry in `app.DEFAULTS`
(`--color`, `--icon`, `--icon-theme`, `--size`, `--date`, `--ignore-glob`)
are left as `None` when not given, so a configuration value can still
apply. `validate_date_argument` accepts `date`, `relative` or `+<format>`.

`flags.configure(from_args, from_config, default, from_environment)` calls
the sources in turn: command line, then environment, then configuration
file. The first that does not return `None` wins; otherwise `default`.

## Colours

```python
from lsdx.color import Colors, Elem, ElemKind, ThemeOption

colors = Colors(ThemeOption.NO_LSCOLORS)
print(repr(colors.colorize("src", Elem(ElemKind.DIR))))  # '\x1b[38;5;33msrc\x1b[39m'
```

`Colors` takes a `ThemeOption` (`NO_COLOR`, `DEFAULT`, `NO_LSCOLORS`) or the
name of a theme file, falling back to the dark theme when the file cannot be
loaded. Except with `NO_COLOR` and `NO_LSCOLORS`, styles from `LS_COLORS`
(or a built-in default) take precedence for elements that have an
`LS_COLORS` indicator. `colorize_using_path` styles text by the file at a
path, by its type and, for plain files, by its name's suffix.
`parse_ls_colors(value)` and `ls_colors_from_env()` build an `LsColors`;
`Style.apply(text)` wraps text in SGR escape sequences.

## Layout

```python
from lsdx.display import Cell, Direction, Grid, get_visible_width, tree_prefix

grid = Grid(Direction.TOP_TO_BOTTOM, filling=2)
for name in ["one", "two", "three"]:
    grid.add(Cell(name))
print(grid.fit_into_width(80))     # one  two  three
print(grid.fit_into_columns(1))    # one per line

print(tree_prefix(1, "", is_last=True))   # ('└── ', '    ')
assert get_visible_width("日本語") == 6
assert get_visible_width("\x1b[38;5;184mfile\x1b[39m") == 4
```

`fit_into_width` returns `None` when a cell is wider than the width.

## What it does not do

There is no command to run and nothing here reads directories: the package
does not collect file metadata, sort entries, choose icons or print a
listing. It provides the configuration, options, colouring and layout that
such a listing is built from.