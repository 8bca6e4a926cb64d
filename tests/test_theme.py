import pytest

from lsdx.theme import (
    Color,
    Count,
    ThemeError,
    default_dark,
    parse_color,
    theme_from_path,
    theme_from_yaml,
)

DEFAULT_YAML = """---
user: 230
group: 187
permission:
  read: dark_green
  write: dark_yellow
  exec: dark_red
  exec-sticky: 5
  no-access: 245
date:
  hour-old: 40
  day-old: 42
  older: 36
size:
  none: 245
  small: 229
  medium: 216
  large: 172
inode:
  valid: 13
  invalid: 245
count:
  valid: 55
  invalid: 245
links:
  valid: 13
  invalid: 245
tree-edge: 245
"""


def test_default_theme():
    assert theme_from_yaml(DEFAULT_YAML) == default_dark()


def test_default_theme_file(tmp_path):
    theme_file = tmp_path / "theme.yaml"
    theme_file.write_text(DEFAULT_YAML + "\n", encoding="utf-8")
    assert theme_from_path(str(theme_file)) == default_dark()


def test_yml_extension_fallback(tmp_path):
    (tmp_path / "mine.yml").write_text(DEFAULT_YAML, encoding="utf-8")
    assert theme_from_path(str(tmp_path / "mine")) == default_dark()


def test_relative_theme_uses_config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))
    themes = tmp_path / "lsd" / "themes"
    themes.mkdir(parents=True)
    (themes / "mine.yaml").write_text(DEFAULT_YAML, encoding="utf-8")
    assert theme_from_path("mine") == default_dark()


def test_missing_theme_file(tmp_path, capsys):
    assert theme_from_path(str(tmp_path / "absent")) is None
    assert "Not a valid theme" in capsys.readouterr().err


def test_bad_theme_file_format(tmp_path, capsys):
    (tmp_path / "bad.yaml").write_text("user: 230\n", encoding="utf-8")
    assert theme_from_path(str(tmp_path / "bad")) is None
    assert "format error" in capsys.readouterr().err


def test_unknown_field_rejected():
    with pytest.raises(ThemeError, match="unknown field"):
        theme_from_yaml(DEFAULT_YAML + "extra: 1\n")


def test_file_type_key_rejected():
    with pytest.raises(ThemeError):
        theme_from_yaml(DEFAULT_YAML + "file-type: 1\n")


def test_missing_field_rejected():
    text = DEFAULT_YAML.replace("tree-edge: 245\n", "")
    with pytest.raises(ThemeError, match="tree-edge"):
        theme_from_yaml(text)


def test_default_count_colors():
    assert default_dark().count == Count(valid=Color(ansi=55), invalid=Color(ansi=245))


@pytest.mark.parametrize(
    "value, expected",
    [
        (230, Color(ansi=230)),
        ("dark_green", Color(name="dark_green")),
        ("reset", Color(name="reset")),
        ("ansi_(7)", Color(ansi=7)),
        ("rgb_(1,2,3)", Color(rgb=(1, 2, 3))),
    ],
)
def test_parse_color(value, expected):
    assert parse_color(value) == expected


@pytest.mark.parametrize("value", [256, -1, "purple", True, "rgb_(1,2)", None])
def test_parse_color_rejects(value):
    with pytest.raises(ThemeError):
        parse_color(value)


def test_color_codes():
    assert Color(ansi=230).fg_code() == "38;5;230"
    assert Color(ansi=124).bg_code() == "48;5;124"
    assert Color(name="dark_green").fg_code() == "38;5;2"
    assert Color(name="white").fg_code() == "38;5;15"
    assert Color(rgb=(1, 2, 3)).fg_code() == "38;2;1;2;3"
    assert Color(name="reset").fg_code() == "39"
    assert Color(name="reset").bg_code() == "49"


def test_color_requires_single_value():
    with pytest.raises(ThemeError):
        Color()
    with pytest.raises(ThemeError):
        Color(name="red", ansi=1)