from pathlib import Path

import pytest

from lsdx.config_file import (
    ColorSection,
    Config,
    ConfigError,
    IconsSection,
    RecursionSection,
    SortingSection,
    builtin,
    config_file_path,
    expand_home,
    from_file,
    from_yaml,
    load_default,
)


def test_read_default():
    assert builtin() == Config(
        classic=False,
        blocks=["permission", "user", "group", "size", "date", "name"],
        color=ColorSection(when="auto", theme="default"),
        date=None,
        dereference=False,
        display=None,
        icons=IconsSection(when="auto", theme="fancy", separator=" "),
        ignore_globs=None,
        indicators=False,
        layout="grid",
        recursion=RecursionSection(enabled=False, depth=None),
        size="default",
        sorting=SortingSection(column="name", reverse=False, dir_grouping="none"),
        no_symlink=False,
        total_size=False,
        symlink_arrow="\u21d2",
    )


def test_read_config_ok():
    assert from_yaml("classic: true").classic is True


def test_read_config_bad_bool():
    with pytest.raises(ConfigError):
        from_yaml("classic: notbool")


def test_read_config_file_not_found():
    assert from_file("not-existed") is None


def test_read_bad_display():
    with pytest.raises(ConfigError):
        from_yaml("display: bad")


def test_unknown_top_level_field_rejected():
    with pytest.raises(ConfigError, match="unknown field"):
        from_yaml("colour: auto")


def test_unknown_section_field_ignored():
    config = from_yaml("color:\n  when: never\n  extra: 1\n")
    assert config.color == ColorSection(when="never", theme=None)


def test_custom_theme_name_kept():
    assert from_yaml("color:\n  theme: mytheme\n").color.theme == "mytheme"


def test_negative_depth_rejected():
    with pytest.raises(ConfigError):
        from_yaml("recursion:\n  depth: -1\n")


def test_depth_and_globs():
    config = from_yaml("recursion:\n  depth: 3\nignore-globs:\n  - .git\n  - '*.o'\n")
    assert config.recursion == RecursionSection(enabled=None, depth=3)
    assert config.ignore_globs == [".git", "*.o"]


def test_from_file_reads_document(tmp_path):
    target = tmp_path / "config.yaml"
    target.write_text("layout: tree\n", encoding="utf-8")
    assert from_file(target) == Config(layout="tree")


def test_from_file_reports_format_error(tmp_path, capsys):
    target = tmp_path / "config.yaml"
    target.write_text("layout: sideways\n", encoding="utf-8")
    assert from_file(target) is None
    assert "format error" in capsys.readouterr().err


def test_config_file_path_uses_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))
    assert config_file_path() == tmp_path / "lsd"


def test_load_default_prefers_user_file(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))
    (tmp_path / "lsd").mkdir()
    (tmp_path / "lsd" / "config.yaml").write_text("layout: tree", encoding="utf-8")
    assert load_default() == Config(layout="tree")


def test_load_default_falls_back_to_builtin(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))
    assert load_default() == builtin()


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    return tmp_path


def test_expand_home_tilde_alone(home):
    assert expand_home("~") == home


def test_expand_home_subpath(home):
    assert expand_home("~/a/b") == home / "a" / "b"


def test_expand_home_leaves_other_paths(home):
    assert expand_home("some/relative") == Path("some/relative")
    assert expand_home("~user/x") == Path("~user/x")