import pytest

from lsdx.app import (
    DEFAULTS,
    ArgumentError,
    build_parser,
    parse_args,
    validate_date_argument,
    validate_time_format,
)


@pytest.mark.parametrize(
    "fmt", ["%Y-%m-%d", "+testDateFormat%.3f", "+testDateFormat%_d", "%.f", "%:z", "%#z", "%9f", "%%", "plain"]
)
def test_valid_time_formats(fmt):
    assert validate_time_format(fmt) is None


@pytest.mark.parametrize("fmt", ["%", "%.", "%.3", "%:", "%-", "%6"])
def test_missing_specifier(fmt):
    with pytest.raises(ArgumentError, match="missing format specifier"):
        validate_time_format(fmt)


@pytest.mark.parametrize(
    "fmt, spec",
    [("%.4f", "%.4"), ("%.3x", "%.3x"), ("%:a", "%:a"), ("%-a", "%-a"), ("%3x", "%3x"), ("%Q", "%Q")],
)
def test_invalid_specifier(fmt, spec):
    with pytest.raises(ArgumentError) as info:
        validate_time_format(fmt)
    assert str(info.value) == f"invalid format specifier: {spec}"


@pytest.mark.parametrize("arg", ["date", "relative", "+%Y"])
def test_valid_date_arguments(arg):
    assert validate_date_argument(arg) is None


def test_invalid_date_argument():
    with pytest.raises(ArgumentError, match="date, relative, \\+date-time-format"):
        validate_date_argument("yesterday")


def test_invalid_date_format_argument():
    with pytest.raises(ArgumentError, match="invalid format specifier"):
        validate_date_argument("+%Q")


def test_defaults():
    ns = parse_args([])
    assert ns.files == ["."]
    assert ns.display is None
    assert ns.color is None
    assert ns.sort is None
    assert ns.ignore_glob is None
    assert DEFAULTS["date"] == "date"


def test_files_intermixed_with_options():
    ns = parse_args(["dir", "--tree", "other"])
    assert ns.files == ["dir", "other"]
    assert ns.tree is True


@pytest.mark.parametrize(
    "argv, expected",
    [(["-a", "-A"], "almost-all"), (["-A", "-a"], "all"), (["--all"], "all")],
)
def test_all_overrides(argv, expected):
    assert parse_args(argv).display == expected


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["-v", "-t"], "time"),
        (["-t", "-v"], "version"),
        (["-v", "-S"], "size"),
        (["--sort", "size", "-X"], "extension"),
        (["-t", "--sort", "version"], "version"),
    ],
)
def test_sort_overrides(argv, expected):
    assert parse_args(argv).sort == expected


def test_last_color_wins():
    assert parse_args(["--color", "always", "--color", "never"]).color == "never"


def test_bad_color_value():
    with pytest.raises(ArgumentError):
        parse_args(["--color", "sometimes"])


def test_blocks_are_split_and_accumulated():
    ns = parse_args(["--blocks", "inode,name", "--blocks", "size"])
    assert ns.blocks == ["inode", "name", "size"]


def test_bad_block():
    with pytest.raises(ArgumentError):
        parse_args(["--blocks", "inode,colour"])


def test_date_option():
    assert parse_args(["--date", "+%Y"]).date == "+%Y"
    with pytest.raises(ArgumentError):
        parse_args(["--date", "+%Q"])
    with pytest.raises(ArgumentError):
        parse_args(["--date", "tomorrow"])


def test_short_h_is_human_readable():
    assert parse_args(["-h"]).human_readable is True


def test_oneline_short_option():
    ns = parse_args(["-1", "x"])
    assert ns.oneline is True
    assert ns.files == ["x"]


def test_ignore_globs_accumulate():
    assert parse_args(["-I", "*.o", "--ignore-glob", ".git"]).ignore_glob == ["*.o", ".git"]


def test_recursive_conflicts_with_tree():
    with pytest.raises(ArgumentError):
        parse_args(["-R", "--tree"])


@pytest.mark.parametrize("argv", [["-d", "-R"], ["-d", "--depth", "2"]])
def test_directory_only_conflicts(argv):
    with pytest.raises(ArgumentError):
        parse_args(argv)


def test_directory_only_with_tree_is_allowed():
    ns = parse_args(["--tree", "-d"])
    assert ns.tree is True and ns.directory_only is True


@pytest.mark.parametrize(
    "argv",
    [["--ignore-config", "--ignore-config"], ["--classic", "--classic"], ["-d", "-d"],
     ["--config-file", "a", "--config-file", "b"]],
)
def test_single_use_options(argv):
    with pytest.raises(ArgumentError, match="more than once"):
        parse_args(argv)


def test_config_file_value():
    assert parse_args(["--config-file", "conf.yaml"]).config_file == "conf.yaml"


def test_parser_raises_instead_of_exiting():
    with pytest.raises(ArgumentError):
        build_parser().parse_args(["--unknown-flag"])


def test_depth_is_kept_last():
    assert parse_args(["--depth", "1", "--depth", "3"]).depth == "3"