import pytest

from iavl.color import (
    ANSI_FG_BLUE,
    ANSI_FG_CYAN,
    ANSI_FG_GREEN,
    ANSI_RESET,
    COLORS_ENV_VAR,
    blue,
    colored_bytes,
    cyan,
    green,
)


@pytest.mark.parametrize(
    "func,code",
    [(green, ANSI_FG_GREEN), (blue, ANSI_FG_BLUE), (cyan, ANSI_FG_CYAN)],
)
def test_wraps_in_color(func, code):
    assert func("x") == code + "x" + ANSI_RESET


def test_already_colored_passes_through():
    colored = blue("text")
    assert green(colored) == colored


def test_multiple_args_joined():
    assert green("a", 1) == green("a") + green("1")


def test_no_args_gives_empty():
    assert cyan() == ""


def test_colored_bytes_without_env(monkeypatch):
    monkeypatch.delenv(COLORS_ENV_VAR, raising=False)
    assert colored_bytes(b"xyz", green, blue) == "x"


def test_colored_bytes_empty(monkeypatch):
    monkeypatch.delenv(COLORS_ENV_VAR, raising=False)
    assert colored_bytes(b"", green, blue) == ""


def test_colored_bytes_with_env(monkeypatch):
    monkeypatch.setenv(COLORS_ENV_VAR, "on")
    assert colored_bytes(b"a", green, blue) == green("a")
    assert colored_bytes(b"\x00", green, blue) == blue("00")
    assert colored_bytes(b" ", green, blue) == blue("20")
    assert colored_bytes(b"ab", green, blue) == green("a") + green("b")