from pathlib import Path

import pytest

from sticker_gifs.utils import discard_file, format_error, sanitize_name


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("wave", "wave"),
        ("Wumpus Beyond", "Wumpus Beyond"),
        ("a/b\\c", "a_b_c"),
        ("what?*", "what__"),
        ("..", "fallback"),
        ("  .hidden. ", "hidden"),
        ("", "fallback"),
        ("tab\there", "tab_here"),
        ("ハロー", "ハロー"),
    ],
)
def test_sanitize_name(name, expected):
    assert sanitize_name(name, "fallback") == expected


def test_sanitize_name_limits_length():
    assert sanitize_name("x" * 300) == "x" * 200
    # 3 bytes per char, a split char is dropped
    assert sanitize_name("ハ" * 100) == "ハ" * 66
    assert sanitize_name("a" * 199 + " .b") == "a" * 199


def test_format_error():
    assert format_error(ValueError("bad")) == "ValueError: bad"


def test_discard_file(tmp_path: Path):
    path = tmp_path / "partial.gif"
    path.write_bytes(b"GIF8")

    assert discard_file(path) == path
    assert not path.exists()
    assert discard_file(path) is None
    assert discard_file(tmp_path) is None
    assert tmp_path.is_dir()
