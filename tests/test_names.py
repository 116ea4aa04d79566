import pytest

from file_service.names import is_safe


@pytest.mark.parametrize(
    "name",
    ["report.pdf", "notes", "with space.txt", "ünïcødé.md", ".hidden", "a.b.c", "(1)!~*'.png"],
)
def test_accepts_plain_names(name: str) -> None:
    assert is_safe(name)


@pytest.mark.parametrize("name", ["..", "../etc/passwd", "a..b", "x/..", "..hidden"])
def test_rejects_traversal_token(name: str) -> None:
    assert not is_safe(name)


@pytest.mark.parametrize("name", ["", ".", "/etc/passwd", "dir/file", "dir\\file", "nul\x00byte"])
def test_rejects_names_that_are_not_a_single_entry(name: str) -> None:
    assert not is_safe(name)
