import pytest

from pagekv.mmap_tools import (
    create_file,
    create_main,
    read_first_char,
    read_main,
    update_file,
    update_main,
)


def test_create_file_writes_message_and_newline(tmp_path):
    path = tmp_path / "f.txt"
    size = create_file(path, "hello")
    assert size == len("hello") + 1
    assert path.read_bytes() == b"hello\n"


def test_create_file_truncates_existing(tmp_path):
    path = tmp_path / "f.txt"
    path.write_bytes(b"a much longer previous content")
    create_file(path, "hi")
    assert path.read_bytes() == b"hi\n"


def test_create_empty_message(tmp_path):
    path = tmp_path / "f.txt"
    assert create_file(path, "") == 1
    assert path.read_bytes() == b"\n"


def test_read_first_char(tmp_path):
    path = tmp_path / "f.txt"
    create_file(path, "hello")
    assert read_first_char(path) == "h"


def test_read_empty_file(tmp_path):
    path = tmp_path / "f.txt"
    path.write_bytes(b"")
    with pytest.raises(ValueError):
        read_first_char(path)


def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_first_char(tmp_path / "missing")


def test_update_file_overwrites_prefix(tmp_path):
    path = tmp_path / "f.txt"
    create_file(path, "hello")
    assert update_file(path, "J") == ("h", "J")
    assert path.read_bytes() == b"Jello\n"


def test_update_too_long(tmp_path):
    path = tmp_path / "f.txt"
    create_file(path, "hi")
    with pytest.raises(ValueError):
        update_file(path, "much too long")
    assert path.read_bytes() == b"hi\n"


@pytest.mark.parametrize(
    "command, name",
    [(create_main, "mmap_create"), (read_main, "mmap_read"), (update_main, "mmap_update")],
)
def test_wrong_argument_count(command, name, capsys):
    assert command(["only-one"]) == 1
    assert f"usage: {name} <file-name> <message>" in capsys.readouterr().out


def test_mains_round_trip(tmp_path, capsys):
    path = str(tmp_path / "f.txt")
    assert create_main([path, "world"]) == 0
    assert read_main([path, "ignored"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[-1] == "w"
    assert update_main([path, "W"]) == 0
    out = capsys.readouterr().out
    assert "READ is --> w" in out
    assert "After update is --> W" in out
    assert (tmp_path / "f.txt").read_bytes() == b"World\n"