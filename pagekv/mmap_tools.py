"""Commands that create, read and update a file through a memory mapping."""

from __future__ import annotations

import mmap
import os
import sys
from typing import Optional, Sequence, Union

PathLike = Union[str, os.PathLike]


def create_file(path: PathLike, message: str) -> int:
    """Create ``path`` holding ``message`` and a trailing newline; return its size."""
    data = message.encode()
    size = len(data) + 1
    with open(path, "w+b") as f:
        f.seek(size - 1)
        f.write(b"\n")
        f.flush()
        with mmap.mmap(f.fileno(), size, access=mmap.ACCESS_WRITE) as mapped:
            mapped[: len(data)] = data
            mapped.flush()
    return size


def read_first_char(path: PathLike) -> str:
    """Return the first byte of ``path``, read through a mapping, as a character."""
    with open(path, "rb") as f:
        if os.fstat(f.fileno()).st_size == 0:
            raise ValueError(f"{os.fspath(path)} is empty")
        with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as mapped:
            return chr(mapped[0])


def update_file(path: PathLike, message: str) -> tuple[str, str]:
    """Overwrite the start of ``path`` with ``message``; return the first char before and after."""
    data = message.encode()
    with open(path, "r+b") as f:
        size = os.fstat(f.fileno()).st_size
        if size == 0:
            raise ValueError(f"{os.fspath(path)} is empty")
        if len(data) > size:
            raise ValueError("message is longer than the file")
        with mmap.mmap(f.fileno(), size, access=mmap.ACCESS_WRITE) as mapped:
            before = chr(mapped[0])
            mapped[: len(data)] = data
            after = chr(mapped[0])
            mapped.flush()
    return before, after


def _args(argv: Optional[Sequence[str]], name: str) -> Optional[list[str]]:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print(f"usage: {name} <file-name> <message>")
        return None
    return args


def create_main(argv: Optional[Sequence[str]] = None) -> int:
    args = _args(argv, "mmap_create")
    if args is None:
        return 1
    path, message = args
    size = create_file(path, message)
    print(f"File is --> {path} <--- size{size}")
    return 0


def read_main(argv: Optional[Sequence[str]] = None) -> int:
    args = _args(argv, "mmap_read")
    if args is None:
        return 1
    path = args[0]
    print(f"File is --> {path} <--- size{os.path.getsize(path)}")
    print(read_first_char(path))
    return 0


def update_main(argv: Optional[Sequence[str]] = None) -> int:
    args = _args(argv, "mmap_update")
    if args is None:
        return 1
    path, message = args
    print(f"File is --> {path} <--- size{os.path.getsize(path)}")
    before, after = update_file(path, message)
    print(f"READ is --> {before}")
    print(f"After update is --> {after}")
    return 0