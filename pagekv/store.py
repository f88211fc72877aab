"""Page-oriented key-value store file: master page, page allocation and file mapping."""

from __future__ import annotations

import mmap
import os
import struct
from types import TracebackType
from typing import Optional, Union

from pagekv.btree import BTree

PAGE_SIZE = 4096
SIGNATURE = b"pagekvDB".ljust(16, b"\0")
PERMISSIONS = 0o644
DEFAULT_ORDER = 4

# |sig |root |pages used|
# |16B | 8B  |    8B    |
_MASTER = struct.Struct("<16sQQ")


class MasterPageError(ValueError):
    """The master page of a database file is missing or inconsistent."""


class KVStore:
    """A database file whose pages are mapped into memory in growing chunks."""

    def __init__(self, path: Union[str, os.PathLike], order: int = DEFAULT_ORDER) -> None:
        self.path = os.fspath(path)
        self.fd: Optional[int] = None
        self.tree: BTree = BTree(order)
        self.root = 0
        self.file_size = 0
        self.total_size = 0
        self.chunks: list[mmap.mmap] = []
        self.flushed = 0
        self.temp: list[bytes] = []

    def open(self) -> KVStore:
        """Open or create the file, map its pages and load the master page."""
        self.fd = os.open(self.path, os.O_CREAT | os.O_RDWR, PERMISSIONS)
        try:
            self.file_size = os.fstat(self.fd).st_size
            if self.file_size:
                self.extend_mmap(self.file_size // PAGE_SIZE)
            self.load_master()
        except BaseException:
            self.close()
            raise
        return self

    def close(self) -> None:
        """Unmap every chunk and close the file."""
        for chunk in self.chunks:
            chunk.close()
        self.chunks = []
        self.total_size = 0
        if self.fd is not None:
            os.close(self.fd)
            self.fd = None

    def __enter__(self) -> KVStore:
        return self.open()

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def _require_fd(self) -> int:
        if self.fd is None:
            raise ValueError("database is not open")
        return self.fd

    def extend_mmap(self, npages: int) -> None:
        """Map more of the file so that at least ``npages`` pages are mapped."""
        fd = self._require_fd()
        size = npages * PAGE_SIZE
        if self.total_size >= size:
            return
        chunk = mmap.mmap(fd, size - self.total_size, access=mmap.ACCESS_WRITE, offset=self.total_size)
        self.total_size = size
        self.chunks.append(chunk)

    def load_master(self) -> None:
        """Read the root pointer and page count from the master page."""
        if self.file_size == 0:
            # An empty file: the master page is created on the first write.
            self.flushed = 1
            return
        if not self.chunks:
            raise MasterPageError("file too small to hold a master page")
        signature, root, used = _MASTER.unpack_from(self.chunks[0], 0)
        if signature != SIGNATURE:
            raise MasterPageError("bad signature")
        bad = not 1 <= used <= self.file_size // PAGE_SIZE
        bad = bad or not 0 <= root <= used
        if bad:
            raise MasterPageError("bad master page")
        self.root = root
        self.flushed = used

    def update_master(self) -> None:
        """Write the master page with a single positional write."""
        fd = self._require_fd()
        data = _MASTER.pack(SIGNATURE, self.root, self.flushed)
        if hasattr(os, "pwrite"):
            os.pwrite(fd, data, 0)
        else:
            os.lseek(fd, 0, os.SEEK_SET)
            os.write(fd, data)

    def allocate_page(self, data: bytes) -> int:
        """Queue a new page after the flushed ones and return its page number."""
        if len(data) > PAGE_SIZE:
            raise ValueError(f"page data exceeds {PAGE_SIZE} bytes")
        ptr = self.flushed + len(self.temp)
        self.temp.append(bytes(data))
        return ptr

    def deallocate_page(self, data: bytes) -> int:
        """Drop a queued page; return the next free page number before removal."""
        if len(data) > PAGE_SIZE:
            raise ValueError(f"page data exceeds {PAGE_SIZE} bytes")
        ptr = self.flushed + len(self.temp)
        try:
            self.temp.remove(bytes(data))
        except ValueError:
            raise ValueError("page is not pending") from None
        return ptr

    def extend_file(self, npages: int) -> None:
        """Grow the file to hold ``npages`` pages, by steps of an eighth."""
        fd = self._require_fd()
        file_pages = self.file_size // PAGE_SIZE
        if file_pages >= npages:
            return
        while file_pages < npages:
            file_pages += max(file_pages // 8, 1)
        size = file_pages * PAGE_SIZE
        try:
            if hasattr(os, "posix_fallocate"):
                os.posix_fallocate(fd, 0, size)
            elif os.fstat(fd).st_size < size:
                os.ftruncate(fd, size)
        except OSError as exc:
            raise OSError(f"failed to preallocate file space: {exc}") from exc
        self.file_size = size