import struct

import pytest

from pagekv.store import PAGE_SIZE, SIGNATURE, KVStore, MasterPageError


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "db.kv"


def test_empty_file_reserves_master_page(db_path):
    with KVStore(db_path) as store:
        assert store.file_size == 0
        assert store.flushed == 1
        assert store.chunks == []


def test_allocate_page_numbers_follow_flushed(db_path):
    with KVStore(db_path) as store:
        first = store.allocate_page(b"a")
        second = store.allocate_page(b"b")
        assert first == store.flushed
        assert second == first + 1
        assert store.temp == [b"a", b"b"]


def test_allocate_page_too_large(db_path):
    with KVStore(db_path) as store:
        with pytest.raises(ValueError):
            store.allocate_page(b"x" * (PAGE_SIZE + 1))


def test_deallocate_page_removes_pending(db_path):
    with KVStore(db_path) as store:
        store.allocate_page(b"a")
        store.allocate_page(b"b")
        ptr = store.deallocate_page(b"a")
        assert ptr == store.flushed + 2
        assert store.temp == [b"b"]
        with pytest.raises(ValueError):
            store.deallocate_page(b"missing")


def test_extend_file_from_empty(db_path):
    with KVStore(db_path) as store:
        store.extend_file(1)
        assert store.file_size == PAGE_SIZE
    assert db_path.stat().st_size == PAGE_SIZE


@pytest.mark.parametrize("npages", [1, 5, 17, 40])
def test_extend_file_covers_request(db_path, npages):
    with KVStore(db_path) as store:
        store.extend_file(npages)
        assert store.file_size >= npages * PAGE_SIZE
        assert store.file_size % PAGE_SIZE == 0
        assert db_path.stat().st_size >= npages * PAGE_SIZE


def test_extend_file_never_shrinks(db_path):
    with KVStore(db_path) as store:
        store.extend_file(10)
        size = store.file_size
        store.extend_file(3)
        assert store.file_size == size


def test_extend_mmap_adds_chunks(db_path):
    with KVStore(db_path) as store:
        store.extend_file(4)
        store.extend_mmap(2)
        assert store.total_size == 2 * PAGE_SIZE
        assert len(store.chunks) == 1
        store.extend_mmap(1)
        assert len(store.chunks) == 1
        store.extend_mmap(4)
        assert store.total_size == 4 * PAGE_SIZE
        assert len(store.chunks) == 2


def test_mapped_chunk_writes_reach_file(db_path):
    with KVStore(db_path) as store:
        store.extend_file(1)
        store.extend_mmap(1)
        store.chunks[0][100:104] = b"data"
        store.chunks[0].flush()
    assert db_path.read_bytes()[100:104] == b"data"


def test_master_page_round_trip(db_path):
    with KVStore(db_path) as store:
        store.extend_file(2)
        store.root = 1
        store.flushed = 2
        store.update_master()
    assert db_path.read_bytes()[:16] == SIGNATURE
    with KVStore(db_path) as store:
        assert store.root == 1
        assert store.flushed == 2


def test_bad_signature(db_path):
    db_path.write_bytes(b"\0" * PAGE_SIZE)
    with pytest.raises(MasterPageError):
        KVStore(db_path).open()


def test_bad_used_count(db_path):
    db_path.write_bytes(struct.pack("<16sQQ", SIGNATURE, 0, 0).ljust(PAGE_SIZE, b"\0"))
    with pytest.raises(MasterPageError):
        KVStore(db_path).open()


def test_root_beyond_used(db_path):
    db_path.write_bytes(struct.pack("<16sQQ", SIGNATURE, 5, 1).ljust(PAGE_SIZE, b"\0"))
    with pytest.raises(MasterPageError):
        KVStore(db_path).open()


def test_file_smaller_than_page(db_path):
    db_path.write_bytes(SIGNATURE)
    with pytest.raises(MasterPageError):
        KVStore(db_path).open()


def test_closed_store_rejects_operations(db_path):
    store = KVStore(db_path)
    with pytest.raises(ValueError):
        store.extend_file(1)