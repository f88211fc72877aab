# pagekv

`pagekv` holds the building blocks of a small page-based key-value store:

- `pagekv.btree`: an in-memory B-tree of order *m*. It holds any objects that
  have an orderable `key` attribute and stays balanced on insert and on erase.
- `pagekv.btree_demo`: the `Record` dataclass (`key`, `name`),
  `build_demo_tree()` and the `pagekv-btree-demo` command.
- `pagekv.store`: `KVStore`, the file layer of the store. It opens a database
  file, maps it into memory in growing chunks, reads and writes the master
  page and keeps track of pages waiting to be written.
- `pagekv.mmap_tools`: helpers and commands that create, read and update a
  file through a memory map.

It has no dependencies outside the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The B-tree

```python
from pagekv.btree import BTree
from pagekv.btree_demo import Record

tree = BTree(4)            # order must be at least 3, else ValueError
tree.insert(Record(10, "name0"))
tree.insert_many([Record(80, "name1"), Record(30, "name2")])

tree.search(30)            # the stored element, or None
tree[30]                   # the stored element, or KeyError
30 in tree                 # True
tree.erase(30)             # True if an element was removed, False if none had the key

for element in tree:       # elements in ascending key order
    print(element.key, element.name)
```

`tree.traverse(visitor)` calls `visitor` on every element in key order, and
`tree.clear()` drops every element and leaves an empty tree. A node splits
when it reaches `m` elements; `tree.root` is the root `Node`, whose `keys`
and `children` lists can be inspected.

### Demo command

```
pagekv-btree-demo [KEY ...] [--order N]
```

It inserts a `Record` named `name<i>` for the i-th key (a fixed sample of keys
when none are given) into a tree of order 4, or `N`, and prints each record as
`<key> <name>` in key order. When the root's second child holds at least two
elements, it also prints the key of that child's second element.

## The store file

```python
from pagekv.store import KVStore, MasterPageError

with KVStore("data.db") as db:      # opens or creates the file
    print(db.root, db.flushed)
    page_no = db.allocate_page(b"page bytes")
    db.extend_file(db.flushed + len(db.temp))
    db.update_master()
```

The first page of the file (pages are 4096 bytes) is the master page: a
16-byte signature, the page number of the tree root and the number of pages
in use, both as little-endian 64-bit integers.

- `open()` (or entering the `with` block) opens the file, maps the pages it
  already has and calls `load_master()`. For an empty file it only sets
  `flushed` to 1, keeping page 0 for the master page.
- `load_master()` raises `MasterPageError` when the signature is wrong or the
  recorded numbers do not fit the file.
- `update_master()` writes the master page with one positional write.
- `allocate_page(data)` queues a page of at most 4096 bytes in `temp` and
  returns its page number; `deallocate_page(data)` removes a queued page and
  raises `ValueError` if it is not queued.
- `extend_file(npages)` grows the file to hold at least `npages` pages, in
  steps of an eighth of its current page count.
- `extend_mmap(npages)` maps further parts of the file so that `npages` pages
  are mapped.
- `close()` (or leaving the `with` block) unmaps everything and closes the file.

Methods that touch the file raise `ValueError` when the store is not open.

### What the store does not do

`KVStore` is only the page and file layer. Queued pages stay in memory: it
never writes them into the file, the B-tree in `KVStore.tree` is not stored in
pages, and there is no API to put, get or delete keys in the file.

## Memory-map commands

```
pagekv-mmap-create <file-name> <message>
pagekv-mmap-read <file-name> <message>
pagekv-mmap-update <file-name> <message>
```

- `pagekv-mmap-create` creates (or truncates) the file, makes it one byte
  longer than the message with a newline as the last byte, writes the message
  into it through a memory map and prints the file name and size.
- `pagekv-mmap-read` prints the file name and size and the file's first
  character. The message argument is required but not used.
- `pagekv-mmap-update` prints the file name and size, writes the message over
  the start of the file through a memory map, and prints the first character
  before and after the update.

Each command prints a usage line and exits with status 1 when it is not given
exactly two arguments. From Python the same work is done by
`create_file(path, message)` (returns the file size),
`read_first_char(path)` and `update_file(path, message)` (returns the first
character before and after) in `pagekv.mmap_tools`; the last two raise
`ValueError` for an empty file, and `update_file` also when the message is
longer than the file.