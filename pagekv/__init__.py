"""An in-memory B-tree and the file layer of a page-based key-value store on memory maps."""

__version__ = "0.1.0"

__all__ = ["btree", "btree_demo", "store", "mmap_tools"]