"""Small command that fills a B-tree with named records and prints it."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from pagekv.btree import BTree

DEMO_KEYS = (10, 80, 30, 90, 85, 40, 50, 60, 70, 95, 100)
DEMO_ORDER = 4


@dataclass
class Record:
    key: int
    name: str


def _build_tree(keys: Iterable[int], order: int) -> BTree[Record]:
    tree: BTree[Record] = BTree(order)
    tree.insert_many(Record(key, f"name{i}") for i, key in enumerate(keys))
    return tree


def build_demo_tree(keys: Iterable[int] = DEMO_KEYS) -> BTree[Record]:
    """Insert a record named ``name<i>`` for the i-th key into a new tree of order 4."""
    return _build_tree(keys, DEMO_ORDER)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="btree-demo", description="Build a B-tree of records and print it in key order."
    )
    parser.add_argument("keys", nargs="*", type=int, help="keys to insert (default: a fixed sample)")
    parser.add_argument("--order", type=int, default=DEMO_ORDER, help="order of the tree")
    args = parser.parse_args(argv)

    tree = _build_tree(args.keys or DEMO_KEYS, args.order)
    tree.traverse(lambda record: print(f"{record.key} {record.name}"))

    root = tree.root
    if len(root.children) > 1 and len(root.children[1].keys) > 1:
        element = root.children[1].keys[1]
        print(f" element key is {element.key}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())