"""In-memory B-tree of order ``m`` holding elements that expose a ``key``."""

from __future__ import annotations

import math
from bisect import bisect_left
from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, Protocol, TypeVar


class Keyed(Protocol):
    key: Any


T = TypeVar("T", bound=Keyed)

_key = attrgetter("key")


class DeleteResult(Enum):
    """Outcome of deleting a key from a subtree."""

    DELETED = 0
    NOT_FOUND = -1
    UNDERFLOW = 1


class Node(Generic[T]):
    """A B-tree node: sorted elements plus, for inner nodes, one more child."""

    def __init__(self, m: int, leaf: bool = True) -> None:
        self.m = m
        self.divisor = math.ceil(m / 2) - 1
        self.min_keys = math.ceil(m / 2) - 1
        self.is_leaf = leaf
        self.keys: list[T] = []
        self.children: list[Node[T]] = []

    def __repr__(self) -> str:
        return f"Node(keys={[e.key for e in self.keys]!r}, leaf={self.is_leaf})"

    def split(self) -> tuple[T, Node[T]]:
        """Split around the divisor; return the promoted element and the new right node."""
        d = self.divisor
        right: Node[T] = Node(self.m, self.is_leaf)
        promoted = self.keys[d]
        right.keys = self.keys[d + 1:]
        self.keys = self.keys[:d]
        if not self.is_leaf:
            right.children = self.children[d + 1:]
            self.children = self.children[:d + 1]
        return promoted, right

    def insert_element(self, element: T) -> Optional[tuple[T, Node[T]]]:
        """Insert into this subtree; return ``(promoted, right)`` if this node split."""
        i = bisect_left(self.keys, element.key, key=_key)
        if self.is_leaf:
            self.keys.insert(i, element)
        else:
            promoted = self.children[i].insert_element(element)
            if promoted is None:
                return None
            up, right = promoted
            self.keys.insert(i, up)
            self.children.insert(i + 1, right)
        if len(self.keys) == self.m:
            return self.split()
        return None

    def search(self, key: Any) -> Optional[T]:
        """Return the element stored under ``key`` in this subtree, or None."""
        i = bisect_left(self.keys, key, key=_key)
        if i < len(self.keys) and self.keys[i].key == key:
            return self.keys[i]
        if self.is_leaf:
            return None
        return self.children[i].search(key)

    def traverse(self) -> Iterator[T]:
        """Yield the elements of this subtree in key order."""
        if self.is_leaf:
            yield from self.keys
            return
        for child, element in zip(self.children, self.keys):
            yield from child.traverse()
            yield element
        yield from self.children[-1].traverse()

    def clear(self) -> None:
        """Drop every element and child of this subtree."""
        for child in self.children:
            child.clear()
        self.children = []
        self.keys = []

    def predecessor(self, idx: int) -> T:
        """Return the largest element in the subtree ``children[idx]``."""
        node = self.children[idx]
        while not node.is_leaf:
            node = node.children[-1]
        return node.keys[-1]

    def successor(self, idx: int) -> T:
        """Return the smallest element in the subtree ``children[idx]``."""
        node = self.children[idx]
        while not node.is_leaf:
            node = node.children[0]
        return node.keys[0]

    def merge_children(self, left_idx: int) -> None:
        """Merge ``children[left_idx + 1]`` and the separator into ``children[left_idx]``."""
        left = self.children[left_idx]
        right = self.children.pop(left_idx + 1)
        separator = self.keys.pop(left_idx)
        left.keys.append(separator)
        left.keys.extend(right.keys)
        left.children.extend(right.children)

    def borrow(self, base: int, to_left: bool) -> None:
        """Rotate one element into ``children[base]`` from its left or right sibling."""
        child = self.children[base]
        if to_left:
            sibling = self.children[base - 1]
            child.keys.insert(0, self.keys[base - 1])
            self.keys[base - 1] = sibling.keys.pop()
            if not child.is_leaf:
                child.children.insert(0, sibling.children.pop())
        else:
            sibling = self.children[base + 1]
            child.keys.append(self.keys[base])
            self.keys[base] = sibling.keys.pop(0)
            if not child.is_leaf:
                child.children.append(sibling.children.pop(0))

    def _status(self) -> DeleteResult:
        return DeleteResult.DELETED if len(self.keys) >= self.min_keys else DeleteResult.UNDERFLOW

    def _rebalance(self, i: int, result: DeleteResult) -> DeleteResult:
        if result is not DeleteResult.UNDERFLOW:
            return result
        child = self.children[i]
        has_left = i > 0
        has_right = i < len(self.children) - 1
        if has_left and len(self.children[i - 1].keys) > child.min_keys:
            self.borrow(i, True)
        elif has_right and len(self.children[i + 1].keys) > child.min_keys:
            self.borrow(i, False)
        elif has_left:
            self.merge_children(i - 1)
        else:
            self.merge_children(i)
        return self._status()

    def delete_key(self, key: Any) -> DeleteResult:
        """Delete one element with ``key`` from this subtree.

        Returns UNDERFLOW when this node is left with fewer than ``min_keys``
        elements, so that the parent can rebalance it.
        """
        i = bisect_left(self.keys, key, key=_key)
        found = i < len(self.keys) and self.keys[i].key == key

        if not found:
            if self.is_leaf:
                return DeleteResult.NOT_FOUND
            result = self.children[i].delete_key(key)
            if result is DeleteResult.NOT_FOUND:
                return result
            return self._rebalance(i, result)

        if self.is_leaf:
            del self.keys[i]
            return self._status()

        left, right = self.children[i], self.children[i + 1]
        if len(left.keys) > left.min_keys:
            replacement = self.predecessor(i)
            self.keys[i] = replacement
            return self._rebalance(i, left.delete_key(replacement.key))
        if len(right.keys) > right.min_keys:
            replacement = self.successor(i + 1)
            self.keys[i] = replacement
            return self._rebalance(i + 1, right.delete_key(replacement.key))
        self.merge_children(i)
        return self._rebalance(i, self.children[i].delete_key(key))


class BTree(Generic[T]):
    """A B-tree of order ``m``: a node overflows and splits when it reaches ``m`` elements."""

    def __init__(self, m: int) -> None:
        if m < 3:
            raise ValueError("B-tree order must be at least 3")
        self.m = m
        self.root: Node[T] = Node(m, True)

    def insert(self, element: T) -> None:
        """Insert one element; the tree grows a new root when the old one splits."""
        promoted = self.root.insert_element(element)
        if promoted is None:
            return
        up, right = promoted
        new_root: Node[T] = Node(self.m, False)
        new_root.keys = [up]
        new_root.children = [self.root, right]
        self.root = new_root

    def insert_many(self, elements: Iterable[T]) -> None:
        """Insert every element of ``elements`` in order."""
        for element in elements:
            self.insert(element)

    def search(self, key: Any) -> Optional[T]:
        """Return the element stored under ``key``, or None."""
        return self.root.search(key)

    def __getitem__(self, key: Any) -> T:
        element = self.root.search(key)
        if element is None:
            raise KeyError(key)
        return element

    def __contains__(self, key: Any) -> bool:
        return self.root.search(key) is not None

    def __iter__(self) -> Iterator[T]:
        return self.root.traverse()

    def traverse(self, visitor: Callable[[T], Any]) -> None:
        """Call ``visitor`` on every element in key order."""
        for element in self.root.traverse():
            visitor(element)

    def erase(self, key: Any) -> bool:
        """Remove one element with ``key``; return False if there was none."""
        if self.root.delete_key(key) is DeleteResult.NOT_FOUND:
            return False
        if not self.root.keys and not self.root.is_leaf:
            self.root = self.root.children[0]
        return True

    def clear(self) -> None:
        """Remove every element, leaving an empty tree."""
        self.root.clear()
        self.root = Node(self.m, True)