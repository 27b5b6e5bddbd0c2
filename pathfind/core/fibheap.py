# pathfind/core/fibheap.py
#!/usr/bin/env python3
"""
Fibonacci heap with decrease-key and lazy consolidation.

Used as the priority queue behind Dijkstra. Two things differ from the
textbook version:

- A node's ``degree`` is the number of nodes in its subtree (itself
  included), not its number of children. Every add/remove of a child updates
  the degree of the parent *and every ancestor above it*.
- Consolidation links roots whose subtree sizes are equal, so after
  ``extract_min`` all root degrees are distinct.

Items are ``PriorityItem`` objects. The heap writes the holding node back
into ``item.node`` so decrease-key needs no search.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class HeapEmptyError(IndexError):
    """extract_min() on an empty heap."""


class InvalidKeyError(ValueError):
    """decrease_key() with a key that is not strictly smaller."""


@dataclass(eq=False)
class PriorityItem:
    key: float
    value: Any = None
    node: Optional["Node"] = field(default=None, repr=False)


class Node:
    def __init__(self, item: PriorityItem):
        self.key = item.key
        self.item = item
        item.node = self
        self.children: List["Node"] = []
        self.parent: Optional["Node"] = None
        self.marked = False
        self.degree = 1  # subtree size

    @property
    def num_children(self) -> int:
        return len(self.children)

    def add_child(self, child: "Node") -> None:
        self.children.append(child)
        child.parent = self
        child.marked = False
        node: Optional[Node] = self
        while node is not None:
            node.degree += child.degree
            node = node.parent

    def remove_child(self, child: "Node") -> None:
        self.children.remove(child)
        child.parent = None
        node: Optional[Node] = self
        while node is not None:
            node.degree -= child.degree
            node = node.parent

    def walk(self) -> Iterator["Node"]:
        yield self
        for c in self.children:
            yield from c.walk()

    def dump(self, depth: int = 0) -> List[str]:
        lines = ["    " * depth + f"({self.key}, {self.item.value!r}) deg={self.degree}"
                 + (" *" if self.marked else "")]
        for c in self.children:
            lines.extend(c.dump(depth + 1))
        return lines

    def __repr__(self) -> str:
        return f"Node(key={self.key}, degree={self.degree}, children={self.num_children})"


class FibonacciHeap:
    def __init__(self):
        self.roots: List[Node] = []
        self.min_root: Optional[Node] = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self.min_root is not None

    def is_empty(self) -> bool:
        return self.min_root is None

    def peek_min(self) -> Optional[PriorityItem]:
        return None if self.min_root is None else self.min_root.item

    def min_key(self) -> Optional[float]:
        return None if self.min_root is None else self.min_root.key

    # -------------------- insert / merge --------------------

    def insert(self, item: PriorityItem) -> Node:
        node = Node(item)
        self._add_root(node)
        self._size += 1
        return node

    def merge(self, other: "FibonacciHeap") -> None:
        """Move every root of ``other`` into this heap; ``other`` is left empty."""
        if other is self or other.min_root is None:
            return
        self.roots.extend(other.roots)
        if self.min_root is None or other.min_root.key < self.min_root.key:
            self.min_root = other.min_root
        self._size += other._size
        other.roots = []
        other.min_root = None
        other._size = 0

    def _add_root(self, node: Node) -> None:
        node.parent = None
        node.marked = False
        self.roots.append(node)
        if self.min_root is None or node.key < self.min_root.key:
            self.min_root = node

    # -------------------- decrease-key --------------------

    def decrease_key(self, item: PriorityItem, new_key: float) -> None:
        node = item.node
        if node is None:
            raise LookupError(f"{item!r} is not in the heap")
        if not new_key < node.key:
            raise InvalidKeyError(f"New key {new_key} is not smaller than current key {node.key}")
        node.key = new_key
        item.key = new_key

        parent = node.parent
        if parent is None:
            if new_key < self.min_root.key:
                self.min_root = node
            return
        if node.key >= parent.key:
            return

        self._cut(node, parent)

        # cascading cut
        node = parent
        while node.parent is not None:
            if not node.marked:
                node.marked = True
                return
            parent = node.parent
            self._cut(node, parent)
            node = parent

    def _cut(self, node: Node, parent: Node) -> None:
        parent.remove_child(node)
        self._add_root(node)

    # -------------------- extract-min --------------------

    def extract_min(self) -> PriorityItem:
        z = self.min_root
        if z is None:
            raise HeapEmptyError("extract_min from an empty heap")
        self.roots.remove(z)
        for child in z.children:
            child.parent = None
            child.marked = False
            self.roots.append(child)
        z.children = []
        self._size -= 1

        if self.roots:
            self._consolidate()
            self.min_root = min(self.roots, key=lambda n: n.key)
        else:
            self.min_root = None

        item = z.item
        item.node = None
        return item

    def _consolidate(self) -> None:
        before = len(self.roots)
        by_degree: Dict[int, Node] = {}
        for root in list(self.roots):
            x = root
            while x.degree in by_degree:
                y = by_degree.pop(x.degree)
                if y.key < x.key:
                    x, y = y, x
                x.add_child(y)
            by_degree[x.degree] = x
        self.roots = [n for n in self.roots if n.parent is None]
        logger.debug("consolidated %d roots into %d", before, len(self.roots))

    # -------------------- inspection --------------------

    def iter_nodes(self) -> Iterator[Node]:
        for root in self.roots:
            yield from root.walk()

    def __str__(self) -> str:
        lines: List[str] = []
        for root in self.roots:
            lines.extend(root.dump())
        return "\n".join(lines)
