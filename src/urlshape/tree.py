"""
Path tree: a scratch trie over segment keys.

It only lives for the duration of a single optimization pass,
nodes are exclusively owned by their parents and get mutated destructively.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .common import InvariantViolationError
from .pattern import Pattern
from .segment import Segment


@dataclass(eq=False)
class TreeNode:
    segment: Segment
    children: dict[str, TreeNode] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return self.segment.key

    def child(self, segment: Segment) -> TreeNode:
        """
        Returns the child for the segment, creating it if necessary.
        """
        node = self.children.get(segment.key)
        if node is None:
            node = TreeNode(segment)
            self.children[segment.key] = node
        return node


def build_tree(patterns: Iterable[Pattern]) -> TreeNode:
    root = TreeNode(Segment.static(''))
    for p in patterns:
        node = root
        for segment in p.segments:
            node = node.child(segment)
    return root


def merge_tree(node1: TreeNode, node2: TreeNode) -> TreeNode:
    '''
    Union of two trees with the same root key.

    Both inputs are consumed: their children are moved into the result and they are left empty.
    '''
    if node1.key != node2.key:
        raise InvariantViolationError(f"trees with different root keys can't be merged: {node1.key!r} vs {node2.key!r}")
    node = TreeNode(node1.segment, dict(node1.children))
    node1.children.clear()
    for k, v in node2.children.items():
        existing = node.children.get(k)
        node.children[k] = v if existing is None else merge_tree(existing, v)
    node2.children.clear()
    return node


def iter_leaf_patterns(root: TreeNode) -> Iterable[Pattern]:
    # explicit stack, so deep trees don't hit the recursion limit
    stack: list[tuple[TreeNode, tuple[Segment, ...]]] = [(root, ())]
    while len(stack) > 0:
        node, segments = stack.pop()
        if len(node.children) == 0:
            yield Pattern(segments)
            continue
        # reversed to emit leaves in insertion order
        for child in reversed(node.children.values()):
            stack.append((child, (*segments, child.segment)))


def extract_dynamic_patterns(root: TreeNode) -> list[Pattern]:
    return [p for p in iter_leaf_patterns(root) if p.is_dynamic]
