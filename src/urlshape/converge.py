"""
Convergence optimizer: collapses over-wide subtrees of the path tree into dynamic nodes.

Say a node has more than `threshold` children. If, some layers below, more than `threshold`
descendants share the same segment, the layers in between are most likely parameters:

    /users/1/posts       /users/:param/posts
    /users/2/posts  -->
    /users/3/posts

If nothing ever converges, the subtree is irregular and gets dropped altogether
(it can only come back via feature based extraction).
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from .common import logger
from .segment import Segment
from .tree import TreeNode, merge_tree


# segment key -> nodes with that key, all on the same layer
Convergent = Dict[str, List[TreeNode]]


def check_threshold(threshold: int) -> int:
    if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 1:
        raise ValueError(f'threshold should be a positive integer, got {threshold!r}')
    return threshold


def optimize_tree(root: TreeNode, threshold: int) -> None:
    check_threshold(threshold)
    stack = [root]
    while len(stack) > 0:
        node = stack.pop()
        if len(node.children) > threshold:
            convergent, layers = find_convergent_nodes(node, threshold)
            logger.debug(
                'collapsing %d children of %r: %d layer(s), convergent: %s',
                len(node.children), node.key, layers, list(convergent),
            )
            clean_static_nodes(node, convergent, layers)
            add_dynamic_nodes(node, convergent, layers)
            # the node might still be too wide
            stack.append(node)
        else:
            stack.extend(node.children.values())


def find_convergent_nodes(start: TreeNode, threshold: int) -> Tuple[Convergent, int]:
    '''
    Walks down layer by layer, until some segment is shared by more than `threshold` nodes of the layer.

    Returns the convergent nodes and the number of layers above them (relative to start) which are to become dynamic.
    '''
    layers = 1
    last_layer = list(start.children.values())
    while True:
        next_layer: list[TreeNode] = []
        by_key: Convergent = {}
        for item in last_layer:
            for child in item.children.values():
                by_key.setdefault(child.key, []).append(child)
                next_layer.append(child)

        convergent = {k: v for k, v in by_key.items() if len(v) > threshold}
        if len(convergent) > 0 or len(next_layer) == 0:
            return convergent, layers
        last_layer = next_layer
        layers += 1


def clean_static_nodes(start: TreeNode, convergent: Convergent, layers: int) -> None:
    '''
    Removes the chains of nodes between start and the convergent nodes.
    Ancestors left without children are pruned too, sibling branches are left intact.
    '''
    if len(convergent) == 0:
        start.children.clear()
        return

    depth = layers + 1
    chains: list[list[TreeNode]] = []
    stack: list[list[TreeNode]] = [[start]]
    while len(stack) > 0:
        path = stack.pop()
        node = path[-1]
        if len(path) == depth + 1:
            if node.key in convergent:
                chains.append(path)
            continue
        for child in node.children.values():
            stack.append([*path, child])

    for chain in chains:
        for i in range(len(chain) - 2, -1, -1):
            cur = chain[i]
            cur.children.pop(chain[i + 1].key, None)
            if len(cur.children) > 0:
                break


def add_dynamic_nodes(start: TreeNode, convergent: Convergent, layers: int) -> None:
    node = start
    for _ in range(layers):
        node = node.child(Segment.dynamic())
    for k, nodes in convergent.items():
        merged = node.children.get(k)
        for n in nodes:
            merged = n if merged is None else merge_tree(merged, n)
        assert merged is not None
        node.children[k] = merged
