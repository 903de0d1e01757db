"""Build merged bit/byte forests for display."""

import copy
import random
from collections.abc import Iterator

from models import NONE_TREE, Connection, TreeNode


def _create_nodes(connections: list[Connection]) -> dict[str, TreeNode]:
    """Create one node per person, in the order people are discovered."""
    nodes: dict[str, TreeNode] = {}
    for c in connections:
        if c.byte not in nodes:
            nodes[c.byte] = TreeNode(id=c.byte, name=c.byte)
        if c.bit not in nodes:
            nodes[c.bit] = TreeNode(id=c.bit, name=c.bit, year=c.year)
        elif nodes[c.bit].year is None:
            # First appearance as a bit sets the year; later duplicates are ignored
            nodes[c.bit].year = c.year
    return nodes


def _attach_children(connections: list[Connection], nodes: dict[str, TreeNode]):
    for c in connections:
        if c.byte == c.bit:
            continue
        parent = nodes[c.byte]
        child = nodes[c.bit]
        if not any(existing.id == child.id for existing in parent.children):
            parent.children.append(child)


def _find_roots(connections: list[Connection], nodes: dict[str, TreeNode]) -> list[TreeNode]:
    bits = {c.bit for c in connections}
    return [node for node in nodes.values() if node.name not in bits]


def build_single_tree(connections: list[Connection], tree_name: str) -> list[TreeNode]:
    """Build the forest for a single tree label, with no cross-tree merging."""
    relevant = [c for c in connections if c.tree_name == tree_name]
    nodes = _create_nodes(relevant)
    _attach_children(relevant, nodes)
    return _find_roots(relevant, nodes)


def build_tree(connections: list[Connection], tree_names: str | list[str]) -> list[TreeNode]:
    """
    Build a forest from one or more tree labels.

    Several labels (the members of a family group) are merged into a single
    forest: each person gets one node, and a byte who has no byte of their own
    within one member tree is marked with `root_of_tree_name` for that tree,
    which shows where the member trees were joined.

    When the sentinel label is requested, every label is built on its own
    instead and the forests are concatenated. A person present in two of those
    labels then gets one node per label: node ids are unique within each
    label's forest, not across the whole result.

    Args:
        connections: Snapshot of all connections
        tree_names: Raw tree label or list of labels to merge

    Returns:
        The root nodes, in the order their people were first discovered
    """
    if isinstance(tree_names, str):
        tree_names = [tree_names]
    tree_names = list(dict.fromkeys(tree_names))

    if not tree_names:
        return []
    if NONE_TREE in tree_names:
        roots: list[TreeNode] = []
        for tree_name in tree_names:
            roots.extend(build_single_tree(connections, tree_name))
        return roots
    if len(tree_names) == 1:
        return build_single_tree(connections, tree_names[0])

    wanted = set(tree_names)
    relevant = [c for c in connections if c.tree_name in wanted]
    nodes = _create_nodes(relevant)
    _attach_children(relevant, nodes)

    # Mark merge seams: bytes who are roots within their own member tree
    for tree_name in tree_names:
        own = [c for c in relevant if c.tree_name == tree_name]
        own_bits = {c.bit for c in own}
        for c in own:
            node = nodes[c.byte]
            if c.byte not in own_bits and node.root_of_tree_name is None:
                node.root_of_tree_name = tree_name

    return _find_roots(relevant, nodes)


def iter_nodes(roots: list[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node reachable from `roots` once, depth first."""
    seen: set[int] = set()
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node
        stack.extend(reversed(node.children))


def shuffle_tree(roots: list[TreeNode], rng: random.Random | None = None) -> list[TreeNode]:
    """Return a deep copy of the forest with siblings shuffled at every level."""
    rng = rng or random.Random()
    shuffled = copy.deepcopy(roots)
    rng.shuffle(shuffled)
    for node in iter_nodes(shuffled):
        rng.shuffle(node.children)
    return shuffled
