"""Tree classification, disconnection checks and family group resolution."""

import networkx as nx

from graph import build_tree_graphs, canonical_tree_name, find_tree_akas, get_root_bytes
from models import (
    DEFAULT_SAPLING_THRESHOLD,
    NONE_TREE,
    Connection,
    FamilyGroup,
    TreeClassification,
)


def group_trees(
    graphs: dict[str, nx.DiGraph], tree_akas: dict[str, str]
) -> dict[str, list[str]]:
    """Group raw tree labels by canonical name, keeping first-seen order."""
    groups: dict[str, list[str]] = {}
    for tree_name in graphs:
        if tree_name == NONE_TREE:
            continue
        groups.setdefault(canonical_tree_name(tree_name, tree_akas), []).append(tree_name)
    return groups


def count_people(graphs: dict[str, nx.DiGraph], tree_names: list[str]) -> int:
    """Count distinct people (bits and bytes) across the given trees."""
    people: set[str] = set()
    for tree_name in tree_names:
        if tree_name in graphs:
            people.update(graphs[tree_name].nodes)
    return len(people)


def _classify_admin(graphs: dict[str, nx.DiGraph]) -> TreeClassification:
    return TreeClassification(
        main_trees=sorted(t for t in graphs if t != NONE_TREE),
        saplings=[],
        predecessor_trees=[],
    )


def _classify_groups(
    graphs: dict[str, nx.DiGraph], tree_akas: dict[str, str], sapling_threshold: int
) -> TreeClassification:
    main_trees: set[str] = set()
    saplings: set[str] = set()
    predecessors: set[str] = set()

    for canonical, members in group_trees(graphs, tree_akas).items():
        if len(members) == 1 and count_people(graphs, members) <= sapling_threshold:
            saplings.add(canonical)
            continue
        main_trees.add(canonical)
        predecessors.update(m for m in members if m != canonical)

    return TreeClassification(
        main_trees=sorted(main_trees),
        saplings=sorted(saplings),
        predecessor_trees=sorted(predecessors),
    )


def get_trees(
    connections: list[Connection],
    sapling_threshold: int = DEFAULT_SAPLING_THRESHOLD,
    tree_akas: dict[str, str] | None = None,
    admin: bool = False,
) -> TreeClassification:
    """
    Classify trees as main trees, saplings or predecessor names.

    In admin mode every raw label is returned as a main tree, with no renaming
    or sapling detection applied.

    Otherwise raw labels are grouped by canonical name. A group made of a single
    label with at most `sapling_threshold` people is a sapling; any other group
    is a main tree and its non-canonical labels are predecessors.
    """
    graphs = build_tree_graphs(connections)
    if admin:
        return _classify_admin(graphs)
    if tree_akas is None:
        tree_akas = find_tree_akas(connections)
    return _classify_groups(graphs, tree_akas, sapling_threshold)


def find_disconnected_trees(
    connections: list[Connection], tree_akas: dict[str, str] | None = None
) -> list[str]:
    """
    Find canonical trees with more than one true root.

    A true root is a byte with no byte of their own inside the merged family
    group who also never appears as a bit anywhere in the connection set. Roots
    that were promoted from a merged predecessor tree are therefore not counted.
    """
    if tree_akas is None:
        tree_akas = find_tree_akas(connections)

    graphs = build_tree_graphs(connections)
    all_bits = {c.bit for c in connections}

    disconnected: list[str] = []
    for canonical, members in group_trees(graphs, tree_akas).items():
        merged = nx.compose_all([graphs[m] for m in members])
        true_roots = [r for r in get_root_bytes(merged) if r not in all_bits]
        if len(true_roots) > 1:
            disconnected.append(canonical)

    return sorted(disconnected)


def get_family_group(
    connections: list[Connection], tree_name: str, tree_akas: dict[str, str] | None = None
) -> FamilyGroup:
    """
    Resolve the family group of a tree and pick its representative member.

    Args:
        connections: Snapshot of all connections
        tree_name: Any raw label of the family, current or superseded
        tree_akas: Canonical name map (computed when not given)

    Returns:
        FamilyGroup whose main tree is the member with the most people (ties go
        to the canonical name, then first-seen order), with the remaining
        members sorted alphabetically as sub trees.
    """
    if tree_akas is None:
        tree_akas = find_tree_akas(connections)

    graphs = build_tree_graphs(connections)
    canonical = canonical_tree_name(tree_name, tree_akas)

    members = [canonical]
    for label in graphs:
        if label != canonical and canonical_tree_name(label, tree_akas) == canonical:
            members.append(label)

    sizes = {m: count_people(graphs, [m]) for m in members}
    ranked = sorted(members, key=lambda m: sizes[m], reverse=True)

    return FamilyGroup(
        main_tree=ranked[0],
        sub_trees=sorted(ranked[1:]),
        total_members=count_people(graphs, members),
    )
