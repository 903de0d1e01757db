"""Data-quality validation for bit/byte connections."""

import networkx as nx

from graph import canonical_tree_name, find_rename_cycles, find_tree_akas
from models import MIN_YEAR, NONE_TREE, Connection


def validate_connection(byte: str, bit: str, tree: str, year: int, check_min_year: bool = True):
    """
    Raise ValueError if a connection record is not fit to be stored.

    Bulk imports pass `check_min_year=False`: early years are kept and reported
    by `validate_connections` instead.
    """
    if not byte or not byte.strip():
        raise ValueError("Byte is required.")
    if not bit or not bit.strip():
        raise ValueError("Bit is required.")
    if not tree or not tree.strip():
        raise ValueError("Tree is required.")
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValueError(f"Year must be an integer, got {year!r}")
    if check_min_year and year < MIN_YEAR:
        raise ValueError(f"Year must be after {MIN_YEAR}.")


def validate_connections(connections: list[Connection]) -> list[str]:
    """
    Validate a connection snapshot for:
    - Cycles in byte/bit relationships within a tree
    - People listed as their own bit
    - Duplicate connections with conflicting years
    - Bits with more than one byte in the same tree
    - Bits picked up in different years by trees of one renamed family
    - Years before the earliest allowed year
    - Cycles in tree rename chains

    Returns a list of warning messages.
    """
    warnings: list[str] = []

    trees: dict[str, list[Connection]] = {}
    for c in connections:
        trees.setdefault(c.tree_name, []).append(c)

    for tree_name, tree_connections in trees.items():
        edges = [(c.byte, c.bit) for c in tree_connections if c.byte != c.bit]
        tree_graph = nx.DiGraph(edges)

        try:
            cycle = nx.find_cycle(tree_graph, orientation="original")
            cycle_nodes = [edge[0] for edge in cycle]
            warnings.append(f"Cycle detected in tree '{tree_name}': {cycle_nodes}")
        except nx.NetworkXNoCycle:
            pass

        years: dict[tuple[str, str], int] = {}
        bytes_of: dict[str, list[str]] = {}
        for c in tree_connections:
            if c.byte == c.bit:
                warnings.append(f"Impossible: {c.bit} is their own bit in tree '{tree_name}'")

            first_year = years.setdefault((c.byte, c.bit), c.year)
            if first_year != c.year:
                warnings.append(
                    f"Conflicting years for {c.byte} -> {c.bit} in tree '{tree_name}': "
                    f"keeping {first_year}, ignoring {c.year}"
                )

            byte_list = bytes_of.setdefault(c.bit, [])
            if c.byte not in byte_list:
                byte_list.append(c.byte)

        for bit, byte_list in bytes_of.items():
            if len(byte_list) > 1:
                warnings.append(
                    f"Suspicious: {bit} has {len(byte_list)} bytes in tree '{tree_name}': "
                    f"{byte_list}"
                )

    for c in connections:
        if c.year < MIN_YEAR:
            warnings.append(
                f"Suspicious: {c.byte} -> {c.bit} in tree '{c.tree_name}' has year {c.year}"
            )

    # Merged forests keep the first bit-year across all trees of a family
    tree_akas = find_tree_akas(connections)
    first_bit_year: dict[tuple[str, str], Connection] = {}
    for c in connections:
        if c.tree_name == NONE_TREE:
            continue
        family = canonical_tree_name(c.tree_name, tree_akas)
        first = first_bit_year.setdefault((family, c.bit), c)
        if first.tree_name != c.tree_name and first.year != c.year:
            warnings.append(
                f"Conflicting years for {c.bit} across merged trees "
                f"'{first.tree_name}' and '{c.tree_name}': "
                f"keeping {first.year}, ignoring {c.year}"
            )

    for cycle in find_rename_cycles(connections):
        warnings.append(f"Cycle detected in tree renames: {cycle}")

    return warnings
