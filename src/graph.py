"""NetworkX graph building and tree rename resolution."""

import networkx as nx

from models import NONE_TREE, Connection


def build_tree_graphs(connections: list[Connection]) -> dict[str, nx.DiGraph]:
    """
    Build one directed byte -> bit graph per tree label.

    Labels are sentinel-normalized and keep the order in which they first appear.
    Duplicate edges keep the attributes of the first connection seen, so the
    first year recorded for a pairing wins.
    """
    graphs: dict[str, nx.DiGraph] = {}
    for c in connections:
        G = graphs.setdefault(c.tree_name, nx.DiGraph(tree_name=c.tree_name))
        if not G.has_edge(c.byte, c.bit):
            G.add_edge(c.byte, c.bit, year=c.year, connection_id=c.id)
    return graphs


def get_root_bytes(G: nx.DiGraph) -> list[str]:
    """People who are a byte in the graph but never a bit, in discovery order."""
    # Nodes only enter through edges, so in-degree 0 means byte-only
    return [n for n in G.nodes if G.in_degree(n) == 0]


def get_all_people(connections: list[Connection]) -> list[str]:
    people: set[str] = set()
    for c in connections:
        people.add(c.byte)
        people.add(c.bit)
    return sorted(people)


def get_bytes(connections: list[Connection]) -> list[str]:
    return sorted({c.byte for c in connections})


def get_bits(connections: list[Connection]) -> list[str]:
    return sorted({c.bit for c in connections})


def find_bit_in_other_trees(
    connections: list[Connection], name: str, current_tree: str
) -> str | None:
    """Return the first tree other than `current_tree` where `name` is a bit."""
    for c in connections:
        if c.bit == name and c.tree_name != current_tree:
            return c.tree_name
    return None


def _rename_links(
    connections: list[Connection],
) -> tuple[dict[str, str], list[str]]:
    """Return (old -> new links, link endpoints in the order first seen)."""
    links: dict[str, str] = {}
    endpoints: dict[str, None] = {}

    first_bit_tree: dict[str, str] = {}
    for c in connections:
        first_bit_tree.setdefault(c.bit, c.tree_name)

    for tree_name, G in build_tree_graphs(connections).items():
        if tree_name == NONE_TREE:
            continue
        for root in get_root_bytes(G):
            # A root byte who was someone's bit elsewhere was promoted from that tree
            origin = first_bit_tree.get(root)
            if origin is None or origin == tree_name or origin == NONE_TREE:
                continue
            links[origin] = tree_name
            endpoints.setdefault(origin)
            endpoints.setdefault(tree_name)

    return links, list(endpoints)


def find_rename_links(connections: list[Connection]) -> dict[str, str]:
    """
    Find direct rename links between trees.

    A link `old -> new` is recorded when a root byte of `new` appears as a bit in
    `old`. When one old tree links to several new trees, the last link found wins.
    """
    links, _ = _rename_links(connections)
    return links


def find_tree_akas(connections: list[Connection]) -> dict[str, str]:
    """
    Map renamed tree labels to their canonical (most current) label.

    Each link endpoint is followed forward through the rename links until no
    further link exists. Labels that are already canonical are left out, so
    callers should default to the input label when it is absent.

    A cycle in the links stops the walk; every member of the cycle then resolves
    to the cycle member that was seen first as a link endpoint.

    Args:
        connections: Snapshot of all connections

    Returns:
        A dict of original tree label -> canonical tree label
    """
    links, endpoints = _rename_links(connections)
    first_seen = {name: i for i, name in enumerate(endpoints)}

    tree_akas: dict[str, str] = {}
    for name in endpoints:
        path = [name]
        seen = {name}
        current = name
        while current in links:
            nxt = links[current]
            if nxt in seen:
                cycle = path[path.index(nxt):]
                current = min(cycle, key=first_seen.__getitem__)
                break
            path.append(nxt)
            seen.add(nxt)
            current = nxt
        if current != name:
            tree_akas[name] = current

    return tree_akas


def find_rename_cycles(connections: list[Connection]) -> list[list[str]]:
    """Return every cycle in the rename links, each as a list of tree labels."""
    links = find_rename_links(connections)
    G = nx.DiGraph(list(links.items()))
    return [sorted(cycle) for cycle in nx.simple_cycles(G)]


def canonical_tree_name(tree_name: str, tree_akas: dict[str, str]) -> str:
    return tree_akas.get(tree_name, tree_name)
