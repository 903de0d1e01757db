"""Free-text person search across all trees."""

from models import Connection, SearchEntry, SearchResult


def generate_tooltip(result: SearchResult) -> str:
    lines = []
    for entry in result.connections:
        if entry.is_root:
            lines.append(f"{entry.tree_name} (Root)")
        else:
            lines.append(f"{entry.tree_name} ({entry.year} - {entry.other_person_name}'s Bit)")
    return f"{result.name}\nTree(s):\n" + "\n".join(lines)


def search_people(connections: list[Connection], query: str) -> list[SearchResult]:
    """
    Find people whose name contains `query`, ignoring case.

    Each result lists every connection where the person is a bit, plus one root
    entry per tree where they are a byte but never a bit. A tree that already has
    an entry for the person is not listed again as a root.
    """
    if not query:
        return []

    needle = query.lower()
    as_bit: dict[str, list[Connection]] = {}
    as_byte: dict[str, list[Connection]] = {}
    for c in connections:
        as_bit.setdefault(c.bit, []).append(c)
        as_byte.setdefault(c.byte, []).append(c)

    names = dict.fromkeys(name for c in connections for name in (c.bit, c.byte))

    results: list[SearchResult] = []
    for name in names:
        if needle not in name.lower():
            continue

        result = SearchResult(id=name, name=name)
        for c in as_bit.get(name, []):
            result.connections.append(
                SearchEntry(
                    connection_id=c.id,
                    tree_name=c.tree_name,
                    year=c.year,
                    other_person_name=c.byte,
                    is_root=False,
                )
            )

        listed = {entry.tree_name for entry in result.connections}
        for c in as_byte.get(name, []):
            if c.tree_name in listed:
                continue
            listed.add(c.tree_name)
            result.connections.append(
                SearchEntry(
                    connection_id=c.id,
                    tree_name=c.tree_name,
                    year=None,
                    other_person_name=None,
                    is_root=True,
                )
            )

        if not result.connections:
            continue
        result.tooltip = generate_tooltip(result)
        results.append(result)

    results.sort(key=lambda r: (r.name.casefold(), r.name))
    return results
