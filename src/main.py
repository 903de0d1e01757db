"""
Command-line driver for the bit/byte tree viewer.

1) Import connections from CSV into SQLite, or edit them one at a time.
2) Resolve renamed trees into family groups.
3) Classify trees, report disconnected trees and data-quality warnings.
4) Build the merged forest for a tree and print or plot it.
5) Search people across every tree.
"""

import argparse
from dataclasses import asdict
import json
from pathlib import Path
import random
import sys

from database import (
    add_connection,
    clear_connections,
    create_database,
    delete_connection,
    load_connections,
    remove_person,
    rename_person,
    store_connections,
    update_connection,
)
from families import find_disconnected_trees, get_family_group, get_trees
from forest import build_tree, shuffle_tree
from graph import canonical_tree_name, find_bit_in_other_trees, find_tree_akas, get_all_people
from models import DEFAULT_SAPLING_THRESHOLD, TreeNode
from parsing import export_csv, import_csv
from plotting import plot_forest
from search import search_people
from validation import validate_connections

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_DB_PATH = PROJECT_ROOT / "connections.db"


# ============================================================================
# Output helpers
# ============================================================================


def node_to_dict(node: TreeNode, ancestors: frozenset[str] = frozenset()) -> dict:
    """Convert a node to a plain dict, cutting any cycle back to an ancestor."""
    ancestors = ancestors | {node.id}
    return {
        "id": node.id,
        "name": node.name,
        "year": node.year,
        "rootOfTreeName": node.root_of_tree_name,
        "children": [
            node_to_dict(child, ancestors) for child in node.children if child.id not in ancestors
        ],
    }


def format_forest(roots: list[TreeNode]) -> list[str]:
    """Render a forest as indented text lines."""
    lines: list[str] = []

    def visit(node: TreeNode, depth: int, ancestors: frozenset[str]):
        label = node.name
        if node.year is not None:
            label += f" ({node.year})"
        if node.root_of_tree_name:
            label += f" [root of {node.root_of_tree_name}]"
        lines.append("  " * depth + label)
        for child in node.children:
            if child.id not in ancestors:
                visit(child, depth + 1, ancestors | {child.id})

    for root in roots:
        visit(root, 0, frozenset({root.id}))
    return lines


def print_list(title: str, items: list[str]):
    print(f"{title} ({len(items)}):")
    for item in items:
        print(f"  - {item}")


# ============================================================================
# Commands
# ============================================================================


def cmd_import(conn, args):
    print(f"Importing CSV file: {args.csv_path}")
    connections = import_csv(args.csv_path)
    stored = store_connections(conn, connections)
    print(f"  Stored {len(stored)} connections")


def cmd_export(conn, args):
    connections = load_connections(conn)
    export_csv(connections, args.csv_path)
    print(f"Exported {len(connections)} connections to {args.csv_path}")


def cmd_trees(conn, args):
    connections = load_connections(conn)
    result = get_trees(connections, args.sapling_threshold, admin=args.admin)
    print_list("Main trees", result.main_trees)
    if not args.admin:
        print_list("Saplings", result.saplings)
        print_list("Predecessor trees", result.predecessor_trees)


def cmd_akas(conn, args):
    tree_akas = find_tree_akas(load_connections(conn))
    if not tree_akas:
        print("No renamed trees found")
    for old_name, new_name in sorted(tree_akas.items()):
        print(f"  {old_name} -> {new_name}")


def cmd_disconnected(conn, args):
    disconnected = find_disconnected_trees(load_connections(conn))
    if disconnected:
        print_list("Disconnected trees (multiple roots)", disconnected)
    else:
        print("No disconnected trees found")


def cmd_family(conn, args):
    group = get_family_group(load_connections(conn), args.tree)
    print(f"Main tree: {group.main_tree}")
    print_list("Sub trees", group.sub_trees)
    print(f"Total members: {group.total_members}")


def cmd_show(conn, args):
    connections = load_connections(conn)
    tree_akas = find_tree_akas(connections)

    canonical = canonical_tree_name(args.tree, tree_akas)
    if canonical != args.tree:
        print(f"'{args.tree}' has been renamed; showing '{canonical}'")

    group = get_family_group(connections, canonical, tree_akas)
    roots = build_tree(connections, [group.main_tree, *group.sub_trees])
    if args.shuffle:
        roots = shuffle_tree(roots, random.Random(args.seed))

    if args.json:
        print(json.dumps([node_to_dict(root) for root in roots], indent=2))
    else:
        for line in format_forest(roots):
            print(line)

    if args.plot:
        plot_forest(roots, args.plot, title=f"{canonical} Tree")


def cmd_search(conn, args):
    results = search_people(load_connections(conn), args.query)
    if args.json:
        print(json.dumps([asdict(r) for r in results], indent=2))
        return
    if not results:
        print(f"No people matching '{args.query}'")
    for result in results:
        print(result.tooltip)
        print()


def cmd_people(conn, args):
    print_list("People", get_all_people(load_connections(conn)))


def cmd_validate(conn, args):
    warnings = validate_connections(load_connections(conn))
    if warnings:
        print(f"Found {len(warnings)} validation warnings:")
        for w in warnings:
            print(f"  - {w}")
    else:
        print("No validation issues found")


def cmd_add(conn, args):
    other_tree = find_bit_in_other_trees(load_connections(conn), args.byte, args.tree)
    if other_tree:
        print(
            f"Warning: '{args.byte}' already exists as a Bit in the '{other_tree}' tree; "
            f"'{args.tree}' will be linked to it as a renamed tree"
        )
    c = add_connection(conn, args.byte, args.bit, args.tree, args.year)
    print(f"Added connection {c.id}: {c.byte} -> {c.bit} ({c.tree}, {c.year})")


def cmd_update(conn, args):
    c = update_connection(
        conn, args.id, byte=args.byte, bit=args.bit, tree=args.tree, year=args.year
    )
    print(f"Updated connection {c.id}: {c.byte} -> {c.bit} ({c.tree}, {c.year})")


def cmd_delete(conn, args):
    delete_connection(conn, args.id)
    print(f"Deleted connection {args.id}")


def cmd_rename_person(conn, args):
    changed = rename_person(conn, args.old_name, args.new_name)
    print(f"Renamed '{args.old_name}' to '{args.new_name}' in {changed} places")


def cmd_remove_person(conn, args):
    deleted = remove_person(conn, args.name)
    print(f"Removed '{args.name}' and {deleted} connections")


def cmd_clear(conn, args):
    deleted = clear_connections(conn)
    print(f"Deleted {deleted} connections")


# ============================================================================
# Main
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bit/byte tree viewer")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH, help="SQLite database path")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("import", help="Import connections from a CSV file")
    p.add_argument("csv_path", type=Path)
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("export", help="Export connections to a CSV file")
    p.add_argument("csv_path", type=Path)
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("trees", help="List main trees, saplings and predecessors")
    p.add_argument("--admin", action="store_true", help="List raw tree labels")
    p.add_argument("--sapling-threshold", type=int, default=DEFAULT_SAPLING_THRESHOLD)
    p.set_defaults(func=cmd_trees)

    p = sub.add_parser("akas", help="List renamed trees")
    p.set_defaults(func=cmd_akas)

    p = sub.add_parser("disconnected", help="List trees with more than one root")
    p.set_defaults(func=cmd_disconnected)

    p = sub.add_parser("family", help="Show the family group of a tree")
    p.add_argument("tree")
    p.set_defaults(func=cmd_family)

    p = sub.add_parser("show", help="Print or plot the merged forest of a tree")
    p.add_argument("tree")
    p.add_argument("--json", action="store_true")
    p.add_argument("--shuffle", action="store_true", help="Randomize sibling order")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--plot", type=Path, default=None, help="Write a png/svg/pdf/dot chart")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("search", help="Search people by name")
    p.add_argument("query")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("people", help="List everyone")
    p.set_defaults(func=cmd_people)

    p = sub.add_parser("validate", help="Report data-quality warnings")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("add", help="Add a connection")
    p.add_argument("byte")
    p.add_argument("bit")
    p.add_argument("tree")
    p.add_argument("year", type=int)
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("update", help="Update a connection")
    p.add_argument("id")
    p.add_argument("--byte")
    p.add_argument("--bit")
    p.add_argument("--tree")
    p.add_argument("--year", type=int)
    p.set_defaults(func=cmd_update)

    p = sub.add_parser("delete", help="Delete a connection")
    p.add_argument("id")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("rename-person", help="Rename a person everywhere")
    p.add_argument("old_name")
    p.add_argument("new_name")
    p.set_defaults(func=cmd_rename_person)

    p = sub.add_parser("remove-person", help="Remove a person and their connections")
    p.add_argument("name")
    p.set_defaults(func=cmd_remove_person)

    p = sub.add_parser("clear", help="Delete every connection")
    p.set_defaults(func=cmd_clear)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    conn = create_database(args.db)
    try:
        args.func(conn, args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
