"""Tests for forest building and layout shuffling."""

import random

from forest import build_single_tree, build_tree, iter_nodes, shuffle_tree
from models import NONE_TREE, Connection, TreeNode


def _c(byte: str, bit: str, tree: str | None, year: int = 2020) -> Connection:
    return Connection(byte=byte, bit=bit, tree=tree, year=year)


def _names(nodes: list[TreeNode]) -> list[str]:
    return [n.name for n in nodes]


def _assert_forest_invariants(roots: list[TreeNode], connections: list[Connection]):
    nodes = list(iter_nodes(roots))
    ids = [n.id for n in nodes]
    assert len(ids) == len(set(ids))

    bits = {c.bit for c in connections}
    root_ids = {r.id for r in roots}
    for node in nodes:
        if node.id in root_ids:
            assert node.name not in bits
        else:
            assert node.name in bits


class TestBuildSingleTree:
    def test_chain(self, chain_connections):
        roots = build_tree(chain_connections, "T1")
        assert len(roots) == 1

        ann = roots[0]
        assert (ann.name, ann.year, ann.root_of_tree_name) == ("Ann", None, None)
        [bob] = ann.children
        assert (bob.name, bob.year) == ("Bob", 2020)
        [cid] = bob.children
        assert (cid.name, cid.year, cid.children) == ("Cid", 2021, [])

    def test_duplicate_edges_first_year_wins(self):
        connections = [_c("a", "b", "T", 2019), _c("a", "b", "T", 2023)]
        [root] = build_single_tree(connections, "T")
        assert len(root.children) == 1
        assert root.children[0].year == 2019

    def test_year_set_when_byte_seen_first(self):
        connections = [_c("b", "c", "T", 2022), _c("a", "b", "T", 2021)]
        roots = build_single_tree(connections, "T")
        assert _names(roots) == ["a"]
        assert roots[0].children[0].year == 2021

    def test_roots_in_discovery_order(self):
        connections = [_c("zed", "x", "T"), _c("amy", "y", "T")]
        assert _names(build_single_tree(connections, "T")) == ["zed", "amy"]

    def test_other_trees_ignored(self, chain_connections):
        connections = chain_connections + [_c("Cid", "Dee", "T2")]
        roots = build_tree(connections, ["T1"])
        assert [n.name for n in iter_nodes(roots)] == ["Ann", "Bob", "Cid"]

    def test_unknown_tree(self, chain_connections):
        assert build_tree(chain_connections, "Nope") == []
        assert build_tree(chain_connections, []) == []


class TestMergedBuild:
    def test_merge_joins_renamed_trees(self, renamed_connections):
        roots = build_tree(renamed_connections, ["New", "Old"])
        assert _names(roots) == ["X"]

        x = roots[0]
        [y] = x.children
        [z] = y.children
        assert (y.name, y.year, y.root_of_tree_name) == ("Y", 2019, "New")
        assert (z.name, z.year) == ("Z", 2021)
        assert x.root_of_tree_name == "Old"
        _assert_forest_invariants(roots, renamed_connections)

    def test_single_label_has_no_seams(self, renamed_connections):
        [y] = build_tree(renamed_connections, ["New"])
        assert y.root_of_tree_name is None

    def test_each_person_once(self):
        connections = [
            _c("a", "b", "T1"), _c("b", "c", "T1"),
            _c("b", "d", "T2"), _c("a", "b", "T2"),
        ]
        roots = build_tree(connections, ["T1", "T2"])
        assert _names(roots) == ["a"]
        assert _names(roots[0].children) == ["b"]
        assert _names(roots[0].children[0].children) == ["c", "d"]
        _assert_forest_invariants(roots, connections)

    def test_sentinel_builds_trees_separately(self):
        connections = [_c("a", "b", ""), _c("b", "c", "T")]
        roots = build_tree(connections, [NONE_TREE, "T"])
        assert _names(roots) == ["a", "b"]
        assert roots[0].children[0] is not roots[1]

        # Ids are unique per label's forest; "b" appears once in each
        assert [n.id for n in iter_nodes(roots[:1])] == ["a", "b"]
        assert [n.id for n in iter_nodes(roots[1:])] == ["b", "c"]

        merged = build_tree(connections, ["T", "Other"])
        assert _names(merged) == ["b"]


class TestIterNodes:
    def test_cycle_terminates(self):
        connections = [_c("c", "a", "T"), _c("a", "b", "T"), _c("b", "a", "T")]
        roots = build_single_tree(connections, "T")
        assert _names(roots) == ["c"]
        assert [n.name for n in iter_nodes(roots)] == ["c", "a", "b"]


class TestShuffleTree:
    def _forest(self) -> list[TreeNode]:
        connections = [_c("r", f"k{i}", "T") for i in range(8)] + [_c("s", "t", "T")]
        return build_single_tree(connections, "T")

    def test_original_untouched(self):
        roots = self._forest()
        before = [n.name for n in iter_nodes(roots)]
        shuffled = shuffle_tree(roots, random.Random(1))
        assert [n.name for n in iter_nodes(roots)] == before
        assert sorted(n.name for n in iter_nodes(shuffled)) == sorted(before)
        assert all(a is not b for a, b in zip(iter_nodes(roots), iter_nodes(shuffled)))

    def test_seeded_shuffle_is_repeatable(self):
        roots = self._forest()
        first = shuffle_tree(roots, random.Random(7))
        second = shuffle_tree(roots, random.Random(7))
        assert [n.name for n in iter_nodes(first)] == [n.name for n in iter_nodes(second)]
