"""Tests for connection validation."""

import pytest

from models import Connection
from validation import validate_connection, validate_connections


def _c(byte: str, bit: str, tree: str | None, year: int = 2020) -> Connection:
    return Connection(byte=byte, bit=bit, tree=tree, year=year)


class TestValidateConnection:
    def test_valid(self):
        validate_connection("Ann", "Bob", "T", 1900)

    @pytest.mark.parametrize(
        "byte, bit, tree, year",
        [
            ("", "Bob", "T", 2020),
            ("Ann", "  ", "T", 2020),
            ("Ann", "Bob", "", 2020),
            ("Ann", "Bob", "T", 1899),
            ("Ann", "Bob", "T", "2020"),
            ("Ann", "Bob", "T", True),
        ],
    )
    def test_invalid(self, byte, bit, tree, year):
        with pytest.raises(ValueError):
            validate_connection(byte, bit, tree, year)


class TestValidateConnections:
    def test_clean_data(self, chain_connections, renamed_connections):
        assert validate_connections(chain_connections) == []
        assert validate_connections(renamed_connections) == []

    def test_cycle_in_tree(self):
        warnings = validate_connections([_c("a", "b", "T"), _c("b", "a", "T")])
        assert any(w.startswith("Cycle detected in tree 'T'") for w in warnings)

    def test_self_connection(self):
        warnings = validate_connections([_c("a", "a", "T")])
        assert warnings == ["Impossible: a is their own bit in tree 'T'"]

    def test_conflicting_years(self):
        warnings = validate_connections([_c("a", "b", "T", 2019), _c("a", "b", "T", 2021)])
        assert warnings == [
            "Conflicting years for a -> b in tree 'T': keeping 2019, ignoring 2021"
        ]

    def test_bit_with_two_bytes(self):
        warnings = validate_connections([_c("a", "c", "T"), _c("b", "c", "T")])
        assert warnings == ["Suspicious: c has 2 bytes in tree 'T': ['a', 'b']"]

    def test_early_year(self):
        warnings = validate_connections([_c("a", "b", "T", 1850)])
        assert warnings == ["Suspicious: a -> b in tree 'T' has year 1850"]

    def test_rename_cycle(self):
        warnings = validate_connections([_c("ra", "rb", "A"), _c("rb", "ra", "B")])
        assert "Cycle detected in tree renames: ['A', 'B']" in warnings


def test_year_floor_can_be_skipped():
    validate_connection("Ann", "Bob", "T", 1850, check_min_year=False)
    with pytest.raises(ValueError):
        validate_connection("Ann", "Bob", "T", "1850", check_min_year=False)


class TestMergedBitYears:
    def test_conflict_across_renamed_trees(self):
        # Y became the root of Mid, so Old and Mid merge; Z is a bit in both
        connections = [
            _c("X", "Y", "Old", 2019),
            _c("X", "Z", "Old", 2018),
            _c("Y", "Z", "Mid", 2020),
        ]
        assert validate_connections(connections) == [
            "Conflicting years for Z across merged trees 'Old' and 'Mid': keeping 2018, ignoring 2020"
        ]

    def test_unrelated_trees_are_not_compared(self):
        connections = [_c("A", "P", "T1", 2020), _c("B", "P", "T2", 2021)]
        assert validate_connections(connections) == []
