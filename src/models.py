"""Data classes for bit/byte connection trees."""

from dataclasses import dataclass, field

NONE_TREE = "(None)"  # Sentinel label for connections without a tree
DEFAULT_TREE = "Default Tree"
DEFAULT_SAPLING_THRESHOLD = 4
MIN_YEAR = 1900


def normalize_tree_name(tree: str | None) -> str:
    """Return the tree label, or the sentinel when it is empty or missing."""
    return tree or NONE_TREE


@dataclass
class Connection:
    byte: str  # Mentor / parent
    bit: str  # Mentee / child
    tree: str | None
    year: int
    id: str | None = None

    @property
    def tree_name(self) -> str:
        return normalize_tree_name(self.tree)


@dataclass
class TreeNode:
    id: str
    name: str
    year: int | None = None
    root_of_tree_name: str | None = None  # Set on merge seams
    children: list["TreeNode"] = field(default_factory=list)


@dataclass
class SearchEntry:
    connection_id: str | None
    tree_name: str
    year: int | None
    other_person_name: str | None  # The byte, for bit entries
    is_root: bool


@dataclass
class SearchResult:
    id: str
    name: str
    tooltip: str = ""
    connections: list[SearchEntry] = field(default_factory=list)


@dataclass
class TreeClassification:
    main_trees: list[str]
    saplings: list[str]
    predecessor_trees: list[str]


@dataclass
class FamilyGroup:
    main_tree: str
    sub_trees: list[str]
    total_members: int
