"""CSV import and export for connection records."""

import csv
from datetime import date
import io
from pathlib import Path
import re

from models import DEFAULT_TREE, Connection

REQUIRED_COLUMNS = ("byte_name", "bit_name")
EXPORT_COLUMNS = ("byte", "bit", "treeName", "year")


def parse_year(year_str: str | None, default: int | None = None) -> int:
    """
    Parse the leading integer of a year column.

    Blank values fall back to `default` (the current year when not given).
    Values like "2021" or " 2021 (fall)" parse to 2021.
    """
    s = (year_str or "").strip()
    if not s:
        return default if default is not None else date.today().year

    match = re.match(r"^[+-]?\d+", s)
    if not match:
        raise ValueError(f"No year found in: {year_str}")
    return int(match.group(0))


def read_connections_csv(text: str) -> list[Connection]:
    """
    Parse CSV text with `byte_name`, `bit_name`, `tree` and `year` columns.

    - A blank tree becomes "Default Tree"
    - A blank year becomes the current year
    - Rows missing a byte or bit are dropped
    """
    reader = csv.DictReader(io.StringIO(text))
    fields = reader.fieldnames or []
    missing = [col for col in REQUIRED_COLUMNS if col not in fields]
    if missing:
        raise ValueError(f'CSV must have "byte_name" and "bit_name" columns (missing {missing})')

    current_year = date.today().year
    connections: list[Connection] = []
    # Row 1 is the header
    for row_number, row in enumerate(reader, start=2):
        byte = (row.get("byte_name") or "").strip()
        bit = (row.get("bit_name") or "").strip()
        if not byte or not bit:
            continue

        try:
            year = parse_year(row.get("year"), default=current_year)
        except ValueError as e:
            raise ValueError(f"Row {row_number}: {e}") from e

        connections.append(
            Connection(
                byte=byte,
                bit=bit,
                tree=(row.get("tree") or "").strip() or DEFAULT_TREE,
                year=year,
            )
        )

    return connections


def import_csv(filepath: Path) -> list[Connection]:
    """Read connections from a CSV file."""
    return read_connections_csv(Path(filepath).read_text(encoding="utf-8-sig"))


def write_connections_csv(connections: list[Connection]) -> str:
    """
    Serialize connections as CSV with `byte`, `bit`, `treeName` and `year` columns.

    The export column names (`byte`, `bit`, `treeName`) differ from the import
    column names (`byte_name`, `bit_name`, `tree`); exported files need their
    header rewritten before they can be imported again.
    """
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for c in connections:
        writer.writerow([c.byte, c.bit, c.tree or "", c.year])
    return out.getvalue()


def export_csv(connections: list[Connection], filepath: Path):
    """Write connections to a CSV file."""
    Path(filepath).write_text(write_connections_csv(connections), encoding="utf-8")
