"""SQLite database operations for connection storage."""

from dataclasses import replace
from pathlib import Path
import sqlite3
import uuid

from models import Connection
from validation import validate_connection


def create_database(db_path: Path) -> sqlite3.Connection:
    """Create SQLite database with the connection table."""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS connection (
            id TEXT PRIMARY KEY,
            byte TEXT NOT NULL,
            bit TEXT NOT NULL,
            tree TEXT NOT NULL,
            year INTEGER NOT NULL
        )
    """)

    conn.commit()
    return conn


def _new_id() -> str:
    return uuid.uuid4().hex


def _row_to_connection(row) -> Connection:
    return Connection(id=row[0], byte=row[1], bit=row[2], tree=row[3], year=row[4])


def load_connections(conn: sqlite3.Connection) -> list[Connection]:
    """Read every connection, in insertion order."""
    cursor = conn.cursor()
    cursor.execute("SELECT id, byte, bit, tree, year FROM connection ORDER BY rowid")
    return [_row_to_connection(row) for row in cursor.fetchall()]


def get_connection(conn: sqlite3.Connection, connection_id: str) -> Connection:
    cursor = conn.cursor()
    cursor.execute(
        "SELECT id, byte, bit, tree, year FROM connection WHERE id = ?", (connection_id,)
    )
    row = cursor.fetchone()
    if row is None:
        raise ValueError(f"Connection {connection_id} not found")
    return _row_to_connection(row)


def store_connections(
    conn: sqlite3.Connection, connections: list[Connection]
) -> list[Connection]:
    """
    Insert connections, assigning ids to those without one.

    Only the record shape is checked here, so imported history with early
    years is stored as is.
    """
    stored = []
    for c in connections:
        validate_connection(c.byte, c.bit, c.tree, c.year, check_min_year=False)
        stored.append(c if c.id else replace(c, id=_new_id()))

    cursor = conn.cursor()
    cursor.executemany(
        """
        INSERT OR REPLACE INTO connection (id, byte, bit, tree, year)
        VALUES (?, ?, ?, ?, ?)
        """,
        [(c.id, c.byte, c.bit, c.tree, c.year) for c in stored],
    )

    conn.commit()
    return stored


def add_connection(
    conn: sqlite3.Connection, byte: str, bit: str, tree: str, year: int
) -> Connection:
    validate_connection(byte, bit, tree, year)
    [stored] = store_connections(conn, [Connection(byte=byte, bit=bit, tree=tree, year=year)])
    return stored


def update_connection(
    conn: sqlite3.Connection,
    connection_id: str,
    *,
    byte: str | None = None,
    bit: str | None = None,
    tree: str | None = None,
    year: int | None = None,
) -> Connection:
    """Update the given fields of a connection and return the new record."""
    current = get_connection(conn, connection_id)
    updated = replace(
        current,
        byte=current.byte if byte is None else byte,
        bit=current.bit if bit is None else bit,
        tree=current.tree if tree is None else tree,
        year=current.year if year is None else year,
    )
    validate_connection(updated.byte, updated.bit, updated.tree, updated.year)

    cursor = conn.cursor()
    cursor.execute(
        "UPDATE connection SET byte = ?, bit = ?, tree = ?, year = ? WHERE id = ?",
        (updated.byte, updated.bit, updated.tree, updated.year, connection_id),
    )
    conn.commit()
    return updated


def delete_connection(conn: sqlite3.Connection, connection_id: str):
    cursor = conn.cursor()
    cursor.execute("DELETE FROM connection WHERE id = ?", (connection_id,))
    if cursor.rowcount == 0:
        raise ValueError(f"Connection {connection_id} not found")
    conn.commit()


def rename_person(conn: sqlite3.Connection, old_name: str, new_name: str) -> int:
    """Rename a person everywhere they appear as byte or bit. Returns rows changed."""
    if not new_name or not new_name.strip():
        raise ValueError("New name is required.")

    cursor = conn.cursor()
    cursor.execute("UPDATE connection SET byte = ? WHERE byte = ?", (new_name, old_name))
    changed = cursor.rowcount
    cursor.execute("UPDATE connection SET bit = ? WHERE bit = ?", (new_name, old_name))
    changed += cursor.rowcount

    if changed == 0:
        conn.rollback()
        raise ValueError(f"No person named '{old_name}' found")
    conn.commit()
    return changed


def remove_person(conn: sqlite3.Connection, name: str) -> int:
    """Delete every connection naming the person. Returns rows deleted."""
    cursor = conn.cursor()
    cursor.execute("DELETE FROM connection WHERE byte = ? OR bit = ?", (name, name))
    deleted = cursor.rowcount
    if deleted == 0:
        raise ValueError(f"No person named '{name}' found")
    conn.commit()
    return deleted


def clear_connections(conn: sqlite3.Connection) -> int:
    cursor = conn.cursor()
    cursor.execute("DELETE FROM connection")
    deleted = cursor.rowcount
    conn.commit()
    return deleted
