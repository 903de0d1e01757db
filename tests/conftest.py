"""Pytest fixtures shared across the test modules."""

import pytest

from database import create_database
from models import Connection


@pytest.fixture
def db(tmp_path):
    """Fresh SQLite connection store."""
    conn = create_database(tmp_path / "connections.db")
    yield conn
    conn.close()


@pytest.fixture
def chain_connections():
    """Ann -> Bob -> Cid in a single tree."""
    return [
        Connection(id="1", byte="Ann", bit="Bob", tree="T1", year=2020),
        Connection(id="2", byte="Bob", bit="Cid", tree="T1", year=2021),
    ]


@pytest.fixture
def renamed_connections():
    """Y was picked up in 'Old' and became the root byte of 'New'."""
    return [
        Connection(id="1", byte="X", bit="Y", tree="Old", year=2019),
        Connection(id="2", byte="Y", bit="Z", tree="New", year=2021),
    ]
