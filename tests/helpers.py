"""Shared fixtures for the test suite."""
import sqlite3

SCHEMA = """
CREATE TABLE transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    ingame_name TEXT,
    item_type TEXT,
    item_name TEXT,
    transaction_type TEXT,
    price INTEGER,
    quantity INTEGER,
    created_at TEXT
)
"""

# no declared types, so sqlite stores values exactly as given
UNTYPED_SCHEMA = """
CREATE TABLE transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    ingame_name, item_type, item_name, transaction_type,
    price, quantity, created_at
)
"""


def make_db(path, rows=(), schema=SCHEMA):
    """Create a QuantFrame-like database at `path` holding `rows`.

    Each row is (ingame_name, item_type, item_name, transaction_type,
    price, quantity, created_at).
    """
    conn = sqlite3.connect(str(path))
    with conn:
        conn.execute(schema)
        conn.executemany(
            """
            INSERT INTO transactions
                (ingame_name, item_type, item_name, transaction_type, price, quantity, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            list(rows),
        )
    conn.close()
    return path
