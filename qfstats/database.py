"""
database.py
-----------

This module wraps the QuantFrame SQLite database. The service never
writes to it: the file is opened read-only once at startup and every
request reads the full `transactions` table through the same connection.

The table is expected to have at least the columns
    id, ingame_name, item_type, item_name, transaction_type,
    price, quantity, created_at
Rows that cannot be converted into a Transaction raise an error instead
of being silently coerced.
"""

import logging
import math
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from .errors import MalformedTransactionError, StoreReadError, StoreUnavailableError
from .models import Number, Transaction

logger = logging.getLogger(__name__)

SELECT_TRANSACTIONS = """
    SELECT id, ingame_name, item_type, item_name, transaction_type,
           price, quantity, created_at
    FROM transactions
"""


class TransactionStore:
    """Read-only SQLite source of transactions."""

    def __init__(self, db_path: Union[str, Path]) -> None:
        self.db_path = str(db_path)
        uri = f"{Path(self.db_path).resolve().as_uri()}?mode=ro"
        try:
            self.conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"{self.db_path}: {e}") from e
        self.conn.row_factory = sqlite3.Row
        try:
            # sqlite opens lazily; touch the schema so a bad file fails now
            self.conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
        except sqlite3.Error as e:
            self.conn.close()
            raise StoreUnavailableError(f"{self.db_path}: {e}") from e

    # ---------- transactions ----------
    def list_transactions(self) -> List[Transaction]:
        """Return every stored transaction."""
        try:
            rows = self.conn.execute(SELECT_TRANSACTIONS).fetchall()
        except sqlite3.Error as e:
            raise StoreReadError(f"failed to read transactions: {e}") from e
        logger.debug("Fetched %d transactions", len(rows))
        return [self._row_to_transaction(r) for r in rows]

    def _row_to_transaction(self, row: sqlite3.Row) -> Transaction:
        """Convert DB row -> Transaction."""
        row_id = row["id"]
        return Transaction(
            id=row_id,
            ingame_name=_to_text(row_id, "ingame_name", row["ingame_name"], nullable=True),
            item_type=_to_text(row_id, "item_type", row["item_type"]),
            item_name=_to_text(row_id, "item_name", row["item_name"], allow_empty=False),
            transaction_type=_to_text(row_id, "transaction_type", row["transaction_type"]),
            price=_to_number(row_id, "price", row["price"]),
            quantity=_to_int(row_id, "quantity", row["quantity"]),
            created_at=_parse_dt(row_id, row["created_at"]),
        )

    # ---------- housekeeping ----------
    def close(self) -> None:
        self.conn.close()


# -------------------------
# small parse helpers
# -------------------------
def _to_text(
    row_id: Any, column: str, value: Any, nullable: bool = False, allow_empty: bool = True
) -> Optional[str]:
    if value is None and nullable:
        return None
    if not isinstance(value, str) or (not allow_empty and not value.strip()):
        raise MalformedTransactionError(row_id, column, value)
    return value


def _to_number(row_id: Any, column: str, value: Any) -> Number:
    """Parse a non-negative, finite amount; NULL counts as 0."""
    if value is None:
        return 0
    number: Optional[Number] = None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                pass
    if number is None or (isinstance(number, float) and not math.isfinite(number)) or number < 0:
        raise MalformedTransactionError(row_id, column, value)
    return number


def _to_int(row_id: Any, column: str, value: Any) -> int:
    number = _to_number(row_id, column, value)
    if isinstance(number, float):
        if not number.is_integer():
            raise MalformedTransactionError(row_id, column, value)
        return int(number)
    return number


def _normalize_epoch(ts: Number) -> float:
    """Accept seconds or milliseconds; return seconds."""
    return ts / 1000 if ts >= 10_000_000_000 else ts


def _from_epoch(ts: Number) -> datetime:
    return datetime.fromtimestamp(_normalize_epoch(ts), tz=timezone.utc)


def _parse_dt(row_id: Any, value: Any) -> Optional[datetime]:
    """Parse created_at into a UTC datetime; text without an offset is taken as UTC."""
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return _from_epoch(value)
        except (ValueError, OverflowError, OSError) as e:
            raise MalformedTransactionError(row_id, "created_at", value) from e
    if isinstance(value, str) and value.strip():
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        # epoch values arrive as text when the column has TEXT affinity
        try:
            epoch = float(s)
        except ValueError:
            epoch = None
        if epoch is not None:
            try:
                return _from_epoch(epoch)
            except (ValueError, OverflowError, OSError) as e:
                raise MalformedTransactionError(row_id, "created_at", value) from e
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            dt = None
        if dt is not None:
            if dt.tzinfo is None:
                return dt.replace(tzinfo=timezone.utc)
            return dt.astimezone(timezone.utc)
    raise MalformedTransactionError(row_id, "created_at", value)
