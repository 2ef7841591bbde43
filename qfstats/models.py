"""
models.py
---------

Defines the data model shared by the database layer and the analytics
code: a single stored transaction, and the aggregate statistics computed
for one group of transactions (a user or a riven).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

Number = Union[int, float]

SALE = "sale"
PURCHASE = "purchase"
RIVEN = "riven"
UNKNOWN_ACTOR = "Unknown"


@dataclass(frozen=True)
class Transaction:
    """Represents a single trade recorded by QuantFrame.

    Attributes
    ----------
    id: Any
        Database primary key. Not used by the statistics.
    ingame_name: Optional[str]
        Name of the user the trade was made with. May be missing.
    item_type: str
        Item category, e.g. 'riven' or 'item'.
    item_name: str
        Human readable item name.
    transaction_type: str
        'sale' or 'purchase'. Other values are kept but only count as
        a trade in the statistics.
    price: Number
        Platinum value of the transaction.
    quantity: int
        Number of units traded.
    created_at: Optional[datetime]
        When the trade happened.
    """

    id: Any
    ingame_name: Optional[str]
    item_type: str
    item_name: str
    transaction_type: str
    price: Number = 0
    quantity: int = 0
    created_at: Optional[datetime] = None

    @property
    def actor(self) -> str:
        """User name, or 'Unknown' when the record has none."""
        return self.ingame_name or UNKNOWN_ACTOR

    @property
    def is_riven(self) -> bool:
        return self.item_type == RIVEN


@dataclass
class GroupStats:
    """Aggregate outcome for one grouping key."""

    key: str
    revenue: Number = 0
    expense: Number = 0
    profit: Number = 0
    profit_margin: float = 0.0
    number_of_trades: int = 0
    purchases: int = 0
    sales: int = 0

    def to_dict(self, key_field: str = "key") -> Dict[str, Any]:
        """JSON shape used by the HTTP endpoints, key stored under `key_field`."""
        return {
            key_field: self.key,
            "profit": self.profit,
            "revenue": self.revenue,
            "expense": self.expense,
            "number_of_trades": self.number_of_trades,
            "purchases": self.purchases,
            "sales": self.sales,
            "profit_margin": self.profit_margin,
        }
