"""
analytics.py
-------------

This module groups transactions by a key (user or item name) and computes
profit, revenue and volume statistics for every group. It works on plain
lists of Transaction objects and has no knowledge of the database or the
web layer, so the same functions serve the HTTP endpoints and the tests.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from .models import PURCHASE, SALE, GroupStats, Number, Transaction

KeyFunc = Callable[[Transaction], str]
Predicate = Callable[[Transaction], bool]


@dataclass
class _Accumulator:
    revenue: Number = 0
    expense: Number = 0
    purchases: int = 0
    sales: int = 0
    trades: int = 0

    def add(self, tx: Transaction) -> None:
        self.trades += 1
        if tx.transaction_type == SALE:
            self.revenue += tx.price
            self.sales += tx.quantity
        elif tx.transaction_type == PURCHASE:
            self.expense += tx.price
            self.purchases += tx.quantity

    def finish(self, key: str) -> GroupStats:
        profit = self.revenue - self.expense
        # zero revenue gives a margin of 0, not NaN
        profit_margin = profit / self.revenue if self.revenue != 0 else 0.0
        return GroupStats(
            key=key,
            revenue=self.revenue,
            expense=self.expense,
            profit=profit,
            profit_margin=profit_margin,
            number_of_trades=self.trades,
            purchases=self.purchases,
            sales=self.sales,
        )


def aggregate(
    records: Iterable[Transaction],
    key_of: KeyFunc,
    include: Optional[Predicate] = None,
) -> List[GroupStats]:
    """Group transactions and compute statistics per group.

    Parameters
    ----------
    records: Iterable[Transaction]
        Transactions to aggregate. They are only read.
    key_of: Callable[[Transaction], str]
        Returns the group key of a transaction.
    include: Optional[Callable[[Transaction], bool]]
        Records for which this returns False are skipped before grouping.
        Defaults to accepting every record.

    Returns
    -------
    List[GroupStats]
        One entry per group, sorted by profit descending. Groups with equal
        profit are ordered by key ascending.
    """
    groups: Dict[str, _Accumulator] = {}
    for tx in records:
        if include is not None and not include(tx):
            continue
        key = key_of(tx)
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = _Accumulator()
        acc.add(tx)

    result = [acc.finish(key) for key, acc in groups.items()]
    result.sort(key=lambda s: (-s.profit, s.key))
    return result


def user_statistics(records: Iterable[Transaction]) -> List[GroupStats]:
    """Statistics per user; records without a user go to 'Unknown'."""
    return aggregate(records, key_of=lambda tx: tx.actor)


def riven_statistics(records: Iterable[Transaction]) -> List[GroupStats]:
    """Statistics per riven name, using riven transactions only."""
    return aggregate(
        records,
        key_of=lambda tx: tx.item_name,
        include=lambda tx: tx.is_riven,
    )
