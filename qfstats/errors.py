"""Exception classes for qfstats."""


class QFStatsError(Exception):
    """Base exception for qfstats."""
    pass


class StoreUnavailableError(QFStatsError):
    """The transaction database could not be opened."""
    pass


class StoreReadError(QFStatsError):
    """Reading transactions failed after the database was opened."""
    pass


class MalformedTransactionError(QFStatsError):
    """A stored row could not be converted into a Transaction."""

    def __init__(self, row_id, column: str, value) -> None:
        self.row_id = row_id
        self.column = column
        self.value = value
        super().__init__(
            f"transaction {row_id}: invalid {column} value {value!r}"
        )
