"""Parts inventory ledger.

ARCHITECTURE:
- Single mapping part_id -> quantity, insertion ordered
- Entries are never removed; a part at zero stays listed
- Deduction is two-phase: validate every requested part, then commit
  * Each occurrence of a part in a request consumes qty_each units
  * Any shortage rejects the whole request and leaves every quantity untouched
- Check and commit run under one lock so concurrent callers cannot interleave
"""

import threading
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from utils.errors import ShortageError


@dataclass
class StockTransaction:
    """Record of a single committed ledger change."""

    part_id: str
    delta: int  # positive for additions, negative for deductions
    balance: int  # quantity after the change
    description: str = ""


class InventoryLedger:
    """Authoritative in-memory record of part quantities.

    Example:
        >>> ledger = InventoryLedger({"O-Ring": 5})
        >>> ledger.deduct_parts(["O-Ring", "O-Ring"])
        >>> ledger.quantity("O-Ring")
        3
    """

    def __init__(
        self,
        initial_stock: Optional[Dict[str, int]] = None,
        verbose: bool = False,
        history_limit: Optional[int] = None,
    ):
        """Initialize ledger.

        Args:
            initial_stock: Starting quantities (zero allowed, negative rejected)
            verbose: Print every committed change
            history_limit: Keep only the most recent transactions (None keeps
                every transaction for the life of the ledger)
        """
        if history_limit is not None:
            self._require_positive(history_limit, "history_limit")

        self.verbose = verbose
        self.history_limit = history_limit
        self._lock = threading.RLock()
        self._stock: Dict[str, int] = {}
        self.transactions: List[StockTransaction] = []

        for part_id, qty in (initial_stock or {}).items():
            if not isinstance(qty, int) or isinstance(qty, bool) or qty < 0:
                raise ValueError(f"Initial quantity for {part_id!r} must be a non-negative integer, got {qty!r}")
            self._stock[part_id] = qty

    @staticmethod
    def _require_positive(qty, name: str = "qty") -> None:
        if not isinstance(qty, int) or isinstance(qty, bool) or qty < 1:
            raise ValueError(f"{name} must be a positive integer, got {qty!r}")

    def _record(self, txn: StockTransaction) -> None:
        self.transactions.append(txn)
        if self.history_limit is not None and len(self.transactions) > self.history_limit:
            del self.transactions[: -self.history_limit]

    def add_stock(self, part_id: str, qty: int, description: str = "") -> int:
        """Increase a part's quantity, creating the entry if absent.

        Args:
            part_id: Part identifier
            qty: Units to add (positive integer)
            description: Optional note stored with the transaction

        Returns:
            New quantity for the part
        """
        self._require_positive(qty)

        with self._lock:
            balance = self._stock.get(part_id, 0) + qty
            self._stock[part_id] = balance
            self._record(StockTransaction(part_id, qty, balance, description))

        if self.verbose:
            print(f"📦 Added {qty} x {part_id} (now {balance})")

        return balance

    def has_available(self, part_id: str, qty: int = 1) -> bool:
        """Check whether at least qty units of a part are in stock.

        A missing part is simply unavailable.
        """
        self._require_positive(qty)
        with self._lock:
            return part_id in self._stock and self._stock[part_id] >= qty

    def quantity(self, part_id: str) -> int:
        """Current quantity (0 for unknown parts)."""
        with self._lock:
            return self._stock.get(part_id, 0)

    def _find_shortages(self, part_ids: Iterable[str], qty_each: int) -> Dict[str, Tuple[int, int]]:
        # Aggregate per part so repeated occurrences are checked against the total
        needed = Counter()
        for part_id in part_ids:
            needed[part_id] += qty_each

        shortages = {}
        for part_id, total in needed.items():
            available = self._stock.get(part_id, 0)
            if part_id not in self._stock or available < total:
                shortages[part_id] = (total, available)
        return shortages

    def missing_parts(self, part_ids: Iterable[str], qty_each: int = 1) -> List[str]:
        """Parts from the request that a deduction would find short.

        Returns:
            Part identifiers in request order, each listed once
        """
        self._require_positive(qty_each, "qty_each")
        with self._lock:
            return list(self._find_shortages(list(part_ids), qty_each))

    def deduct_parts(self, part_ids: Iterable[str], qty_each: int = 1, description: str = "") -> None:
        """Atomically deduct parts from stock.

        Every part is validated before any quantity changes. Each occurrence
        of a part in part_ids consumes qty_each units.

        Args:
            part_ids: Ordered part identifiers (duplicates allowed)
            qty_each: Units consumed per occurrence
            description: Optional note stored with each transaction

        Raises:
            ShortageError: If any part is missing or insufficient; the ledger
                is left unchanged
        """
        self._require_positive(qty_each, "qty_each")
        part_ids = list(part_ids)

        with self._lock:
            # Phase 1: validate
            shortages = self._find_shortages(part_ids, qty_each)
            if shortages:
                if self.verbose:
                    print(f"⚠️  Deduction rejected, short parts: {', '.join(shortages)}")
                raise ShortageError(shortages)

            # Phase 2: commit
            for part_id in part_ids:
                balance = self._stock[part_id] - qty_each
                self._stock[part_id] = balance
                self._record(StockTransaction(part_id, -qty_each, balance, description))

        if self.verbose and part_ids:
            print(f"🔧 Deducted {len(part_ids) * qty_each} unit(s) across {len(set(part_ids))} part(s)")

    def snapshot(self) -> List[Tuple[str, int]]:
        """Read-only enumeration of all entries, in insertion order."""
        with self._lock:
            return list(self._stock.items())

    def get_summary(self) -> Dict:
        """Get inventory summary for display.

        Returns:
            Dict with part counts, total units and out-of-stock parts
        """
        with self._lock:
            return {
                "part_count": len(self._stock),
                "total_units": sum(self._stock.values()),
                "out_of_stock": [part for part, qty in self._stock.items() if qty == 0],
                "transactions": len(self.transactions),
            }

    def __contains__(self, part_id: str) -> bool:
        with self._lock:
            return part_id in self._stock

    def __len__(self) -> int:
        with self._lock:
            return len(self._stock)

    def __repr__(self) -> str:
        """String representation."""
        summary = self.get_summary()
        return (
            f"InventoryLedger(parts={summary['part_count']}, "
            f"units={summary['total_units']}, "
            f"out_of_stock={len(summary['out_of_stock'])})"
        )
