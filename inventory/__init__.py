"""Parts inventory for aircraft maintenance."""

from .ledger import InventoryLedger, StockTransaction

__all__ = ["InventoryLedger", "StockTransaction"]
