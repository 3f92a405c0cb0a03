"""StoreLedger: purchase order lifecycle, stock ledger and moving-average costing."""

__version__ = "1.0.0"
