"""Offline sync: last-write-wins reconciliation."""

from .engine import InvalidChange, ReconciliationEngine, parse_timestamp, server_wins

__all__ = ["InvalidChange", "ReconciliationEngine", "parse_timestamp", "server_wins"]
