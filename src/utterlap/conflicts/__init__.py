"""Conflict detection and remediation tracking.

This package scans other dialogs for utterances that match the active
dialog's keywords, records remediation decisions in the resolution
ledger, and aggregates both into per-dialog resolution states.
"""

from utterlap.conflicts.aggregator import ConflictAggregator, display_state
from utterlap.conflicts.ledger import ResolutionLedger
from utterlap.conflicts.scanner import ConflictScanner

__all__ = [
    "ConflictAggregator",
    "ConflictScanner",
    "ResolutionLedger",
    "display_state",
]
