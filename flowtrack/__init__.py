"""
FlowTrack - Source Package

The core of a personal finance tracker: income and expense transactions,
categories, period reports and exports over a small local key-value store.

DESIGN PRINCIPLES:
1. The store is the source of truth, re-read on every view
2. Money is Decimal from storage to display
3. Reports are pure functions of a transaction list
4. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "FlowTrack Team"
