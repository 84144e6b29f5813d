"""
CashFlow - Ledger Core Package

The per-user financial ledger behind the CashFlow personal finance
tracker: income, categorized expenses, subscriptions, and the
month/year summaries exported as CSV or printable HTML.

DESIGN PRINCIPLES:
1. The caller passes the user explicitly - no ambient session state
2. Every mutation is a whole-document read-modify-write
3. Absence is a default value, never an exception
4. Invalid input is rejected before anything is written
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "CashFlow Team"
