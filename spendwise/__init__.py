"""
Spendwise - Expense Ledger Core

A personal ledger of expenses that survives round-trips through a
portable CSV format and reconciles with externally produced data.

DESIGN PRINCIPLES:
1. Core functions take collections and return new ones
2. Problems are reported as data, never thrown past the codec
3. Import decisions belong to the caller
4. Every applied change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Spendwise Team"
