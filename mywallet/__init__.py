"""
My Wallet - Source Package

A personal finance tracker: balance, category spending, savings vaults
and a scripted assistant that answers questions about the user's own data.

DESIGN PRINCIPLES:
1. One explicitly owned state container, never ambient globals
2. Memory is authoritative, persistence follows every mutation
3. No silent corrections (overspending is allowed, not hidden)
4. The assistant reads a snapshot, it never mutates state
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "My Wallet Team"
