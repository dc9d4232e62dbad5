"""
Retail Kernel - order lifecycle and inventory consistency engine

A transactional back-office core with:
- Bundle-aware order pricing and stock reservation
- Reversible status transitions (stock and loyalty points)
- Atomic points transfers between customers
- Row-level locking for shared stock and points balances
"""

__version__ = "0.1.0"
