"""
Expense Tracker - Source Package

Backend for recording user profiles and their dated, categorized
expenses, with a per-user lifetime total and monthly reports grouped
by category.

DESIGN PRINCIPLES:
1. Validate before touching storage
2. Expected failures are results, not exceptions
3. Every mutation is auditable
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
