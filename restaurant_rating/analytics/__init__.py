"""
Ledger statistics.

Responsibilities:
- Summarise restaurant and review counts.
- Average every rating dimension per restaurant.
- Report how many reviews have been verified.
"""
