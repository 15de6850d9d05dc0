"""
Restaurant rating ledger.

Responsibilities:
- Register restaurants and record multi-dimensional reviews against them.
- Enforce ownership, duplicate-review and rating-range rules before any write.
- Track the one-way verification flag on reviews.
- Notify an event sink after each successful mutation.
"""
