"""
Seeded demo traffic for the rating ledger.

Responsibilities:
- Register a catalogue of restaurants, one per owner.
- Submit randomized reviews from every reviewer who is not the owner.
- Summarise what was recorded.
"""
