"""
Run the demo simulation against a fresh ledger and print the summary.

Usage:
    python -m restaurant_rating.simulation.run
"""
from __future__ import annotations

import json

from ..ledger.config import DEFAULT_LEDGER_CONFIG
from ..ledger.store import RatingLedger
from .scenario import RESTAURANT_CATALOGUE, run_simulation


def main() -> None:
    ledger = RatingLedger(DEFAULT_LEDGER_CONFIG)
    owners = [f"owner{i + 1}" for i in range(len(RESTAURANT_CATALOGUE))]
    reviewers = [f"diner{i + 1}" for i in range(10)]

    result = run_simulation(ledger, owners, reviewers, seed=42)

    restaurants, reviews = ledger.get_total_counts()
    print(f"Total restaurants: {restaurants}")
    print(f"Total reviews: {reviews}")
    for r in result["restaurants"]:
        details = ledger.get_restaurant(r["id"])
        print(f"  #{details.id} {details.name}: {details.total_reviews} reviews")
    print(json.dumps(result["summary"], indent=2))


if __name__ == "__main__":
    main()
