from __future__ import annotations

import logging
import random
from typing import Any

from ..ledger.errors import LedgerError
from ..ledger.store import RatingLedger

logger = logging.getLogger(__name__)

RESTAURANT_CATALOGUE: list[dict[str, str]] = [
    {"name": "The Golden Fork", "location": "123 Main St, New York, NY"},
    {"name": "Ocean Breeze Seafood", "location": "456 Harbor Rd, Seattle, WA"},
    {"name": "Bella Italia Trattoria", "location": "789 Vine St, San Francisco, CA"},
    {"name": "Sakura Sushi House", "location": "321 Cherry Ln, Los Angeles, CA"},
    {"name": "La Maison Française", "location": "654 Boulevard Ave, Chicago, IL"},
]

COMMENTS: list[str] = [
    "Excellent dining experience!",
    "Great food and service.",
    "Would definitely recommend.",
    "Amazing atmosphere and delicious food.",
    "Good value for money.",
    "Wonderful experience, will come again!",
    "Outstanding quality.",
    "Highly satisfied with the meal.",
]


def _random_ratings(rng: random.Random) -> dict[str, int]:
    # Skewed positive: every dimension in 6..10
    food, service, atmosphere, price = (rng.randint(6, 10) for _ in range(4))
    return {
        "food_quality": food,
        "service": service,
        "atmosphere": atmosphere,
        "price_value": price,
        "overall_rating": (food + service + atmosphere + price) // 4,
    }


def run_simulation(
    ledger: RatingLedger,
    owners: list[str],
    reviewers: list[str],
    seed: int = 0,
    review_probability: float = 0.7,
) -> dict[str, Any]:
    """
    Register one catalogue restaurant per owner, then let each reviewer
    review every restaurant they do not own with ``review_probability``.

    Returns the registered restaurants, submitted reviews and a summary.
    """
    rng = random.Random(seed)

    restaurants: list[dict[str, Any]] = []
    for entry, owner in zip(RESTAURANT_CATALOGUE, owners):
        restaurant_id = ledger.register_restaurant(entry["name"], entry["location"], owner)
        restaurants.append({"id": restaurant_id, "owner": owner, **entry})

    reviews: list[dict[str, Any]] = []
    for reviewer in reviewers:
        for restaurant in restaurants:
            if restaurant["owner"] == reviewer:
                continue
            if rng.random() >= review_probability:
                continue
            ratings = _random_ratings(rng)
            comment = rng.choice(COMMENTS)
            try:
                review_id = ledger.submit_review(
                    restaurant["id"], comment=comment, caller=reviewer, **ratings,
                )
            except LedgerError as exc:
                logger.warning("Simulated review skipped: %s", exc)
                continue
            reviews.append({
                "id": review_id,
                "restaurant_id": restaurant["id"],
                "reviewer": reviewer,
                "ratings": ratings,
                "comment": comment,
            })

    return {
        "restaurants": restaurants,
        "reviews": reviews,
        "summary": {
            "total_restaurants": len(restaurants),
            "total_reviews": len(reviews),
            "avg_reviews_per_restaurant": round(len(reviews) / len(restaurants), 2) if restaurants else 0.0,
        },
    }
