from __future__ import annotations

from typing import Any

import pandas as pd

from ..ledger.models import RATING_FIELDS
from ..ledger.store import RatingLedger


def _restaurant_frame(ledger: RatingLedger) -> pd.DataFrame:
    rows = [r.model_dump() for r in ledger.list_restaurants()]
    return pd.DataFrame(rows, columns=["id", "name", "location", "owner", "is_active", "total_reviews", "created_at"])


def _review_frame(ledger: RatingLedger) -> pd.DataFrame:
    rows = [r.model_dump() for r in ledger.list_reviews()]
    return pd.DataFrame(rows, columns=["id", "restaurant_id", "reviewer", *RATING_FIELDS, "comment", "is_verified", "created_at"])


def compute_analytics(ledger: RatingLedger) -> dict[str, Any]:
    restaurants = _restaurant_frame(ledger)
    reviews = _review_frame(ledger)

    total_restaurants = len(restaurants)
    total_reviews = len(reviews)
    active = int(restaurants["is_active"].sum()) if total_restaurants else 0
    verified = int(reviews["is_verified"].sum()) if total_reviews else 0

    # Per-restaurant averages for each rating dimension
    per_restaurant: list[dict[str, Any]] = []
    if total_reviews:
        means = reviews.groupby("restaurant_id")[list(RATING_FIELDS)].mean().round(2)
        names = restaurants.set_index("id")["name"]
        for restaurant_id, row in means.iterrows():
            per_restaurant.append({
                "restaurant_id": int(restaurant_id),
                "name": str(names.get(restaurant_id, "")),
                "review_count": int((reviews["restaurant_id"] == restaurant_id).sum()),
                "averages": {field: float(row[field]) for field in RATING_FIELDS},
            })

    # Top rated by average overall rating
    top_rated = sorted(
        per_restaurant,
        key=lambda r: (-r["averages"]["overall_rating"], r["restaurant_id"]),
    )[:10]

    return {
        "total_restaurants": total_restaurants,
        "active_restaurants": active,
        "total_reviews": total_reviews,
        "avg_reviews_per_restaurant": round(total_reviews / total_restaurants, 2) if total_restaurants else 0.0,
        "verified_reviews": verified,
        "verification_rate": round(verified / total_reviews * 100, 1) if total_reviews else 0.0,
        "restaurants": per_restaurant,
        "top_rated": [
            {"restaurant_id": r["restaurant_id"], "name": r["name"], "overall_rating": r["averages"]["overall_rating"]}
            for r in top_rated
        ],
    }
