from __future__ import annotations

from pydantic import BaseModel, Field

RATING_FIELDS: tuple[str, ...] = (
    "food_quality",
    "service",
    "atmosphere",
    "price_value",
    "overall_rating",
)


class Restaurant(BaseModel):
    id: int
    name: str
    location: str
    owner: str
    is_active: bool = True
    total_reviews: int = 0
    created_at: float


class Review(BaseModel):
    id: int
    restaurant_id: int
    reviewer: str
    food_quality: int
    service: int
    atmosphere: int
    price_value: int
    overall_rating: int
    comment: str = ""
    is_verified: bool = False
    created_at: float


class LedgerSnapshot(BaseModel):
    """Serialisable copy of every record, index and counter in a ledger."""

    restaurant_counter: int = 0
    review_counter: int = 0
    restaurants: list[Restaurant] = Field(default_factory=list)
    reviews: list[Review] = Field(default_factory=list)
    restaurant_reviews: dict[int, list[int]] = Field(default_factory=dict)
    user_reviews: dict[str, list[int]] = Field(default_factory=dict)
