from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterUserRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=6)


class RegisterRestaurantRequest(BaseModel):
    name: str = ""
    location: str = ""


class SubmitReviewRequest(BaseModel):
    # Range checks happen in the ledger so the caller gets RatingOutOfRange.
    food_quality: int
    service: int
    atmosphere: int
    price_value: int
    overall_rating: int
    comment: str = ""


class CreatedResponse(BaseModel):
    id: int


class StatusResponse(BaseModel):
    success: bool


class ReviewIdsResponse(BaseModel):
    review_ids: list[int]


class HasReviewedResponse(BaseModel):
    restaurant_id: int
    identity: str
    has_reviewed: bool


class TotalCountsResponse(BaseModel):
    total_restaurants: int
    total_reviews: int
