from __future__ import annotations


class LedgerError(Exception):
    """Base class for every failure raised by the rating ledger."""


class NotFoundError(LedgerError):
    pass


class RestaurantNotFound(NotFoundError):
    def __init__(self, restaurant_id: int) -> None:
        super().__init__(f"Restaurant not found: {restaurant_id}")
        self.restaurant_id = restaurant_id


class ReviewNotFound(NotFoundError):
    def __init__(self, review_id: int) -> None:
        super().__init__(f"Review not found: {review_id}")
        self.review_id = review_id


class RestaurantInactive(LedgerError):
    def __init__(self, restaurant_id: int) -> None:
        super().__init__(f"Restaurant not active: {restaurant_id}")
        self.restaurant_id = restaurant_id


class DuplicateReview(LedgerError):
    def __init__(self, restaurant_id: int, reviewer: str) -> None:
        super().__init__(f"{reviewer} already reviewed restaurant {restaurant_id}")
        self.restaurant_id = restaurant_id
        self.reviewer = reviewer


class SelfReviewForbidden(LedgerError):
    def __init__(self, restaurant_id: int) -> None:
        super().__init__(f"Restaurant owner cannot review own restaurant {restaurant_id}")
        self.restaurant_id = restaurant_id


class RatingOutOfRange(LedgerError):
    def __init__(self, field: str, value: int, low: int = 1, high: int = 10) -> None:
        super().__init__(f"{field} must be between {low}-{high}, got {value}")
        self.field = field
        self.value = value


class NotAuthorized(LedgerError):
    def __init__(self, caller: str, action: str) -> None:
        super().__init__(f"{caller} is not authorized to {action}")
        self.caller = caller
        self.action = action


class AlreadyVerified(LedgerError):
    def __init__(self, review_id: int) -> None:
        super().__init__(f"Review already verified: {review_id}")
        self.review_id = review_id


class SnapshotError(LedgerError):
    """Raised when a persisted ledger snapshot cannot be read."""
