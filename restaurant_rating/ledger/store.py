from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from .config import DEFAULT_LEDGER_CONFIG, LedgerConfig
from .errors import (
    AlreadyVerified,
    DuplicateReview,
    NotAuthorized,
    RatingOutOfRange,
    RestaurantInactive,
    RestaurantNotFound,
    ReviewNotFound,
    SelfReviewForbidden,
)
from .events import (
    RESTAURANT_REGISTERED,
    REVIEW_SUBMITTED,
    REVIEW_VERIFIED,
    EventSink,
    InMemoryEventLog,
    NullSink,
    dispatch,
    make_event,
)
from .models import RATING_FIELDS, LedgerSnapshot, Restaurant, Review
from .persistence import load_snapshot, save_snapshot

logger = logging.getLogger(__name__)


class RatingLedger:
    """
    Store of restaurants and reviews.

    Every public method runs under one re-entrant lock, so each
    check-then-write sequence is applied as a whole and readers never see a
    half-applied mutation. Records handed out by the read accessors are
    copies. When a snapshot path is configured, a mutation whose snapshot
    cannot be written is rolled back before the error reaches the caller.

    Events are delivered to ``sink`` after the lock is released; a failing
    sink is logged and ignored.
    """

    def __init__(
        self,
        config: LedgerConfig = DEFAULT_LEDGER_CONFIG,
        sink: EventSink | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.sink: EventSink = sink if sink is not None else NullSink()
        self._clock = clock
        self._lock = threading.RLock()

        self._restaurant_counter = 0
        self._review_counter = 0
        self._restaurants: dict[int, Restaurant] = {}
        self._reviews: dict[int, Review] = {}
        self._restaurant_reviews: dict[int, list[int]] = {}
        self._user_reviews: dict[str, list[int]] = {}
        self._reviewed: set[tuple[int, str]] = set()

        if config.snapshot_path is not None:
            snapshot = load_snapshot(config.snapshot_path)
            if snapshot is not None:
                self._restore(snapshot)
                logger.info(
                    "Loaded ledger snapshot from %s (%d restaurants, %d reviews)",
                    config.snapshot_path,
                    self._restaurant_counter,
                    self._review_counter,
                )

    @property
    def admin(self) -> str:
        return self.config.admin

    # ── Mutations ────────────────────────────────────────────────────────

    def register_restaurant(self, name: str, location: str, caller: str) -> int:
        with self._lock:
            # Build the record before touching the counter so a bad argument leaves no gap.
            restaurant_id = self._restaurant_counter + 1
            restaurant = Restaurant(
                id=restaurant_id,
                name=name,
                location=location,
                owner=caller,
                created_at=self._clock(),
            )
            checkpoint = self._checkpoint()
            self._restaurant_counter = restaurant_id
            self._restaurants[restaurant_id] = restaurant
            self._persist(checkpoint)

        logger.info("Restaurant %d registered by %s", restaurant_id, caller)
        self._emit(RESTAURANT_REGISTERED, {
            "restaurant_id": restaurant_id,
            "name": name,
            "owner": caller,
        })
        return restaurant_id

    def submit_review(
        self,
        restaurant_id: int,
        food_quality: int,
        service: int,
        atmosphere: int,
        price_value: int,
        overall_rating: int,
        comment: str,
        caller: str,
    ) -> int:
        ratings = {
            "food_quality": food_quality,
            "service": service,
            "atmosphere": atmosphere,
            "price_value": price_value,
            "overall_rating": overall_rating,
        }
        with self._lock:
            restaurant = self._require_restaurant(restaurant_id)
            if not restaurant.is_active:
                raise self._rejected(RestaurantInactive(restaurant_id))
            if (restaurant_id, caller) in self._reviewed:
                raise self._rejected(DuplicateReview(restaurant_id, caller))
            if caller == restaurant.owner:
                raise self._rejected(SelfReviewForbidden(restaurant_id))
            self._check_ratings(ratings)

            review_id = self._review_counter + 1
            review = Review(
                id=review_id,
                restaurant_id=restaurant_id,
                reviewer=caller,
                comment=comment,
                created_at=self._clock(),
                **ratings,
            )
            checkpoint = self._checkpoint()
            self._review_counter = review_id
            self._reviews[review_id] = review
            self._restaurant_reviews.setdefault(restaurant_id, []).append(review_id)
            self._user_reviews.setdefault(caller, []).append(review_id)
            self._reviewed.add((restaurant_id, caller))
            restaurant.total_reviews += 1
            self._persist(checkpoint)

        logger.info("Review %d submitted for restaurant %d by %s", review_id, restaurant_id, caller)
        self._emit(REVIEW_SUBMITTED, {
            "review_id": review_id,
            "restaurant_id": restaurant_id,
            "reviewer": caller,
        })
        return review_id

    def verify_review(self, review_id: int, caller: str) -> bool:
        with self._lock:
            review = self._reviews.get(review_id)
            if review is None:
                raise self._rejected(ReviewNotFound(review_id))
            owner = self._restaurants[review.restaurant_id].owner
            if caller not in (owner, self.config.admin):
                raise self._rejected(NotAuthorized(caller, f"verify review {review_id}"))
            if review.is_verified:
                raise self._rejected(AlreadyVerified(review_id))

            checkpoint = self._checkpoint()
            review.is_verified = True
            self._persist(checkpoint)
            restaurant_id = review.restaurant_id

        logger.info("Review %d verified by %s", review_id, caller)
        self._emit(REVIEW_VERIFIED, {
            "review_id": review_id,
            "restaurant_id": restaurant_id,
        })
        return True

    def toggle_restaurant_status(self, restaurant_id: int, caller: str) -> bool:
        with self._lock:
            restaurant = self._require_restaurant(restaurant_id)
            if caller != restaurant.owner:
                raise self._rejected(
                    NotAuthorized(caller, f"toggle restaurant {restaurant_id}")
                )
            checkpoint = self._checkpoint()
            restaurant.is_active = not restaurant.is_active
            self._persist(checkpoint)
            is_active = restaurant.is_active

        logger.info("Restaurant %d is_active=%s", restaurant_id, is_active)
        return True

    # ── Reads ────────────────────────────────────────────────────────────

    def get_restaurant(self, restaurant_id: int) -> Restaurant:
        with self._lock:
            restaurant = self._restaurants.get(restaurant_id)
            if restaurant is None:
                raise RestaurantNotFound(restaurant_id)
            return restaurant.model_copy()

    def get_review_info(self, review_id: int) -> Review:
        with self._lock:
            review = self._reviews.get(review_id)
            if review is None:
                raise ReviewNotFound(review_id)
            return review.model_copy()

    def has_reviewed(self, restaurant_id: int, identity: str) -> bool:
        with self._lock:
            return (restaurant_id, identity) in self._reviewed

    def get_user_reviews(self, identity: str) -> list[int]:
        with self._lock:
            return list(self._user_reviews.get(identity, []))

    def get_restaurant_reviews(self, restaurant_id: int) -> list[int]:
        # Unknown restaurants yield an empty list rather than an error.
        with self._lock:
            return list(self._restaurant_reviews.get(restaurant_id, []))

    def get_total_counts(self) -> tuple[int, int]:
        with self._lock:
            return self._restaurant_counter, self._review_counter

    def list_restaurants(self) -> list[Restaurant]:
        with self._lock:
            return [r.model_copy() for r in self._restaurants.values()]

    def list_reviews(self) -> list[Review]:
        with self._lock:
            return [r.model_copy() for r in self._reviews.values()]

    # ── Snapshots ────────────────────────────────────────────────────────

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            return LedgerSnapshot(
                restaurant_counter=self._restaurant_counter,
                review_counter=self._review_counter,
                restaurants=[r.model_copy() for r in self._restaurants.values()],
                reviews=[r.model_copy() for r in self._reviews.values()],
                restaurant_reviews={k: list(v) for k, v in self._restaurant_reviews.items()},
                user_reviews={k: list(v) for k, v in self._user_reviews.items()},
            )

    def _restore(self, snapshot: LedgerSnapshot) -> None:
        self._restaurant_counter = snapshot.restaurant_counter
        self._review_counter = snapshot.review_counter
        self._restaurants = {r.id: r for r in snapshot.restaurants}
        self._reviews = {r.id: r for r in snapshot.reviews}
        self._restaurant_reviews = {k: list(v) for k, v in snapshot.restaurant_reviews.items()}
        self._user_reviews = {k: list(v) for k, v in snapshot.user_reviews.items()}
        self._reviewed = {(r.restaurant_id, r.reviewer) for r in snapshot.reviews}

    def _checkpoint(self) -> LedgerSnapshot | None:
        """State to roll back to if the following write cannot be persisted."""
        if self.config.snapshot_path is None:
            return None
        return self.snapshot()

    def _persist(self, checkpoint: LedgerSnapshot | None) -> None:
        path = self.config.snapshot_path
        if path is None or checkpoint is None:
            return
        try:
            save_snapshot(path, self.snapshot())
        except Exception:
            logger.warning("Snapshot write to %s failed, rolling back", path, exc_info=True)
            self._restore(checkpoint)
            raise

    # ── Guards ───────────────────────────────────────────────────────────

    def _require_restaurant(self, restaurant_id: int) -> Restaurant:
        restaurant = self._restaurants.get(restaurant_id)
        if restaurant is None:
            raise self._rejected(RestaurantNotFound(restaurant_id))
        return restaurant

    def _check_ratings(self, ratings: dict[str, int]) -> None:
        low, high = self.config.rating_min, self.config.rating_max
        for field in RATING_FIELDS:
            value = ratings[field]
            # bool is an int subclass but never a rating
            if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
                raise self._rejected(RatingOutOfRange(field, value, low, high))

    @staticmethod
    def _rejected(error: Exception) -> Exception:
        logger.info("Rejected: %s (%s)", type(error).__name__, error)
        return error

    def _emit(self, event_type: str, data: dict[str, Any]) -> None:
        dispatch(self.sink, make_event(event_type, data))


# ── Process-wide ledger ──────────────────────────────────────────────────

_event_log = InMemoryEventLog()
_ledger: RatingLedger | None = None
_ledger_lock = threading.Lock()


def get_event_log() -> InMemoryEventLog:
    return _event_log


def get_ledger() -> RatingLedger:
    """Return the process-wide ledger, creating it on first call."""
    global _ledger
    with _ledger_lock:
        if _ledger is None:
            _ledger = RatingLedger(DEFAULT_LEDGER_CONFIG, sink=_event_log)
        return _ledger


def reset_ledger(config: LedgerConfig | None = None) -> RatingLedger:
    """Replace the process-wide ledger with a fresh one and clear the event log."""
    global _ledger
    with _ledger_lock:
        _event_log.clear()
        _ledger = RatingLedger(config or DEFAULT_LEDGER_CONFIG, sink=_event_log)
        return _ledger
