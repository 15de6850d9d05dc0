from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .auth.dependencies import caller_identity, require_admin, require_user
from .auth.users import authenticate, register_user
from .ledger.errors import (
    AlreadyVerified,
    DuplicateReview,
    LedgerError,
    NotAuthorized,
    NotFoundError,
    RatingOutOfRange,
    RestaurantInactive,
    SelfReviewForbidden,
)
from .ledger.models import Restaurant, Review
from .ledger.schemas import (
    CreatedResponse,
    HasReviewedResponse,
    LoginRequest,
    RegisterRestaurantRequest,
    RegisterUserRequest,
    ReviewIdsResponse,
    StatusResponse,
    SubmitReviewRequest,
    TotalCountsResponse,
)
from .ledger.store import get_event_log, get_ledger

logger = logging.getLogger(__name__)

app = FastAPI(title="Restaurant Rating Ledger API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "rating-ledger-secret-change-in-production"),
)

_STATUS_BY_ERROR: list[tuple[type[LedgerError], int]] = [
    (NotFoundError, 404),
    (NotAuthorized, 403),
    (RatingOutOfRange, 422),
    (DuplicateReview, 409),
    (SelfReviewForbidden, 409),
    (AlreadyVerified, 409),
    (RestaurantInactive, 409),
]


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 500)
    if status == 500:
        logger.error("Unhandled ledger error on %s", request.url.path, exc_info=exc)
    body = {"detail": str(exc), "error": type(exc).__name__}
    if isinstance(exc, RatingOutOfRange):
        body["field"] = exc.field
    return JSONResponse(status_code=status, content=body)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/restaurants/{restaurant_id}", response_model=Restaurant)
def get_restaurant(restaurant_id: int) -> Restaurant:
    return get_ledger().get_restaurant(restaurant_id)


@app.get("/restaurants/{restaurant_id}/reviews", response_model=ReviewIdsResponse)
def restaurant_reviews(restaurant_id: int) -> ReviewIdsResponse:
    return ReviewIdsResponse(review_ids=get_ledger().get_restaurant_reviews(restaurant_id))


@app.get("/restaurants/{restaurant_id}/reviewers/{identity}", response_model=HasReviewedResponse)
def has_reviewed(restaurant_id: int, identity: str) -> HasReviewedResponse:
    return HasReviewedResponse(
        restaurant_id=restaurant_id,
        identity=identity,
        has_reviewed=get_ledger().has_reviewed(restaurant_id, identity),
    )


@app.get("/reviews/{review_id}", response_model=Review)
def get_review(review_id: int) -> Review:
    return get_ledger().get_review_info(review_id)


@app.get("/users/{identity}/reviews", response_model=ReviewIdsResponse)
def user_reviews(identity: str) -> ReviewIdsResponse:
    return ReviewIdsResponse(review_ids=get_ledger().get_user_reviews(identity))


@app.get("/counts", response_model=TotalCountsResponse)
def total_counts() -> TotalCountsResponse:
    restaurants, reviews = get_ledger().get_total_counts()
    return TotalCountsResponse(total_restaurants=restaurants, total_reviews=reviews)


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/register", status_code=201)
def register(body: RegisterUserRequest) -> dict:
    user = register_user(body.username, body.password)
    if not user:
        raise HTTPException(status_code=409, detail="Username already taken")
    return {"status": "created", "user": user}


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Caller endpoints ─────────────────────────────────────────────────────


@app.post("/restaurants", response_model=CreatedResponse, status_code=201)
def register_restaurant(
    body: RegisterRestaurantRequest,
    caller: str = Depends(caller_identity),
) -> CreatedResponse:
    restaurant_id = get_ledger().register_restaurant(body.name, body.location, caller)
    return CreatedResponse(id=restaurant_id)


@app.post("/restaurants/{restaurant_id}/toggle", response_model=StatusResponse)
def toggle_restaurant(
    restaurant_id: int,
    caller: str = Depends(caller_identity),
) -> StatusResponse:
    return StatusResponse(success=get_ledger().toggle_restaurant_status(restaurant_id, caller))


@app.post("/restaurants/{restaurant_id}/reviews", response_model=CreatedResponse, status_code=201)
def submit_review(
    restaurant_id: int,
    body: SubmitReviewRequest,
    caller: str = Depends(caller_identity),
) -> CreatedResponse:
    review_id = get_ledger().submit_review(
        restaurant_id,
        body.food_quality,
        body.service,
        body.atmosphere,
        body.price_value,
        body.overall_rating,
        body.comment,
        caller,
    )
    return CreatedResponse(id=review_id)


@app.post("/reviews/{review_id}/verify", response_model=StatusResponse)
def verify_review(
    review_id: int,
    caller: str = Depends(caller_identity),
) -> StatusResponse:
    return StatusResponse(success=get_ledger().verify_review(review_id, caller))


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/events")
def events(event_type: str | None = None, user: dict = Depends(require_admin)) -> list[dict]:
    return get_event_log().get_events(event_type)


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_ledger())
