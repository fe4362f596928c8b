import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from venue_booking.api.schemas.schemas import (
    CancelRequest,
    CancelResponse,
    DeletionCheckResponse,
    FavoriteResponse,
    OwnerDashboardResponse,
    PriceBreakdownResponse,
    QuoteRequest,
    RatingResponse,
)
from venue_booking.application.booking_service import BookingService
from venue_booking.application.package_service import ServicePackageService
from venue_booking.application.review_service import ReviewService
from venue_booking.application.venue_catalog import VenueCatalog, VenueFilter, VenueSortKey
from venue_booking.domain.exceptions import (
    NotFoundError,
    ValidationError,
    VenueBookingError,
)
from venue_booking.domain.models import (
    Booking,
    BookingBucket,
    BookingDraft,
    PackageDraft,
    PackagePatch,
    Review,
    ReviewDraft,
    ServicePackage,
    Venue,
    VenueDraft,
    VenuePatch,
)
from venue_booking.infrastructure.db.session import SessionLocal
from venue_booking.infrastructure.repositories.partition_store import (
    PartitionStore,
    SqlPartitionStore,
)


router = APIRouter()
logger = logging.getLogger(__name__)


def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> PartitionStore:
    return SqlPartitionStore(db)


def current_user(x_user_id: str = Header()) -> str:
    return x_user_id


def to_http_error(exc: VenueBookingError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "fields": exc.fields},
        )
    if isinstance(exc, NotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        )

    # consistency, state transition and idempotency conflicts
    logger.info("Request rejected: %s", exc)
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=str(exc),
    )


def _not_found(entity: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{entity} not found",
    )


@router.get("/health")
def health():
    return {"message": "Venue booking engine is running"}


# ---------------------
# PRICING & BOOKINGS
# ---------------------

@router.post("/quotes", response_model=PriceBreakdownResponse)
def quote_booking(
    request: QuoteRequest,
    store: PartitionStore = Depends(get_store),
):
    try:
        breakdown = BookingService(store).quote(
            venue_id=request.venue_id,
            service_ids=request.services,
            guest_count=request.guest_count,
        )
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc

    return PriceBreakdownResponse(
        subtotal=breakdown.subtotal,
        service_fee=breakdown.service_fee,
        total=breakdown.total,
        deposit=breakdown.deposit,
        balance=breakdown.balance,
    )


@router.post("/bookings", response_model=Booking)
def create_booking(
    draft: BookingDraft,
    user_id: str = Depends(current_user),
    store: PartitionStore = Depends(get_store),
):
    draft.customer_id = user_id

    try:
        return BookingService(store).create_booking(draft)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc


@router.get("/bookings", response_model=list[Booking])
def list_my_bookings(
    bucket: BookingBucket = BookingBucket.UPCOMING,
    user_id: str = Depends(current_user),
    store: PartitionStore = Depends(get_store),
):
    return BookingService(store).list_for_customer(user_id, bucket)


@router.get("/bookings/{booking_id}", response_model=Booking)
def get_booking(
    booking_id: str,
    store: PartitionStore = Depends(get_store),
):
    booking = BookingService(store).get_booking_by_id(booking_id)
    if not booking:
        raise _not_found("Booking")
    return booking


@router.post("/bookings/{booking_id}/cancel", response_model=CancelResponse)
def cancel_booking(
    booking_id: str,
    request: CancelRequest | None = None,
    store: PartitionStore = Depends(get_store),
):
    reason = request.reason if request else None

    try:
        cancelled = BookingService(store).cancel_booking(booking_id, reason=reason)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc

    if not cancelled:
        raise _not_found("Booking")
    return CancelResponse(booking_id=booking_id, cancelled=True)


@router.post("/bookings/{booking_id}/confirm", response_model=Booking)
def confirm_booking(
    booking_id: str,
    store: PartitionStore = Depends(get_store),
):
    try:
        booking = BookingService(store).confirm_booking(booking_id)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc

    if not booking:
        raise _not_found("Booking")
    return booking


@router.post("/bookings/{booking_id}/complete", response_model=Booking)
def complete_booking(
    booking_id: str,
    store: PartitionStore = Depends(get_store),
):
    try:
        booking = BookingService(store).complete_booking(booking_id)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc

    if not booking:
        raise _not_found("Booking")
    return booking


@router.get("/owner/dashboard", response_model=OwnerDashboardResponse)
def owner_dashboard(
    user_id: str = Depends(current_user),
    store: PartitionStore = Depends(get_store),
):
    venues = VenueCatalog(store).get_venues_for_owner(user_id)
    summary = BookingService(store).owner_summary(venue.id for venue in venues)

    return OwnerDashboardResponse(
        total_venues=summary.total_venues,
        total_bookings=summary.total_bookings,
        pending_bookings=summary.pending_bookings,
        total_revenue=summary.total_revenue,
        recent_bookings=summary.bookings,
    )


# ---------------------
# VENUES
# ---------------------

@router.get("/venues", response_model=list[Venue])
def list_venues(
    category: str | None = None,
    min_price: int | None = None,
    max_price: int | None = None,
    min_capacity: int | None = None,
    max_capacity: int | None = None,
    amenities: list[str] = Query(default=[]),
    q: str | None = None,
    featured: bool = False,
    sort: VenueSortKey | None = None,
    store: PartitionStore = Depends(get_store),
):
    catalog = VenueCatalog(store)
    criteria = VenueFilter(
        category=category,
        min_price=min_price,
        max_price=max_price,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        amenities=tuple(amenities),
    )

    venues = catalog.filter_venues(criteria)
    if q:
        matching = {venue.id for venue in catalog.search_venues(q)}
        venues = [venue for venue in venues if venue.id in matching]
    if featured:
        venues = [venue for venue in venues if venue.is_featured]
    if sort:
        venues = catalog.sort_venues(venues, sort)
    return venues


@router.post("/venues", response_model=Venue)
def create_venue(
    draft: VenueDraft,
    user_id: str = Depends(current_user),
    store: PartitionStore = Depends(get_store),
):
    try:
        return VenueCatalog(store).create_venue(user_id, draft)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc


@router.get("/venues/{venue_id}", response_model=Venue)
def get_venue(
    venue_id: str,
    store: PartitionStore = Depends(get_store),
):
    venue = VenueCatalog(store).get_venue_by_id(venue_id)
    if not venue:
        raise _not_found("Venue")
    return venue


@router.patch("/venues/{venue_id}", response_model=Venue)
def update_venue(
    venue_id: str,
    patch: VenuePatch,
    store: PartitionStore = Depends(get_store),
):
    try:
        return VenueCatalog(store).update_venue(venue_id, patch)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc


@router.get("/venues/{venue_id}/can-delete", response_model=DeletionCheckResponse)
def can_delete_venue(
    venue_id: str,
    store: PartitionStore = Depends(get_store),
):
    try:
        check = VenueCatalog(store).can_delete_venue(venue_id)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc

    return DeletionCheckResponse(can_delete=check.can_delete, reason=check.reason)


@router.delete("/venues/{venue_id}")
def delete_venue(
    venue_id: str,
    store: PartitionStore = Depends(get_store),
):
    try:
        VenueCatalog(store).delete_venue(venue_id)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/venues/{venue_id}/bookings", response_model=list[Booking])
def list_venue_bookings(
    venue_id: str,
    store: PartitionStore = Depends(get_store),
):
    return BookingService(store).list_for_venue(venue_id)


# ---------------------
# SERVICE PACKAGES
# ---------------------

@router.get("/venues/{venue_id}/packages", response_model=list[ServicePackage])
def list_venue_packages(
    venue_id: str,
    store: PartitionStore = Depends(get_store),
):
    return ServicePackageService(store).get_venue_packages(venue_id)


@router.post("/venues/{venue_id}/packages", response_model=ServicePackage)
def create_package(
    venue_id: str,
    draft: PackageDraft,
    store: PartitionStore = Depends(get_store),
):
    try:
        return ServicePackageService(store).create_package(venue_id, draft)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc


@router.get("/packages/{package_id}", response_model=ServicePackage)
def get_package(
    package_id: str,
    store: PartitionStore = Depends(get_store),
):
    package = ServicePackageService(store).get_package_by_id(package_id)
    if not package:
        raise _not_found("Service package")
    return package


@router.patch("/packages/{package_id}", response_model=ServicePackage)
def update_package(
    package_id: str,
    patch: PackagePatch,
    store: PartitionStore = Depends(get_store),
):
    try:
        return ServicePackageService(store).update_package(package_id, patch)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc


@router.get("/packages/{package_id}/can-delete", response_model=DeletionCheckResponse)
def can_delete_package(
    package_id: str,
    store: PartitionStore = Depends(get_store),
):
    try:
        check = ServicePackageService(store).can_delete_package(package_id)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc

    return DeletionCheckResponse(can_delete=check.can_delete, reason=check.reason)


@router.delete("/packages/{package_id}")
def delete_package(
    package_id: str,
    store: PartitionStore = Depends(get_store),
):
    try:
        ServicePackageService(store).delete_package(package_id)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------
# FAVORITES & REVIEWS
# ---------------------

@router.get("/favorites", response_model=list[Venue])
def list_favorites(
    user_id: str = Depends(current_user),
    store: PartitionStore = Depends(get_store),
):
    return VenueCatalog(store).get_favorite_venues(user_id)


@router.put("/favorites/{venue_id}", response_model=FavoriteResponse)
def add_favorite(
    venue_id: str,
    user_id: str = Depends(current_user),
    store: PartitionStore = Depends(get_store),
):
    try:
        VenueCatalog(store).add_to_favorites(user_id, venue_id)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc
    return FavoriteResponse(venue_id=venue_id, is_favorite=True)


@router.delete("/favorites/{venue_id}", response_model=FavoriteResponse)
def remove_favorite(
    venue_id: str,
    user_id: str = Depends(current_user),
    store: PartitionStore = Depends(get_store),
):
    VenueCatalog(store).remove_from_favorites(user_id, venue_id)
    return FavoriteResponse(venue_id=venue_id, is_favorite=False)


@router.get("/venues/{venue_id}/reviews", response_model=list[Review])
def list_venue_reviews(
    venue_id: str,
    store: PartitionStore = Depends(get_store),
):
    return ReviewService(store).get_venue_reviews(venue_id)


@router.post("/venues/{venue_id}/reviews", response_model=Review)
def submit_review(
    venue_id: str,
    draft: ReviewDraft,
    user_id: str = Depends(current_user),
    store: PartitionStore = Depends(get_store),
):
    try:
        return ReviewService(store).submit_review(venue_id, user_id, draft)
    except VenueBookingError as exc:
        raise to_http_error(exc) from exc


@router.get("/venues/{venue_id}/rating", response_model=RatingResponse)
def venue_rating(
    venue_id: str,
    store: PartitionStore = Depends(get_store),
):
    summary = ReviewService(store).get_average_rating(venue_id)
    return RatingResponse(venue_id=venue_id, average=summary.average, count=summary.count)
