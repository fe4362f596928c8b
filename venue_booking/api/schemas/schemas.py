from pydantic import BaseModel, Field

from venue_booking.domain.models import Booking, DomainModel


class QuoteRequest(DomainModel):
    venue_id: str
    services: list[str] = Field(default_factory=list)
    guest_count: int


class PriceBreakdownResponse(DomainModel):
    subtotal: int
    service_fee: int
    total: int
    deposit: int
    balance: int


class CancelRequest(BaseModel):
    reason: str | None = None


class CancelResponse(DomainModel):
    booking_id: str
    cancelled: bool


class DeletionCheckResponse(DomainModel):
    can_delete: bool
    reason: str | None = None


class OwnerDashboardResponse(DomainModel):
    total_venues: int
    total_bookings: int
    pending_bookings: int
    total_revenue: int
    recent_bookings: list[Booking]


class FavoriteResponse(DomainModel):
    venue_id: str
    is_favorite: bool


class RatingResponse(DomainModel):
    venue_id: str
    average: float
    count: int
