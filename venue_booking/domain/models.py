"""Domain records for venues, service packages, bookings and reviews.

Records are pydantic models so they serialize to the camelCase JSON
shape stored in the partitions. Patches carry only the fields a caller
set; `apply_to` merges them field-by-field with patch precedence.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Generic, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from venue_booking.domain.exceptions import ValidationError
from venue_booking.domain.state_machine import BookingStatus, PaymentStatus


class DomainModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


M = TypeVar("M", bound=BaseModel)


def build(model: type[M], data: dict) -> M:
    """Validate caller-supplied data, reporting failures per field."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


class VenueCategory(str, Enum):
    RESTAURANT = "restaurant"
    BALLROOM = "ballroom"
    GARDEN = "garden"
    CONFERENCE = "conference"
    EVENTS_HALL = "events_hall"
    WEDDING_HALL = "wedding_hall"


class PackageType(str, Enum):
    CATERING = "catering"
    DECORATION = "decoration"
    PHOTOGRAPHY = "photography"
    ENTERTAINMENT = "entertainment"
    OTHER = "other"


class PricingUnit(str, Enum):
    FLAT_RATE = "flat_rate"
    PER_PERSON = "per_person"
    PER_HOUR = "per_hour"


class EventType(str, Enum):
    WEDDING = "wedding"
    BIRTHDAY = "birthday"
    CORPORATE = "corporate"
    CONFERENCE = "conference"
    OTHER = "other"


class RecordOrigin(str, Enum):
    SEED = "seed"
    OWNED = "owned"


# -----------------------------
# Venue
# -----------------------------
class VenueLocation(DomainModel):
    city: str
    province: str
    address: str
    latitude: float | None = None
    longitude: float | None = None


class Range(DomainModel):
    min: int = Field(ge=0)
    max: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min > self.max:
            raise ValueError("min must not exceed max")
        return self


class Venue(DomainModel):
    id: str
    name: str
    category: VenueCategory
    location: VenueLocation
    rating: float = Field(default=0, ge=0, le=5)
    total_reviews: int = Field(default=0, ge=0)
    capacity: Range
    price_range: Range
    images: list[str]
    cover_image: str
    amenities: list[str] = Field(default_factory=list)
    description: str = ""
    is_featured: bool = False
    owner_id: str
    house_rules: str | None = None
    operating_hours: str | None = None
    created_at: datetime | None = None

    @field_validator("cover_image")
    @classmethod
    def _check_cover_image(cls, value: str, info: ValidationInfo) -> str:
        images = info.data.get("images")
        if images is not None and value not in images:
            raise ValueError("must be one of images")
        return value

    @field_validator("amenities")
    @classmethod
    def _dedupe_amenities(cls, value: list[str]) -> list[str]:
        # amenities behave as a set; keep first-seen order
        return list(dict.fromkeys(value))


class VenueDraft(DomainModel):
    """Owner input for a new venue."""

    name: str = Field(min_length=1)
    category: VenueCategory
    location: VenueLocation
    capacity: Range
    price_range: Range
    description: str = ""
    images: list[str] = Field(default_factory=list)
    cover_image: str | None = None
    amenities: list[str] = Field(default_factory=list)
    house_rules: str | None = None
    operating_hours: str | None = None


class VenuePatch(DomainModel):
    name: str | None = None
    category: VenueCategory | None = None
    location: VenueLocation | None = None
    capacity: Range | None = None
    price_range: Range | None = None
    images: list[str] | None = None
    cover_image: str | None = None
    amenities: list[str] | None = None
    description: str | None = None
    is_featured: bool | None = None
    house_rules: str | None = None
    operating_hours: str | None = None

    def apply_to(self, venue: Venue) -> Venue:
        merged = venue.model_dump(by_alias=True)
        merged.update(self.model_dump(exclude_unset=True, by_alias=True))
        return build(Venue, merged)


# -----------------------------
# Service packages
# -----------------------------
class ServicePackage(DomainModel):
    id: str
    venue_id: str
    name: str
    type: PackageType
    description: str = ""
    pricing_unit: PricingUnit = PricingUnit.FLAT_RATE
    price: int | None = Field(default=None, ge=0, validate_default=True)
    price_per_person: int | None = Field(default=None, ge=0, validate_default=True)
    inclusions: list[str] = Field(default_factory=list)

    @field_validator("price", "price_per_person")
    @classmethod
    def _check_authoritative_price(cls, value: int | None, info: ValidationInfo):
        # the pricing unit decides which price field must be present
        unit = info.data.get("pricing_unit")
        if unit is None or value is not None:
            return value

        required = "price_per_person" if unit == PricingUnit.PER_PERSON else "price"
        if info.field_name == required:
            raise ValueError(f"required for {unit.value} pricing")
        return value


class PackageDraft(DomainModel):
    name: str = Field(min_length=1)
    type: PackageType
    description: str = ""
    pricing_unit: PricingUnit = PricingUnit.FLAT_RATE
    price: int | None = Field(default=None, ge=0)
    price_per_person: int | None = Field(default=None, ge=0)
    inclusions: list[str] = Field(default_factory=list)


class PackagePatch(DomainModel):
    name: str | None = None
    type: PackageType | None = None
    description: str | None = None
    pricing_unit: PricingUnit | None = None
    price: int | None = Field(default=None, ge=0)
    price_per_person: int | None = Field(default=None, ge=0)
    inclusions: list[str] | None = None

    def apply_to(self, package: ServicePackage) -> ServicePackage:
        merged = package.model_dump(by_alias=True)
        merged.update(self.model_dump(exclude_unset=True, by_alias=True))
        return build(ServicePackage, merged)


# -----------------------------
# Seed vs owned records
# -----------------------------
T = TypeVar("T")


@dataclass(frozen=True)
class CatalogRecord(Generic[T]):
    """A catalog entry tagged with where it came from."""

    value: T
    origin: RecordOrigin

    @property
    def is_owned(self) -> bool:
        return self.origin == RecordOrigin.OWNED


# -----------------------------
# Bookings
# -----------------------------
class Booking(DomainModel):
    id: str
    reference: str
    customer_id: str
    venue_id: str
    event_name: str
    event_type: EventType = EventType.OTHER
    event_date: date
    start_time: time
    end_time: time
    guest_count: int = Field(ge=1)
    services: list[str] = Field(default_factory=list)
    total_amount: int = Field(ge=0)
    deposit_amount: int = Field(ge=0)
    balance_amount: int = Field(ge=0)
    status: BookingStatus
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    special_requests: str | None = None
    cancellation_reason: str | None = None
    cancelled_at: datetime | None = None
    idempotency_key: str | None = None
    request_hash: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def _check_amounts(self):
        if self.deposit_amount + self.balance_amount != self.total_amount:
            raise ValueError("depositAmount + balanceAmount must equal totalAmount")
        return self


class BookingDraft(DomainModel):
    """
    Caller input for a new booking. Every field is optional here so
    missing values can be reported together by the booking service.
    """

    customer_id: str | None = None
    venue_id: str | None = None
    event_name: str | None = None
    event_type: EventType = EventType.OTHER
    event_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    guest_count: int | None = None
    services: list[str] = Field(default_factory=list)
    special_requests: str | None = None
    status: BookingStatus = BookingStatus.CONFIRMED
    payment_status: PaymentStatus = PaymentStatus.DEPOSIT_PAID
    idempotency_key: str | None = None


class BookingBucket(str, Enum):
    UPCOMING = "upcoming"
    PAST = "past"
    CANCELLED = "cancelled"


# -----------------------------
# Favorites and reviews
# -----------------------------
class Favorite(DomainModel):
    user_id: str
    venue_id: str


class Review(DomainModel):
    id: str
    venue_id: str
    customer_id: str
    customer_name: str
    rating: int = Field(ge=1, le=5)
    review_text: str = ""
    photos: list[str] = Field(default_factory=list)
    event_type: str = ""
    venue_quality_rating: int | None = Field(default=None, ge=1, le=5)
    service_quality_rating: int | None = Field(default=None, ge=1, le=5)
    value_rating: int | None = Field(default=None, ge=1, le=5)
    cleanliness_rating: int | None = Field(default=None, ge=1, le=5)
    created_at: datetime


class ReviewDraft(DomainModel):
    customer_name: str
    rating: int = Field(ge=1, le=5)
    review_text: str = ""
    photos: list[str] = Field(default_factory=list)
    event_type: str = ""
    venue_quality_rating: int | None = Field(default=None, ge=1, le=5)
    service_quality_rating: int | None = Field(default=None, ge=1, le=5)
    value_rating: int | None = Field(default=None, ge=1, le=5)
    cleanliness_rating: int | None = Field(default=None, ge=1, le=5)
