import hashlib
import json
import logging
import os
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Callable, Iterable, Sequence
from uuid import uuid4
from zoneinfo import ZoneInfo

from venue_booking.domain.exceptions import (
    IdempotencyConflictError,
    ValidationError,
    VenueNotFoundError,
)
from venue_booking.domain.models import Booking, BookingBucket, BookingDraft
from venue_booking.domain.pricing import PriceBreakdown, calculate_total, resolve_line_item
from venue_booking.domain.state_machine import BookingStateMachine, BookingStatus, PaymentStatus
from venue_booking.infrastructure.repositories.booking_repository import BookingRepository
from venue_booking.infrastructure.repositories.package_repository import PackageRepository
from venue_booking.infrastructure.repositories.partition_store import PartitionStore
from venue_booking.infrastructure.repositories.venue_repository import VenueRepository

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "BKL"
REFERENCE_DIGITS = 8

_REQUIRED_FIELDS = (
    "customer_id",
    "venue_id",
    "event_name",
    "event_date",
    "start_time",
    "end_time",
)
_REVENUE_STATUSES = {BookingStatus.CONFIRMED, BookingStatus.COMPLETED}
_CREATION_PAYMENT_STATUSES = {PaymentStatus.UNPAID, PaymentStatus.DEPOSIT_PAID}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _event_timezone() -> tzinfo:
    name = os.getenv("EVENT_TIMEZONE")
    return ZoneInfo(name) if name else timezone.utc


def _field_name(name: str) -> str:
    # report fields under the names callers send
    return BookingDraft.model_fields[name].alias or name


def _hash_request(draft: BookingDraft) -> str:
    payload = draft.model_dump(mode="json", exclude={"idempotency_key"})
    payload["event_name"] = draft.event_name.strip()
    payload["services"] = list(dict.fromkeys(draft.services))
    encoded = json.dumps(payload, sort_keys=True).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


@dataclass(frozen=True)
class OwnerSummary:
    total_venues: int
    total_bookings: int
    pending_bookings: int
    total_revenue: int
    bookings: list[Booking] = field(default_factory=list)


class BookingService:
    """Application service coordinating the booking lifecycle."""

    def __init__(
        self,
        store: PartitionStore,
        clock: Callable[[], datetime] = _utc_now,
        event_timezone: tzinfo | None = None,
    ):
        self.store = store
        self.clock = clock
        self.event_timezone = event_timezone or _event_timezone()
        self.booking_repository = BookingRepository(store)
        self.venue_repository = VenueRepository(store)
        self.package_repository = PackageRepository(store)

    # ---------------------
    # PRICING
    # ---------------------

    def quote(
        self,
        venue_id: str,
        service_ids: Sequence[str],
        guest_count: int,
    ) -> PriceBreakdown:
        venue = self.venue_repository.get_by_id(venue_id)
        if not venue:
            raise VenueNotFoundError(venue_id)

        if guest_count is None or guest_count < 1:
            raise ValidationError([_field_name("guest_count")])

        line_items = []
        for service_id in dict.fromkeys(service_ids):
            package = self.package_repository.get_by_id(service_id)
            if not package or package.venue_id != venue_id:
                raise ValidationError(
                    [_field_name("services")],
                    f"Service package {service_id} is not offered by venue {venue_id}",
                )
            line_items.append(resolve_line_item(package, guest_count))

        return calculate_total(venue.price_range.min, line_items)

    # ---------------------
    # LIFECYCLE
    # ---------------------

    def create_booking(self, draft: BookingDraft) -> Booking:
        invalid = self._invalid_fields(draft)
        if invalid:
            raise ValidationError(invalid)

        request_hash = _hash_request(draft)

        with self.store.transaction():
            if draft.idempotency_key:
                existing = self.booking_repository.get_by_idempotency_key(
                    draft.idempotency_key
                )
                if existing:
                    if existing.request_hash == request_hash:
                        return existing
                    raise IdempotencyConflictError(
                        "Idempotency key was already used for a different booking"
                    )

            services = list(dict.fromkeys(draft.services))
            pricing = self.quote(draft.venue_id, services, draft.guest_count)

            booking = Booking(
                id=str(uuid4()),
                reference=self._new_reference(),
                customer_id=draft.customer_id,
                venue_id=draft.venue_id,
                event_name=draft.event_name.strip(),
                event_type=draft.event_type,
                event_date=draft.event_date,
                start_time=draft.start_time,
                end_time=draft.end_time,
                guest_count=draft.guest_count,
                services=services,
                total_amount=pricing.total,
                deposit_amount=pricing.deposit,
                balance_amount=pricing.balance,
                status=draft.status,
                payment_status=draft.payment_status,
                special_requests=draft.special_requests,
                idempotency_key=draft.idempotency_key,
                request_hash=request_hash,
                created_at=self.clock(),
            )
            self.booking_repository.add(booking)

        logger.info(
            "Created booking %s (%s) for venue %s, total %s",
            booking.id,
            booking.reference,
            booking.venue_id,
            booking.total_amount,
        )
        return booking

    def get_booking_by_id(self, booking_id: str) -> Booking | None:
        return self.booking_repository.get_by_id(booking_id)

    def cancel_booking(self, booking_id: str, reason: str | None = None) -> bool:
        """
        Cancel a booking. Returns False when the booking does not exist.
        Completed and already-cancelled bookings raise
        InvalidStateTransitionError.
        """
        with self.store.transaction():
            booking = self.booking_repository.get_by_id(booking_id)
            if not booking:
                return False

            now = self.clock()
            self._transition(booking, BookingStatus.CANCELLED)
            booking.cancellation_reason = reason
            booking.cancelled_at = now
            booking.updated_at = now
            self.booking_repository.save(booking)

        logger.info("Cancelled booking %s", booking_id)
        return True

    def confirm_booking(self, booking_id: str) -> Booking | None:
        return self._move(booking_id, BookingStatus.CONFIRMED)

    def complete_booking(self, booking_id: str) -> Booking | None:
        return self._move(booking_id, BookingStatus.COMPLETED)

    # ---------------------
    # QUERIES
    # ---------------------

    def classify(self, booking: Booking, now: datetime | None = None) -> BookingBucket:
        now = now or self.clock()

        if booking.status == BookingStatus.CANCELLED:
            return BookingBucket.CANCELLED
        if booking.status != BookingStatus.COMPLETED and self._event_start(booking) >= now:
            return BookingBucket.UPCOMING
        return BookingBucket.PAST

    def list_for_customer(
        self,
        customer_id: str,
        bucket: BookingBucket | str,
    ) -> list[Booking]:
        try:
            bucket = BookingBucket(bucket)
        except ValueError as exc:
            raise ValidationError(["bucket"], f"Unknown booking bucket: {bucket}") from exc

        now = self.clock()
        bookings = [
            booking
            for booking in self.booking_repository.list_for_customer(customer_id)
            if self.classify(booking, now) == bucket
        ]

        if bucket == BookingBucket.UPCOMING:
            return sorted(bookings, key=self._event_start)
        if bucket == BookingBucket.PAST:
            return sorted(bookings, key=self._event_start, reverse=True)
        return sorted(bookings, key=lambda b: b.created_at, reverse=True)

    def list_for_venue(self, venue_id: str) -> list[Booking]:
        return self.booking_repository.list_for_venue(venue_id)

    def owner_summary(self, venue_ids: Iterable[str]) -> OwnerSummary:
        venue_ids = list(dict.fromkeys(venue_ids))

        bookings = [
            booking
            for venue_id in venue_ids
            for booking in self.booking_repository.list_for_venue(venue_id)
        ]
        bookings.sort(key=lambda b: b.created_at, reverse=True)

        return OwnerSummary(
            total_venues=len(venue_ids),
            total_bookings=len(bookings),
            pending_bookings=sum(
                1 for b in bookings if b.status == BookingStatus.PENDING
            ),
            total_revenue=sum(
                b.total_amount for b in bookings if b.status in _REVENUE_STATUSES
            ),
            bookings=bookings,
        )

    # ---------------------
    # INTERNALS
    # ---------------------

    def _move(self, booking_id: str, to_status: BookingStatus) -> Booking | None:
        with self.store.transaction():
            booking = self.booking_repository.get_by_id(booking_id)
            if not booking:
                return None

            self._transition(booking, to_status)
            booking.updated_at = self.clock()
            self.booking_repository.save(booking)

        logger.info("Booking %s moved to %s", booking_id, to_status.value)
        return booking

    def _transition(self, booking: Booking, to_status: BookingStatus) -> None:
        BookingStateMachine.validate_transition(booking.status, to_status)
        booking.status = to_status

    def _event_start(self, booking: Booking) -> datetime:
        return datetime.combine(
            booking.event_date,
            booking.start_time,
            tzinfo=self.event_timezone,
        )

    def _invalid_fields(self, draft: BookingDraft) -> list[str]:
        invalid = []

        for name in _REQUIRED_FIELDS:
            value = getattr(draft, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                invalid.append(_field_name(name))

        if draft.guest_count is None or draft.guest_count < 1:
            invalid.append(_field_name("guest_count"))

        if not BookingStateMachine.is_initial(draft.status):
            invalid.append(_field_name("status"))

        if draft.payment_status not in _CREATION_PAYMENT_STATUSES:
            invalid.append(_field_name("payment_status"))

        return invalid

    def _new_reference(self) -> str:
        taken = self.booking_repository.references()

        while True:
            digits = "".join(
                secrets.choice(string.digits) for _ in range(REFERENCE_DIGITS)
            )
            reference = f"{REFERENCE_PREFIX}{digits}"
            if reference not in taken:
                return reference
