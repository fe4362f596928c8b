# tests/unit/test_booking_service.py

import itertools
from datetime import date, time, timezone
from decimal import Decimal

import pytest

from venue_booking.application import booking_service as booking_service_module
from venue_booking.application.booking_service import BookingService
from venue_booking.domain.exceptions import (
    IdempotencyConflictError,
    InvalidStateTransitionError,
    ValidationError,
    VenueNotFoundError,
)
from venue_booking.domain.models import BookingBucket, BookingDraft
from venue_booking.domain.pricing import round_currency
from venue_booking.domain.state_machine import BookingStatus, PaymentStatus


@pytest.fixture
def service(store, clock):
    return BookingService(store, clock=clock, event_timezone=timezone.utc)


def make_draft(**overrides) -> BookingDraft:
    data = {
        "customer_id": "cust1",
        "venue_id": "v1",
        "event_name": "Dela Cruz Wedding",
        "event_type": "wedding",
        "event_date": date(2030, 7, 15),
        "start_time": time(16, 0),
        "end_time": time(22, 0),
        "guest_count": 50,
        "services": [],
    }
    data.update(overrides)
    return BookingDraft(**data)


# ---------------------
# CREATION
# ---------------------

def test_create_booking_prices_selected_services(service, clock):
    booking = service.create_booking(make_draft(services=["pkg1"]))

    assert booking.total_amount == 47250
    assert booking.deposit_amount == 14175
    assert booking.balance_amount == 33075
    assert booking.status == BookingStatus.CONFIRMED
    assert booking.payment_status == PaymentStatus.DEPOSIT_PAID
    assert booking.created_at == clock.now
    assert booking.reference.startswith("BKL")
    assert len(booking.reference) == 11

    assert service.get_booking_by_id(booking.id) == booking


def test_quote_matches_created_booking(service):
    breakdown = service.quote("v1", ["pkg1", "pkg2"], 80)
    booking = service.create_booking(make_draft(services=["pkg1", "pkg2"], guest_count=80))

    assert booking.total_amount == breakdown.total
    assert booking.deposit_amount == breakdown.deposit


def test_zero_guest_count_is_rejected(service):
    with pytest.raises(ValidationError) as exc_info:
        service.create_booking(make_draft(guest_count=0))

    assert exc_info.value.fields == ["guestCount"]


def test_missing_fields_are_reported_together(service, store):
    draft = make_draft(event_name="  ", event_date=None, start_time=None, end_time=None)

    with pytest.raises(ValidationError) as exc_info:
        service.create_booking(draft)

    assert exc_info.value.fields == ["eventName", "eventDate", "startTime", "endTime"]
    assert service.booking_repository.list_all() == []


def test_cannot_create_completed_booking(service):
    with pytest.raises(ValidationError) as exc_info:
        service.create_booking(make_draft(status=BookingStatus.COMPLETED))

    assert "status" in exc_info.value.fields


@pytest.mark.parametrize("payment_status", [PaymentStatus.FULLY_PAID, PaymentStatus.REFUNDED])
def test_cannot_create_settled_booking(service, payment_status):
    with pytest.raises(ValidationError) as exc_info:
        service.create_booking(make_draft(payment_status=payment_status))

    assert exc_info.value.fields == ["paymentStatus"]
    assert service.booking_repository.list_all() == []


def test_service_from_another_venue_is_rejected(service):
    # pkg3 belongs to v2
    with pytest.raises(ValidationError) as exc_info:
        service.create_booking(make_draft(services=["pkg3"]))

    assert exc_info.value.fields == ["services"]
    assert service.booking_repository.list_all() == []


def test_unknown_venue_is_not_found(service):
    with pytest.raises(VenueNotFoundError):
        service.create_booking(make_draft(venue_id="nope"))


def test_references_are_unique(service):
    references = {service.create_booking(make_draft()).reference for _ in range(25)}
    assert len(references) == 25


def test_reference_collision_draws_again(service, monkeypatch):
    digits = itertools.chain("11111111", "11111111", "22222222")
    monkeypatch.setattr(
        booking_service_module.secrets, "choice", lambda _alphabet: next(digits)
    )

    first = service.create_booking(make_draft())
    second = service.create_booking(make_draft())

    assert first.reference == "BKL11111111"
    assert second.reference == "BKL22222222"


def test_deposit_is_thirty_percent_of_total(service):
    for guest_count in (1, 17, 33, 101, 499):
        booking = service.create_booking(
            make_draft(services=["pkg1", "pkg2"], guest_count=guest_count)
        )
        expected = round_currency(Decimal(booking.total_amount) * Decimal("0.30"))

        assert booking.deposit_amount == expected
        assert booking.deposit_amount + booking.balance_amount == booking.total_amount


# ---------------------
# IDEMPOTENCY
# ---------------------

def test_retry_with_same_key_returns_existing_booking(service):
    first = service.create_booking(make_draft(idempotency_key="retry-1"))
    second = service.create_booking(make_draft(idempotency_key="retry-1"))

    assert second.id == first.id
    assert len(service.booking_repository.list_all()) == 1


def test_same_key_different_payload_conflicts(service):
    service.create_booking(make_draft(idempotency_key="retry-1"))

    with pytest.raises(IdempotencyConflictError):
        service.create_booking(make_draft(idempotency_key="retry-1", guest_count=60))


@pytest.mark.parametrize(
    "changes",
    [
        {"event_type": "birthday"},
        {"special_requests": "Vegan menu"},
        {"status": BookingStatus.PENDING},
        {"payment_status": PaymentStatus.UNPAID},
    ],
)
def test_same_key_with_any_changed_field_conflicts(service, changes):
    first = service.create_booking(make_draft(idempotency_key="retry-1"))

    with pytest.raises(IdempotencyConflictError):
        service.create_booking(make_draft(idempotency_key="retry-1", **changes))

    assert service.booking_repository.list_all() == [first]


def test_retry_after_cancellation_still_returns_booking(service):
    first = service.create_booking(make_draft(idempotency_key="retry-1"))
    service.cancel_booking(first.id)

    again = service.create_booking(make_draft(idempotency_key="retry-1"))

    assert again.id == first.id
    assert again.status == BookingStatus.CANCELLED


# ---------------------
# LIFECYCLE
# ---------------------

def test_unknown_booking_lookups(service):
    assert service.get_booking_by_id("missing") is None
    assert service.cancel_booking("missing") is False
    assert service.confirm_booking("missing") is None


def test_cancel_stamps_reason_and_time(service, clock):
    booking = service.create_booking(make_draft(services=["pkg1"]))
    clock.advance(hours=2)

    assert service.cancel_booking(booking.id, reason="Moved abroad") is True

    cancelled = service.get_booking_by_id(booking.id)
    assert cancelled.status == BookingStatus.CANCELLED
    assert cancelled.cancellation_reason == "Moved abroad"
    assert cancelled.cancelled_at == clock.now
    assert cancelled.deposit_amount == booking.deposit_amount
    assert cancelled.total_amount == booking.total_amount


def test_completed_booking_cannot_be_cancelled(service):
    booking = service.create_booking(make_draft())
    service.complete_booking(booking.id)

    with pytest.raises(InvalidStateTransitionError):
        service.cancel_booking(booking.id)

    assert service.get_booking_by_id(booking.id).status == BookingStatus.COMPLETED


def test_cancelled_booking_cannot_be_cancelled_again(service):
    booking = service.create_booking(make_draft())
    service.cancel_booking(booking.id)

    with pytest.raises(InvalidStateTransitionError):
        service.cancel_booking(booking.id)


def test_pending_booking_goes_through_owner_approval(service):
    booking = service.create_booking(make_draft(status=BookingStatus.PENDING))

    confirmed = service.confirm_booking(booking.id)
    completed = service.complete_booking(booking.id)

    assert confirmed.status == BookingStatus.CONFIRMED
    assert completed.status == BookingStatus.COMPLETED

    with pytest.raises(InvalidStateTransitionError):
        service.confirm_booking(booking.id)


# ---------------------
# CUSTOMER BUCKETS
# ---------------------

def test_buckets_partition_customer_bookings(service, clock):
    later = service.create_booking(make_draft(event_date=date(2030, 7, 15)))
    sooner = service.create_booking(
        make_draft(event_date=date(2030, 6, 20), status=BookingStatus.PENDING)
    )
    elapsed = service.create_booking(make_draft(event_date=date(2030, 5, 1)))
    future_cancelled = service.create_booking(make_draft(event_date=date(2030, 9, 1)))
    future_completed = service.create_booking(make_draft(event_date=date(2030, 8, 1)))
    service.cancel_booking(future_cancelled.id)
    service.complete_booking(future_completed.id)
    service.create_booking(make_draft(customer_id="someone-else"))

    upcoming = service.list_for_customer("cust1", "upcoming")
    past = service.list_for_customer("cust1", BookingBucket.PAST)
    cancelled = service.list_for_customer("cust1", BookingBucket.CANCELLED)

    assert [b.id for b in upcoming] == [sooner.id, later.id]
    assert [b.id for b in past] == [future_completed.id, elapsed.id]
    assert [b.id for b in cancelled] == [future_cancelled.id]

    all_ids = [b.id for b in upcoming + past + cancelled]
    assert len(all_ids) == len(set(all_ids)) == 5


def test_same_day_event_uses_start_time(service):
    evening = service.create_booking(
        make_draft(event_date=date(2030, 6, 1), start_time=time(18, 0))
    )
    morning = service.create_booking(
        make_draft(event_date=date(2030, 6, 1), start_time=time(9, 0), end_time=time(11, 0))
    )

    assert service.classify(evening) == BookingBucket.UPCOMING
    assert service.classify(morning) == BookingBucket.PAST


def test_cancelled_sorted_newest_first(service, clock):
    first = service.create_booking(make_draft())
    clock.advance(minutes=5)
    second = service.create_booking(make_draft())
    service.cancel_booking(first.id)
    service.cancel_booking(second.id)

    cancelled = service.list_for_customer("cust1", "cancelled")

    assert [b.id for b in cancelled] == [second.id, first.id]


def test_unknown_bucket_is_rejected(service):
    with pytest.raises(ValidationError) as exc_info:
        service.list_for_customer("cust1", "someday")

    assert exc_info.value.fields == ["bucket"]


# ---------------------
# VENUE & OWNER VIEWS
# ---------------------

def test_list_for_venue_and_owner_summary(service):
    confirmed = service.create_booking(make_draft(services=["pkg1"]))
    service.create_booking(make_draft(status=BookingStatus.PENDING))
    dropped = service.create_booking(make_draft())
    service.cancel_booking(dropped.id)
    other_venue = service.create_booking(make_draft(venue_id="v2"))

    assert len(service.list_for_venue("v1")) == 3
    assert [b.id for b in service.list_for_venue("v2")] == [other_venue.id]

    summary = service.owner_summary(["v1"])
    assert summary.total_venues == 1
    assert summary.total_bookings == 3
    assert summary.pending_bookings == 1
    assert summary.total_revenue == confirmed.total_amount
