# tests/unit/test_models.py

from datetime import date, datetime, time, timezone

import pytest

from venue_booking.domain.exceptions import ValidationError
from venue_booking.domain.models import Booking, Range, Venue, VenuePatch, build
from venue_booking.infrastructure.seed_catalog import SEED_VENUES


def _seed_venue() -> Venue:
    return SEED_VENUES[0].model_copy(deep=True)


def test_inverted_range_is_reported_on_its_field():
    with pytest.raises(ValidationError) as exc_info:
        build(Venue, {**_seed_venue().to_record(), "capacity": {"min": 500, "max": 100}})

    assert exc_info.value.fields == ["capacity"]


def test_range_accepts_equal_bounds():
    assert Range(min=100, max=100).max == 100


def test_cover_image_must_be_listed():
    with pytest.raises(ValidationError) as exc_info:
        VenuePatch(images=["https://example.com/a.jpg"]).apply_to(_seed_venue())

    assert exc_info.value.fields == ["coverImage"]


def test_patch_keeps_unset_fields():
    venue = _seed_venue()

    patched = VenuePatch(name="Renamed Ballroom", amenities=["AC", "AC", "Stage"]).apply_to(venue)

    assert patched.name == "Renamed Ballroom"
    assert patched.amenities == ["AC", "Stage"]
    assert patched.price_range == venue.price_range
    assert patched.cover_image == venue.cover_image


def test_booking_amounts_must_add_up():
    data = {
        "id": "b1",
        "reference": "BKL00000001",
        "customerId": "cust1",
        "venueId": "v1",
        "eventName": "Reunion",
        "eventDate": date(2030, 7, 1),
        "startTime": time(10, 0),
        "endTime": time(14, 0),
        "guestCount": 20,
        "totalAmount": 1000,
        "depositAmount": 300,
        "balanceAmount": 600,
        "status": "confirmed",
        "createdAt": datetime(2030, 6, 1, tzinfo=timezone.utc),
    }

    with pytest.raises(ValidationError) as exc_info:
        build(Booking, data)
    assert exc_info.value.fields == ["record"]

    booking = build(Booking, {**data, "balanceAmount": 700})
    record = booking.to_record()
    assert record["depositAmount"] == 300
    assert record["eventDate"] == "2030-07-01"
    assert "deposit_amount" not in record
