from datetime import date, timedelta

CUSTOMER = {"X-User-Id": "cust1"}
OWNER = {"X-User-Id": "owner1"}


def _booking_payload(**overrides):
    payload = {
        "venueId": "v1",
        "eventName": "Dela Cruz Wedding",
        "eventType": "wedding",
        "eventDate": (date.today() + timedelta(days=45)).isoformat(),
        "startTime": "16:00",
        "endTime": "22:00",
        "guestCount": 50,
        "services": ["pkg1"],
    }
    payload.update(overrides)
    return payload


def test_booking_flow(client):
    quote_response = client.post(
        "/quotes",
        json={"venueId": "v1", "services": ["pkg1"], "guestCount": 50},
    )
    assert quote_response.status_code == 200
    assert quote_response.json() == {
        "subtotal": 45000,
        "serviceFee": 2250,
        "total": 47250,
        "deposit": 14175,
        "balance": 33075,
    }

    response = client.post("/bookings", json=_booking_payload(), headers=CUSTOMER)

    assert response.status_code == 200
    booking = response.json()
    assert booking["customerId"] == "cust1"
    assert booking["totalAmount"] == 47250
    assert booking["status"] == "confirmed"
    assert booking["paymentStatus"] == "deposit_paid"

    get_response = client.get(f"/bookings/{booking['id']}")
    assert get_response.status_code == 200
    assert get_response.json()["reference"] == booking["reference"]

    upcoming = client.get("/bookings", params={"bucket": "upcoming"}, headers=CUSTOMER)
    assert [b["id"] for b in upcoming.json()] == [booking["id"]]

    cancel_response = client.post(
        f"/bookings/{booking['id']}/cancel",
        json={"reason": "Date moved"},
    )
    assert cancel_response.status_code == 200
    assert cancel_response.json() == {"bookingId": booking["id"], "cancelled": True}

    cancelled = client.get("/bookings", params={"bucket": "cancelled"}, headers=CUSTOMER)
    assert [b["id"] for b in cancelled.json()] == [booking["id"]]
    assert cancelled.json()[0]["cancellationReason"] == "Date moved"

    again = client.post(f"/bookings/{booking['id']}/cancel")
    assert again.status_code == 409


def test_invalid_guest_count_is_unprocessable(client):
    response = client.post(
        "/bookings",
        json=_booking_payload(guestCount=0),
        headers=CUSTOMER,
    )

    assert response.status_code == 422
    assert "guestCount" in response.json()["detail"]["fields"]


def test_unknown_booking_is_not_found(client):
    assert client.get("/bookings/missing").status_code == 404
    assert client.post("/bookings/missing/cancel").status_code == 404


def test_seed_venue_cannot_be_deleted(client):
    check = client.get("/venues/v3/can-delete")
    assert check.json() == {"canDelete": False, "reason": "Cannot delete a system venue."}

    response = client.delete("/venues/v3")
    assert response.status_code == 409


def test_can_delete_unknown_records_is_not_found(client):
    assert client.get("/venues/missing/can-delete").status_code == 404
    assert client.get("/packages/missing/can-delete").status_code == 404


def test_owner_venue_lifecycle(client):
    created = client.post(
        "/venues",
        json={
            "name": "Iloilo Heritage Events Hall",
            "category": "events_hall",
            "location": {"city": "Iloilo City", "province": "Iloilo", "address": "Calle Real"},
            "capacity": {"min": 40, "max": 200},
            "priceRange": {"min": 18000, "max": 70000},
        },
        headers=OWNER,
    )
    assert created.status_code == 200
    venue_id = created.json()["id"]
    assert created.json()["ownerId"] == "owner1"

    client.post(
        "/bookings",
        json=_booking_payload(venueId=venue_id, services=[]),
        headers=CUSTOMER,
    )

    dashboard = client.get("/owner/dashboard", headers=OWNER).json()
    assert dashboard["totalVenues"] == 1
    assert dashboard["totalBookings"] == 1
    assert dashboard["totalRevenue"] == 18900

    check = client.get(f"/venues/{venue_id}/can-delete").json()
    assert check == {
        "canDelete": False,
        "reason": "Venue has 1 existing booking(s) and cannot be deleted.",
    }
    assert client.delete(f"/venues/{venue_id}").status_code == 409


def test_favorites_and_reviews(client):
    assert client.put("/favorites/v2", headers=CUSTOMER).json() == {
        "venueId": "v2",
        "isFavorite": True,
    }
    assert [v["id"] for v in client.get("/favorites", headers=CUSTOMER).json()] == ["v2"]
    assert client.get("/favorites", headers=OWNER).json() == []

    review = client.post(
        "/venues/v2/reviews",
        json={"customerName": "Ana", "rating": 5, "reviewText": "Beautiful view"},
        headers=CUSTOMER,
    )
    assert review.status_code == 200

    duplicate = client.post(
        "/venues/v2/reviews",
        json={"customerName": "Ana", "rating": 3},
        headers=CUSTOMER,
    )
    assert duplicate.status_code == 422

    assert client.get("/venues/v2/rating").json() == {
        "venueId": "v2",
        "average": 5.0,
        "count": 1,
    }
