from datetime import date, time, timedelta

from venue_booking.application.booking_service import BookingService
from venue_booking.application.package_service import ServicePackageService
from venue_booking.application.venue_catalog import VenueCatalog
from venue_booking.domain.models import (
    BookingDraft,
    EventType,
    PackageDraft,
    VenueDraft,
)
from venue_booking.domain.state_machine import BookingStatus
from venue_booking.infrastructure.db.models import Base
from venue_booking.infrastructure.db.session import engine, get_db_session
from venue_booking.infrastructure.repositories.partition_store import SqlPartitionStore

DEMO_OWNER_ID = "owner_demo"
DEMO_CUSTOMER_ID = "customer_demo"


def seed_owner_venue(store) -> str:
    catalog = VenueCatalog(store)
    existing = catalog.get_venues_for_owner(DEMO_OWNER_ID)
    if existing:
        return existing[0].id

    venue = catalog.create_venue(
        DEMO_OWNER_ID,
        VenueDraft(
            name="Iloilo Heritage Events Hall",
            category="events_hall",
            location={
                "city": "Iloilo City",
                "province": "Iloilo",
                "address": "Calle Real, City Proper",
            },
            capacity={"min": 40, "max": 200},
            price_range={"min": 18000, "max": 70000},
            amenities=["Air Conditioning", "Parking", "Stage"],
            operating_hours="9:00 AM - 11:00 PM",
        ),
    )
    ServicePackageService(store).create_package(
        venue.id,
        PackageDraft(
            name="Lechon Feast",
            type="catering",
            pricing_unit="per_person",
            price_per_person=650,
            inclusions=["Whole lechon", "Rice", "Dessert"],
        ),
    )
    return venue.id


def seed_bookings(store, venue_id: str) -> None:
    service = BookingService(store)
    if service.list_for_venue(venue_id):
        return

    event_day = date.today() + timedelta(days=30)
    service.create_booking(
        BookingDraft(
            customer_id=DEMO_CUSTOMER_ID,
            venue_id=venue_id,
            event_name="Santos-Reyes Wedding Reception",
            event_type=EventType.WEDDING,
            event_date=event_day,
            start_time=time(16, 0),
            end_time=time(22, 0),
            guest_count=120,
        )
    )
    service.create_booking(
        BookingDraft(
            customer_id=DEMO_CUSTOMER_ID,
            venue_id="v1",
            event_name="Company Year-End Party",
            event_type=EventType.CORPORATE,
            event_date=event_day + timedelta(days=14),
            start_time=time(18, 0),
            end_time=time(23, 0),
            guest_count=50,
            services=["pkg1"],
            status=BookingStatus.PENDING,
        )
    )


def main() -> None:
    Base.metadata.create_all(bind=engine)

    with get_db_session() as db:
        store = SqlPartitionStore(db)
        venue_id = seed_owner_venue(store)
        seed_bookings(store, venue_id)

    print(f"Seed complete: demo venue {venue_id} with sample bookings added.")


if __name__ == "__main__":
    main()
