# venue_booking/infrastructure/repositories/booking_repository.py

from venue_booking.domain.models import Booking
from venue_booking.infrastructure.repositories.partition_store import (
    Partition,
    PartitionStore,
)


class BookingRepository:

    def __init__(self, store: PartitionStore):
        self.store = store

    def list_all(self) -> list[Booking]:
        return [
            Booking.model_validate(record)
            for record in self.store.get(Partition.BOOKINGS)
        ]

    def get_by_id(
        self,
        booking_id: str,
    ) -> Booking | None:

        return next(
            (booking for booking in self.list_all() if booking.id == booking_id),
            None,
        )

    def get_by_idempotency_key(
        self,
        idempotency_key: str,
    ) -> Booking | None:

        return next(
            (
                booking
                for booking in self.list_all()
                if booking.idempotency_key == idempotency_key
            ),
            None,
        )

    def list_for_customer(self, customer_id: str) -> list[Booking]:
        return [b for b in self.list_all() if b.customer_id == customer_id]

    def list_for_venue(self, venue_id: str) -> list[Booking]:
        return [b for b in self.list_all() if b.venue_id == venue_id]

    def list_using_package(self, package_id: str) -> list[Booking]:
        return [b for b in self.list_all() if package_id in b.services]

    def references(self) -> set[str]:
        return {booking.reference for booking in self.list_all()}

    def add(self, booking: Booking) -> Booking:
        self.store.append(Partition.BOOKINGS, booking.to_record())
        return booking

    def save(self, booking: Booking) -> None:
        records = self.store.get(Partition.BOOKINGS)

        for index, record in enumerate(records):
            if record["id"] == booking.id:
                records[index] = booking.to_record()
                break
        else:
            raise ValueError(f"Booking not persisted: {booking.id}")

        self.store.set(Partition.BOOKINGS, records)
