from dataclasses import dataclass

from venue_booking.domain.exceptions import PackageNotFoundError, VenueNotFoundError
from venue_booking.infrastructure.repositories.booking_repository import BookingRepository
from venue_booking.infrastructure.repositories.package_repository import PackageRepository
from venue_booking.infrastructure.repositories.partition_store import PartitionStore
from venue_booking.infrastructure.repositories.venue_repository import VenueRepository


@dataclass(frozen=True)
class DeletionCheck:
    can_delete: bool
    reason: str | None = None


class ConsistencyGuards:
    """
    Cross-entity rules deciding whether a venue or package may be deleted.
    Always evaluated against current store contents, never cached.
    """

    def __init__(self, store: PartitionStore):
        self.booking_repository = BookingRepository(store)
        self.venue_repository = VenueRepository(store)
        self.package_repository = PackageRepository(store)

    def can_delete_venue(self, venue_id: str) -> DeletionCheck:
        record = self.venue_repository.get_record(venue_id)
        if not record:
            raise VenueNotFoundError(venue_id)

        booking_count = len(self.booking_repository.list_for_venue(venue_id))

        if booking_count:
            return DeletionCheck(
                can_delete=False,
                reason=f"Venue has {booking_count} existing booking(s) and cannot be deleted.",
            )

        if not record.is_owned:
            return DeletionCheck(
                can_delete=False,
                reason="Cannot delete a system venue.",
            )

        return DeletionCheck(can_delete=True)

    def can_delete_package(self, package_id: str) -> DeletionCheck:
        record = self.package_repository.get_record(package_id)
        if not record:
            raise PackageNotFoundError(package_id)

        if self.booking_repository.list_using_package(package_id):
            return DeletionCheck(
                can_delete=False,
                reason="Package is used in existing bookings and cannot be deleted.",
            )

        if not record.is_owned:
            return DeletionCheck(
                can_delete=False,
                reason="Cannot delete a system package.",
            )

        return DeletionCheck(can_delete=True)
