# venue_booking/infrastructure/repositories/venue_repository.py

from typing import Sequence

from venue_booking.domain.models import CatalogRecord, RecordOrigin, Venue
from venue_booking.infrastructure.repositories.partition_store import (
    Partition,
    PartitionStore,
)
from venue_booking.infrastructure.seed_catalog import SEED_VENUES


class VenueRepository:
    """
    Merged view over seed venues and owned venues.
    An owned venue with a seed's id shadows that seed on every read.
    """

    def __init__(
        self,
        store: PartitionStore,
        seed_venues: Sequence[Venue] = SEED_VENUES,
    ):
        self.store = store
        self._seeds = {venue.id: venue for venue in seed_venues}

    def _owned(self) -> list[Venue]:
        return [
            Venue.model_validate(record)
            for record in self.store.get(Partition.USER_VENUES)
        ]

    def seed_venues(self) -> list[Venue]:
        return [venue.model_copy(deep=True) for venue in self._seeds.values()]

    def list_records(self) -> list[CatalogRecord[Venue]]:
        owned = {venue.id: venue for venue in self._owned()}
        records = []

        for venue_id, seed in self._seeds.items():
            if venue_id in owned:
                records.append(CatalogRecord(owned.pop(venue_id), RecordOrigin.OWNED))
            else:
                records.append(
                    CatalogRecord(seed.model_copy(deep=True), RecordOrigin.SEED)
                )

        # remaining owned venues were created by owners, in creation order
        records.extend(CatalogRecord(venue, RecordOrigin.OWNED) for venue in owned.values())
        return records

    def list_all(self) -> list[Venue]:
        return [record.value for record in self.list_records()]

    def get_record(self, venue_id: str) -> CatalogRecord[Venue] | None:
        for venue in self._owned():
            if venue.id == venue_id:
                return CatalogRecord(venue, RecordOrigin.OWNED)

        seed = self._seeds.get(venue_id)
        if seed:
            return CatalogRecord(seed.model_copy(deep=True), RecordOrigin.SEED)
        return None

    def get_by_id(self, venue_id: str) -> Venue | None:
        record = self.get_record(venue_id)
        return record.value if record else None

    def save_owned(self, venue: Venue) -> Venue:
        records = self.store.get(Partition.USER_VENUES)

        for index, record in enumerate(records):
            if record["id"] == venue.id:
                records[index] = venue.to_record()
                break
        else:
            records.append(venue.to_record())

        self.store.set(Partition.USER_VENUES, records)
        return venue

    def delete_owned(self, venue_id: str) -> bool:
        records = self.store.get(Partition.USER_VENUES)
        remaining = [record for record in records if record["id"] != venue_id]

        if len(remaining) == len(records):
            return False

        self.store.set(Partition.USER_VENUES, remaining)
        return True
