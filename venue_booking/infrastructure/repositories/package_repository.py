# venue_booking/infrastructure/repositories/package_repository.py

from typing import Sequence

from venue_booking.domain.models import CatalogRecord, RecordOrigin, ServicePackage
from venue_booking.infrastructure.repositories.partition_store import (
    Partition,
    PartitionStore,
)
from venue_booking.infrastructure.seed_catalog import SEED_PACKAGES


class PackageRepository:

    def __init__(
        self,
        store: PartitionStore,
        seed_packages: Sequence[ServicePackage] = SEED_PACKAGES,
    ):
        self.store = store
        self._seeds = {package.id: package for package in seed_packages}

    def _owned(self) -> list[ServicePackage]:
        return [
            ServicePackage.model_validate(record)
            for record in self.store.get(Partition.SERVICE_PACKAGES)
        ]

    def list_records(self) -> list[CatalogRecord[ServicePackage]]:
        seeds = [
            CatalogRecord(package.model_copy(deep=True), RecordOrigin.SEED)
            for package in self._seeds.values()
        ]
        owned = [CatalogRecord(package, RecordOrigin.OWNED) for package in self._owned()]
        return seeds + owned

    def list_for_venue(self, venue_id: str) -> list[ServicePackage]:
        return [
            record.value
            for record in self.list_records()
            if record.value.venue_id == venue_id
        ]

    def get_record(self, package_id: str) -> CatalogRecord[ServicePackage] | None:
        for package in self._owned():
            if package.id == package_id:
                return CatalogRecord(package, RecordOrigin.OWNED)

        seed = self._seeds.get(package_id)
        if seed:
            return CatalogRecord(seed.model_copy(deep=True), RecordOrigin.SEED)
        return None

    def get_by_id(self, package_id: str) -> ServicePackage | None:
        record = self.get_record(package_id)
        return record.value if record else None

    def save_owned(self, package: ServicePackage) -> ServicePackage:
        records = self.store.get(Partition.SERVICE_PACKAGES)

        for index, record in enumerate(records):
            if record["id"] == package.id:
                records[index] = package.to_record()
                break
        else:
            records.append(package.to_record())

        self.store.set(Partition.SERVICE_PACKAGES, records)
        return package

    def delete_owned(self, package_id: str) -> bool:
        records = self.store.get(Partition.SERVICE_PACKAGES)
        remaining = [record for record in records if record["id"] != package_id]

        if len(remaining) == len(records):
            return False

        self.store.set(Partition.SERVICE_PACKAGES, remaining)
        return True
