import logging
from uuid import uuid4

from venue_booking.application.consistency_guards import ConsistencyGuards, DeletionCheck
from venue_booking.domain.exceptions import (
    ConsistencyViolationError,
    PackageNotFoundError,
    VenueNotFoundError,
)
from venue_booking.domain.models import (
    PackageDraft,
    PackagePatch,
    ServicePackage,
    build,
)
from venue_booking.infrastructure.repositories.package_repository import PackageRepository
from venue_booking.infrastructure.repositories.partition_store import PartitionStore
from venue_booking.infrastructure.repositories.venue_repository import VenueRepository

logger = logging.getLogger(__name__)


class ServicePackageService:

    def __init__(self, store: PartitionStore):
        self.store = store
        self.package_repository = PackageRepository(store)
        self.venue_repository = VenueRepository(store)
        self.guards = ConsistencyGuards(store)

    def get_venue_packages(self, venue_id: str) -> list[ServicePackage]:
        return self.package_repository.list_for_venue(venue_id)

    def get_package_by_id(self, package_id: str) -> ServicePackage | None:
        return self.package_repository.get_by_id(package_id)

    def create_package(self, venue_id: str, draft: PackageDraft) -> ServicePackage:
        with self.store.transaction():
            if not self.venue_repository.get_by_id(venue_id):
                raise VenueNotFoundError(venue_id)

            package = build(
                ServicePackage,
                {**draft.model_dump(by_alias=True), "id": str(uuid4()), "venueId": venue_id},
            )
            self.package_repository.save_owned(package)

        logger.info("Created package %s for venue %s", package.id, venue_id)
        return package

    def update_package(self, package_id: str, patch: PackagePatch) -> ServicePackage:
        with self.store.transaction():
            record = self.package_repository.get_record(package_id)
            if not record:
                raise PackageNotFoundError(package_id)
            if not record.is_owned:
                raise ConsistencyViolationError("Cannot modify a system package.")

            updated = patch.apply_to(record.value)
            self.package_repository.save_owned(updated)

        logger.info("Updated package %s", package_id)
        return updated

    def can_delete_package(self, package_id: str) -> DeletionCheck:
        return self.guards.can_delete_package(package_id)

    def delete_package(self, package_id: str) -> None:
        with self.store.transaction():
            if not self.package_repository.get_record(package_id):
                raise PackageNotFoundError(package_id)

            check = self.guards.can_delete_package(package_id)
            if not check.can_delete:
                logger.warning("Refused to delete package %s: %s", package_id, check.reason)
                raise ConsistencyViolationError(check.reason)

            self.package_repository.delete_owned(package_id)

        logger.info("Deleted package %s", package_id)
