import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Sequence
from uuid import uuid4

from venue_booking.application.consistency_guards import ConsistencyGuards, DeletionCheck
from venue_booking.domain.exceptions import (
    ConsistencyViolationError,
    ValidationError,
    VenueNotFoundError,
)
from venue_booking.domain.models import (
    Favorite,
    RecordOrigin,
    Venue,
    VenueDraft,
    VenuePatch,
    build,
)
from venue_booking.infrastructure.repositories.engagement_repository import FavoriteRepository
from venue_booking.infrastructure.repositories.partition_store import PartitionStore
from venue_booking.infrastructure.repositories.venue_repository import VenueRepository

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"
PLACEHOLDER_IMAGE = "https://picsum.photos/800/600?random={venue_id}"


class VenueSortKey(str, Enum):
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    RATING = "rating"
    CAPACITY = "capacity"


_SORT_KEYS: dict[VenueSortKey, Callable[[Venue], float]] = {
    VenueSortKey.PRICE_LOW: lambda v: v.price_range.min,
    VenueSortKey.PRICE_HIGH: lambda v: -v.price_range.max,
    VenueSortKey.RATING: lambda v: -v.rating,
    VenueSortKey.CAPACITY: lambda v: -v.capacity.max,
}


@dataclass(frozen=True)
class VenueFilter:
    category: str | None = None
    min_price: int | None = None
    max_price: int | None = None
    min_capacity: int | None = None
    max_capacity: int | None = None
    amenities: Sequence[str] = field(default_factory=tuple)

    def matches(self, venue: Venue) -> bool:
        if self.category and self.category != ALL_CATEGORIES:
            if venue.category.value != self.category:
                return False
        if self.min_price is not None and venue.price_range.min < self.min_price:
            return False
        if self.max_price is not None and venue.price_range.max > self.max_price:
            return False
        # capacity bounds test for overlap with the venue's range
        if self.min_capacity is not None and venue.capacity.max < self.min_capacity:
            return False
        if self.max_capacity is not None and venue.capacity.min > self.max_capacity:
            return False
        return all(amenity in venue.amenities for amenity in self.amenities)


def sort_venues(venues: Sequence[Venue], key: VenueSortKey | str) -> list[Venue]:
    """Return a new, stably sorted list; the input is left untouched."""
    try:
        sort_key = VenueSortKey(key)
    except ValueError as exc:
        raise ValidationError(["sort"], f"Unknown sort key: {key}") from exc

    return sorted(venues, key=_SORT_KEYS[sort_key])


class VenueCatalog:
    """Read and write access to the merged seed + owned venue view."""

    def __init__(
        self,
        store: PartitionStore,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.clock = clock
        self.venue_repository = VenueRepository(store)
        self.favorite_repository = FavoriteRepository(store)
        self.guards = ConsistencyGuards(store)

    def get_all_venues(self) -> list[Venue]:
        return self.venue_repository.list_all()

    def get_venue_by_id(self, venue_id: str) -> Venue | None:
        return self.venue_repository.get_by_id(venue_id)

    def get_featured_venues(self) -> list[Venue]:
        return [venue for venue in self.get_all_venues() if venue.is_featured]

    def get_venues_for_owner(self, owner_id: str) -> list[Venue]:
        return [venue for venue in self.get_all_venues() if venue.owner_id == owner_id]

    def search_venues(self, query: str) -> list[Venue]:
        needle = query.strip().lower()
        return [
            venue
            for venue in self.get_all_venues()
            if any(
                needle in text.lower()
                for text in (
                    venue.name,
                    venue.location.city,
                    venue.location.province,
                    venue.location.address,
                )
            )
        ]

    def filter_by_category(self, category: str) -> list[Venue]:
        return self.filter_venues(VenueFilter(category=category))

    def filter_venues(self, criteria: VenueFilter) -> list[Venue]:
        return [venue for venue in self.get_all_venues() if criteria.matches(venue)]

    def sort_venues(self, venues: Sequence[Venue], key: VenueSortKey | str) -> list[Venue]:
        return sort_venues(venues, key)

    # ---------------------
    # OWNER MUTATIONS
    # ---------------------

    def create_venue(self, owner_id: str, draft: VenueDraft) -> Venue:
        venue_id = str(uuid4())
        images = list(draft.images) or [PLACEHOLDER_IMAGE.format(venue_id=venue_id)]

        venue = build(
            Venue,
            {
                **draft.model_dump(by_alias=True),
                "id": venue_id,
                "images": images,
                "coverImage": draft.cover_image or images[0],
                "ownerId": owner_id,
                "createdAt": self.clock(),
            },
        )

        with self.store.transaction():
            self.venue_repository.save_owned(venue)

        logger.info("Owner %s created venue %s", owner_id, venue.id)
        return venue

    def update_venue(self, venue_id: str, patch: VenuePatch) -> Venue:
        """
        Apply a patch to a venue. Editing a seed venue materializes an
        owned copy under the same id; the seed itself is never changed.
        """
        with self.store.transaction():
            record = self.venue_repository.get_record(venue_id)
            if not record:
                raise VenueNotFoundError(venue_id)

            updated = patch.apply_to(record.value)
            self.venue_repository.save_owned(updated)

        if record.origin == RecordOrigin.SEED:
            logger.info("Seed venue %s promoted to an owned record", venue_id)
        else:
            logger.info("Updated venue %s", venue_id)
        return updated

    def can_delete_venue(self, venue_id: str) -> DeletionCheck:
        return self.guards.can_delete_venue(venue_id)

    def delete_venue(self, venue_id: str) -> None:
        with self.store.transaction():
            if not self.venue_repository.get_record(venue_id):
                raise VenueNotFoundError(venue_id)

            check = self.guards.can_delete_venue(venue_id)
            if not check.can_delete:
                logger.warning("Refused to delete venue %s: %s", venue_id, check.reason)
                raise ConsistencyViolationError(check.reason)

            self.venue_repository.delete_owned(venue_id)

        logger.info("Deleted venue %s", venue_id)

    # ---------------------
    # FAVORITES
    # ---------------------

    def add_to_favorites(self, user_id: str, venue_id: str) -> None:
        if not self.get_venue_by_id(venue_id):
            raise VenueNotFoundError(venue_id)
        self.favorite_repository.add(Favorite(user_id=user_id, venue_id=venue_id))

    def remove_from_favorites(self, user_id: str, venue_id: str) -> None:
        self.favorite_repository.remove(user_id, venue_id)

    def is_favorite(self, user_id: str, venue_id: str) -> bool:
        return venue_id in self.favorite_repository.venue_ids_for_user(user_id)

    def get_favorite_venues(self, user_id: str) -> list[Venue]:
        favorites = set(self.favorite_repository.venue_ids_for_user(user_id))
        return [venue for venue in self.get_all_venues() if venue.id in favorites]
