# venue_booking/infrastructure/repositories/engagement_repository.py

from venue_booking.domain.models import Favorite, Review
from venue_booking.infrastructure.repositories.partition_store import (
    Partition,
    PartitionStore,
)


class FavoriteRepository:

    def __init__(self, store: PartitionStore):
        self.store = store

    def venue_ids_for_user(self, user_id: str) -> list[str]:
        return [
            record["venueId"]
            for record in self.store.get(Partition.FAVORITES)
            if record["userId"] == user_id
        ]

    def add(self, favorite: Favorite) -> bool:
        if favorite.venue_id in self.venue_ids_for_user(favorite.user_id):
            return False

        self.store.append(Partition.FAVORITES, favorite.to_record())
        return True

    def remove(self, user_id: str, venue_id: str) -> bool:
        records = self.store.get(Partition.FAVORITES)
        remaining = [
            record
            for record in records
            if not (record["userId"] == user_id and record["venueId"] == venue_id)
        ]

        if len(remaining) == len(records):
            return False

        self.store.set(Partition.FAVORITES, remaining)
        return True


class ReviewRepository:

    def __init__(self, store: PartitionStore):
        self.store = store

    def list_all(self) -> list[Review]:
        return [
            Review.model_validate(record)
            for record in self.store.get(Partition.REVIEWS)
        ]

    def list_for_venue(self, venue_id: str) -> list[Review]:
        return [review for review in self.list_all() if review.venue_id == venue_id]

    def list_for_customer(self, customer_id: str) -> list[Review]:
        return [
            review for review in self.list_all() if review.customer_id == customer_id
        ]

    def add(self, review: Review) -> Review:
        self.store.append(Partition.REVIEWS, review.to_record())
        return review
