import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable
from uuid import uuid4

from venue_booking.domain.exceptions import ValidationError, VenueNotFoundError
from venue_booking.domain.models import Review, ReviewDraft
from venue_booking.infrastructure.repositories.engagement_repository import ReviewRepository
from venue_booking.infrastructure.repositories.partition_store import PartitionStore
from venue_booking.infrastructure.repositories.venue_repository import VenueRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingSummary:
    average: float
    count: int


class ReviewService:

    def __init__(
        self,
        store: PartitionStore,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.clock = clock
        self.review_repository = ReviewRepository(store)
        self.venue_repository = VenueRepository(store)

    def get_venue_reviews(self, venue_id: str) -> list[Review]:
        return self.review_repository.list_for_venue(venue_id)

    def get_customer_reviews(self, customer_id: str) -> list[Review]:
        return self.review_repository.list_for_customer(customer_id)

    def has_reviewed(self, customer_id: str, venue_id: str) -> bool:
        return any(
            review.venue_id == venue_id
            for review in self.review_repository.list_for_customer(customer_id)
        )

    def submit_review(
        self,
        venue_id: str,
        customer_id: str,
        draft: ReviewDraft,
    ) -> Review:
        with self.store.transaction():
            if not self.venue_repository.get_by_id(venue_id):
                raise VenueNotFoundError(venue_id)
            if self.has_reviewed(customer_id, venue_id):
                raise ValidationError(
                    ["venueId"], "Customer has already reviewed this venue"
                )

            review = Review(
                id=str(uuid4()),
                venue_id=venue_id,
                customer_id=customer_id,
                created_at=self.clock(),
                **draft.model_dump(),
            )
            self.review_repository.add(review)

        logger.info("Customer %s reviewed venue %s", customer_id, venue_id)
        return review

    def get_average_rating(self, venue_id: str) -> RatingSummary:
        reviews = self.get_venue_reviews(venue_id)
        if not reviews:
            return RatingSummary(average=0.0, count=0)

        mean = Decimal(sum(review.rating for review in reviews)) / len(reviews)
        average = mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return RatingSummary(average=float(average), count=len(reviews))
