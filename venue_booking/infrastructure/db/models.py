# venue_booking/infrastructure/db/models.py

from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from venue_booking.infrastructure.db.session import Base


class PartitionState(Base):
    """
    One row per named partition (bookings, userVenues, ...).
    `payload` holds the JSON text of the ordered record list.
    """

    __tablename__ = "partitions"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
