# venue_booking/domain/pricing.py

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from venue_booking.domain.models import PricingUnit, ServicePackage

SERVICE_FEE_RATE = Decimal("0.05")
DEPOSIT_RATE = Decimal("0.30")


@dataclass(frozen=True)
class LineItem:
    """A selected service with its price already resolved for the party size."""

    name: str
    price: int


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: int
    service_fee: int
    total: int
    deposit: int
    balance: int


def round_currency(amount: Decimal) -> int:
    """Round half-up to a whole currency unit."""
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def resolve_line_item(package: ServicePackage, guest_count: int) -> LineItem:
    if package.pricing_unit == PricingUnit.PER_PERSON:
        return LineItem(
            name=package.name,
            price=(package.price_per_person or 0) * guest_count,
        )

    # flat_rate and per_hour are charged as quoted
    return LineItem(name=package.name, price=package.price or 0)


def calculate_total(
    venue_price: int,
    line_items: Sequence[LineItem],
) -> PriceBreakdown:
    """
    Compute the booking price from a venue base price and resolved
    line items. Pure: identical inputs always give identical output.
    Inputs are not validated here; guest counts are checked upstream.
    """
    subtotal = venue_price + sum(item.price for item in line_items)

    service_fee = round_currency(Decimal(subtotal) * SERVICE_FEE_RATE)
    total = subtotal + service_fee
    deposit = round_currency(Decimal(total) * DEPOSIT_RATE)

    return PriceBreakdown(
        subtotal=subtotal,
        service_fee=service_fee,
        total=total,
        deposit=deposit,
        balance=total - deposit,
    )
