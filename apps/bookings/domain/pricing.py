"""
Booking Pricing

Prices are computed on the server from the product's rental-unit tiers:

    duration   = rental period measured in the tier's unit, rounded up
    line total = tier price * quantity * duration
    subtotal   = sum of line totals
    total      = subtotal - discount + late fees

Durations and prices sent by the client are only accepted when they agree
with this computation.
"""

import math
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Optional, Sequence
from uuid import UUID

from apps.bookings.exceptions import DurationOutOfRange, PricingMismatch
from apps.catalog.exceptions import RentalUnitNotOffered
from shared.domain.value_objects import DateRange, Money

UNIT_LENGTH = {
    'hour': timedelta(hours=1),
    'day': timedelta(days=1),
    'week': timedelta(days=7),
    'month': timedelta(days=30),
    'year': timedelta(days=365),
}


def rental_duration(unit: str, period: DateRange) -> int:
    """Number of started ``unit`` periods covered by ``period``"""
    return max(1, math.ceil(period.length / UNIT_LENGTH[unit]))


@dataclass(frozen=True)
class LineRequest:
    """One requested line item, as submitted by the customer"""
    product_id: UUID
    quantity: int
    rental_unit: str
    duration: Optional[int] = None
    unit_price: Optional[Decimal] = None


@dataclass(frozen=True)
class PricedLine:
    product_id: UUID
    quantity: int
    rental_unit: str
    duration: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity * self.duration


@dataclass(frozen=True)
class ClaimedPricing:
    """Pricing block the client computed; every field is optional"""
    subtotal: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    late_fees: Optional[Decimal] = None
    total: Optional[Decimal] = None


@dataclass(frozen=True)
class Quote:
    lines: Sequence[PricedLine]
    subtotal: Money
    discount: Money
    late_fees: Money
    total: Money


def price_line(product, request: LineRequest, period: DateRange) -> PricedLine:
    tier = product.tier_for(request.rental_unit)
    if tier is None:
        raise RentalUnitNotOffered(
            details={'product_id': str(product.pk), 'rental_unit': request.rental_unit}
        )

    duration = rental_duration(request.rental_unit, period)
    if request.duration is not None and request.duration != duration:
        raise PricingMismatch(
            "Duration does not match the booking dates",
            details={'product_id': str(product.pk), 'expected_duration': duration, 'duration': request.duration},
        )
    if not tier.accepts(duration):
        raise DurationOutOfRange(
            details={
                'product_id': str(product.pk),
                'rental_unit': tier.unit,
                'duration': duration,
                'min_duration': tier.min_duration,
                'max_duration': tier.max_duration,
            }
        )
    if request.unit_price is not None and Decimal(request.unit_price) != tier.price:
        raise PricingMismatch(
            details={'product_id': str(product.pk), 'expected_unit_price': str(tier.price)}
        )

    return PricedLine(
        product_id=product.pk,
        quantity=request.quantity,
        rental_unit=tier.unit,
        duration=duration,
        unit_price=tier.price,
    )


def build_quote(lines: Sequence[PricedLine], currency: str, claimed: Optional[ClaimedPricing] = None) -> Quote:
    subtotal = Money.zero(currency)
    for line in lines:
        subtotal = subtotal + Money(line.line_total, currency)
    subtotal = subtotal.rounded()
    discount = Money.zero(currency).rounded()
    late_fees = Money.zero(currency).rounded()
    quote = Quote(
        lines=tuple(lines),
        subtotal=subtotal,
        discount=discount,
        late_fees=late_fees,
        total=(subtotal - discount + late_fees).rounded(),
    )
    if claimed is not None:
        _check_claim(quote, claimed)
    return quote


def _check_claim(quote: Quote, claimed: ClaimedPricing) -> None:
    expected = {
        'subtotal': quote.subtotal.amount,
        'discount': quote.discount.amount,
        'late_fees': quote.late_fees.amount,
        'total': quote.total.amount,
    }
    mismatched = {
        name: str(value)
        for name, value in expected.items()
        if getattr(claimed, name) is not None and Decimal(getattr(claimed, name)) != value
    }
    if mismatched:
        raise PricingMismatch(details={'expected': mismatched})
