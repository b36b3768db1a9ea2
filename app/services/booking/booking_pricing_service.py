# app/services/booking/booking_pricing_service.py
"""
Booking pricing service.

Nightly rate accumulation plus tax and a flat service fee. All amounts are
Decimal and quantized to cents with ROUND_HALF_UP.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Union

from app.utils.date_utils import count_nights

CENTS = Decimal("0.01")

Amount = Union[Decimal, int, float, str]


def to_money(value: Amount) -> Decimal:
    """Coerce to Decimal and round to cents."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PriceBreakdown:
    price_per_night: Decimal
    nights: int
    subtotal: Decimal
    taxes: Decimal
    fees: Decimal
    total_amount: Decimal
    currency: str

    def as_dict(self) -> Dict[str, object]:
        return {
            "price_per_night": self.price_per_night,
            "number_of_nights": self.nights,
            "subtotal": self.subtotal,
            "taxes": self.taxes,
            "fees": self.fees,
            "total_amount": self.total_amount,
            "currency": self.currency,
        }


class BookingPricingService:
    """
    Service for booking pricing calculations.

    Example:
        >>> BookingPricingService(Decimal("0.12"), Decimal("25")).calculate(Decimal("100"), 2).total_amount
        Decimal('249.00')
    """

    def __init__(self, tax_rate: Amount, service_fee: Amount, currency: str = "USD"):
        self.tax_rate = Decimal(str(tax_rate))
        self.service_fee = to_money(service_fee)
        self.currency = currency

    def calculate(self, price_per_night: Amount, nights: int) -> PriceBreakdown:
        """
        Price a stay of ``nights`` nights.

        Args:
            price_per_night: Room rate
            nights: Number of nights, at least one

        Raises:
            ValueError: If ``nights`` is not positive or the rate is negative
        """
        if nights < 1:
            raise ValueError("A stay must be at least one night")
        rate = to_money(price_per_night)
        if rate < 0:
            raise ValueError("Nightly rate cannot be negative")

        subtotal = to_money(rate * nights)
        taxes = to_money(subtotal * self.tax_rate)
        fees = self.service_fee
        total = to_money(subtotal + taxes + fees)

        return PriceBreakdown(
            price_per_night=rate,
            nights=nights,
            subtotal=subtotal,
            taxes=taxes,
            fees=fees,
            total_amount=total,
            currency=self.currency,
        )

    def calculate_for_dates(self, price_per_night: Amount, check_in: date, check_out: date) -> PriceBreakdown:
        return self.calculate(price_per_night, count_nights(check_in, check_out))
