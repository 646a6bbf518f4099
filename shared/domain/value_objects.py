"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
- DateRange: Represents a rental period (start inclusive, end exclusive)
- Actor: The verified caller a use case runs on behalf of
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.base import ValueObject

CENTS = Decimal('0.01')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Immutable and supports arithmetic operations.
    """
    amount: Decimal
    currency: str = 'USD'

    def __post_init__(self):
        # Validation
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency or len(self.currency) != 3 or not self.currency.isalpha():
            raise ValueError(f"Unsupported currency: {self.currency!r}")
        object.__setattr__(self, 'currency', self.currency.upper())

    @classmethod
    def zero(cls, currency: str = 'USD') -> 'Money':
        return cls(Decimal('0'), currency)

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        """Subtract two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only subtract Money from Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract different currencies: {self.currency} and {other.currency}")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        """Multiply money by a factor"""
        if not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by an integer or Decimal")
        return Money(self.amount * Decimal(factor), self.currency)

    def rounded(self) -> 'Money':
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    def to_minor_units(self) -> int:
        """Amount in the currency's minor unit (cents), as payment gateways expect"""
        return int((self.amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Rental period value object

    Represents a range from start (inclusive) to end (exclusive).
    Both bounds are timezone-aware datetimes.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        # Validation
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start}) must be before end ({self.end})")

    @property
    def length(self) -> timedelta:
        return self.end - self.start

    @property
    def days(self) -> int:
        """Whole days covered by the range, any started day counts as one"""
        return math.ceil(self.length / timedelta(days=1))

    @property
    def hours(self) -> int:
        return math.ceil(self.length / timedelta(hours=1))

    def __str__(self):
        return f"{self.start:%Y-%m-%d %H:%M} - {self.end:%Y-%m-%d %H:%M}"

    def __repr__(self):
        return f"DateRange({self.start.isoformat()}, {self.end.isoformat()})"


@dataclass(frozen=True)
class Actor(ValueObject):
    """
    Verified caller identity

    Built from the authenticated request user; use cases receive it instead
    of the request so they stay independent of the HTTP layer.
    """
    user_id: int
    role: str
    email: str = ''

    ADMIN = 'admin'
    CUSTOMER = 'customer'

    @classmethod
    def from_user(cls, user) -> 'Actor':
        role = cls.ADMIN if getattr(user, 'is_admin', lambda: False)() else cls.CUSTOMER
        return cls(user_id=user.pk, role=role, email=getattr(user, 'email', ''))

    @property
    def is_admin(self) -> bool:
        return self.role == self.ADMIN

    def owns(self, owner_id) -> bool:
        return self.user_id == owner_id
