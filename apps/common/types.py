"""
Type system for EMall
Rust-inspired Result pattern and shared business exception hierarchy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

# Type variables for generic Result
T = TypeVar('T')  # Success type
E = TypeVar('E')  # Error type

# ===============================================================================
# RESULT TYPES
# ===============================================================================

@dataclass(frozen=True)
class Ok(Generic[T]):
    """Success result containing a value"""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value"""
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Error result containing an error value"""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """Raises ValueError, check is_err() first"""
        raise ValueError(f"Called unwrap on Err: {self.error}")


# Result type alias
Result = Ok[T] | Err[E]

# ===============================================================================
# BUSINESS TYPES
# ===============================================================================

PickupCode = str  # Six character pickup code: "K7M4QX"
CurrencyCode = str  # ISO 4217 code: "EGP"

# ===============================================================================
# MONEY
# ===============================================================================

SUPPORTED_CURRENCIES = ('EGP', 'USD', 'EUR')


@dataclass(frozen=True)
class Money:
    """Money type with currency support"""
    amount: int  # Store in cents/piasters for precision
    currency: CurrencyCode = 'EGP'

    def __post_init__(self) -> None:
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def to_decimal(self) -> float:
        """Get decimal amount"""
        return self.amount / 100

    def __str__(self) -> str:
        return f"{self.to_decimal():.2f} {self.currency}"


# ===============================================================================
# COMMON EXCEPTIONS
# ===============================================================================

class BusinessError(Exception):
    """Base exception for business logic errors"""

