"""
Pickup code primitives for EMall
Code generation, expiry arithmetic, format validation and the pickup error taxonomy.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from django.conf import settings

from apps.common.constants import (
    PICKUP_CODE_ALPHABET,
    PICKUP_CODE_LENGTH,
    PICKUP_CODE_MAX_GENERATION_ATTEMPTS,
    PICKUP_CODE_TTL_MINUTES,
)
from apps.common.types import BusinessError, Err, Ok, PickupCode, Result

# ===============================================================================
# PICKUP STATES
# ===============================================================================

class PickupState(str, Enum):
    """Lifecycle of a pickup code"""
    ISSUED = 'issued'
    EXPIRED = 'expired'
    REDEEMED = 'redeemed'
    INVALID = 'invalid'


# ===============================================================================
# ERROR TAXONOMY
# ===============================================================================

class PickupError(BusinessError):
    """Base pickup failure, carries an API error code and HTTP status"""
    code = 'PICKUP_ERROR'
    http_status = 400
    default_message = 'Pickup code could not be processed'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class PickupCodeValidationError(PickupError):
    code = 'VALIDATION_ERROR'
    http_status = 400
    default_message = 'Pickup code must be 6 characters'


class PickupCodeNotFound(PickupError):
    code = 'NOT_FOUND'
    http_status = 404
    default_message = 'Invalid pickup code'


class PickupCodeForbidden(PickupError):
    code = 'FORBIDDEN'
    http_status = 403
    default_message = 'This order does not belong to your store'


class PickupCodeAlreadyRedeemed(PickupError):
    code = 'ALREADY_REDEEMED'
    http_status = 409
    default_message = 'This pickup code has already been used'


class PickupCodeExpired(PickupError):
    code = 'EXPIRED'
    http_status = 410
    default_message = 'This pickup code has expired. Ask the customer to generate a new one'


class PickupOrderClosed(PickupError):
    code = 'ORDER_CLOSED'
    http_status = 409
    default_message = 'This order is no longer open for pickup'


# ===============================================================================
# SETTINGS
# ===============================================================================

def get_code_length() -> int:
    return int(getattr(settings, 'PICKUP_CODE_LENGTH', PICKUP_CODE_LENGTH))


def get_code_ttl_minutes() -> int:
    return int(getattr(settings, 'PICKUP_CODE_TTL_MINUTES', PICKUP_CODE_TTL_MINUTES))


# ===============================================================================
# CODE GENERATION
# ===============================================================================

def generate_code(length: int | None = None, alphabet: str = PICKUP_CODE_ALPHABET) -> PickupCode:
    """🔒 Generate a pickup code from the unambiguous alphabet using the CSPRNG"""
    if length is None:
        length = get_code_length()
    if length < 1:
        raise ValueError("Pickup code length must be positive")
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def compute_expiry(now: datetime, minutes: int | None = None) -> datetime:
    """Expiry instant for a code issued at `now`"""
    if minutes is None:
        minutes = get_code_ttl_minutes()
    return now + timedelta(minutes=minutes)


def is_expired(expiry: datetime, now: datetime) -> bool:
    """A code is expired strictly after its expiry instant"""
    return now > expiry


def remaining_seconds(expiry: datetime, now: datetime) -> int:
    return max(0, int((expiry - now).total_seconds()))


def format_remaining(expiry: datetime, now: datetime) -> str:
    """Countdown text shown next to the code: MM:SS or Expired"""
    if is_expired(expiry, now):
        return 'Expired'
    minutes, seconds = divmod(remaining_seconds(expiry, now), 60)
    return f"{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class IssuedPickupCode:
    code: PickupCode
    expires_at: datetime


def issue_pickup_code(
    now: datetime,
    is_taken: Callable[[str], bool] | None = None,
    minutes: int | None = None,
    length: int | None = None,
) -> IssuedPickupCode:
    """
    Issue a fresh code and its expiry.

    `is_taken` reports whether a candidate collides with an outstanding code;
    candidates are redrawn until one is free or the attempt budget runs out.
    """
    max_attempts = int(getattr(
        settings, 'PICKUP_CODE_MAX_GENERATION_ATTEMPTS', PICKUP_CODE_MAX_GENERATION_ATTEMPTS
    ))

    for _ in range(max_attempts):
        code = generate_code(length)
        if is_taken is None or not is_taken(code):
            return IssuedPickupCode(code=code, expires_at=compute_expiry(now, minutes))

    raise RuntimeError(f"Could not generate a unique pickup code after {max_attempts} attempts")


# ===============================================================================
# CODE VALIDATION
# ===============================================================================

def normalize_code(raw: str | None) -> str:
    """Trim and uppercase operator input"""
    return (raw or '').strip().upper()


def validate_code_format(raw: str | None) -> Result[PickupCode, PickupCodeValidationError]:
    """Check length and charset before any lookup"""
    code = normalize_code(raw)
    length = get_code_length()

    if not code:
        return Err(PickupCodeValidationError('Pickup code is required'))
    if len(code) != length:
        return Err(PickupCodeValidationError(f'Pickup code must be {length} characters'))
    if any(char not in PICKUP_CODE_ALPHABET for char in code):
        return Err(PickupCodeValidationError('Pickup code contains invalid characters'))

    return Ok(code)
