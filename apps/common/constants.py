"""
EMall Constants

Centralized defaults for marketplace business rules that span multiple apps.
Runtime values are read from Django settings; these are the fallbacks.
"""

from typing import Final

# ===============================================================================
# PICKUP FULFILMENT 🎫
# ===============================================================================

# Uppercase letters and digits without the confusable 0/O, 1/I/L
PICKUP_CODE_ALPHABET: Final[str] = 'ABCDEFGHJKMNPQRSTUVWXYZ23456789'
PICKUP_CODE_LENGTH: Final[int] = 6
PICKUP_CODE_TTL_MINUTES: Final[int] = 10
PICKUP_CODE_MAX_GENERATION_ATTEMPTS: Final[int] = 20

# QR rendering
PICKUP_QR_SIZE_PX: Final[int] = 300
PICKUP_QR_MIN_SIZE_PX: Final[int] = 64
PICKUP_QR_MAX_SIZE_PX: Final[int] = 1024
PICKUP_QR_BORDER_MODULES: Final[int] = 2

# ===============================================================================
# MERCHANT REWARDS 🏆
# ===============================================================================

PICKUP_REWARD_POINTS_PER_ORDER: Final[int] = 10
MAX_DISCOUNT_PERCENTAGE: Final[int] = 100
REWARD_HISTORY_LIMIT: Final[int] = 10

# ===============================================================================
# NOTIFICATIONS 🔔
# ===============================================================================

RECENT_NOTIFICATIONS_LIMIT: Final[int] = 20
MAX_RECENT_NOTIFICATIONS_LIMIT: Final[int] = 100

# ===============================================================================
# MONEY 💰
# ===============================================================================

DEFAULT_CURRENCY: Final[str] = 'EGP'
ORDER_SHORT_ID_LENGTH: Final[int] = 8
ORDER_NUMBER_MAX_ATTEMPTS: Final[int] = 5
