"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

FEES_TABLE = "student_fees"
NOTIFICATIONS_TABLE = "notifications"

DEFAULT_CURRENCY = "USD"
MONEY_QUANTUM = Decimal("0.01")
MAX_SCHOLARSHIP_PERCENTAGE = Decimal("100")
MIN_INSTALLMENTS = 2
MAX_FEE_AMOUNT = Decimal("1000000000000")

PAYMENT_ID_PREFIX = "payment"
PAYMENT_ID_RANDOM_LENGTH = 9

FEES_HREF = "/fees"
