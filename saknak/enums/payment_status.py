from enum import Enum


class PaymentStatus(str, Enum):
    NONE = "none"
    CONFIRMED = "confirmed"
