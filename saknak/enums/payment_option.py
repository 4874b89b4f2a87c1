from enum import Enum


class PaymentOption(str, Enum):
    DEPOSIT = "deposit"
    FULL_INSURANCE = "full_insurance"
