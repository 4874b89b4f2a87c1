from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime

from saknak.enums.payment_option import PaymentOption


class BookingRequestCreate(BaseModel):
    property_id: int
    message: Optional[str] = Field(default=None, max_length=2000)

    model_config = ConfigDict(extra="forbid")


class BookingDecision(BaseModel):
    status: str

    model_config = ConfigDict(extra="forbid")


class PaymentSubmission(BaseModel):
    payment_option: PaymentOption = PaymentOption.DEPOSIT
    payment_proof_url: Optional[str] = Field(default=None, max_length=500)

    model_config = ConfigDict(extra="forbid")


class RentUpdate(BaseModel):
    rent_due_date: Optional[date] = None
    rent_paid_date: Optional[date] = None

    model_config = ConfigDict(extra="forbid")


class BookingPropertyResponse(BaseModel):
    id: int
    title: str
    address: Optional[str] = None
    rental_type: str
    price: float

    model_config = ConfigDict(from_attributes=True)


class BookingRequestResponse(BaseModel):
    id: int
    property_id: int
    student_id: int
    owner_id: int
    message: Optional[str] = None
    status: str
    deposit_amount: Optional[float] = None
    full_insurance_amount: Optional[float] = None
    vodafone_number: Optional[str] = None
    expires_at: Optional[datetime] = None
    payment_option: Optional[str] = None
    payment_proof_url: Optional[str] = None
    payment_status: str
    payment_confirmed: bool
    rent_due_date: Optional[date] = None
    rent_paid_date: Optional[date] = None
    student_can_rate: bool
    owner_can_rate: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    property: Optional[BookingPropertyResponse] = None

    model_config = ConfigDict(from_attributes=True)
