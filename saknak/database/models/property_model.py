from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from saknak.database.init import Base
from saknak.enums.property_type import RentalType, PropertyStatus, GenderPreference
from saknak.utils.date_helper import utcnow


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), index=True, nullable=False)
    description = Column(String(2000), nullable=True)
    address = Column(String(255), nullable=True)
    rental_type = Column(String(20), default=RentalType.APARTMENT.value, nullable=False)
    price = Column(Float, nullable=False)
    status = Column(String(20), default=PropertyStatus.AVAILABLE.value, nullable=False)
    furnished = Column(Boolean, default=False)
    has_internet = Column(Boolean, default=False)
    gender_preference = Column(String(10), default=GenderPreference.ANY.value)
    num_rooms = Column(Integer, nullable=True)
    num_beds = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow, nullable=True)

    owner = relationship("User", back_populates="properties")
    booking_requests = relationship("BookingRequest", back_populates="property")
