from saknak.database.init import Base
from saknak.enums.user_type import UserType
from saknak.utils.date_helper import utcnow

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(100), nullable=False)
    user_type = Column(String(20), default=UserType.STUDENT.value, nullable=False)
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True)

    # Student profile, required before a student can request a booking
    civil_id_url = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True)
    area = Column(String(100), nullable=True)
    college = Column(String(150), nullable=True)
    level = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    properties = relationship("Property", back_populates="owner", cascade="all, delete-orphan")

    STUDENT_PROFILE_FIELDS = ("civil_id_url", "city", "area", "college", "level")

    @property
    def is_student(self) -> bool:
        return self.user_type == UserType.STUDENT.value

    def missing_profile_fields(self) -> list[str]:
        return [
            field
            for field in self.STUDENT_PROFILE_FIELDS
            if not (getattr(self, field) or "").strip()
        ]
