"""
Customer model. Email is stored normalized (trimmed, lower-cased) so the
unique index enforces case-insensitive uniqueness at the database level.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from conference_center.db.base import Base, TimestampMixin
from conference_center.models.status import BookingStatus


class Customer(Base, TimestampMixin):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    email = Column(String(254), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=False, default="")
    company_name = Column(String(255), nullable=False, default="")
    address = Column(String(255), nullable=False, default="")
    postal_code = Column(String(20), nullable=False, default="")
    city = Column(String(100), nullable=False, default="")

    # Relationships
    bookings = relationship("Booking", back_populates="customer", lazy="selectin")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def total_bookings(self) -> int:
        return len(self.bookings)

    @property
    def active_bookings(self) -> int:
        return sum(1 for b in self.bookings if BookingStatus(b.status).is_active)

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, email={self.email})>"
