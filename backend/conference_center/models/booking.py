"""
Booking model representing a customer's reservation of a facility.

Key design decisions:
- start_date/end_date are wall-clock datetimes at the facility (no time zone)
- Status is a closed enum; cancelled bookings are kept, never deleted
- Composite index on (facility_id, start_date, end_date) serves the overlap check
- PostgreSQL additionally carries an exclusion constraint over active ranges
  (see the initial migration) as the storage-level guard against double-booking
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from conference_center.db.base import Base, TimestampMixin
from conference_center.models.status import BookingStatus


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    facility_id = Column(Integer, ForeignKey("facilities.id"), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    number_of_participants = Column(Integer, nullable=False)
    notes = Column(String(4000), nullable=False, default="")
    status = Column(
        Enum(
            BookingStatus,
            name="booking_status",
            native_enum=False,
            length=20,
            values_callable=lambda e: [x.value for x in e],
        ),
        nullable=False,
        default=BookingStatus.PENDING,
    )
    total_price = Column(Numeric(12, 2), nullable=False)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    customer = relationship("Customer", back_populates="bookings")
    facility = relationship("Facility")
    contract = relationship("BookingContract", back_populates="booking", uselist=False)

    __table_args__ = (
        CheckConstraint("number_of_participants > 0", name="check_booking_participants_positive"),
        CheckConstraint("end_date > start_date", name="check_booking_range"),
        CheckConstraint("total_price >= 0", name="check_booking_price_non_negative"),
        Index("ix_bookings_facility_range", "facility_id", "start_date", "end_date"),
    )

    @property
    def customer_name(self):
        return self.customer.full_name if self.customer else None

    @property
    def customer_email(self):
        return self.customer.email if self.customer else None

    @property
    def facility_name(self):
        return self.facility.name if self.facility else None

    @property
    def contract_id(self):
        return self.contract.id if self.contract else None

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, facility={self.facility_id}, customer={self.customer_id}, status={self.status})>"
