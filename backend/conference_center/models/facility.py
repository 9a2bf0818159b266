"""
Bookable conference facility.

Key design decisions:
- `is_active` is the soft-delete switch: inactive facilities cannot be booked
  but keep their booking history intact
- The facility row doubles as the per-facility lock for booking writes
  (SELECT ... FOR UPDATE in the booking service)
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Index, Integer, Numeric, String

from conference_center.db.base import Base, TimestampMixin


class Facility(Base, TimestampMixin):
    __tablename__ = "facilities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=False, default="")
    address = Column(String(255), nullable=False)
    postal_code = Column(String(20), nullable=False)
    city = Column(String(100), nullable=False)
    max_capacity = Column(Integer, nullable=False)
    price_per_day = Column(Numeric(12, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("max_capacity > 0", name="check_facility_capacity_positive"),
        CheckConstraint("price_per_day >= 0", name="check_facility_price_non_negative"),
        Index("ix_facilities_active_name", "is_active", "name"),
    )

    def __repr__(self) -> str:
        return f"<Facility(id={self.id}, name={self.name}, active={self.is_active})>"
