"""
Legal contract derived from a booking.

Key design decisions:
- Unique booking_id: one contract per booking, checked in the service and
  enforced by the database
- customer_name / customer_email / facility_name are snapshots taken at
  creation time and never resynced with the live records
- `version` counts edits to terms, amount and payment due date
"""

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from conference_center.db.base import Base, TimestampMixin
from conference_center.models.status import ContractStatus


class BookingContract(Base, TimestampMixin):
    __tablename__ = "booking_contracts"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True, index=True)
    contract_number = Column(String(32), nullable=False, index=True)
    version = Column(Integer, nullable=False, default=1)
    status = Column(
        Enum(
            ContractStatus,
            name="contract_status",
            native_enum=False,
            length=20,
            values_callable=lambda e: [x.value for x in e],
        ),
        nullable=False,
        default=ContractStatus.DRAFT,
    )
    terms = Column(Text, nullable=False, default="")
    total_amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="SEK")
    payment_due_date = Column(DateTime, nullable=True)

    last_updated = Column(DateTime(timezone=True), nullable=True)
    signed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancel_reason = Column(String(1000), nullable=True)

    # Snapshot fields
    customer_name = Column(String(255), nullable=False, default="")
    customer_email = Column(String(254), nullable=False, default="")
    facility_name = Column(String(255), nullable=False, default="")

    booking = relationship("Booking", back_populates="contract")

    __table_args__ = (
        CheckConstraint("version >= 1", name="check_contract_version_positive"),
        CheckConstraint("total_amount >= 0", name="check_contract_amount_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<BookingContract(id={self.id}, number={self.contract_number}, status={self.status})>"
