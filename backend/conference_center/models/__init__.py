from conference_center.models.customer import Customer
from conference_center.models.facility import Facility
from conference_center.models.booking import Booking
from conference_center.models.contract import BookingContract
from conference_center.models.status import BookingStatus, ContractStatus

__all__ = [
    "Customer", "Facility", "Booking", "BookingContract",
    "BookingStatus", "ContractStatus",
]
