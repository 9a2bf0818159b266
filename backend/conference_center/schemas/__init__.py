from conference_center.schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse
from conference_center.schemas.facility import FacilityCreate, FacilityUpdate, FacilitySetActive, FacilityResponse
from conference_center.schemas.booking import BookingCreate, BookingReschedule, BookingCancel, BookingResponse
from conference_center.schemas.contract import (
    ContractCreate, ContractPatch, ContractSign, ContractCancel, ContractResponse,
)

__all__ = [
    "CustomerCreate", "CustomerUpdate", "CustomerResponse",
    "FacilityCreate", "FacilityUpdate", "FacilitySetActive", "FacilityResponse",
    "BookingCreate", "BookingReschedule", "BookingCancel", "BookingResponse",
    "ContractCreate", "ContractPatch", "ContractSign", "ContractCancel", "ContractResponse",
]
