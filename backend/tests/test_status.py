"""
Tests for the booking and contract state machines.
"""

import pytest

from conference_center.core.exceptions import ValidationError
from conference_center.models.status import (
    BookingStatus,
    ContractStatus,
    can_transition,
    ensure_transition,
)


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (BookingStatus.PENDING, BookingStatus.CONFIRMED, True),
        (BookingStatus.CONFIRMED, BookingStatus.CONFIRMED, True),
        (BookingStatus.CONFIRMED, BookingStatus.COMPLETED, True),
        (BookingStatus.COMPLETED, BookingStatus.CANCELLED, True),
        (BookingStatus.COMPLETED, BookingStatus.CONFIRMED, False),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED, False),
        (BookingStatus.CANCELLED, BookingStatus.PENDING, False),
        (BookingStatus.CONFIRMED, BookingStatus.PENDING, False),
    ],
)
def test_booking_transitions(current, target, allowed):
    assert can_transition(current, target) is allowed


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (ContractStatus.DRAFT, ContractStatus.SENT, True),
        (ContractStatus.DRAFT, ContractStatus.SIGNED, True),
        (ContractStatus.SENT, ContractStatus.SENT, True),
        (ContractStatus.SIGNED, ContractStatus.CANCELLED, True),
        (ContractStatus.CANCELLED, ContractStatus.CANCELLED, True),
        (ContractStatus.SIGNED, ContractStatus.SENT, False),
        (ContractStatus.SIGNED, ContractStatus.SIGNED, False),
        (ContractStatus.CANCELLED, ContractStatus.DRAFT, False),
    ],
)
def test_contract_transitions(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_ensure_transition_message():
    with pytest.raises(ValidationError) as exc:
        ensure_transition(ContractStatus.SIGNED, ContractStatus.SENT, "contract")
    assert exc.value.message == "Cannot move contract from signed to sent."
    assert exc.value.context == {"current": "signed", "target": "sent"}


def test_active_and_frozen_sets():
    assert BookingStatus.PENDING.is_active
    assert BookingStatus.CONFIRMED.is_active
    assert not BookingStatus.CANCELLED.is_active
    assert not BookingStatus.COMPLETED.is_active
    assert ContractStatus.SIGNED.is_frozen
    assert ContractStatus.CANCELLED.is_frozen
    assert not ContractStatus.SENT.is_frozen
