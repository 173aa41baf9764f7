"""Availability store - validate and edit a staff member's slot list.

All functions are pure: they take the current slot list and return a new one,
leaving the input untouched.
"""

from collections import Counter
from typing import Optional, Union

from petconnect.models.availability import AvailabilitySlot, WEEKDAYS
from petconnect.utils.errors import MalformedSlotError, SlotOverlapError
from petconnect.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


def validate_slot(slot: AvailabilitySlot) -> None:
    """Raise MalformedSlotError unless the slot has a known day and start < end."""
    if not slot.day or not slot.start_time or not slot.end_time:
        raise MalformedSlotError("Slot requires day, start time and end time")
    if slot.day not in WEEKDAYS:
        raise MalformedSlotError(f"Unknown day '{slot.day}'")
    if slot.start_minutes >= slot.end_minutes:
        raise MalformedSlotError("Start time must be before end time")
    if slot.date is not None and WEEKDAYS[slot.date.weekday()] != slot.day:
        raise MalformedSlotError(f"{slot.date.isoformat()} is not a {slot.day}")


def same_scope(a: AvailabilitySlot, b: AvailabilitySlot) -> bool:
    """
    Slots compete for time when they share a concrete date, or when they fall on
    the same weekday and at least one of them is recurring.
    """
    if a.date is not None and b.date is not None:
        return a.date == b.date
    return _weekday(a) == _weekday(b)


def _weekday(slot: AvailabilitySlot) -> str:
    if slot.date is not None:
        return WEEKDAYS[slot.date.weekday()]
    return slot.day


def slots_overlap(a: AvailabilitySlot, b: AvailabilitySlot) -> bool:
    """Half-open interval test; touching slots (09:00-10:00, 10:00-11:00) do not overlap."""
    return a.start_minutes < b.end_minutes and a.end_minutes > b.start_minutes


def find_conflict(existing: list[AvailabilitySlot], candidate: AvailabilitySlot) -> Optional[AvailabilitySlot]:
    for slot in existing:
        if same_scope(slot, candidate) and slots_overlap(candidate, slot):
            return slot
    return None


def add_slot(existing: list[AvailabilitySlot], candidate: AvailabilitySlot) -> list[AvailabilitySlot]:
    """
    Append ``candidate`` to ``existing``.

    Raises MalformedSlotError before any overlap check, then SlotOverlapError
    naming the first conflicting slot.
    """
    validate_slot(candidate)

    conflict = find_conflict(existing, candidate)
    if conflict is not None:
        logger.info(
            "Rejected overlapping availability slot",
            candidate=candidate.describe(),
            conflicting_slot=conflict.describe()
        )
        raise SlotOverlapError(conflict)

    return [*existing, candidate]


def _matches(slot: AvailabilitySlot, target: Union[AvailabilitySlot, str]) -> bool:
    if isinstance(target, str):
        return slot.id == target
    if target.id is not None and slot.id is not None:
        return slot.id == target.id
    return slot.identity() == target.identity()


def remove_slot(
    existing: list[AvailabilitySlot],
    target: Union[AvailabilitySlot, str]
) -> list[AvailabilitySlot]:
    """
    Drop the slot matching ``target`` (an ID or a slot).

    Slots without an ID are matched on (day, start, end, date), never on day alone.
    """
    remaining = [slot for slot in existing if not _matches(slot, target)]
    if len(remaining) == len(existing):
        logger.debug(
            "No availability slot matched removal target",
            target=target if isinstance(target, str) else target.describe()
        )
    return remaining


def slot_count(slots: list[AvailabilitySlot]) -> int:
    return len(slots)


def total_hours(slots: list[AvailabilitySlot]) -> float:
    return round(sum(slot.hours for slot in slots), 2)


def most_frequent_day(slots: list[AvailabilitySlot]) -> Optional[str]:
    """Day with the most slots; ties go to the day seen first."""
    if not slots:
        return None
    counts = Counter(slot.day for slot in slots)
    best = max(counts.values())
    for slot in slots:
        if counts[slot.day] == best:
            return slot.day
    return None


def slots_for_day(slots: list[AvailabilitySlot], day: str) -> list[AvailabilitySlot]:
    wanted = day.strip().capitalize()
    return [slot for slot in slots if slot.day == wanted]
