"""
Availability aggregation.

Two read-side views over the confirmed-reservation set:
- a per-slot map ({seat_id: {slot: reserved}}) for the booking grid
- a coarse per-date status ('available' / 'limited' / 'booked') for calendars

Both are recomputed from stored reservations on every call; the coarse
status is only ever a summary of the slot map.
"""

from collections import defaultdict
from typing import Dict, Iterable, List

from flask import current_app

from utils.datetime_helpers import iter_dates

from .branch import get_all_branches, get_branch_by_id
from .reservation_queries import (
    get_confirmed_reservations, get_confirmed_reservations_between
)
from .seat import get_all_seats, is_bookable
from .time_grid import generate_time_slots, get_operating_window, parse_time

STATUS_AVAILABLE = 'available'
STATUS_LIMITED = 'limited'
STATUS_BOOKED = 'booked'


# =============================================================================
# PURE AGGREGATION
# =============================================================================

def is_slot_reserved(slot: str, reservations: Iterable[dict]) -> bool:
    """True if the slot instant falls inside any reservation's [start, end)."""
    instant = parse_time(slot)
    return any(
        parse_time(r['start_time']) <= instant < parse_time(r['end_time'])
        for r in reservations
    )


def build_slot_map(
    seat_ids: Iterable[int],
    reservations: Iterable[dict],
    slots: List[str]
) -> Dict[int, Dict[str, bool]]:
    """
    Reserved flag for every (seat, slot) pair of one operating window.

    Args:
        seat_ids: Seats to map
        reservations: Confirmed reservations for the date
        slots: Slot start times of the window

    Returns:
        dict: {seat_id: {slot: True if reserved}}
    """
    by_seat = defaultdict(list)
    for r in reservations:
        if r.get('status', 'confirmed') == 'confirmed':
            by_seat[r['seat_id']].append(r)

    return {
        seat_id: {slot: is_slot_reserved(slot, by_seat.get(seat_id, [])) for slot in slots}
        for seat_id in seat_ids
    }


def classify_date(slot_map: Dict[int, Dict[str, bool]], threshold: float = 0.25) -> str:
    """
    Summarize a slot map into a calendar status.

    'booked' when no seat has a free slot (including no seats or no slots),
    'limited' when the free fraction of seat-slots is below the threshold,
    'available' otherwise.
    """
    total = sum(len(slots) for slots in slot_map.values())
    free = sum(1 for slots in slot_map.values() for reserved in slots.values() if not reserved)

    if total == 0 or free == 0:
        return STATUS_BOOKED
    if free / total < threshold:
        return STATUS_LIMITED
    return STATUS_AVAILABLE


# =============================================================================
# DATABASE-BACKED VIEWS
# =============================================================================

def _branches_for(branch_id: int = None) -> list:
    if branch_id:
        branch = get_branch_by_id(branch_id)
        return [branch] if branch else []
    return get_all_branches()


def _slot_map_for_date(date: str, branches: list, seats_by_branch: dict,
                       reservations: list) -> Dict[int, Dict[str, bool]]:
    slot_map = {}
    for branch in branches:
        seat_ids = [s['id'] for s in seats_by_branch.get(branch['id'], [])]
        window = get_operating_window(branch, date)
        slots = generate_time_slots(*window) if window else []
        slot_map.update(build_slot_map(seat_ids, reservations, slots))
    return slot_map


def get_slot_map(date: str, branch_id: int = None) -> dict:
    """
    Per-slot reserved map for a date.

    Every slot of a seat under maintenance is reported as taken, so the
    selection grid never offers a seat the coordinator would reject.

    Args:
        date: Date (YYYY-MM-DD)
        branch_id: Restrict to one branch (optional)

    Returns:
        dict: {
            'date': str,
            'slots': {branch_id: [slot, ...]},
            'seats': {seat_id: {slot: bool}},
            'unbookable_seats': [seat_id, ...]
        }
    """
    branches = _branches_for(branch_id)
    seats = get_all_seats(branch_id=branch_id)
    seats_by_branch = defaultdict(list)
    for seat in seats:
        seats_by_branch[seat['branch_id']].append(seat)

    reservations = get_confirmed_reservations(date, [s['id'] for s in seats])

    slots = {}
    for branch in branches:
        window = get_operating_window(branch, date)
        slots[branch['id']] = generate_time_slots(*window) if window else []

    seat_map = _slot_map_for_date(date, branches, seats_by_branch, reservations)
    unbookable = [s['id'] for s in seats if not is_bookable(s)]
    for seat_id in unbookable:
        seat_map[seat_id] = dict.fromkeys(seat_map.get(seat_id, {}), True)

    return {
        'date': date,
        'slots': slots,
        'seats': seat_map,
        'unbookable_seats': unbookable
    }


def get_availability_calendar(date_from: str, date_to: str, branch_id: int = None) -> dict:
    """
    Coarse availability status for each date of an inclusive range.

    Seats under maintenance do not count toward free capacity.

    Args:
        date_from: Range start (YYYY-MM-DD)
        date_to: Range end (YYYY-MM-DD)
        branch_id: Restrict to one branch (optional)

    Returns:
        dict: {'YYYY-MM-DD': 'available' | 'limited' | 'booked'}
    """
    threshold = current_app.config.get('LIMITED_AVAILABILITY_THRESHOLD', 0.25)

    branches = _branches_for(branch_id)
    seats = [s for s in get_all_seats(branch_id=branch_id) if is_bookable(s)]
    seats_by_branch = defaultdict(list)
    for seat in seats:
        seats_by_branch[seat['branch_id']].append(seat)

    reservations_by_date = defaultdict(list)
    if seats:
        for r in get_confirmed_reservations_between(date_from, date_to, [s['id'] for s in seats]):
            reservations_by_date[r['reservation_date']].append(r)

    calendar = {}
    for date in iter_dates(date_from, date_to):
        slot_map = _slot_map_for_date(date, branches, seats_by_branch,
                                      reservations_by_date.get(date, []))
        calendar[date] = classify_date(slot_map, threshold)

    return calendar


def get_date_status(date: str, branch_id: int = None) -> str:
    """Coarse availability status for a single date."""
    return get_availability_calendar(date, date, branch_id)[date]


def annotate_seats(seats: list, date: str) -> list:
    """
    Attach a date's occupancy to catalog entries.

    Adds 'reservations' (occupied intervals), 'reserved_slots' and
    'is_fully_booked' (every slot of the window taken, or branch closed).

    Args:
        seats: Seat dicts (with branch_id)
        date: Date (YYYY-MM-DD)

    Returns:
        list: New seat dicts with the extra keys
    """
    if not seats:
        return []

    reservations = get_confirmed_reservations(date, [s['id'] for s in seats])
    by_seat = defaultdict(list)
    for r in reservations:
        by_seat[r['seat_id']].append(r)

    branches = {}
    annotated = []
    for seat in seats:
        branch_id = seat['branch_id']
        if branch_id not in branches:
            branches[branch_id] = get_branch_by_id(branch_id)
        window = get_operating_window(branches[branch_id], date)
        slots = generate_time_slots(*window) if window else []

        seat_reservations = by_seat.get(seat['id'], [])
        reserved_slots = [slot for slot in slots if is_slot_reserved(slot, seat_reservations)]

        annotated.append({
            **seat,
            'reservations': [
                {'start_time': r['start_time'], 'end_time': r['end_time']}
                for r in seat_reservations
            ],
            'reserved_slots': reserved_slots,
            'is_fully_booked': len(reserved_slots) == len(slots)
        })

    return annotated
