"""
Conflict detection for seat reservations.

Pure functions over reservations supplied by the caller; nothing here reads
the database. Callers are responsible for passing the current confirmed set.
"""

from typing import Iterable, List

from .time_grid import parse_time, validate_interval

CONFIRMED = 'confirmed'


def intervals_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """
    Half-open interval intersection: [a_start, a_end) and [b_start, b_end).

    Adjacent intervals (one ends where the other starts) do not overlap.
    """
    return (parse_time(a_start) < parse_time(b_end)
            and parse_time(b_start) < parse_time(a_end))


def _competes(reservation: dict, seat_id: int, date: str) -> bool:
    """True if the reservation is a confirmed booking of the same seat and day."""
    return (reservation.get('status', CONFIRMED) == CONFIRMED
            and reservation['seat_id'] == seat_id
            and reservation['reservation_date'] == date)


def find_conflicts(
    seat_id: int,
    date: str,
    start: str,
    end: str,
    existing: Iterable[dict]
) -> List[dict]:
    """
    Existing confirmed reservations that overlap a candidate interval.

    Args:
        seat_id: Seat ID
        date: Reservation date (YYYY-MM-DD)
        start: Candidate start (HH:MM)
        end: Candidate end (HH:MM)
        existing: Reservation dicts (seat_id, reservation_date, start_time,
                  end_time, status)

    Returns:
        list: Overlapping reservations, empty if none

    Raises:
        ValidationError: If start >= end or either bound is off-grid
    """
    validate_interval(start, end)

    return [
        r for r in existing
        if _competes(r, seat_id, date)
        and intervals_overlap(start, end, r['start_time'], r['end_time'])
    ]


def has_conflict(
    seat_id: int,
    date: str,
    start: str,
    end: str,
    existing: Iterable[dict]
) -> bool:
    """True if [start, end) overlaps any confirmed reservation for the seat/date."""
    return bool(find_conflicts(seat_id, date, start, end, existing))
