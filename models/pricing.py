"""
Reservation cost calculation.

Advance reservations are billed per minute at the seat's rate, rounded half
up to a whole currency unit per seat. The per-hour-block billing used for
walk-in sessions is a separate path and is not computed here.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable

from .time_grid import validate_interval


def duration_minutes(start: str, end: str) -> int:
    """Length of [start, end) in minutes; raises ValidationError if invalid."""
    return validate_interval(start, end)


def seat_cost(seat: dict, start: str, end: str) -> int:
    """
    Cost of holding one seat for [start, end).

    Args:
        seat: Seat dict with 'rate_per_minute'
        start: Start time (HH:MM)
        end: End time (HH:MM)

    Returns:
        int: rate_per_minute * minutes, rounded to the nearest integer
    """
    minutes = duration_minutes(start, end)
    rate = Decimal(str(seat.get('rate_per_minute') or 0))
    return int((rate * minutes).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def request_cost(seats_by_id: Dict[int, dict], entries: Iterable[dict]) -> dict:
    """
    Per-seat and total cost of a booking request.

    Args:
        seats_by_id: Seat dicts keyed by seat ID
        entries: Dicts with 'seat_id', 'start_time', 'end_time'

    Returns:
        dict: {
            'items': [{'seat_id', 'start_time', 'end_time', 'duration', 'cost'}],
            'total_duration': int,
            'total_cost': int
        }
    """
    items = []
    for entry in entries:
        seat = seats_by_id[entry['seat_id']]
        items.append({
            'seat_id': entry['seat_id'],
            'start_time': entry['start_time'],
            'end_time': entry['end_time'],
            'duration': duration_minutes(entry['start_time'], entry['end_time']),
            'cost': seat_cost(seat, entry['start_time'], entry['end_time'])
        })

    return {
        'items': items,
        'total_duration': sum(i['duration'] for i in items),
        'total_cost': sum(i['cost'] for i in items)
    }
