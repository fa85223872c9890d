"""
Seat selection state machine.

A member builds a booking request by clicking grid slots, independently per
seat. Each seat moves through:

    Unselected -> StartOnly(t) -> Complete(start, end) -> StartOnly(t') ...

Transitions are pure: they take a SelectionState and return a new one, so
the state can be serialized between requests and tested without a database.
"""

from typing import Dict, Optional

from utils.exceptions import NotFoundError, ValidationError
from utils.messages import get_message

from .pricing import request_cost
from .time_grid import add_slots, parse_time

UNSELECTED = 'unselected'
START_ONLY = 'start_only'
COMPLETE = 'complete'


class SeatRange:
    """Selection range of one seat. Times are the clicked slot instants."""

    __slots__ = ('start', 'end')

    def __init__(self, start: Optional[str] = None, end: Optional[str] = None):
        if end is not None and (start is None or parse_time(start) >= parse_time(end)):
            raise ValueError(f'Invalid selection range {start}-{end}')
        self.start = start
        self.end = end

    @property
    def state(self) -> str:
        if self.start is None:
            return UNSELECTED
        if self.end is None:
            return START_ONLY
        return COMPLETE

    def interval(self) -> Optional[tuple]:
        """
        Bookable [start, end) of a complete range.

        The end click selects the start of the last slot, so the interval
        runs one grid unit past it.
        """
        if self.state != COMPLETE:
            return None
        return self.start, add_slots(self.end, 1)

    def to_dict(self) -> dict:
        return {'state': self.state, 'start': self.start, 'end': self.end}

    @classmethod
    def from_dict(cls, data: dict) -> 'SeatRange':
        return cls(data.get('start'), data.get('end'))

    def __eq__(self, other):
        return isinstance(other, SeatRange) and (self.start, self.end) == (other.start, other.end)

    def __repr__(self):
        return f'SeatRange({self.start!r}, {self.end!r})'


class SelectionState:
    """
    In-progress booking request of one client session.

    Attributes:
        session_id: Client session key
        date: Date being booked (YYYY-MM-DD)
        branch_id: Branch whose grid is shown (optional)
        headcount: Party size chosen by the member
        ranges: {seat_id: SeatRange}; unselected seats are absent
    """

    def __init__(self, session_id: str, date: str, branch_id: int = None,
                 headcount: int = 1, ranges: Dict[int, SeatRange] = None):
        self.session_id = session_id
        self.date = date
        self.branch_id = branch_id
        self.headcount = headcount
        self.ranges = {
            seat_id: seat_range
            for seat_id, seat_range in (ranges or {}).items()
            if seat_range.state != UNSELECTED
        }

    def range_for(self, seat_id: int) -> SeatRange:
        return self.ranges.get(seat_id, SeatRange())

    def with_range(self, seat_id: int, seat_range: SeatRange) -> 'SelectionState':
        ranges = dict(self.ranges)
        ranges[seat_id] = seat_range
        return SelectionState(self.session_id, self.date, self.branch_id,
                              self.headcount, ranges)

    def to_dict(self) -> dict:
        return {
            'session_id': self.session_id,
            'date': self.date,
            'branch_id': self.branch_id,
            'headcount': self.headcount,
            'ranges': {str(seat_id): r.to_dict() for seat_id, r in sorted(self.ranges.items())}
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SelectionState':
        ranges = {
            int(seat_id): SeatRange.from_dict(r)
            for seat_id, r in (data.get('ranges') or {}).items()
        }
        return cls(data['session_id'], data['date'], data.get('branch_id'),
                   data.get('headcount', 1), ranges)

    def __eq__(self, other):
        return isinstance(other, SelectionState) and self.to_dict() == other.to_dict()


# =============================================================================
# TRANSITIONS
# =============================================================================

def click_slot(state: SelectionState, seat_id: int, slot: str,
               slot_map: Dict[int, Dict[str, bool]]) -> SelectionState:
    """
    Apply one slot click.

    Args:
        state: Current selection
        seat_id: Clicked seat
        slot: Clicked slot start (HH:MM)
        slot_map: {seat_id: {slot: reserved}} for state.date

    Returns:
        SelectionState: The next state (the same object if the click is ignored)

    Raises:
        NotFoundError: If the seat is not on the grid
        ValidationError: If the slot is not a slot of the seat's window
    """
    if seat_id not in slot_map:
        raise NotFoundError(f'Seat {seat_id} is not offered on {state.date}')
    seat_slots = slot_map[seat_id]
    if slot not in seat_slots:
        raise ValidationError(
            f'{slot} is not a bookable slot',
            errors=[{'field': 'time', 'value': slot, 'error': 'not_a_slot'}]
        )

    # Reserved slots cannot be picked
    if seat_slots[slot]:
        return state

    current = state.range_for(seat_id)

    if current.state == UNSELECTED:
        return state.with_range(seat_id, SeatRange(slot))

    if current.state == START_ONLY:
        if slot == current.start:
            return state.with_range(seat_id, SeatRange())
        first, last = sorted((current.start, slot), key=parse_time)
        return state.with_range(seat_id, SeatRange(first, last))

    # A click on a complete range starts a new one
    return state.with_range(seat_id, SeatRange(slot))


def change_date(state: SelectionState, date: str) -> SelectionState:
    """Switch the booking date; every seat goes back to Unselected."""
    return SelectionState(state.session_id, date, state.branch_id, state.headcount)


def set_headcount(state: SelectionState, headcount: int, max_headcount: int = 10) -> SelectionState:
    """Change the party size."""
    if not isinstance(headcount, int) or isinstance(headcount, bool) \
            or not 1 <= headcount <= max_headcount:
        raise ValidationError(
            get_message('invalid_headcount', max=max_headcount),
            errors=[{'field': 'headcount', 'value': headcount, 'error': 'out_of_range'}]
        )
    return SelectionState(state.session_id, state.date, state.branch_id,
                          headcount, state.ranges)


# =============================================================================
# COMPOSITION
# =============================================================================

def build_booking_request(state: SelectionState) -> dict:
    """
    Booking request made of every seat whose range is complete.

    Returns:
        dict: {'date', 'headcount', 'items': [{'seat_id', 'start_time', 'end_time'}]}
    """
    items = []
    for seat_id, seat_range in sorted(state.ranges.items()):
        interval = seat_range.interval()
        if interval:
            items.append({'seat_id': seat_id, 'start_time': interval[0], 'end_time': interval[1]})

    return {'date': state.date, 'headcount': state.headcount, 'items': items}


def summarize(state: SelectionState, seats_by_id: Dict[int, dict]) -> dict:
    """
    Live totals for display after a transition.

    Args:
        state: Current selection
        seats_by_id: Seat dicts (with rate_per_minute) keyed by ID

    Returns:
        dict: request_cost() result plus the request itself
    """
    request = build_booking_request(state)
    items = [i for i in request['items'] if i['seat_id'] in seats_by_id]
    totals = request_cost(seats_by_id, items)
    return {'request': request, **totals}
