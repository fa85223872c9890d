"""
Selection session storage.
Persists each client's SelectionState as JSON so the state machine can be
driven across HTTP requests. Sessions are owned by the member who opened them.
"""

import json
import logging
import uuid

from flask import current_app

from database import get_db
from utils.exceptions import AuthorizationError, BookingError, NotFoundError, ValidationError
from utils.messages import get_message
from utils.validators import validate_date_format, validate_optional_id

from .availability import get_slot_map
from .branch import get_branch_by_id
from .reservation_crud import submit_booking_request
from .seat import get_seats_by_ids
from .selection import (
    SelectionState, build_booking_request, change_date, click_slot, set_headcount, summarize
)

logger = logging.getLogger(__name__)


def _check_date(date: str) -> None:
    if not validate_date_format(date):
        raise ValidationError(get_message('invalid_date'),
                              errors=[{'field': 'date', 'value': date, 'error': 'invalid_date'}])


def _save(state: SelectionState) -> None:
    db = get_db()
    db.execute('''
        UPDATE selection_sessions
        SET state_json = ?, updated_at = CURRENT_TIMESTAMP
        WHERE session_id = ?
    ''', (json.dumps(state.to_dict()), state.session_id))
    db.commit()


def describe(state: SelectionState) -> dict:
    """State plus live duration/cost totals for the client."""
    seats = get_seats_by_ids(list(state.ranges))
    return {'selection': state.to_dict(), 'summary': summarize(state, seats)}


# =============================================================================
# LIFECYCLE
# =============================================================================

def create_selection(member_id: int, date: str, branch_id: int = None,
                     headcount: int = 1) -> SelectionState:
    """
    Open a new selection session with every seat unselected.

    Returns:
        SelectionState: The new state
    """
    _check_date(date)
    if not validate_optional_id(branch_id):
        raise ValidationError(get_message('invalid_request'),
                              errors=[{'field': 'branchId', 'value': branch_id, 'error': 'invalid_id'}])
    if branch_id and not get_branch_by_id(branch_id):
        raise NotFoundError(get_message('branch_not_found'))

    state = set_headcount(
        SelectionState(uuid.uuid4().hex, date, branch_id),
        headcount,
        current_app.config.get('MAX_HEADCOUNT', 10)
    )

    db = get_db()
    db.execute('''
        INSERT INTO selection_sessions (session_id, member_id, state_json)
        VALUES (?, ?, ?)
    ''', (state.session_id, member_id, json.dumps(state.to_dict())))
    db.commit()

    logger.debug('Member %s opened selection %s for %s', member_id, state.session_id, date)
    return state


def get_selection(session_id: str, member_id: int) -> SelectionState:
    """
    Load a member's selection session.

    Raises:
        NotFoundError: Unknown session
        AuthorizationError: Session opened by another member
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT member_id, state_json FROM selection_sessions WHERE session_id = ?',
                   (session_id,))
    row = cursor.fetchone()

    if not row:
        raise NotFoundError(get_message('selection_not_found'))
    if row['member_id'] != member_id:
        raise AuthorizationError(get_message('selection_not_owner'))

    return SelectionState.from_dict(json.loads(row['state_json']))


def clear_selection(session_id: str, member_id: int) -> None:
    """Discard a selection session."""
    get_selection(session_id, member_id)

    db = get_db()
    db.execute('DELETE FROM selection_sessions WHERE session_id = ?', (session_id,))
    db.commit()


# =============================================================================
# TRANSITIONS
# =============================================================================

def click(session_id: str, member_id: int, seat_id: int, time: str) -> SelectionState:
    """
    Apply a slot click against the current availability of the session date.

    Returns:
        SelectionState: The state after the click
    """
    state = get_selection(session_id, member_id)
    slot_map = get_slot_map(state.date, state.branch_id)['seats']

    new_state = click_slot(state, seat_id, time, slot_map)
    if new_state is not state:
        _save(new_state)
    return new_state


def set_date(session_id: str, member_id: int, date: str) -> SelectionState:
    """Move the session to another date, resetting every seat."""
    _check_date(date)
    state = change_date(get_selection(session_id, member_id), date)
    _save(state)
    return state


def update_headcount(session_id: str, member_id: int, headcount: int) -> SelectionState:
    """Change the party size of the session."""
    state = set_headcount(
        get_selection(session_id, member_id),
        headcount,
        current_app.config.get('MAX_HEADCOUNT', 10)
    )
    _save(state)
    return state


def submit_selection(session_id: str, member_id: int, notes: str = '') -> list:
    """
    Submit every complete range of the session as one booking request.

    The session is closed whether the submission is accepted or rejected;
    after a rejection the client opens a new one on fresh availability.

    Returns:
        list: Created reservations
    """
    state = get_selection(session_id, member_id)
    request = build_booking_request(state)

    try:
        return submit_booking_request(member_id, request, notes)
    except BookingError:
        logger.info('Selection %s submission rejected', session_id)
        raise
    finally:
        db = get_db()
        db.execute('DELETE FROM selection_sessions WHERE session_id = ?', (session_id,))
        db.commit()
