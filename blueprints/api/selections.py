"""
Selection session API routes.
Drives the per-seat click state machine and submits the finished selection.
"""

from flask_login import current_user

from models.selection_session import (
    clear_selection, click, create_selection, describe, get_selection,
    set_date, submit_selection, update_headcount
)
from utils.api_response import api_success, get_json_body
from utils.decorators import handle_booking_errors, login_required
from utils.exceptions import ValidationError
from utils.messages import get_message
from utils.validators import require_fields


def _require(data: dict, fields: list) -> None:
    missing = require_fields(data, fields)
    if missing:
        raise ValidationError(
            get_message('missing_fields', fields=', '.join(missing)),
            errors=[{'field': f, 'error': 'required'} for f in missing]
        )


def register_routes(bp):
    """Register selection API routes on the blueprint."""

    @bp.route('/selections', methods=['POST'])
    @login_required
    @handle_booking_errors
    def open_selection():
        """
        Start a selection.

        Body:
            date (required), branchId, headcount
        """
        data = get_json_body()
        _require(data, ['date'])

        state = create_selection(current_user.id, data['date'],
                                 data.get('branchId'), data.get('headcount', 1))
        return api_success(data=describe(state),
                           message=get_message('selection_created'), status=201)

    @bp.route('/selections/<session_id>')
    @login_required
    @handle_booking_errors
    def show_selection(session_id):
        """Current state and totals of a selection."""
        return api_success(data=describe(get_selection(session_id, current_user.id)))

    @bp.route('/selections/<session_id>/click', methods=['POST'])
    @login_required
    @handle_booking_errors
    def click_selection(session_id):
        """
        Click one grid slot.

        Body:
            seatId, time (required)
        """
        data = get_json_body()
        _require(data, ['seatId', 'time'])

        state = click(session_id, current_user.id, data['seatId'], data['time'])
        return api_success(data=describe(state))

    @bp.route('/selections/<session_id>/date', methods=['PUT'])
    @login_required
    @handle_booking_errors
    def change_selection_date(session_id):
        """Switch the date; every seat is deselected."""
        data = get_json_body()
        _require(data, ['date'])

        state = set_date(session_id, current_user.id, data['date'])
        return api_success(data=describe(state))

    @bp.route('/selections/<session_id>/headcount', methods=['PUT'])
    @login_required
    @handle_booking_errors
    def change_selection_headcount(session_id):
        """Change the party size."""
        data = get_json_body()
        _require(data, ['headcount'])

        state = update_headcount(session_id, current_user.id, data['headcount'])
        return api_success(data=describe(state))

    @bp.route('/selections/<session_id>/submit', methods=['POST'])
    @login_required
    @handle_booking_errors
    def submit(session_id):
        """
        Book every complete range of the selection.

        Body:
            notes (optional)
        """
        data = get_json_body()
        reservations = submit_selection(session_id, current_user.id, data.get('notes', ''))
        return api_success(
            data={'reservations': reservations},
            message=get_message('reservations_created', count=len(reservations)),
            status=201
        )

    @bp.route('/selections/<session_id>', methods=['DELETE'])
    @login_required
    @handle_booking_errors
    def discard_selection(session_id):
        """Throw a selection away."""
        clear_selection(session_id, current_user.id)
        return api_success(message=get_message('selection_cleared'))
