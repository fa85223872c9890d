"""
Seat catalog API routes: listing with occupancy and booking previews.
"""

from flask import request

from models.availability import annotate_seats
from models.branch import get_all_branches, get_branch_by_id
from models.conflict import has_conflict
from models.pricing import seat_cost
from models.reservation_queries import get_confirmed_reservations
from models.seat import SEAT_STATUSES, get_all_seats, is_bookable
from models.time_grid import get_operating_window, is_within_window, validate_interval
from utils.api_response import api_success, get_json_body
from utils.decorators import handle_booking_errors, login_required
from utils.exceptions import NotFoundError, ValidationError
from utils.messages import get_message
from utils.validators import require_fields, validate_date_format, validate_optional_id


def _check_date(value: str, field: str = 'date') -> None:
    if not validate_date_format(value):
        raise ValidationError(get_message('invalid_date'),
                              errors=[{'field': field, 'value': value, 'error': 'invalid_date'}])


def _check_branch(branch_id: int) -> None:
    if not validate_optional_id(branch_id):
        raise ValidationError(get_message('invalid_request'),
                              errors=[{'field': 'branchId', 'value': branch_id, 'error': 'invalid_id'}])
    if branch_id and not get_branch_by_id(branch_id):
        raise NotFoundError(get_message('branch_not_found'))


def register_routes(bp):
    """Register seat and branch API routes on the blueprint."""

    @bp.route('/branches')
    @login_required
    def list_branches():
        """Get all branches with their hours and seat counts."""
        branches = get_all_branches()
        return api_success(data={'branches': branches}, count=len(branches))

    @bp.route('/seats')
    @login_required
    @handle_booking_errors
    def list_seats():
        """
        Get the seat catalog.

        Query params:
            date: Annotate each seat with that date's occupancy (optional)
            status: available / in-use / maintenance (optional)
            branchId: Filter by branch (optional)
        """
        date_str = request.args.get('date') or None
        status = request.args.get('status') or None
        branch_id = request.args.get('branchId', type=int)

        if status and status not in SEAT_STATUSES:
            raise ValidationError(
                get_message('invalid_status', statuses=', '.join(SEAT_STATUSES)),
                errors=[{'field': 'status', 'value': status, 'error': 'invalid_status'}]
            )
        _check_branch(branch_id)

        seats = get_all_seats(branch_id=branch_id, status=status)
        if date_str:
            _check_date(date_str)
            seats = annotate_seats(seats, date_str)

        return api_success(data={'seats': seats}, count=len(seats))

    @bp.route('/seats', methods=['POST'])
    @login_required
    @handle_booking_errors
    def preview_seats():
        """
        Availability and cost of every seat for one interval. Nothing is reserved.

        Body:
            date, startTime, endTime (required), branchId
        """
        data = get_json_body()
        missing = require_fields(data, ['date', 'startTime', 'endTime'])
        if missing:
            raise ValidationError(
                get_message('missing_fields', fields=', '.join(missing)),
                errors=[{'field': f, 'error': 'required'} for f in missing]
            )

        date_str = data['date']
        start_time = data['startTime']
        end_time = data['endTime']
        branch_id = data.get('branchId')

        _check_date(date_str)
        duration = validate_interval(start_time, end_time)
        _check_branch(branch_id)

        seats = get_all_seats(branch_id=branch_id)
        reservations = get_confirmed_reservations(date_str, [s['id'] for s in seats])

        branches = {}
        preview = []
        for seat in seats:
            if seat['branch_id'] not in branches:
                branches[seat['branch_id']] = get_branch_by_id(seat['branch_id'])
            window = get_operating_window(branches[seat['branch_id']], date_str)

            in_window = bool(window) and is_within_window(start_time, end_time, *window)
            is_available = (
                in_window
                and is_bookable(seat)
                and not has_conflict(seat['id'], date_str, start_time, end_time, reservations)
            )

            preview.append({
                'seat_id': seat['id'],
                'name': seat['name'],
                'branch_id': seat['branch_id'],
                'status': seat['status'],
                'is_available': is_available,
                'cost': seat_cost(seat, start_time, end_time)
            })

        return api_success(data={
            'date': date_str,
            'start_time': start_time,
            'end_time': end_time,
            'duration': duration,
            'seats': preview
        })
