"""
Availability API routes: calendar status and per-slot grid.
"""

from flask import current_app, request

from models.availability import get_availability_calendar, get_slot_map
from models.branch import get_branch_by_id
from utils.api_response import api_success
from utils.datetime_helpers import days_in_range
from utils.decorators import handle_booking_errors, login_required
from utils.exceptions import NotFoundError, ValidationError
from utils.messages import get_message
from utils.validators import validate_date_format, validate_date_range


def _date_arg(name: str) -> str:
    value = request.args.get(name)
    if not validate_date_format(value):
        raise ValidationError(get_message('invalid_date'),
                              errors=[{'field': name, 'value': value, 'error': 'invalid_date'}])
    return value


def _branch_arg() -> int:
    branch_id = request.args.get('branchId', type=int)
    if branch_id and not get_branch_by_id(branch_id):
        raise NotFoundError(get_message('branch_not_found'))
    return branch_id


def register_routes(bp):
    """Register availability API routes on the blueprint."""

    @bp.route('/availability')
    @login_required
    @handle_booking_errors
    def availability_calendar():
        """
        Per-date availability status for a date range.

        Query params:
            dateFrom, dateTo: Inclusive range (required)
            branchId: Restrict to one branch (optional)

        Returns:
            JSON {'availability': {'YYYY-MM-DD': 'available' | 'limited' | 'booked'}}
        """
        date_from = _date_arg('dateFrom')
        date_to = _date_arg('dateTo')
        if not validate_date_range(date_from, date_to):
            raise ValidationError(get_message('invalid_date_range'),
                                  errors=[{'field': 'dateTo', 'value': date_to,
                                           'error': 'before_date_from'}])

        max_days = current_app.config.get('MAX_CALENDAR_DAYS', 62)
        if days_in_range(date_from, date_to) > max_days:
            raise ValidationError(get_message('date_range_too_long', days=max_days),
                                  errors=[{'field': 'dateTo', 'value': date_to,
                                           'error': 'range_too_long'}])

        branch_id = _branch_arg()
        calendar = get_availability_calendar(date_from, date_to, branch_id)
        return api_success(data={'availability': calendar})

    @bp.route('/availability/slots')
    @login_required
    @handle_booking_errors
    def availability_slots():
        """
        Per-slot reserved map for one date.

        Query params:
            date: Date (required)
            branchId: Restrict to one branch (optional)
        """
        date_str = _date_arg('date')
        branch_id = _branch_arg()
        return api_success(data=get_slot_map(date_str, branch_id))
