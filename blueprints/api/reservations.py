"""
Reservation API routes: listing, booking, editing and cancellation.
"""

from flask import request
from flask_login import current_user

from models.pricing import request_cost
from models.reservation import (
    RESERVATION_STATUSES, cancel_reservation, create_reservation, get_member_reservations,
    get_reservation_by_id, get_status_history, submit_booking_request, update_reservation
)
from models.seat import get_seats_by_ids
from utils.api_response import api_success, get_json_body
from utils.decorators import handle_booking_errors, login_required
from utils.exceptions import AuthorizationError, NotFoundError, ValidationError
from utils.messages import get_message
from utils.validators import require_fields, validate_date_format


def _require(data: dict, fields: list) -> None:
    missing = require_fields(data, fields)
    if missing:
        raise ValidationError(
            get_message('missing_fields', fields=', '.join(missing)),
            errors=[{'field': f, 'error': 'required'} for f in missing]
        )


def _owned_reservation(reservation_id: int) -> dict:
    reservation = get_reservation_by_id(reservation_id)
    if not reservation:
        raise NotFoundError(get_message('reservation_not_found'))
    if reservation['user_id'] != current_user.id:
        raise AuthorizationError(get_message('not_owner'))
    return reservation


def _with_costs(reservations: list) -> dict:
    """Booking response body: the records plus their cost breakdown."""
    seats = get_seats_by_ids(list({r['seat_id'] for r in reservations}))
    totals = request_cost(seats, reservations)
    return {
        'reservations': reservations,
        'total_duration': totals['total_duration'],
        'total_cost': totals['total_cost']
    }


def register_routes(bp):
    """Register reservation API routes on the blueprint."""

    # ============================================================================
    # READ
    # ============================================================================

    @bp.route('/reservations')
    @login_required
    @handle_booking_errors
    def list_reservations():
        """
        List the caller's reservations.

        Query params:
            userId: Must be the caller's own ID when given
            status: confirmed / cancelled / completed (optional)
            dateFrom, dateTo: Inclusive date bounds (optional)
        """
        user_id = request.args.get('userId', type=int)
        if 'userId' in request.args and user_id != current_user.id:
            raise AuthorizationError(get_message('permission_denied'))

        status = request.args.get('status') or None
        if status and status not in RESERVATION_STATUSES:
            raise ValidationError(
                get_message('invalid_status', statuses=', '.join(RESERVATION_STATUSES)),
                errors=[{'field': 'status', 'value': status, 'error': 'invalid_status'}]
            )

        date_from = request.args.get('dateFrom') or None
        date_to = request.args.get('dateTo') or None
        for field, value in (('dateFrom', date_from), ('dateTo', date_to)):
            if value and not validate_date_format(value):
                raise ValidationError(get_message('invalid_date'),
                                      errors=[{'field': field, 'value': value, 'error': 'invalid_date'}])

        reservations = get_member_reservations(current_user.id, status, date_from, date_to)
        return api_success(data={'reservations': reservations}, count=len(reservations))

    @bp.route('/reservations/<int:reservation_id>')
    @login_required
    @handle_booking_errors
    def reservation_detail(reservation_id):
        """Get one of the caller's reservations."""
        return api_success(data={'reservation': _owned_reservation(reservation_id)})

    @bp.route('/reservations/<int:reservation_id>/history')
    @login_required
    @handle_booking_errors
    def reservation_history(reservation_id):
        """Get reservation status change history."""
        _owned_reservation(reservation_id)
        return api_success(data={'history': get_status_history(reservation_id)})

    # ============================================================================
    # CREATE
    # ============================================================================

    @bp.route('/reservations', methods=['POST'])
    @login_required
    @handle_booking_errors
    def create():
        """
        Book one seat interval.

        Body:
            seatId, date, startTime, endTime (required), notes, headcount
        """
        data = get_json_body()
        _require(data, ['seatId', 'date', 'startTime', 'endTime'])

        reservation = create_reservation(
            user_id=current_user.id,
            seat_id=data['seatId'],
            date=data['date'],
            start_time=data['startTime'],
            end_time=data['endTime'],
            notes=data.get('notes', ''),
            headcount=data.get('headcount', 1)
        )
        seat = get_seats_by_ids([reservation['seat_id']])
        cost = request_cost(seat, [reservation])['total_cost']

        return api_success(
            data={'reservation': reservation, 'cost': cost},
            message=get_message('reservation_created'),
            status=201
        )

    @bp.route('/bookings', methods=['POST'])
    @login_required
    @handle_booking_errors
    def create_booking():
        """
        Book several seats at once; all entries succeed or none does.

        Body:
            date, items: [{seatId, startTime, endTime}] (required),
            headcount, notes
        """
        data = get_json_body()
        _require(data, ['date', 'items'])

        items = data['items'] if isinstance(data['items'], list) else []
        booking_request = {
            'date': data['date'],
            'headcount': data.get('headcount', 1),
            'items': [
                {
                    'seat_id': item.get('seatId'),
                    'start_time': item.get('startTime'),
                    'end_time': item.get('endTime')
                }
                for item in items if isinstance(item, dict)
            ]
        }

        reservations = submit_booking_request(current_user.id, booking_request,
                                              data.get('notes', ''))
        return api_success(
            data=_with_costs(reservations),
            message=get_message('reservations_created', count=len(reservations)),
            status=201
        )

    # ============================================================================
    # UPDATE / CANCEL
    # ============================================================================

    @bp.route('/reservations/<int:reservation_id>', methods=['PATCH'])
    @login_required
    @handle_booking_errors
    def update(reservation_id):
        """
        Edit notes or move the status of an owned reservation.

        Body:
            notes, status (only these keys are accepted)
        """
        data = get_json_body()

        unknown = sorted(set(data) - {'notes', 'status'})
        if unknown:
            raise ValidationError(
                get_message('invalid_request'),
                errors=[{'field': f, 'error': 'not_editable'} for f in unknown]
            )

        reservation = update_reservation(
            reservation_id,
            current_user.id,
            notes=data.get('notes'),
            status=data.get('status')
        )
        return api_success(data={'reservation': reservation},
                           message=get_message('reservation_updated'))

    @bp.route('/reservations/<int:reservation_id>', methods=['DELETE'])
    @login_required
    @handle_booking_errors
    def cancel(reservation_id):
        """Cancel an owned reservation (kept with status 'cancelled')."""
        reservation = cancel_reservation(reservation_id, current_user.id)
        return api_success(data={'reservation': reservation},
                           message=get_message('reservation_cancelled'))
