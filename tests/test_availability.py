"""
Tests for slot maps and calendar availability status.
"""

from models.availability import (
    STATUS_AVAILABLE, STATUS_BOOKED, STATUS_LIMITED,
    build_slot_map, classify_date, is_slot_reserved
)
from models.time_grid import generate_time_slots

DATE = '2030-03-01'
SLOTS = generate_time_slots('10:00', '12:00')


def _reservation(seat_id, start, end, status='confirmed'):
    return {'seat_id': seat_id, 'reservation_date': DATE,
            'start_time': start, 'end_time': end, 'status': status}


class TestSlotMap:
    """Tests for the per-slot reserved map."""

    def test_slot_inside_reservation(self):
        """Test start is reserved and end is free (half-open)."""
        reservations = [_reservation(1, '10:30', '11:30')]
        assert is_slot_reserved('10:00', reservations) is False
        assert is_slot_reserved('10:30', reservations) is True
        assert is_slot_reserved('11:00', reservations) is True
        assert is_slot_reserved('11:30', reservations) is False

    def test_build_slot_map(self):
        """Test reserved flags per seat and slot."""
        slot_map = build_slot_map([1, 2], [_reservation(1, '10:30', '11:30')], SLOTS)
        assert slot_map[1] == {'10:00': False, '10:30': True, '11:00': True, '11:30': False}
        assert not any(slot_map[2].values())

    def test_cancelled_reservations_free_slots(self):
        """Test only confirmed reservations occupy slots."""
        slot_map = build_slot_map([1], [_reservation(1, '10:00', '12:00', 'cancelled')], SLOTS)
        assert not any(slot_map[1].values())


class TestClassifyDate:
    """Tests for the coarse per-date status."""

    def test_all_free_is_available(self):
        """Test an empty day is available."""
        assert classify_date(build_slot_map([1, 2], [], SLOTS)) == STATUS_AVAILABLE

    def test_nothing_free_is_booked(self):
        """Test a full day is booked."""
        reservations = [_reservation(1, '10:00', '12:00'), _reservation(2, '10:00', '12:00')]
        assert classify_date(build_slot_map([1, 2], reservations, SLOTS)) == STATUS_BOOKED

    def test_below_threshold_is_limited(self):
        """Test 1 free slot of 8 (12.5%) is limited."""
        reservations = [_reservation(1, '10:00', '12:00'), _reservation(2, '10:00', '11:30')]
        assert classify_date(build_slot_map([1, 2], reservations, SLOTS)) == STATUS_LIMITED

    def test_threshold_is_exclusive(self):
        """Test exactly 25% free stays available."""
        reservations = [_reservation(1, '10:00', '12:00'), _reservation(2, '10:00', '11:00')]
        slot_map = build_slot_map([1, 2], reservations, SLOTS)
        assert classify_date(slot_map, threshold=0.25) == STATUS_AVAILABLE

    def test_no_capacity_is_booked(self):
        """Test no seats or an empty window is booked."""
        assert classify_date({}) == STATUS_BOOKED
        assert classify_date(build_slot_map([1], [], [])) == STATUS_BOOKED


class TestAvailabilityFromDatabase:
    """Tests for the database-backed views."""

    def _small_branch(self, app, days_off=''):
        from models.branch import create_branch
        from models.seat import create_seat

        with app.app_context():
            branch_id = create_branch('TEST', 'Test Branch', '', '10:00', '14:00', days_off)
            seat_id = create_seat(branch_id, 'Booth 1', 10, seat_number=1)
        return branch_id, seat_id

    def test_slot_map_reflects_bookings(self, app, member, booking_date):
        """Test a confirmed booking shows up in the slot map."""
        from models.availability import get_slot_map
        from models.reservation_crud import create_reservation

        with app.app_context():
            create_reservation(member['id'], 1, booking_date, '12:00', '13:00')
            result = get_slot_map(booking_date, branch_id=1)

            assert result['slots'][1][0] == '10:00'
            assert result['slots'][1][-1] == '21:30'
            assert result['seats'][1]['12:00'] is True
            assert result['seats'][1]['12:30'] is True
            assert result['seats'][1]['13:00'] is False
            assert not any(result['seats'][2].values())

    def test_slot_map_blocks_maintenance_seats(self, app, booking_date):
        """Test every slot of a seat under maintenance is reported as taken."""
        from database import get_db
        from models.availability import get_slot_map

        with app.app_context():
            db = get_db()
            db.execute("UPDATE seats SET status = 'maintenance' WHERE id = 3")
            db.commit()

            result = get_slot_map(booking_date, branch_id=1)
            assert result['unbookable_seats'] == [3]
            assert all(result['seats'][3].values())
            assert len(result['seats'][3]) == len(result['slots'][1])
            assert not any(result['seats'][4].values())

    def test_calendar_status_from_real_data(self, app, member, booking_date):
        """Test calendar status follows the confirmed set."""
        from models.availability import get_availability_calendar, get_date_status
        from models.reservation_crud import cancel_reservation, create_reservation

        branch_id, seat_id = self._small_branch(app)

        with app.app_context():
            assert get_date_status(booking_date, branch_id) == STATUS_AVAILABLE

            reservation = create_reservation(member['id'], seat_id, booking_date, '10:00', '13:30')
            assert get_date_status(booking_date, branch_id) == STATUS_LIMITED

            cancel_reservation(reservation['id'], member['id'])
            create_reservation(member['id'], seat_id, booking_date, '10:00', '14:00')
            calendar = get_availability_calendar(booking_date, booking_date, branch_id)
            assert calendar == {booking_date: STATUS_BOOKED}

    def test_maintenance_seats_add_no_capacity(self, app, booking_date):
        """Test a branch whose only seat is under maintenance is booked."""
        from database import get_db
        from models.availability import get_date_status

        branch_id, seat_id = self._small_branch(app)

        with app.app_context():
            db = get_db()
            db.execute("UPDATE seats SET status = 'maintenance' WHERE id = ?", (seat_id,))
            db.commit()
            assert get_date_status(booking_date, branch_id) == STATUS_BOOKED

    def test_day_off_is_booked(self, app, booking_date):
        """Test a closed day has no capacity."""
        from datetime import datetime
        from models.availability import get_date_status
        from models.time_grid import WEEKDAYS

        weekday = WEEKDAYS[datetime.strptime(booking_date, '%Y-%m-%d').weekday()]
        branch_id, _ = self._small_branch(app, days_off=weekday)

        with app.app_context():
            assert get_date_status(booking_date, branch_id) == STATUS_BOOKED

    def test_annotate_seats(self, app, member, booking_date):
        """Test catalog entries gain the day's occupancy."""
        from models.availability import annotate_seats
        from models.reservation_crud import create_reservation
        from models.seat import get_all_seats

        branch_id, seat_id = self._small_branch(app)

        with app.app_context():
            create_reservation(member['id'], seat_id, booking_date, '10:00', '14:00')
            seat = annotate_seats(get_all_seats(branch_id=branch_id), booking_date)[0]

            assert seat['reservations'] == [{'start_time': '10:00', 'end_time': '14:00'}]
            assert len(seat['reserved_slots']) == 8
            assert seat['is_fully_booked'] is True
