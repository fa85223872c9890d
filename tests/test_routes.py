"""
API route tests.
Tests status codes, authentication and ownership rules of the JSON API.
"""

from datetime import timedelta


def _book(client, member, date, seat_id=1, start='10:00', end='11:00', **extra):
    body = {'seatId': seat_id, 'date': date, 'startTime': start, 'endTime': end, **extra}
    return client.post('/api/reservations', json=body, headers=member['headers'])


class TestAuthentication:
    """Tests for bearer-token authentication."""

    def test_health_is_public(self, client):
        """Test health check needs no token."""
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['data']['status'] == 'ok'

    def test_missing_or_unknown_token(self, client, member):
        """Test protected endpoints answer 401 without a valid token."""
        assert client.get('/api/reservations').status_code == 401
        response = client.get('/api/reservations', headers={'Authorization': 'Bearer nope'})
        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_valid_token(self, client, member):
        """Test a registered token is accepted."""
        response = client.get('/api/reservations', headers=member['headers'])
        assert response.status_code == 200
        assert response.get_json()['data']['reservations'] == []

    def test_unknown_route_is_json(self, client):
        """Test 404s use the JSON envelope."""
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert response.get_json()['success'] is False


class TestReservationRoutes:
    """Tests for /api/reservations."""

    def test_create_reservation(self, client, member, booking_date):
        """Test successful booking returns 201 with the record and cost."""
        response = _book(client, member, booking_date, notes='first visit')
        assert response.status_code == 201

        data = response.get_json()['data']
        assert data['reservation']['seat_id'] == 1
        assert data['reservation']['status'] == 'confirmed'
        assert data['reservation']['duration'] == 60
        # Seat 1 is a high-spec seat at 12/min
        assert data['cost'] == 720

    def test_missing_fields(self, client, member, booking_date):
        """Test missing fields answer 400 with the field names."""
        response = client.post('/api/reservations', json={'seatId': 1, 'date': booking_date},
                               headers=member['headers'])
        assert response.status_code == 400
        fields = {e['field'] for e in response.get_json()['errors']}
        assert fields == {'startTime', 'endTime'}

    def test_misaligned_time(self, client, member, booking_date):
        """Test off-grid times answer 400."""
        response = _book(client, member, booking_date, start='10:10')
        assert response.status_code == 400

    def test_unknown_seat(self, client, member, booking_date):
        """Test a missing seat answers 404."""
        assert _book(client, member, booking_date, seat_id=9999).status_code == 404

    def test_conflict(self, client, member, other_member, booking_date):
        """Test an overlapping booking answers 409 with the seat id."""
        assert _book(client, member, booking_date).status_code == 201

        response = _book(client, other_member, booking_date, start='10:30', end='11:30')
        assert response.status_code == 409
        assert response.get_json()['seat_ids'] == [1]

    def test_list_only_own(self, client, member, other_member, booking_date):
        """Test listing is limited to the caller."""
        _book(client, member, booking_date)
        _book(client, other_member, booking_date, seat_id=2)

        response = client.get('/api/reservations', headers=member['headers'])
        reservations = response.get_json()['data']['reservations']
        assert [r['seat_id'] for r in reservations] == [1]

        response = client.get(f'/api/reservations?userId={other_member["id"]}',
                              headers=member['headers'])
        assert response.status_code == 403

        response = client.get(f'/api/reservations?userId={member["id"]}&status=confirmed'
                              f'&dateFrom={booking_date}&dateTo={booking_date}',
                              headers=member['headers'])
        assert response.status_code == 200
        assert response.get_json()['count'] == 1

    def test_list_invalid_filters(self, client, member):
        """Test bad filters answer 400."""
        assert client.get('/api/reservations?status=pending',
                          headers=member['headers']).status_code == 400
        assert client.get('/api/reservations?dateFrom=01-01-2030',
                          headers=member['headers']).status_code == 400

    def test_detail_and_history(self, client, member, other_member, booking_date):
        """Test detail and history are owner only."""
        reservation_id = _book(client, member, booking_date).get_json()['data']['reservation']['id']

        assert client.get(f'/api/reservations/{reservation_id}',
                          headers=member['headers']).status_code == 200
        assert client.get(f'/api/reservations/{reservation_id}',
                          headers=other_member['headers']).status_code == 403
        assert client.get('/api/reservations/9999', headers=member['headers']).status_code == 404

        history = client.get(f'/api/reservations/{reservation_id}/history',
                             headers=member['headers']).get_json()['data']['history']
        assert [h['action'] for h in history] == ['created']

    def test_patch(self, client, member, other_member, booking_date):
        """Test PATCH edits notes/status and is owner only."""
        reservation_id = _book(client, member, booking_date).get_json()['data']['reservation']['id']
        url = f'/api/reservations/{reservation_id}'

        response = client.patch(url, json={'notes': 'late arrival'}, headers=member['headers'])
        assert response.status_code == 200
        assert response.get_json()['data']['reservation']['notes'] == 'late arrival'

        assert client.patch(url, json={'notes': 'x'},
                            headers=other_member['headers']).status_code == 403
        assert client.patch(url, json={'startTime': '12:00'},
                            headers=member['headers']).status_code == 400

    def test_delete_cancels(self, client, member, other_member, booking_date):
        """Test DELETE is a status change and is owner only."""
        reservation_id = _book(client, member, booking_date).get_json()['data']['reservation']['id']
        url = f'/api/reservations/{reservation_id}'

        assert client.delete(url, headers=other_member['headers']).status_code == 403

        response = client.delete(url, headers=member['headers'])
        assert response.status_code == 200
        assert response.get_json()['data']['reservation']['status'] == 'cancelled'

        # Still listed, and the slot is free again
        listed = client.get('/api/reservations?status=cancelled', headers=member['headers'])
        assert listed.get_json()['count'] == 1
        assert _book(client, other_member, booking_date).status_code == 201


class TestBookingRoute:
    """Tests for multi-seat /api/bookings."""

    def test_multi_seat_booking(self, client, member, booking_date):
        """Test every seat is booked with a combined cost."""
        response = client.post('/api/bookings', json={
            'date': booking_date,
            'headcount': 2,
            'items': [
                {'seatId': 7, 'startTime': '10:00', 'endTime': '11:00'},
                {'seatId': 8, 'startTime': '10:00', 'endTime': '11:00'},
            ]
        }, headers=member['headers'])

        assert response.status_code == 201
        data = response.get_json()['data']
        assert len(data['reservations']) == 2
        # Standard seats at 8/min
        assert data['total_cost'] == 960
        assert data['total_duration'] == 120

    def test_conflicting_entry_books_nothing(self, client, member, other_member, booking_date):
        """Test a partial conflict rejects the whole booking."""
        _book(client, other_member, booking_date, seat_id=8)

        response = client.post('/api/bookings', json={
            'date': booking_date,
            'items': [
                {'seatId': 7, 'startTime': '10:00', 'endTime': '11:00'},
                {'seatId': 8, 'startTime': '10:00', 'endTime': '11:00'},
            ]
        }, headers=member['headers'])

        assert response.status_code == 409
        listed = client.get('/api/reservations', headers=member['headers'])
        assert listed.get_json()['count'] == 0


class TestSeatRoutes:
    """Tests for /api/seats and /api/branches."""

    def test_catalog(self, client, member):
        """Test the seat catalog and its filters."""
        response = client.get('/api/seats', headers=member['headers'])
        assert response.get_json()['count'] == 28

        response = client.get('/api/seats?branchId=1', headers=member['headers'])
        assert response.get_json()['count'] == 12

        assert client.get('/api/seats?status=broken', headers=member['headers']).status_code == 400
        assert client.get('/api/seats?branchId=99', headers=member['headers']).status_code == 404

    def test_catalog_annotated_with_date(self, client, member, booking_date):
        """Test date annotation shows occupied slots."""
        _book(client, member, booking_date, start='12:00', end='13:00')

        response = client.get(f'/api/seats?date={booking_date}&branchId=1', headers=member['headers'])
        seat = response.get_json()['data']['seats'][0]
        assert seat['id'] == 1
        assert seat['reserved_slots'] == ['12:00', '12:30']
        assert seat['is_fully_booked'] is False

    def test_preview(self, client, member, booking_date):
        """Test POST /seats previews availability and cost without booking."""
        _book(client, member, booking_date)

        response = client.post('/api/seats', json={
            'date': booking_date, 'startTime': '10:30', 'endTime': '11:30', 'branchId': 1
        }, headers=member['headers'])
        assert response.status_code == 200

        seats = {s['seat_id']: s for s in response.get_json()['data']['seats']}
        assert seats[1]['is_available'] is False
        assert seats[2]['is_available'] is True
        assert seats[2]['cost'] == 720

        listed = client.get('/api/reservations', headers=member['headers'])
        assert listed.get_json()['count'] == 1

    def test_preview_requires_fields(self, client, member, booking_date):
        """Test preview validation."""
        response = client.post('/api/seats', json={'date': booking_date}, headers=member['headers'])
        assert response.status_code == 400

    def test_preview_rejects_malformed_branch(self, client, member, booking_date):
        """Test a non-integer branchId is a validation error, not a server error."""
        body = {'date': booking_date, 'startTime': '10:00', 'endTime': '11:00'}

        for bad in ([1], {'id': 1}, '1', True):
            response = client.post('/api/seats', json={**body, 'branchId': bad},
                                   headers=member['headers'])
            assert response.status_code == 400
            assert response.get_json()['errors'][0]['error'] == 'invalid_id'

        response = client.post('/api/seats', json={**body, 'branchId': 999},
                               headers=member['headers'])
        assert response.status_code == 404

    def test_branches(self, client, member):
        """Test branch listing."""
        response = client.get('/api/branches', headers=member['headers'])
        codes = [b['code'] for b in response.get_json()['data']['branches']]
        assert codes == ['AKIB', 'TACH']


class TestAvailabilityRoutes:
    """Tests for /api/availability."""

    def test_calendar(self, client, member, booking_date):
        """Test per-date status over a range."""
        response = client.get(f'/api/availability?dateFrom={booking_date}&dateTo={booking_date}',
                              headers=member['headers'])
        assert response.status_code == 200
        assert response.get_json()['data']['availability'] == {booking_date: 'available'}

    def test_calendar_validation(self, client, member, app, booking_date):
        """Test bad ranges answer 400."""
        from datetime import datetime

        start = datetime.strptime(booking_date, '%Y-%m-%d')
        before = (start - timedelta(days=1)).strftime('%Y-%m-%d')
        too_far = (start + timedelta(days=app.config['MAX_CALENDAR_DAYS'])).strftime('%Y-%m-%d')

        for query in (f'dateFrom={booking_date}&dateTo={before}',
                      f'dateFrom={booking_date}&dateTo={too_far}',
                      f'dateFrom={booking_date}'):
            assert client.get(f'/api/availability?{query}',
                              headers=member['headers']).status_code == 400

    def test_slots(self, client, member, booking_date):
        """Test the per-slot map endpoint."""
        _book(client, member, booking_date, start='10:00', end='10:30')

        response = client.get(f'/api/availability/slots?date={booking_date}&branchId=1',
                              headers=member['headers'])
        data = response.get_json()['data']
        assert data['seats']['1']['10:00'] is True
        assert data['seats']['1']['10:30'] is False
        assert len(data['slots']['1']) == 24
