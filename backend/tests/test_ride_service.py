"""Unit tests for ride_service helpers that need no HTTP layer."""
from datetime import date, datetime

import pytest
from fastapi import HTTPException

from caronae.services import ride_service
from caronae.services.ride_service import DuplicateStatus
from tests.conftest import make_user, make_ride, attach


class TestRoutineDates:

    def test_weekly(self):
        dates = ride_service.routine_dates(date(2017, 6, 6), "2", date(2017, 6, 13))
        assert dates == [date(2017, 6, 6), date(2017, 6, 13)]

    def test_sunday_as_zero_or_seven(self):
        start = date(2017, 6, 5)  # Monday
        assert ride_service.routine_dates(start, "0", date(2017, 6, 11)) == [start, date(2017, 6, 11)]
        assert ride_service.routine_dates(start, "7", date(2017, 6, 11)) == [start, date(2017, 6, 11)]

    def test_end_date_before_next_occurrence(self):
        assert ride_service.routine_dates(date(2017, 6, 6), "2", date(2017, 6, 12)) == [date(2017, 6, 6)]


class TestValidateDuplicate:

    NOW = datetime(2016, 12, 1)

    def test_direction_must_match(self, db):
        user = make_user(db)
        make_ride(db, driver=user, date=datetime(2016, 12, 18, 16, 0), going=False)

        result = ride_service.validate_duplicate(db, user.user_id, datetime(2016, 12, 18, 16, 0), True, self.NOW)
        assert result.valid is True
        assert result.status == DuplicateStatus.valid

    def test_other_day_outside_window_is_valid(self, db):
        user = make_user(db)
        make_ride(db, driver=user, date=datetime(2016, 12, 17, 16, 0))

        result = ride_service.validate_duplicate(db, user.user_id, datetime(2016, 12, 18, 16, 0), True, self.NOW)
        assert result.status == DuplicateStatus.valid

    def test_exact_slot_is_duplicate(self, db):
        user = make_user(db)
        make_ride(db, driver=user, date=datetime(2016, 12, 18, 16, 0))

        result = ride_service.validate_duplicate(db, user.user_id, datetime(2016, 12, 18, 16, 0), True, self.NOW)
        assert result.status == DuplicateStatus.duplicate
        assert result.valid is False

    def test_quit_ride_is_ignored(self, db):
        user = make_user(db)
        ride = make_ride(db, driver=make_user(db, "Driver"), date=datetime(2016, 12, 18, 16, 0))
        attach(db, ride, user, "quit")

        result = ride_service.validate_duplicate(db, user.user_id, datetime(2016, 12, 18, 16, 0), True, self.NOW)
        assert result.status == DuplicateStatus.valid


class TestGuards:

    def test_get_ride_not_found(self, db):
        with pytest.raises(HTTPException) as exc:
            ride_service.get_ride(db, "missing")
        assert exc.value.status_code == 404

    def test_riders_visible_to(self, db):
        driver = make_user(db, "Driver")
        rider = make_user(db, "Rider")
        pending = make_user(db, "Pending")
        ride = make_ride(db, driver=driver)
        attach(db, ride, rider, "accepted")
        attach(db, ride, pending, "pending")

        assert ride_service.riders_visible_to(ride, driver.user_id)
        assert ride_service.riders_visible_to(ride, rider.user_id)
        assert not ride_service.riders_visible_to(ride, pending.user_id)
        assert not ride_service.riders_visible_to(ride, None)
