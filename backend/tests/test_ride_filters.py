"""Tests for the composable ride filters."""
from datetime import datetime, timedelta

from caronae.models.place import Institution, Campus, Hub
from caronae.services.ride_filters import RideFilters, list_rides
from tests.conftest import NOW, make_user, make_ride, attach


def _ids(rides):
    return [r.ride_id for r in rides]


def _campus(db):
    """Two campuses of one institution, each with hubs."""
    institution = Institution(name="UFRJ")
    fundao = Campus(name="Cidade Universitária", institution=institution)
    praia = Campus(name="Praia Vermelha", institution=institution)
    db.add_all([
        institution, fundao, praia,
        Hub(name="CT: Bloco A", center="CT", campus=fundao),
        Hub(name="CT: Bloco H", center="CT", campus=fundao),
        Hub(name="Letras", center="CLA", campus=fundao),
        Hub(name="PV", center="PV", campus=praia),
    ])
    db.commit()
    return institution


class TestAvailability:

    def test_only_rides_with_free_slots(self, db):
        ride = make_ride(db, slots=3, driver=make_user(db, "A"))
        attach(db, ride, make_user(db, "A rider"), "accepted")

        full = make_ride(db, slots=2, driver=make_user(db, "B"))
        attach(db, full, make_user(db, "B rider"), "accepted")

        pending_only = make_ride(db, slots=2, driver=make_user(db, "C"))
        attach(db, pending_only, make_user(db, "C pending"), "pending")

        results = _ids(list_rides(db, RideFilters(available=True), NOW))
        assert ride.ride_id in results
        assert full.ride_id not in results
        assert pending_only.ride_id in results


class TestFuture:

    def test_only_future_rides(self, db):
        upcoming = make_ride(db, driver=make_user(db, "A"))
        old = make_ride(db, date=datetime(1990, 1, 1), driver=make_user(db, "B"))

        results = _ids(list_rides(db, RideFilters(future=True), NOW))
        assert upcoming.ride_id in results
        assert old.ride_id not in results

    def test_cancelled_rides_are_hidden(self, db):
        ride = make_ride(db, driver=make_user(db))
        ride.deleted_at = datetime(2017, 5, 1)
        db.commit()
        assert list_rides(db, RideFilters(), NOW) == []


class TestPlaces:

    def test_neighborhoods(self, db):
        ipanema = make_ride(db, neighborhood="Ipanema")
        niteroi = make_ride(db, neighborhood="Niterói")
        leblon = make_ride(db, neighborhood="Leblon")

        results = _ids(list_rides(db, RideFilters(neighborhoods=["Ipanema", "Leblon"]), NOW))
        assert ipanema.ride_id in results
        assert niteroi.ride_id not in results
        assert leblon.ride_id in results

    def test_hubs(self, db):
        fnd = make_ride(db, hub="FND")
        bloco_a = make_ride(db, hub="CT: Bloco A")
        bloco_h = make_ride(db, hub="CT: Bloco H")

        results = _ids(list_rides(db, RideFilters(hubs=["CT: Bloco A", "CT: Bloco H"]), NOW))
        assert fnd.ride_id not in results
        assert bloco_a.ride_id in results
        assert bloco_h.ride_id in results

    def test_hub_center_label_expands_to_its_hubs(self, db):
        _campus(db)
        bloco_a = make_ride(db, hub="CT: Bloco A")
        center = make_ride(db, hub="CT")
        letras = make_ride(db, hub="Letras")

        results = _ids(list_rides(db, RideFilters(hubs=["CT"]), NOW))
        assert bloco_a.ride_id in results
        assert center.ride_id in results
        assert letras.ride_id not in results

    def test_campus_matches_hub_names_and_centers(self, db):
        _campus(db)
        by_name = make_ride(db, hub="CT: Bloco H", date=NOW + timedelta(days=5, hours=1))
        by_center = make_ride(db, hub="CT", date=NOW + timedelta(days=5, hours=2))
        elsewhere = make_ride(db, hub="PV", date=NOW + timedelta(days=5))

        results = _ids(list_rides(db, RideFilters(campus="Cidade Universitária"), NOW))
        assert results == [by_name.ride_id, by_center.ride_id]
        assert elsewhere.ride_id not in results

    def test_unknown_campus_matches_nothing(self, db):
        make_ride(db, hub="CT: Bloco A")
        assert list_rides(db, RideFilters(campus="Nowhere"), NOW) == []


class TestDateAndDirection:

    def test_date_and_time_is_an_exact_slot(self, db):
        day = (NOW + timedelta(days=5)).date()
        noon = make_ride(db, date=datetime.combine(day, datetime.min.time()) + timedelta(hours=12))
        morning = make_ride(db, date=datetime.combine(day, datetime.min.time()) + timedelta(hours=8))

        filters = RideFilters(ride_date=day, ride_time=noon.date.time())
        assert _ids(list_rides(db, filters, NOW)) == [noon.ride_id]

        by_day = _ids(list_rides(db, RideFilters(ride_date=day), NOW))
        assert by_day == [morning.ride_id, noon.ride_id]

    def test_going(self, db):
        going = make_ride(db, going=True)
        returning = make_ride(db, going=False)

        assert _ids(list_rides(db, RideFilters(going=False), NOW)) == [returning.ride_id]
        assert _ids(list_rides(db, RideFilters(going=True), NOW)) == [going.ride_id]

    def test_default_order_is_by_date(self, db):
        later = make_ride(db, date=NOW + timedelta(days=3))
        sooner = make_ride(db, date=NOW + timedelta(days=1))
        assert _ids(list_rides(db, RideFilters(), NOW)) == [sooner.ride_id, later.ride_id]


class TestInstitution:

    def test_filters_by_drivers_institution(self, db):
        ufrj = Institution(name="UFRJ")
        uff = Institution(name="UFF")
        db.add_all([ufrj, uff])
        db.commit()

        ride_a = make_ride(db, driver=make_user(db, "A", institution_id=ufrj.institution_id))
        ride_b = make_ride(db, driver=make_user(db, "B", institution_id=uff.institution_id))
        # A rider from UFRJ does not make a UFF ride count as UFRJ's.
        attach(db, ride_b, make_user(db, "Rider", institution_id=ufrj.institution_id), "accepted")

        results = _ids(list_rides(db, RideFilters(institution_id=ufrj.institution_id), NOW))
        assert results == [ride_a.ride_id]
