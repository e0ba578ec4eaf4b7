"""Composable ride list filters.

Every option narrows the query with AND; options left as None add no
constraint. Results are ordered by ride date, earliest first.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Query, Session

from caronae.models.place import Campus, Hub
from caronae.models.ride import Ride
from caronae.models.ride_user import RideUser, ParticipantStatus, SEATED_STATUSES
from caronae.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class RideFilters:
    neighborhoods: Optional[list[str]] = None
    hubs: Optional[list[str]] = None
    campus: Optional[str] = None
    ride_date: Optional[date] = None
    ride_time: Optional[time] = None
    going: Optional[bool] = None
    institution_id: Optional[int] = None
    available: bool = False
    future: bool = False


def active_rides(db: Session) -> Query:
    """Rides that have not been cancelled or deleted."""
    return db.query(Ride).filter(Ride.deleted_at.is_(None))


def seated_count():
    """Correlated sub-query counting a ride's driver and accepted riders."""
    return (
        select(func.count())
        .select_from(RideUser)
        .where(RideUser.ride_id == Ride.ride_id, RideUser.status.in_(SEATED_STATUSES))
        .correlate(Ride)
        .scalar_subquery()
    )


def campus_hub_names(db: Session, campus_name: str) -> set[str]:
    """Hub names and center labels belonging to a campus."""
    hubs = db.query(Hub).join(Campus).filter(Campus.name == campus_name).all()
    return {h.name for h in hubs} | {h.center for h in hubs}


def expand_hub_names(db: Session, names: list[str]) -> set[str]:
    """Expand center labels and campus names to the hub names they cover."""
    expanded = set(names)
    for hub in db.query(Hub).filter(Hub.center.in_(names)).all():
        expanded.add(hub.name)
    for campus_name in db.query(Campus.name).filter(Campus.name.in_(names)).all():
        expanded |= campus_hub_names(db, campus_name[0])
    return expanded


def apply_ride_filters(db: Session, query: Query, filters: RideFilters, now: datetime) -> Query:
    if filters.neighborhoods:
        query = query.filter(Ride.neighborhood.in_(filters.neighborhoods))

    if filters.hubs:
        query = query.filter(Ride.hub.in_(expand_hub_names(db, filters.hubs)))

    if filters.campus:
        query = query.filter(Ride.hub.in_(campus_hub_names(db, filters.campus)))

    if filters.ride_date and filters.ride_time:
        query = query.filter(Ride.date == datetime.combine(filters.ride_date, filters.ride_time))
    elif filters.ride_date:
        day_start = datetime.combine(filters.ride_date, time.min)
        query = query.filter(Ride.date >= day_start, Ride.date < day_start + timedelta(days=1))

    if filters.going is not None:
        query = query.filter(Ride.going == filters.going)

    if filters.available:
        query = query.filter(Ride.slots > seated_count())

    if filters.future:
        query = query.filter(Ride.date > now)

    if filters.institution_id is not None:
        driven_by_institution = (
            select(RideUser.ride_id)
            .join(User, User.user_id == RideUser.user_id)
            .where(
                RideUser.status == ParticipantStatus.driver,
                User.institution_id == filters.institution_id,
            )
        )
        query = query.filter(Ride.ride_id.in_(driven_by_institution))

    return query.order_by(Ride.date)


def list_rides(db: Session, filters: RideFilters, now: datetime) -> list[Ride]:
    rides = apply_ride_filters(db, active_rides(db), filters, now).all()
    logger.info("Ride search with %s returned %d ride(s)", filters, len(rides))
    return rides
