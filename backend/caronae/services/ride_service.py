"""Core ride service: rule engine for offering, joining and closing rides.

Responsibilities:
- Duplicate-ride validation against the driver's upcoming offers
- Ride creation, expanding weekly routines into one ride per occurrence
- Join request / answer / leave / finish / cancel transitions
- Driver-only authorization for every driver action
- Ride history and history counts

Every function takes ``now`` explicitly where time matters, including the
cancellation timestamp; nothing here reads the clock.
"""
import enum
import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from caronae.config import settings
from caronae.models.notification import NotificationType
from caronae.models.ride import Ride
from caronae.models.ride_user import RideUser, ParticipantStatus, SEATED_STATUSES
from caronae.models.user import User
from caronae.schemas.ride import RideCreate
from caronae.services import notification_service
from caronae.services.ride_filters import active_rides

logger = logging.getLogger(__name__)


class DuplicateStatus(str, enum.Enum):
    valid = "valid"
    duplicate = "duplicate"
    possible_duplicate = "possible_duplicate"


DUPLICATE_MESSAGES = {
    DuplicateStatus.valid: "No conflicting rides were found close to the specified date.",
    DuplicateStatus.duplicate: "The user has already offered a ride on the specified date.",
    DuplicateStatus.possible_duplicate: "The user has already offered a ride too close to the specified date.",
}


@dataclass
class DuplicateValidation:
    """Outcome of checking a candidate ride against the driver's offers."""
    valid: bool
    status: DuplicateStatus
    message: str

    @classmethod
    def of(cls, result: DuplicateStatus) -> "DuplicateValidation":
        return cls(
            valid=result == DuplicateStatus.valid,
            status=result,
            message=DUPLICATE_MESSAGES[result],
        )


# ── Lookups and guards ─────────────────────────────────────────────

def get_ride(db: Session, ride_id: str) -> Ride:
    ride = active_rides(db).filter(Ride.ride_id == ride_id).first()
    if not ride:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ride not found")
    return ride


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _check_driver(ride: Ride, user_id: str) -> None:
    """Only the ride's driver may manage it."""
    edge = ride.participant(user_id)
    if edge is None or edge.status != ParticipantStatus.driver:
        logger.warning("User %s attempted a driver action on ride %s", user_id, ride.ride_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the driver may perform this action on the ride.",
        )


def _validation_error(field: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={field: [message]},
    )


# ── Duplicate validation ───────────────────────────────────────────

def validate_duplicate(
    db: Session,
    user_id: str,
    ride_date: datetime,
    going: bool,
    now: datetime,
) -> DuplicateValidation:
    """Classify a candidate ride against the user's upcoming offers.

    Only rides the user drives, in the same direction and still in the future
    are considered. A ride on the same day or within the duplicate window is
    "close"; a close ride within the around-date tolerance is a duplicate.
    """
    window = timedelta(hours=settings.DUPLICATE_WINDOW_HOURS)
    day_start = datetime.combine(ride_date.date(), time.min)

    close_rides = (
        active_rides(db)
        .join(RideUser, RideUser.ride_id == Ride.ride_id)
        .filter(
            RideUser.user_id == user_id,
            RideUser.status == ParticipantStatus.driver,
            Ride.going == going,
            Ride.date > now,
            or_(
                and_(Ride.date >= day_start, Ride.date < day_start + timedelta(days=1)),
                and_(Ride.date >= ride_date - window, Ride.date <= ride_date + window),
            ),
        )
        .all()
    )

    if not close_rides:
        return DuplicateValidation.of(DuplicateStatus.valid)
    if any(ride.is_around_date(ride_date) for ride in close_rides):
        return DuplicateValidation.of(DuplicateStatus.duplicate)
    return DuplicateValidation.of(DuplicateStatus.possible_duplicate)


# ── Creation ───────────────────────────────────────────────────────

def _iso_weekday(day: int) -> int:
    """Client weekdays count from 0 = Sunday; 7 is also accepted as Sunday."""
    return 7 if day in (0, 7) else day


def routine_dates(start: date, week_days: str, until: date) -> list[date]:
    """The offered date followed by every listed weekday up to ``until`` inclusive."""
    iso_days = {_iso_weekday(int(d)) for d in week_days.split(",") if d}
    dates = [start]
    current = start + timedelta(days=1)
    while current <= until:
        if current.isoweekday() in iso_days:
            dates.append(current)
        current += timedelta(days=1)
    return dates


def create_rides(db: Session, driver_id: str, offer: RideCreate, now: datetime) -> list[Ride]:
    """Create a ride, or a weekly routine of rides, offered by ``driver_id``.

    All occurrences are validated before anything is written; a single
    duplicate aborts the whole batch.
    """
    driver = get_user(db, driver_id)
    start = datetime.combine(offer.mydate, offer.mytime)
    if start <= now:
        raise _validation_error("mydate", "You cannot create a ride in the past.")

    recurring = bool(offer.week_days and offer.repeats_until)
    if recurring:
        if offer.repeats_until < offer.mydate:
            raise _validation_error("repeats_until", "The routine must end after the ride date.")
        if offer.repeats_until > offer.mydate + timedelta(weeks=settings.ROUTINE_MAX_WEEKS):
            raise _validation_error(
                "repeats_until",
                f"A routine cannot last more than {settings.ROUTINE_MAX_WEEKS} weeks.",
            )
        dates = routine_dates(offer.mydate, offer.week_days, offer.repeats_until)
    else:
        dates = [offer.mydate]

    for day in dates:
        candidate = datetime.combine(day, offer.mytime)
        result = validate_duplicate(db, driver.user_id, candidate, offer.going, now)
        if result.status == DuplicateStatus.duplicate:
            logger.warning("Rejected duplicate ride offer by %s on %s", driver.user_id, candidate)
            raise _validation_error("mydate", result.message)

    routine_id = str(uuid.uuid4()) if recurring else None
    rides = []
    try:
        for day in dates:
            ride = Ride(
                ride_id=routine_id if recurring and not rides else str(uuid.uuid4()),
                date=datetime.combine(day, offer.mytime),
                going=offer.going,
                hub=offer.hub,
                neighborhood=offer.neighborhood,
                myzone=offer.myzone,
                place=offer.place,
                route=offer.route,
                slots=offer.slots,
                description=offer.description,
                routine_id=routine_id,
                week_days=offer.week_days,
                repeats_until=offer.repeats_until if recurring else None,
                done=False,
            )
            ride.participants.append(RideUser(user_id=driver.user_id, user=driver, status=ParticipantStatus.driver))
            db.add(ride)
            rides.append(ride)
        db.commit()
    except Exception:
        db.rollback()
        raise

    for ride in rides:
        db.refresh(ride)
    logger.info("Created %d ride(s) for driver %s (routine: %s)", len(rides), driver.user_id, routine_id)
    return rides


# ── Join requests ──────────────────────────────────────────────────

def request_join(db: Session, ride_id: str, user_id: str, now: datetime) -> str:
    ride = get_ride(db, ride_id)
    user = get_user(db, user_id)

    if ride.participant(user.user_id) is not None:
        return "Ride request already exists."
    if ride.date <= now:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You cannot join a ride in the past.")

    ride.participants.append(RideUser(user_id=user.user_id, user=user, status=ParticipantStatus.pending))
    notification_service.notify(
        db, ride, [ride.driver] if ride.driver else [],
        NotificationType.ride_join_requested, user_id=user.user_id,
    )
    db.commit()
    logger.info("User %s requested to join ride %s", user.user_id, ride_id)
    return "Request created."


def list_requests(db: Session, ride_id: str, user_id: str) -> list[User]:
    ride = get_ride(db, ride_id)
    _check_driver(ride, user_id)
    return ride.users_with_status(ParticipantStatus.pending)


def answer_request(db: Session, ride_id: str, driver_id: str, user_id: str, accepted: bool) -> str:
    ride = get_ride(db, ride_id)
    _check_driver(ride, driver_id)

    edge = ride.participant(user_id)
    if edge is None or edge.status != ParticipantStatus.pending:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Ride request not found.")

    if accepted and ride.available_slots <= 0:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="There are no available slots in this ride.",
        )

    edge.status = ParticipantStatus.accepted if accepted else ParticipantStatus.rejected
    notification_service.notify(
        db, ride, [edge.user], NotificationType.ride_join_request_answered, accepted=accepted,
    )
    db.commit()
    logger.info("Request of user %s on ride %s answered: %s", user_id, ride_id, edge.status.value)
    return "Request updated."


# ── Leaving, cancelling, finishing ─────────────────────────────────

def _cancel(db: Session, ride: Ride, now: datetime) -> None:
    """Soft-delete a ride, dropping its participants after notifying them."""
    notification_service.notify(
        db, ride,
        ride.users_with_status(ParticipantStatus.accepted, ParticipantStatus.pending),
        NotificationType.ride_canceled,
    )
    ride.participants.clear()
    ride.deleted_at = now


def leave_ride(db: Session, ride_id: str, user_id: str, now: datetime) -> str:
    ride = get_ride(db, ride_id)
    edge = ride.participant(user_id)
    if edge is None or edge.status in (ParticipantStatus.rejected, ParticipantStatus.quit):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is not part of this ride.")

    if edge.status == ParticipantStatus.driver:
        _cancel(db, ride, now)
        logger.info("Driver %s left ride %s; ride cancelled", user_id, ride_id)
    else:
        edge.status = ParticipantStatus.quit
        notification_service.notify(
            db, ride, [ride.driver] if ride.driver else [],
            NotificationType.ride_user_left, user_id=user_id,
        )
        logger.info("User %s left ride %s", user_id, ride_id)
    db.commit()
    return "Left ride."


def finish_ride(db: Session, ride_id: str, user_id: str, now: datetime) -> str:
    ride = get_ride(db, ride_id)
    _check_driver(ride, user_id)

    if ride.date > now:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="A ride in the future cannot be marked as finished",
        )

    ride.done = True
    notification_service.notify(db, ride, ride.riders, NotificationType.ride_finished)
    db.commit()
    logger.info("Ride %s finished by driver %s", ride_id, user_id)
    return "Ride finished."


def delete_ride(db: Session, ride_id: str, user_id: str, now: datetime) -> str:
    ride = get_ride(db, ride_id)
    _check_driver(ride, user_id)
    _cancel(db, ride, now)
    db.commit()
    logger.info("Ride %s deleted by driver %s", ride_id, user_id)
    return "Ride deleted."


def delete_routine(db: Session, routine_id: str, user_id: str, now: datetime) -> str:
    """Cancel every upcoming ride of a routine driven by ``user_id``."""
    rides = (
        active_rides(db)
        .join(RideUser, RideUser.ride_id == Ride.ride_id)
        .filter(
            Ride.routine_id == routine_id,
            Ride.date > now,
            RideUser.user_id == user_id,
            RideUser.status == ParticipantStatus.driver,
        )
        .all()
    )
    if not rides:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Routine not found")

    for ride in rides:
        _cancel(db, ride, now)
    db.commit()
    logger.info("Routine %s deleted by driver %s (%d ride(s))", routine_id, user_id, len(rides))
    return "Routine deleted."


# ── History ────────────────────────────────────────────────────────

def _history_query(db: Session, user_id: str, now: datetime):
    return (
        active_rides(db)
        .join(RideUser, RideUser.ride_id == Ride.ride_id)
        .filter(
            RideUser.user_id == user_id,
            RideUser.status.in_(SEATED_STATUSES),
            Ride.done.is_(True),
            Ride.date <= now,
        )
    )


def ride_history(db: Session, user_id: str, now: datetime) -> list[Ride]:
    """Finished rides the user drove or rode in, oldest first."""
    return _history_query(db, user_id, now).order_by(Ride.date).all()


def history_counts(db: Session, user_id: str, now: datetime) -> dict[str, int]:
    get_user(db, user_id)
    rows = (
        _history_query(db, user_id, now)
        .with_entities(RideUser.status, func.count(Ride.ride_id))
        .group_by(RideUser.status)
        .all()
    )
    counts = {row_status: count for row_status, count in rows}
    return {
        "offered_count": counts.get(ParticipantStatus.driver, 0),
        "taken_count": counts.get(ParticipantStatus.accepted, 0),
    }


def riders_visible_to(ride: Ride, user_id: Optional[str]) -> bool:
    """Riders are shown only to the driver and to accepted riders."""
    if user_id is None:
        return False
    edge = ride.participant(user_id)
    return edge is not None and edge.status in SEATED_STATUSES
