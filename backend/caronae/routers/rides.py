"""Ride API routes. Delegates to ride_service for rule enforcement."""
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from caronae.clock import get_now
from caronae.database import get_db
from caronae.schemas.ride import (
    DuplicateValidationOut,
    JoinRequestAnswer,
    MessageOut,
    RideCreate,
    RideOut,
    RideWithRidersOut,
    parse_date,
    parse_time,
)
from caronae.schemas.user import UserOut
from caronae.services import ride_service
from caronae.services.ride_filters import RideFilters, list_rides

logger = logging.getLogger(__name__)
router = APIRouter()


def _split(value: Optional[str]) -> Optional[list[str]]:
    if not value:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_query(parser, field: str, value: Optional[str]):
    if value is None or value == "":
        return None
    try:
        return parser(value)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail={field: [str(exc)]})


def _require_query(parser, field: str, value: Optional[str]):
    parsed = _parse_query(parser, field, value)
    if parsed is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={field: [f"The {field} field is required."]},
        )
    return parsed


@router.get("/", response_model=list[RideOut])
def search_rides(
    neighborhoods: Optional[str] = Query(None, description="Comma-separated neighborhood names"),
    hubs: Optional[str] = Query(None, description="Comma-separated hub names or center labels"),
    campus: Optional[str] = Query(None),
    date: Optional[str] = Query(None),
    time: Optional[str] = Query(None),
    going: Optional[bool] = Query(None),
    institution_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """List upcoming rides with free slots, optionally filtered."""
    filters = RideFilters(
        neighborhoods=_split(neighborhoods),
        hubs=_split(hubs),
        campus=campus,
        ride_date=_parse_query(parse_date, "date", date),
        ride_time=_parse_query(parse_time, "time", time),
        going=going,
        institution_id=institution_id,
        available=True,
        future=True,
    )
    return list_rides(db, filters, now)


@router.get("/validateDuplicate", response_model=DuplicateValidationOut)
def validate_duplicate(
    date: str = Query(...),
    time: str = Query(...),
    going: bool = Query(...),
    user_id: str = Query(..., description="ID of the user about to offer the ride"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Check whether offering a ride at this date would duplicate an existing offer."""
    ride_date = datetime.combine(
        _require_query(parse_date, "date", date),
        _require_query(parse_time, "time", time),
    )
    result = ride_service.validate_duplicate(db, user_id, ride_date, going, now)
    return DuplicateValidationOut(valid=result.valid, status=result.status.value, message=result.message)


@router.get("/history", response_model=list[RideWithRidersOut])
def ride_history(
    user_id: str = Query(...),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Finished rides the user drove or rode in."""
    return ride_service.ride_history(db, user_id, now)


@router.post("/", response_model=list[RideOut], status_code=status.HTTP_201_CREATED)
def create_rides(
    payload: RideCreate,
    user_id: str = Query(..., description="ID of the driver offering the ride"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Offer a ride; with week_days and repeats_until, a weekly routine of rides."""
    return ride_service.create_rides(db, user_id, payload, now)


@router.get("/{ride_id}")
def get_ride(
    ride_id: str,
    user_id: Optional[str] = Query(None, description="ID of the user viewing the ride"),
    db: Session = Depends(get_db),
):
    """Fetch a ride with its driver; riders are included for participants only."""
    ride = ride_service.get_ride(db, ride_id)
    data = RideOut.model_validate(ride).model_dump(mode="json")
    if ride_service.riders_visible_to(ride, user_id):
        data["riders"] = [UserOut.model_validate(u).model_dump(mode="json") for u in ride.riders]
    return data


@router.delete("/routine/{routine_id}", response_model=MessageOut)
def delete_routine(
    routine_id: str,
    user_id: str = Query(...),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Cancel every upcoming ride of a routine (driver only)."""
    return MessageOut(message=ride_service.delete_routine(db, routine_id, user_id, now))


@router.delete("/{ride_id}", response_model=MessageOut)
def delete_ride(
    ride_id: str,
    user_id: str = Query(...),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Cancel a ride (soft delete, driver only)."""
    return MessageOut(message=ride_service.delete_ride(db, ride_id, user_id, now))


@router.get("/{ride_id}/requests", response_model=list[UserOut])
def list_requests(ride_id: str, user_id: str = Query(...), db: Session = Depends(get_db)):
    """Users waiting for an answer to their join request (driver only)."""
    return ride_service.list_requests(db, ride_id, user_id)


@router.post("/{ride_id}/requests", response_model=MessageOut)
def request_join(
    ride_id: str,
    user_id: str = Query(...),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Ask the driver to join a ride."""
    return MessageOut(message=ride_service.request_join(db, ride_id, user_id, now))


@router.put("/{ride_id}/requests", response_model=MessageOut)
def answer_request(
    ride_id: str,
    payload: JoinRequestAnswer,
    user_id: str = Query(..., description="ID of the driver answering"),
    db: Session = Depends(get_db),
):
    """Accept or reject a pending join request (driver only)."""
    return MessageOut(message=ride_service.answer_request(
        db, ride_id, user_id, payload.user_id, payload.accepted,
    ))


@router.post("/{ride_id}/leave", response_model=MessageOut)
def leave_ride(
    ride_id: str,
    user_id: str = Query(...),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Leave a ride; when the driver leaves, the ride is cancelled."""
    return MessageOut(message=ride_service.leave_ride(db, ride_id, user_id, now))


@router.post("/{ride_id}/finish", response_model=MessageOut)
def finish_ride(
    ride_id: str,
    user_id: str = Query(...),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Mark a past ride as done (driver only)."""
    return MessageOut(message=ride_service.finish_ride(db, ride_id, user_id, now))
