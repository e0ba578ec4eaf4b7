"""Pydantic schemas for Rides."""
from __future__ import annotations
from datetime import date, datetime, time
from typing import Optional, Any
from pydantic import BaseModel, field_validator

from caronae.schemas.user import UserOut

DATE_FORMATS = ("%d/%m/%Y", "%Y-%m-%d")
TIME_FORMATS = ("%H:%M:%S", "%H:%M")


def parse_date(value: Any) -> date:
    """Parse ``DD/MM/YYYY`` (app clients) or ``YYYY-MM-DD``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(str(value).strip(), fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date: {value!r}")


def parse_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(str(value).strip(), fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time: {value!r}")


class RideCreate(BaseModel):
    myzone: Optional[str] = None
    neighborhood: str
    place: Optional[str] = None
    route: Optional[str] = None
    mydate: date
    mytime: time
    week_days: Optional[str] = None  # comma-separated, 0 = Sunday
    repeats_until: Optional[date] = None
    slots: int
    hub: str
    description: Optional[str] = None
    going: bool

    @field_validator("mydate", "repeats_until", mode="before")
    @classmethod
    def _parse_date(cls, value):
        if value is None or value == "":
            return None
        return parse_date(value)

    @field_validator("mytime", mode="before")
    @classmethod
    def _parse_time(cls, value):
        return parse_time(value)

    @field_validator("week_days", mode="before")
    @classmethod
    def _normalize_week_days(cls, value):
        if value is None or value == "":
            return None
        if isinstance(value, int):
            value = str(value)
        if isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)
        days = [d.strip() for d in str(value).split(",") if d.strip()]
        for d in days:
            if not d.isdigit() or int(d) > 7:
                raise ValueError(f"Invalid week day: {d!r}")
        return ",".join(days)

    @field_validator("slots")
    @classmethod
    def _positive_slots(cls, value):
        if value < 1:
            raise ValueError("A ride must offer at least one slot")
        return value


class RideOut(BaseModel):
    ride_id: str
    myzone: Optional[str] = None
    neighborhood: str
    going: bool
    place: Optional[str] = None
    route: Optional[str] = None
    routine_id: Optional[str] = None
    hub: str
    slots: int
    mydate: str
    mytime: str
    description: Optional[str] = None
    week_days: Optional[str] = None
    repeats_until: Optional[date] = None
    done: bool
    title: str
    origin: str
    destination: str
    available_slots: int
    driver: Optional[UserOut] = None

    model_config = {"from_attributes": True}


class RideWithRidersOut(RideOut):
    riders: list[UserOut] = []


class DuplicateValidationOut(BaseModel):
    valid: bool
    status: str
    message: str


class JoinRequestAnswer(BaseModel):
    user_id: str
    accepted: bool


class MessageOut(BaseModel):
    message: str
