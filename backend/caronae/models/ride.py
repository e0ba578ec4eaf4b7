"""Ride ORM model and its derived properties."""
import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import Column, String, DateTime, Date, Integer, Boolean, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from caronae.config import settings
from caronae.database import Base
from caronae.models.ride_user import ParticipantStatus, SEATED_STATUSES


class Ride(Base):
    __tablename__ = "rides"

    ride_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    date = Column(DateTime, nullable=False, index=True)  # local wall-clock time
    going = Column(Boolean, nullable=False, default=True)  # True: neighborhood → hub
    hub = Column(String(150), nullable=False)
    neighborhood = Column(String(150), nullable=False)
    myzone = Column(String(50), nullable=True)
    place = Column(String(255), nullable=True)
    route = Column(String(255), nullable=True)
    slots = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    routine_id = Column(String(36), nullable=True, index=True)
    week_days = Column(String(20), nullable=True)  # e.g. "1,3,5"
    repeats_until = Column(Date, nullable=True)
    done = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime, nullable=True)  # local wall-clock, like date
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    participants = relationship("RideUser", back_populates="ride", cascade="all, delete-orphan")

    # ── Participants ───────────────────────────────────────────────

    def participant(self, user_id: str):
        """Return the RideUser edge for ``user_id`` or None."""
        for edge in self.participants:
            if edge.user_id == user_id:
                return edge
        return None

    def users_with_status(self, *statuses: ParticipantStatus) -> list:
        return [edge.user for edge in self.participants if edge.status in statuses]

    @property
    def driver(self):
        drivers = self.users_with_status(ParticipantStatus.driver)
        return drivers[0] if drivers else None

    @property
    def riders(self) -> list:
        return self.users_with_status(ParticipantStatus.accepted)

    @property
    def institution(self):
        driver = self.driver
        return driver.institution if driver else None

    # ── Derived values ─────────────────────────────────────────────

    @property
    def origin(self) -> str:
        return self.hub if self.going else self.neighborhood

    @property
    def destination(self) -> str:
        return self.neighborhood if self.going else self.hub

    @property
    def title(self) -> str:
        # Going rides head to campus, so the title reads neighborhood → hub.
        start, end = (self.neighborhood, self.hub) if self.going else (self.hub, self.neighborhood)
        return f"{start} → {end} | {self.date.strftime('%d/%m')}"

    @property
    def available_slots(self) -> int:
        seated = sum(1 for edge in self.participants if edge.status in SEATED_STATUSES)
        return self.slots - seated

    @property
    def mydate(self) -> str:
        return self.date.strftime("%Y-%m-%d")

    @property
    def mytime(self) -> str:
        return self.date.strftime("%H:%M:%S")

    def is_around_date(self, candidate: datetime, minutes: Optional[int] = None) -> bool:
        """True if ``candidate`` is within the tolerance window of this ride's date."""
        if minutes is None:
            minutes = settings.AROUND_DATE_MINUTES
        return abs(self.date - candidate) <= timedelta(minutes=minutes)
