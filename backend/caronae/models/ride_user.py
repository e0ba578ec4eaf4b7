"""RideUser ORM model: a user's participation in a ride."""
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from caronae.database import Base


class ParticipantStatus(str, enum.Enum):
    driver = "driver"
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    quit = "quit"


# Statuses that occupy a seat in the car.
SEATED_STATUSES = (ParticipantStatus.driver, ParticipantStatus.accepted)


class RideUser(Base):
    __tablename__ = "ride_user"

    ride_id = Column(String(36), ForeignKey("rides.ride_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    status = Column(SAEnum(ParticipantStatus), nullable=False, default=ParticipantStatus.pending)
    feedback = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    ride = relationship("Ride", back_populates="participants")
    user = relationship("User")
