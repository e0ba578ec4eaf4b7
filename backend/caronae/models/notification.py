"""RideNotification ORM model: outbox of notifications raised by ride transitions."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from caronae.database import Base


class NotificationType(str, enum.Enum):
    ride_join_requested = "ride_join_requested"
    ride_join_request_answered = "ride_join_request_answered"
    ride_user_left = "ride_user_left"
    ride_canceled = "ride_canceled"
    ride_finished = "ride_finished"


class RideNotification(Base):
    __tablename__ = "ride_notifications"

    notification_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    ride_id = Column(String(36), ForeignKey("rides.ride_id"), nullable=False)
    recipient_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    notification_type = Column(SAEnum(NotificationType), nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
