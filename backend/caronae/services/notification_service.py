"""Notification outbox for ride state transitions.

Each transition appends one RideNotification per recipient to the caller's
session, so notifications are committed (or rolled back) together with the
change that produced them. Delivery (push, e-mail) reads the outbox and is
not handled here.
"""
import logging
from typing import Any, Iterable

from sqlalchemy.orm import Session

from caronae.models.notification import RideNotification, NotificationType
from caronae.models.ride import Ride

logger = logging.getLogger(__name__)


def _ride_payload(ride: Ride) -> dict[str, Any]:
    return {
        "ride_id": ride.ride_id,
        "title": ride.title,
        "date": ride.date.isoformat(),
        "going": ride.going,
    }


def notify(
    db: Session,
    ride: Ride,
    recipients: Iterable,
    notification_type: NotificationType,
    **extra: Any,
) -> list[RideNotification]:
    """Queue ``notification_type`` about ``ride`` for every user in ``recipients``."""
    queued = []
    for user in recipients:
        payload = _ride_payload(ride)
        payload.update(extra)
        notification = RideNotification(
            ride_id=ride.ride_id,
            recipient_id=user.user_id,
            notification_type=notification_type,
            payload=payload,
        )
        db.add(notification)
        queued.append(notification)

    logger.info(
        "Queued %d '%s' notification(s) for ride %s",
        len(queued), notification_type.value, ride.ride_id,
    )
    return queued
