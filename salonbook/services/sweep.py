# salonbook/services/sweep.py

import logging
from datetime import datetime

from sqlalchemy import or_, and_
from sqlmodel import Session, col, select

from ..core.lifecycle import AppointmentStatus, has_window_passed
from ..models import Appointment

logger = logging.getLogger(__name__)

SWEPT_STATUSES = (AppointmentStatus.confirmed.value, AppointmentStatus.in_progress.value)


def complete_expired_appointments(session: Session, now: datetime) -> int:
    """Mark confirmed/in-progress appointments whose end time has passed as completed."""
    today = now.date()

    candidates = session.exec(
        select(Appointment)
        .where(col(Appointment.status).in_(SWEPT_STATUSES))
        .where(or_(
            Appointment.date < today,
            and_(Appointment.date == today, Appointment.end_time < now.time()),
        ))
    ).all()

    count = 0
    for appointment in candidates:
        if not has_window_passed(appointment.date, appointment.end_time, now):
            continue
        appointment.status = AppointmentStatus.completed.value
        session.add(appointment)
        count += 1
        logger.info(
            "Appointment auto-completed: id=%s date=%s end_time=%s",
            appointment.id, appointment.date, appointment.end_time,
        )

    session.commit()
    if count == 0:
        logger.info("No expired appointments found")
    else:
        logger.info("Marked %s appointments as completed", count)
    return count
