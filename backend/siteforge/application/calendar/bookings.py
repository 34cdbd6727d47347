import logging
from datetime import datetime, timedelta

from sqlalchemy import select

from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.booking import BOOKING_STATUSES, Booking
from siteforge.models.user import User, UserTenant
from siteforge.domain.lifecycle.booking import assert_booking_transition
from siteforge.utils.audit import log_action
from siteforge.utils.dates import parse_datetime
from siteforge.utils.transaction import transactional
from .services import get_service

logger = logging.getLogger(__name__)

DEFAULT_BUSINESS_HOURS = {"start": "09:00", "end": "17:00"}


def list_bookings(*, tenant_id, status=None, date_from=None, date_to=None):
    query = Booking.query.filter_by(tenant_id=tenant_id)
    if status:
        if status not in BOOKING_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        query = query.filter_by(status=status)
    if date_from:
        query = query.filter(Booking.start_time >= parse_datetime(date_from, "date_from"))
    if date_to:
        query = query.filter(Booking.start_time <= parse_datetime(date_to, "date_to"))
    return query.order_by(Booking.start_time.asc()).all()


def get_booking(*, tenant_id, booking_id):
    booking = Booking.query.filter_by(tenant_id=tenant_id, id=booking_id).first()
    if not booking:
        raise NotFound("Booking not found")
    return booking


def _blocking_bookings(tenant_id, service, staff_user_id, window_start, window_end, lock=False):
    """
    Non-cancelled bookings for the same staff member (or the same service when
    nobody is assigned) that intersect [window_start, window_end).
    """
    stmt = select(Booking).where(
        Booking.tenant_id == tenant_id,
        Booking.status != "CANCELLED",
        Booking.start_time < window_end,
        Booking.end_time > window_start,
    )
    if staff_user_id:
        stmt = stmt.where(Booking.staff_user_id == staff_user_id)
    else:
        stmt = stmt.where(Booking.service_id == service.id, Booking.staff_user_id.is_(None))
    if lock:
        stmt = stmt.with_for_update()
    return db.session.execute(stmt).scalars().all()


def _assert_staff_member(tenant_id, staff_user_id):
    """Staff must be an active user with an active membership in the tenant."""
    staff = (
        User.query
        .join(UserTenant, UserTenant.user_id == User.id)
        .filter(
            User.id == staff_user_id,
            User.is_active.is_(True),
            UserTenant.tenant_id == tenant_id,
            UserTenant.is_active.is_(True),
        )
        .first()
    )
    if staff is None:
        raise NotFound("Staff user not found")


def _overlaps(start, end, service, others):
    buffer = timedelta(minutes=service.buffer_minutes or 0)
    for other in others:
        if start < other.end_time + buffer and other.start_time < end + buffer:
            return True
    return False


def create_booking(*, tenant_id, actor_id, data):
    service = get_service(tenant_id=tenant_id, service_id=data.get("service_id"))
    if not service.is_active:
        raise ValidationError("Service is not bookable")

    if not data.get("customer_name") or not data.get("customer_email"):
        raise ValidationError("customer_name and customer_email are required")

    start = parse_datetime(data.get("start_time"), "start_time")
    if start is None:
        raise ValidationError("start_time is required")
    end = start + timedelta(minutes=service.duration_minutes)

    staff_user_id = data.get("staff_user_id")
    if staff_user_id:
        _assert_staff_member(tenant_id, staff_user_id)

    buffer = timedelta(minutes=service.buffer_minutes or 0)

    with transactional():
        others = _blocking_bookings(tenant_id, service, staff_user_id, start - buffer, end + buffer, lock=True)
        if _overlaps(start, end, service, others):
            logger.info("Booking overlap for service %s at %s", service.id, start.isoformat())
            raise Conflict("The requested time overlaps an existing booking")

        booking = Booking(
            tenant_id=tenant_id,
            service_id=service.id,
            staff_user_id=staff_user_id,
            customer_name=data["customer_name"],
            customer_email=data["customer_email"].strip().lower(),
            customer_phone=data.get("customer_phone"),
            start_time=start,
            end_time=end,
            status="PENDING",
            notes=data.get("notes"),
        )
        db.session.add(booking)
        db.session.flush()

        log_action(
            action="booking.create",
            entity_type="booking",
            entity_id=booking.id,
            payload={"service_id": service.id, "start_time": start.isoformat()},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return booking


def update_booking_status(*, tenant_id, actor_id, booking_id, status):
    if status not in BOOKING_STATUSES:
        raise ValidationError(f"Invalid status: {status}")

    booking = get_booking(tenant_id=tenant_id, booking_id=booking_id)
    previous = booking.status

    with transactional():
        assert_booking_transition(from_status=previous, to_status=status)
        booking.status = status
        log_action(
            action="booking.status",
            entity_type="booking",
            entity_id=booking.id,
            payload={"from": previous, "to": status},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return booking


def cancel_booking(*, tenant_id, actor_id, booking_id):
    return update_booking_status(
        tenant_id=tenant_id, actor_id=actor_id, booking_id=booking_id, status="CANCELLED"
    )


def _parse_hour(value, field):
    try:
        return datetime.strptime(value, "%H:%M").time()
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid business_hours.{field}: {value}") from exc


def business_hours(tenant):
    hours = dict(DEFAULT_BUSINESS_HOURS)
    hours.update(((tenant.settings or {}).get("business_hours") or {}))
    return _parse_hour(hours["start"], "start"), _parse_hour(hours["end"], "end")


def available_slots(*, tenant, service_id, date, staff_user_id=None):
    """
    Start times on ``date`` where a booking of the service would fit, stepping
    through business hours in (duration + buffer) increments.
    """
    service = get_service(tenant_id=tenant.id, service_id=service_id)
    if staff_user_id:
        _assert_staff_member(tenant.id, staff_user_id)

    day = parse_datetime(date, "date")
    if day is None:
        raise ValidationError("date is required")
    day = day.date()

    open_at, close_at = business_hours(tenant)
    window_start = datetime.combine(day, open_at)
    window_end = datetime.combine(day, close_at)
    if window_end <= window_start:
        return []

    duration = timedelta(minutes=service.duration_minutes)
    buffer = timedelta(minutes=service.buffer_minutes or 0)
    step = duration + buffer

    others = _blocking_bookings(tenant.id, service, staff_user_id, window_start - buffer, window_end + buffer)

    slots = []
    cursor = window_start
    while cursor + duration <= window_end:
        if not _overlaps(cursor, cursor + duration, service, others):
            slots.append(cursor)
        cursor += step
    return slots
