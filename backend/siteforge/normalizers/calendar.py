from siteforge.utils.dates import isoformat
from .ecommerce import money


def normalize_service(service):
    return {
        "id": service.id,
        "name": service.name,
        "description": service.description,
        "duration_minutes": service.duration_minutes,
        "buffer_minutes": service.buffer_minutes,
        "price": money(service.price),
        "is_active": service.is_active,
    }


def normalize_booking(booking):
    return {
        "id": booking.id,
        "service_id": booking.service_id,
        "service_name": booking.service.name if booking.service else None,
        "staff_user_id": booking.staff_user_id,
        "customer_name": booking.customer_name,
        "customer_email": booking.customer_email,
        "customer_phone": booking.customer_phone,
        "start_time": isoformat(booking.start_time),
        "end_time": isoformat(booking.end_time),
        "status": booking.status,
        "notes": booking.notes,
        "created_at": isoformat(booking.created_at),
    }
