from siteforge.errors import NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.booking import Service
from siteforge.utils.audit import log_action
from siteforge.utils.transaction import transactional
from siteforge.application.ecommerce.money import to_money

SERVICE_FIELDS = ("name", "description", "duration_minutes", "buffer_minutes", "is_active")


def list_services(*, tenant_id, active=None):
    query = Service.query.filter_by(tenant_id=tenant_id)
    if active is not None:
        query = query.filter_by(is_active=active)
    return query.order_by(Service.name.asc()).all()


def get_service(*, tenant_id, service_id):
    service = Service.query.filter_by(tenant_id=tenant_id, id=service_id).first()
    if not service:
        raise NotFound("Service not found")
    return service


def _clean_service(data):
    fields = {f: data[f] for f in SERVICE_FIELDS if f in data}

    if "name" in fields and not (fields["name"] or "").strip():
        raise ValidationError("Service name is required")
    if "duration_minutes" in fields:
        duration = fields["duration_minutes"]
        if not isinstance(duration, int) or isinstance(duration, bool) or duration <= 0:
            raise ValidationError("duration_minutes must be a positive integer")
    if "buffer_minutes" in fields:
        buffer = fields["buffer_minutes"]
        if not isinstance(buffer, int) or isinstance(buffer, bool) or buffer < 0:
            raise ValidationError("buffer_minutes must be a non-negative integer")
    if data.get("price") is not None:
        fields["price"] = to_money(data["price"], "price")
    return fields


def create_service(*, tenant_id, actor_id, data):
    if not data.get("name") or "duration_minutes" not in data:
        raise ValidationError("Service name and duration_minutes are required")

    service = Service(tenant_id=tenant_id, buffer_minutes=0, is_active=True)
    for field, value in _clean_service(data).items():
        setattr(service, field, value)

    with transactional():
        db.session.add(service)
        db.session.flush()
        log_action(action="service.create", entity_type="service", entity_id=service.id,
                   payload={"name": service.name}, tenant_id=tenant_id, actor_id=actor_id)
    return service


def update_service(*, tenant_id, actor_id, service_id, data):
    service = get_service(tenant_id=tenant_id, service_id=service_id)
    fields = _clean_service(data)

    with transactional():
        for field, value in fields.items():
            setattr(service, field, value)
        log_action(action="service.update", entity_type="service", entity_id=service.id,
                   payload={"fields": sorted(fields.keys())}, tenant_id=tenant_id, actor_id=actor_id)
    return service
