from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.cms_component import CMSComponent
from siteforge.models.cms_section import SectionComponent
from siteforge.utils.audit import log_action
from siteforge.utils.transaction import transactional

COMPONENT_FIELDS = ("name", "slug", "description", "category", "schema", "icon", "is_active")


def get_all_cms_components(*, tenant_id):
    return (
        CMSComponent.query
        .filter_by(tenant_id=tenant_id)
        .order_by(CMSComponent.created_at.desc())
        .all()
    )


def get_cms_component(*, tenant_id, component_id):
    component = CMSComponent.query.filter_by(tenant_id=tenant_id, id=component_id).first()
    if not component:
        raise NotFound(f"No component found with ID: {component_id}")
    return component


def get_cms_components_by_type(*, tenant_id, component_type):
    return (
        CMSComponent.query
        .filter_by(tenant_id=tenant_id, category=component_type)
        .order_by(CMSComponent.name.asc())
        .all()
    )


def create_cms_component(*, tenant_id, actor_id, data):
    if not data.get("name") or not data.get("slug"):
        raise ValidationError("Both name and slug are required")

    if CMSComponent.query.filter_by(tenant_id=tenant_id, slug=data["slug"]).first():
        raise Conflict(f"A component with slug {data['slug']} already exists")

    component = CMSComponent(tenant_id=tenant_id)
    for field in COMPONENT_FIELDS:
        if field in data:
            setattr(component, field, data[field])
    if component.schema is None:
        component.schema = {}

    with transactional():
        db.session.add(component)
        db.session.flush()
        log_action(
            action="cms_component.create",
            entity_type="cms_component",
            entity_id=component.id,
            payload={"slug": component.slug},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return component


def update_cms_component(*, tenant_id, actor_id, component_id, data):
    component = get_cms_component(tenant_id=tenant_id, component_id=component_id)

    new_slug = data.get("slug")
    if new_slug and new_slug != component.slug:
        if CMSComponent.query.filter_by(tenant_id=tenant_id, slug=new_slug).first():
            raise Conflict(f"A component with slug {new_slug} already exists")

    changed = []
    with transactional():
        for field in COMPONENT_FIELDS:
            if field in data and getattr(component, field) != data[field]:
                setattr(component, field, data[field])
                changed.append(field)

        if changed:
            log_action(
                action="cms_component.update",
                entity_type="cms_component",
                entity_id=component.id,
                payload={"fields": changed},
                tenant_id=tenant_id,
                actor_id=actor_id,
            )
    return component


def delete_cms_component(*, tenant_id, actor_id, component_id):
    component = get_cms_component(tenant_id=tenant_id, component_id=component_id)

    usage_count = (
        db.session.query(SectionComponent.section_id)
        .filter(SectionComponent.component_id == component.id)
        .distinct()
        .count()
    )
    if usage_count:
        raise Conflict(
            f"Component cannot be deleted because it is used in {usage_count} sections"
        )

    with transactional():
        log_action(
            action="cms_component.delete",
            entity_type="cms_component",
            entity_id=component.id,
            payload={"slug": component.slug},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
        db.session.delete(component)

    return {"success": True, "message": "Component deleted"}
