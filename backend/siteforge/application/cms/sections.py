import logging

from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.base import utcnow
from siteforge.models.cms_component import CMSComponent
from siteforge.models.cms_section import CMSSection, SectionComponent
from siteforge.domain.invariants.section import assert_component_links
from siteforge.utils.audit import log_action
from siteforge.utils.slugs import section_name_from_id
from siteforge.utils.transaction import transactional

logger = logging.getLogger(__name__)


def clean_section_id(section_id):
    """Drop any cache-busting ``?query`` suffix from a section key."""
    if not section_id:
        raise ValidationError("sectionId is required")
    return section_id.split("?", 1)[0]


def find_section(tenant_id, section_id):
    """Exact key match first, then the first key that prefixes (or is prefixed by) ``section_id``."""
    section = CMSSection.query.filter_by(tenant_id=tenant_id, section_id=section_id).first()
    if section:
        return section, False

    for candidate in CMSSection.query.filter_by(tenant_id=tenant_id).order_by(CMSSection.created_at.asc()):
        if section_id.startswith(candidate.section_id) or candidate.section_id.startswith(section_id):
            logger.debug("Section %s matched by prefix to %s", section_id, candidate.section_id)
            return candidate, True

    return None, False


def get_all_cms_sections(*, tenant_id):
    return (
        CMSSection.query
        .filter_by(tenant_id=tenant_id)
        .order_by(CMSSection.updated_at.desc())
        .all()
    )


def get_section_components(*, tenant_id, section_id):
    section, by_prefix = find_section(tenant_id, clean_section_id(section_id))

    # A prefix match only counts when it actually carries components
    if section is None or (by_prefix and not section.components):
        return {"components": [], "lastUpdated": None}

    return {
        "components": [
            {
                "id": link.id,
                "type": link.component.slug,
                "data": link.data,
            }
            for link in section.components
        ],
        "lastUpdated": section.last_updated.isoformat(),
    }


def _component_for(tenant_id, component_type, cache):
    if component_type in cache:
        return cache[component_type]

    component = CMSComponent.query.filter_by(tenant_id=tenant_id, slug=component_type).first()
    if component is None:
        component = CMSComponent(
            tenant_id=tenant_id,
            name=component_type,
            slug=component_type,
            description=f"Component type {component_type}",
            schema={},
            is_active=True,
        )
        db.session.add(component)
        db.session.flush()
        logger.info("Auto-created CMS component %s", component_type)

    cache[component_type] = component
    return component


def save_section_components(*, tenant_id, actor_id, section_id, components):
    """
    Replace the component list of a section, creating the section and any
    unknown component types on the way.
    """
    section_id = clean_section_id(section_id)
    components = components or []

    for item in components:
        if not isinstance(item, dict) or not item.get("type"):
            raise ValidationError("Every component needs a type")

    timestamp = utcnow()
    cache = {}

    with transactional():
        section = CMSSection.query.filter_by(tenant_id=tenant_id, section_id=section_id).first()
        if section is None:
            section = CMSSection(
                tenant_id=tenant_id,
                section_id=section_id,
                name=section_name_from_id(section_id),
                description=f'Section "{section_id}"',
                created_by=actor_id,
            )
            db.session.add(section)
            db.session.flush()
        else:
            section.components.clear()
            db.session.flush()

        for index, item in enumerate(components):
            section.components.append(SectionComponent(
                component_id=_component_for(tenant_id, item["type"], cache).id,
                order=index,
                data=item.get("data") or {},
            ))

        section.last_updated = timestamp
        db.session.flush()
        assert_component_links(section.components)

        log_action(
            action="cms_section.save_components",
            entity_type="cms_section",
            entity_id=section.id,
            payload={"section_id": section_id, "count": len(components)},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )

    return {
        "success": True,
        "message": "Components saved successfully",
        "lastUpdated": section.last_updated.isoformat(),
    }


def get_cms_section(*, tenant_id, section_id):
    section = CMSSection.query.filter_by(tenant_id=tenant_id, section_id=section_id).first()
    if not section:
        raise NotFound(f"No section found with ID: {section_id}")
    return section


def create_cms_section(*, tenant_id, actor_id, data):
    section_id = clean_section_id(data.get("sectionId") or data.get("section_id"))

    if CMSSection.query.filter_by(tenant_id=tenant_id, section_id=section_id).first():
        raise Conflict(f"A section with ID {section_id} already exists")

    section = CMSSection(
        tenant_id=tenant_id,
        section_id=section_id,
        name=data.get("name") or section_name_from_id(section_id),
        description=data.get("description"),
        created_by=actor_id,
    )
    with transactional():
        db.session.add(section)
        db.session.flush()
        log_action(
            action="cms_section.create",
            entity_type="cms_section",
            entity_id=section.id,
            payload={"section_id": section_id},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return section


def update_cms_section(*, tenant_id, actor_id, section_id, data):
    section = get_cms_section(tenant_id=tenant_id, section_id=section_id)

    with transactional():
        for field in ("name", "description"):
            if field in data:
                setattr(section, field, data[field])
        section.last_updated = utcnow()

        log_action(
            action="cms_section.update",
            entity_type="cms_section",
            entity_id=section.id,
            payload={"fields": [f for f in ("name", "description") if f in data]},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return section


def delete_cms_section(*, tenant_id, actor_id, section_id):
    section = get_cms_section(tenant_id=tenant_id, section_id=section_id)
    component_count = len(section.components)

    with transactional():
        log_action(
            action="cms_section.delete",
            entity_type="cms_section",
            entity_id=section.id,
            payload={"section_id": section.section_id, "unlinked_components": component_count},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
        db.session.delete(section)

    return {
        "success": True,
        "message": f"Section deleted. {component_count} components were unlinked.",
    }
