from siteforge.utils.dates import isoformat


def normalize_section_component(link):
    return {
        "id": link.id,
        "component_id": link.component_id,
        "type": link.component.slug if link.component else None,
        "order": link.order,
        "data": link.data or {},
    }


def normalize_page_section(section, components=None):
    data = {
        "id": section.id,
        "title": section.title,
        "component_type": section.component_type,
        "order": section.order,
        "is_visible": section.is_visible,
        "data": section.data or {},
        "section_id": section.linked_section_id,
    }

    if components is not None:
        data["components"] = [normalize_section_component(c) for c in components]

    return data


def normalize_cms_section(section, include_components=True):
    data = {
        "id": section.id,
        "section_id": section.section_id,
        "name": section.name,
        "description": section.description,
        "last_updated": isoformat(section.last_updated),
        "created_by": section.created_by,
        "created_at": isoformat(section.created_at),
        "updated_at": isoformat(section.updated_at),
    }

    if include_components:
        data["components"] = [normalize_section_component(c) for c in section.components]

    return data


def normalize_cms_component(component):
    return {
        "id": component.id,
        "name": component.name,
        "slug": component.slug,
        "description": component.description,
        "category": component.category,
        "schema": component.schema or {},
        "icon": component.icon,
        "is_active": component.is_active,
        "created_at": isoformat(component.created_at),
        "updated_at": isoformat(component.updated_at),
    }
