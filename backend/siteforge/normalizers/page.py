from siteforge.domain.lifecycle.page import page_status
from siteforge.utils.dates import isoformat
from .section import normalize_page_section


def normalize_page(page, admin=False, resolved=None):
    """
    Page with its sections in order. ``resolved`` is the output of
    ``resolve_sections``; when given, each section carries its components.
    """
    if resolved is None:
        sections = [normalize_page_section(s) for s in sorted(page.sections, key=lambda s: s.order)]
    else:
        sections = [normalize_page_section(s, components) for s, components in resolved]

    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "description": page.description,
        "template": page.template,
        "status": page_status(page),
        "is_published": page.is_published,
        "publish_date": isoformat(page.publish_date),
        "featured_image": page.featured_image,
        "seo": {
            "meta_title": page.meta_title,
            "meta_description": page.meta_description,
        },
        "parent_id": page.parent_id,
        "order": page.order,
        "page_type": page.page_type,
        "locale": page.locale,
        "scroll_type": page.scroll_type,
        "sections": sections,
    }

    if admin:
        data["created_by"] = page.created_by
        data["created_at"] = isoformat(page.created_at)
        data["updated_at"] = isoformat(page.updated_at)

    return data


def normalize_page_link(page):
    return {"id": page.id, "title": page.title, "slug": page.slug}


def normalize_version(version):
    return {
        "id": version.id,
        "page_id": version.page_id,
        "version": version.version,
        "status": version.status,
        "created_by": version.created_by,
        "created_at": isoformat(version.created_at),
    }
