from siteforge.models.cms_section import CMSSection
from siteforge.models.page_version import PageVersion

PAGE_SNAPSHOT_FIELDS = (
    "title", "slug", "description", "template", "featured_image",
    "meta_title", "meta_description", "page_type", "locale", "scroll_type",
)


def snapshot_page(page):
    """Serializable copy of a page, its sections and the components they resolve to."""
    linked_ids = [s.linked_section_id for s in page.sections if s.linked_section_id]
    cms_sections = {}
    if linked_ids:
        cms_sections = {
            cs.section_id: cs
            for cs in CMSSection.query.filter(
                CMSSection.tenant_id == page.tenant_id,
                CMSSection.section_id.in_(linked_ids),
            )
        }

    return {
        "page": {
            "id": page.id,
            "is_published": page.is_published,
            **{field: getattr(page, field) for field in PAGE_SNAPSHOT_FIELDS},
        },
        "sections": [
            {
                "id": s.id,
                "title": s.title,
                "component_type": s.component_type,
                "order": s.order,
                "is_visible": s.is_visible,
                "data": s.data,
                "components": [
                    {
                        "type": link.component.slug,
                        "order": link.order,
                        "data": link.data,
                    }
                    for link in cms_sections[s.linked_section_id].components
                ] if s.linked_section_id in cms_sections else [],
            }
            for s in page.sections
        ],
    }


def next_version(page_id, tenant_id):
    last = (
        PageVersion.query
        .filter_by(page_id=page_id, tenant_id=tenant_id)
        .order_by(PageVersion.version.desc())
        .first()
    )
    return (last.version + 1) if last else 1
