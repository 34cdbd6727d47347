from siteforge.errors import NotFound
from siteforge.models.cms_section import CMSSection
from .queries import get_page_by_slug


def resolve_sections(page, *, include_hidden=False):
    """
    Page sections in order, each with the ordered components of the CMS
    section it links to.
    """
    sections = sorted(page.sections, key=lambda s: s.order)
    if not include_hidden:
        sections = [s for s in sections if s.is_visible]

    keys = [s.linked_section_id for s in sections if s.linked_section_id]
    cms_sections = {}
    if keys:
        cms_sections = {
            cs.section_id: cs
            for cs in CMSSection.query.filter(
                CMSSection.tenant_id == page.tenant_id,
                CMSSection.section_id.in_(keys),
            )
        }

    resolved = []
    for section in sections:
        cms_section = cms_sections.get(section.linked_section_id)
        resolved.append((section, list(cms_section.components) if cms_section else []))
    return resolved


def render_page(*, tenant_id, slug):
    page = get_page_by_slug(tenant_id=tenant_id, slug=slug)
    if page is None or not page.is_published:
        raise NotFound("Page not found")
    return page, resolve_sections(page)
