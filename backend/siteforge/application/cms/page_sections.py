from siteforge.errors import Conflict, NotFound
from siteforge.models.cms_section import CMSSection
from siteforge.models.section import PageSection
from siteforge.domain.invariants.page import assert_page
from siteforge.utils.audit import log_action
from siteforge.utils.order import compact_order, next_order
from siteforge.utils.transaction import transactional
from .queries import get_page


def associate_section_to_page(*, tenant_id, actor_id, page_id, section_id, order=None):
    """Link a CMS section to a page, appending it unless ``order`` says otherwise."""
    page = get_page(tenant_id=tenant_id, page_id=page_id)

    cms_section = CMSSection.query.filter_by(tenant_id=tenant_id, section_id=section_id).first()
    if not cms_section:
        raise NotFound(f"No section found with ID: {section_id}")

    if any(s.linked_section_id == section_id for s in page.sections):
        raise Conflict(f"Section {section_id} is already on this page")

    with transactional():
        if order is None:
            order = next_order(page.sections)
        else:
            # Make room: shift everything at or after the requested slot
            for section in page.sections:
                if section.order >= order:
                    section.order += 1

        link = PageSection(
            title=cms_section.name or section_id,
            component_type="CUSTOM",
            order=order,
            is_visible=True,
            data={"sectionId": section_id},
        )
        page.sections.append(link)
        compact_order(page.sections)
        assert_page(page)

        log_action(
            action="page.section_associate",
            entity_type="page",
            entity_id=page.id,
            payload={"section_id": section_id, "order": link.order},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )

    return page


def dissociate_section_from_page(*, tenant_id, actor_id, page_id, section_id):
    page = get_page(tenant_id=tenant_id, page_id=page_id)

    links = [s for s in page.sections if s.linked_section_id == section_id]
    if not links:
        raise NotFound(f"Section {section_id} is not on this page")

    with transactional():
        for link in links:
            page.sections.remove(link)
        compact_order(page.sections)
        assert_page(page)

        log_action(
            action="page.section_dissociate",
            entity_type="page",
            entity_id=page.id,
            payload={"section_id": section_id},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )

    return page
