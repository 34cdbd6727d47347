from typing import Dict

from siteforge.errors import Conflict, NotFound
from siteforge.models.page import Page
from siteforge.models.page_version import PageVersion
from siteforge.models.section import PageSection
from siteforge.utils.transaction import transactional
from siteforge.utils.versioning import PAGE_SNAPSHOT_FIELDS
from siteforge.utils.order import compact_order
from siteforge.utils.audit import log_action
from siteforge.domain.invariants.page import assert_page
from .publish_page import locked_page, record_version


def rollback_page(
    *,
    tenant_id: str,
    page_id: str,
    rollback_version: int,
    actor_id: str
) -> Dict[str, int]:
    """
    Roll back a page to a previous version.

    The page returns to draft with the snapshot's fields and sections; a new
    ``rollback`` version records the restored state. CMS section content is
    shared across pages and is not rewound.
    """
    # 1️⃣ Fetch the PageVersion to roll back to
    pv: PageVersion | None = (
        PageVersion.query
        .filter_by(page_id=page_id, tenant_id=tenant_id, version=rollback_version)
        .first()
    )

    if not pv:
        raise NotFound("PageVersion not found")

    snapshot = pv.snapshot

    restored_slug = snapshot["page"].get("slug")
    if restored_slug and Page.query.filter(
        Page.tenant_id == tenant_id, Page.slug == restored_slug, Page.id != page_id
    ).first():
        raise Conflict(f"Cannot roll back: slug {restored_slug} is now used by another page")

    with transactional():
        # 2️⃣ Fetch live Page with row-level lock
        page = locked_page(tenant_id, page_id)
        page.is_published = False

        for field in PAGE_SNAPSHOT_FIELDS:
            if field in snapshot["page"]:
                setattr(page, field, snapshot["page"][field])

        # 3️⃣ Replace current sections with the snapshot's
        page.sections.clear()
        for s_data in snapshot["sections"]:
            page.sections.append(PageSection(
                title=s_data.get("title"),
                component_type=s_data.get("component_type") or "CUSTOM",
                order=s_data.get("order", 0),
                is_visible=s_data.get("is_visible", True),
                data=s_data.get("data"),
            ))

        # 4️⃣ Normalize ordering
        compact_order(page.sections)

        # 5️⃣ Assert invariants
        assert_page(page)

        # 6️⃣ Create rollback PageVersion
        new_version = record_version(page, tenant_id=tenant_id, actor_id=actor_id, status="rollback")

        # 7️⃣ Audit logging
        log_action(
            action="page.rollback",
            entity_type="page",
            entity_id=page.id,
            payload={
                "from_version": rollback_version,
                "to_version": new_version.version,
            },
            tenant_id=tenant_id,
            actor_id=actor_id,
        )

    return {
        "page_id": page.id,
        "new_version": new_version.version
    }
