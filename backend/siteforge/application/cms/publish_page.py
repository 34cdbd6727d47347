from typing import Dict

from sqlalchemy import select

from siteforge.errors import NotFound
from siteforge.extensions import db
from siteforge.models.base import utcnow
from siteforge.models.page import Page
from siteforge.models.page_version import PageVersion
from siteforge.utils.transaction import transactional
from siteforge.utils.versioning import snapshot_page, next_version
from siteforge.utils.audit import log_action
from siteforge.domain.invariants.page import assert_page
from siteforge.domain.lifecycle.page import assert_page_transition, page_status


def locked_page(tenant_id: str, page_id: str) -> Page:
    """Fetch a page with a row-level lock (no-op on SQLite)."""
    page = (
        db.session.execute(
            select(Page)
            .where(Page.id == page_id, Page.tenant_id == tenant_id)
            .with_for_update()
        )
        .scalar_one_or_none()
    )
    if not page:
        raise NotFound(f"No page found with ID: {page_id}")
    return page


def record_version(page: Page, *, tenant_id: str, actor_id: str, status: str) -> PageVersion:
    version = PageVersion()
    version.page_id = page.id
    version.tenant_id = tenant_id
    version.version = next_version(page.id, tenant_id)
    version.status = status
    version.snapshot = snapshot_page(page)
    version.created_by = actor_id

    db.session.add(version)
    db.session.flush()
    return version


def publish_page(
    *,
    tenant_id: str,
    page_id: str,
    actor_id: str,
) -> Dict[str, object]:
    """
    Publishes a page and creates an immutable version snapshot.

    Responsibilities:
    - transactional boundary
    - invariant enforcement
    - version creation
    - audit logging
    """
    with transactional():
        # 1️⃣ Fetch page with row-level lock
        page = locked_page(tenant_id, page_id)

        # 2️⃣ Lifecycle transition enforcement
        assert_page_transition(from_status=page_status(page), to_status="published")

        # 3️⃣ Apply state change
        page.is_published = True
        if page.publish_date is None:
            page.publish_date = utcnow()

        # 4️⃣ Enforce publish-specific invariants
        assert_page(page, publish=True)

        # 5️⃣ Create immutable PageVersion
        version = record_version(page, tenant_id=tenant_id, actor_id=actor_id, status="published")

        # 6️⃣ Audit logging
        log_action(
            action="page.publish",
            entity_type="page",
            entity_id=page.id,
            payload={"version": version.version},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )

    return {
        "page_id": page.id,
        "version": version.version,
    }
