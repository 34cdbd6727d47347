from typing import Dict

from siteforge.utils.transaction import transactional
from siteforge.utils.audit import log_action
from siteforge.domain.invariants.page import assert_page
from siteforge.domain.lifecycle.page import assert_page_transition, page_status
from .publish_page import locked_page, record_version


def unpublish_page(
    *,
    tenant_id: str,
    page_id: str,
    actor_id: str,
) -> Dict[str, object]:
    """
    Marks a page as draft again and creates a version snapshot.
    """
    with transactional():
        page = locked_page(tenant_id, page_id)

        assert_page_transition(from_status=page_status(page), to_status="draft")
        page.is_published = False

        assert_page(page)

        version = record_version(page, tenant_id=tenant_id, actor_id=actor_id, status="unpublished")

        log_action(
            action="page.unpublish",
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
