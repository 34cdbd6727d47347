from siteforge.extensions import db
from siteforge.utils.audit import log_action
from siteforge.utils.transaction import transactional
from .queries import get_page


def delete_page(
    *,
    tenant_id: str,
    page_id: str,
    actor_id: str,
) -> str:
    """
    Hard-delete a page. Sections and versions go with it (FK cascade);
    child pages are detached.
    """
    page = get_page(tenant_id=tenant_id, page_id=page_id)
    title = page.title

    with transactional():
        for child in page.children:
            child.parent_id = None

        log_action(
            action="page.delete",
            entity_type="page",
            entity_id=page.id,
            payload={"title": title, "slug": page.slug},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
        db.session.delete(page)

    return title
