import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError

from siteforge.errors import Conflict, ValidationError
from siteforge.extensions import db
from siteforge.models.cms_section import CMSSection
from siteforge.models.page import Page
from siteforge.models.section import PageSection
from siteforge.domain.invariants.page import assert_page
from siteforge.utils.audit import log_action
from siteforge.utils.transaction import transactional
from .page_input import clean_page_input

logger = logging.getLogger(__name__)


def create_page(
    *,
    tenant_id: str,
    actor_id: str,
    data: Dict[str, Any],
) -> Page:
    """
    Create a new CMS page in draft state.

    ``data["sections"]`` may list CMS section keys; each known key becomes a
    PageSection linking to it, unknown keys are skipped.

    Edge cases handled:
    - Missing required fields
    - Duplicate slug per tenant
    - Invariant violations
    """
    if not data.get("title") or not data.get("slug"):
        raise ValidationError("Both title and slug are required")

    fields = clean_page_input(data, tenant_id=tenant_id)

    if Page.query.filter_by(tenant_id=tenant_id, slug=fields["slug"]).first():
        raise Conflict(f"A page with slug {fields['slug']} already exists")

    page = Page(tenant_id=tenant_id, created_by=actor_id, is_published=False)
    for field, value in fields.items():
        setattr(page, field, value)

    section_keys = data.get("sections") or []

    try:
        with transactional():
            db.session.add(page)
            db.session.flush()  # ensures page.id is available

            order = 0
            for key in section_keys:
                if not CMSSection.query.filter_by(tenant_id=tenant_id, section_id=key).first():
                    logger.warning("Section %s not found, skipping", key)
                    continue

                page.sections.append(PageSection(
                    title=f"Section {order + 1}",
                    component_type="CUSTOM",
                    order=order,
                    is_visible=True,
                    data={"sectionId": key},
                ))
                order += 1

            db.session.flush()

            # 🔒 Domain invariants (single source of truth)
            assert_page(page)

            log_action(
                action="page.create",
                entity_type="page",
                entity_id=page.id,
                payload={
                    "title": page.title,
                    "slug": page.slug,
                    "sections": order,
                },
                tenant_id=tenant_id,
                actor_id=actor_id,
            )

        return page

    except IntegrityError as exc:
        # Typically raised by unique constraints (e.g., tenant_id + slug)
        raise Conflict("A page with this slug already exists") from exc
