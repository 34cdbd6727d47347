from typing import Any, Dict, List

from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.page import Page
from siteforge.models.section import PageSection
from siteforge.domain.invariants.page import assert_page
from siteforge.domain.lifecycle.page import assert_page_transition, page_status
from siteforge.utils.audit import log_action
from siteforge.utils.order import compact_order
from siteforge.utils.transaction import transactional
from .page_input import clean_page_input
from .queries import get_page


def _is_new_section(entry):
    section_id = entry.get("id")
    return not section_id or str(section_id).startswith("temp-")


def sync_sections(page: Page, entries: List[Dict[str, Any]]) -> None:
    """
    Make the page's sections match ``entries``: unlisted sections are deleted,
    listed ids are updated, entries without an id (or with a ``temp-`` id)
    are created.
    """
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValidationError("Each section entry must be an object")
        if entry.get("id") is not None and not isinstance(entry["id"], str):
            raise ValidationError("Section id must be a string")
        order = entry.get("order")
        if order is not None and (not isinstance(order, int) or isinstance(order, bool) or order < 0):
            raise ValidationError("Section order must be a non-negative integer")
        if entry.get("title") is not None and not isinstance(entry["title"], str):
            raise ValidationError("Section title must be a string")

    existing = {s.id: s for s in page.sections}
    keep_ids = {entry["id"] for entry in entries if not _is_new_section(entry)}

    unknown = keep_ids - existing.keys()
    if unknown:
        raise NotFound(f"Sections not found on this page: {', '.join(sorted(unknown))}")

    for section_id, section in existing.items():
        if section_id not in keep_ids:
            page.sections.remove(section)

    for position, entry in enumerate(entries):
        order = entry.get("order")
        if order is None:
            order = position

        if _is_new_section(entry):
            section = PageSection(
                title=entry.get("title") or f"Section {order + 1}",
                order=order,
            )
            page.sections.append(section)
        else:
            section = existing[entry["id"]]
            section.order = order
            if "title" in entry:
                section.title = entry["title"]

        section.component_type = entry.get("component_type") or "CUSTOM"
        section.is_visible = entry.get("is_visible") is not False
        section.data = entry.get("data") if isinstance(entry.get("data"), dict) else None

    db.session.flush()
    compact_order(page.sections)


def update_page(
    *,
    tenant_id: str,
    page_id: str,
    actor_id: str,
    data: Dict[str, Any],
) -> Page:
    """
    Partially update a page and, when ``sections`` is supplied, sync its sections.

    Design rules:
    - Only whitelisted fields are mutable
    - Slug stays unique per tenant
    - Invariants always revalidated
    """
    page = get_page(tenant_id=tenant_id, page_id=page_id)
    fields = clean_page_input(data, tenant_id=tenant_id, page_id=page.id)

    if "slug" in fields and fields["slug"] != page.slug:
        if Page.query.filter_by(tenant_id=tenant_id, slug=fields["slug"]).first():
            raise Conflict(f"A page with slug {fields['slug']} already exists")

    changed_fields: list[str] = []

    with transactional():
        for field, value in fields.items():
            if getattr(page, field) != value:
                setattr(page, field, value)
                changed_fields.append(field)

        if "sections" in data and data["sections"] is not None:
            sync_sections(page, data["sections"])
            changed_fields.append("sections")

        publishing = False
        if "is_published" in data and bool(data["is_published"]) != page.is_published:
            target = "published" if data["is_published"] else "draft"
            assert_page_transition(from_status=page_status(page), to_status=target)
            page.is_published = bool(data["is_published"])
            publishing = page.is_published
            changed_fields.append("is_published")

        # 🔒 Domain invariant enforcement
        assert_page(page, publish=publishing)

        if changed_fields:
            log_action(
                action="page.update",
                entity_type="page",
                entity_id=page.id,
                payload={"fields": changed_fields},
                tenant_id=tenant_id,
                actor_id=actor_id,
            )

    return page
