import logging

from sqlalchemy import or_

from siteforge.errors import NotFound
from siteforge.models.page import Page
from siteforge.models.page_version import PageVersion

logger = logging.getLogger(__name__)


def get_all_cms_pages(*, tenant_id):
    return (
        Page.query
        .filter_by(tenant_id=tenant_id)
        .order_by(Page.order.asc(), Page.created_at.desc())
        .all()
    )


def get_page(*, tenant_id, page_id):
    page = Page.query.filter_by(tenant_id=tenant_id, id=page_id).first()
    if not page:
        raise NotFound(f"No page found with ID: {page_id}")
    return page


def get_page_by_slug(*, tenant_id, slug):
    """
    Forgiving slug lookup: exact variants, then a case-insensitive contains
    search, then any page whose slug and the requested slug overlap.
    Returns None when nothing matches.
    """
    if not slug:
        return None

    normalized = slug.strip().lower()
    if not normalized:
        return None

    dashed = "-".join(normalized.split())
    undashed = normalized.replace("-", " ")
    variants = [normalized, dashed, undashed]

    base = Page.query.filter_by(tenant_id=tenant_id)

    page = base.filter(Page.slug.in_(variants)).order_by(Page.created_at.asc()).first()
    if page:
        return page

    page = (
        base.filter(or_(*[Page.slug.ilike(f"%{v}%") for v in variants]))
        .order_by(Page.created_at.asc())
        .first()
    )
    if page:
        return page

    for candidate in base.order_by(Page.created_at.asc()):
        s = candidate.slug
        if normalized in s or s in normalized or dashed in s or s in dashed:
            logger.debug("Slug %s partially matched page %s", slug, candidate.slug)
            return candidate

    return None


def get_default_page(*, tenant_id, locale=None):
    """The published HOME page, else the first published page by order."""
    base = Page.query.filter_by(tenant_id=tenant_id, is_published=True)
    if locale:
        base = base.filter_by(locale=locale)

    home = base.filter_by(page_type="HOME").order_by(Page.order.asc()).first()
    if home:
        return home
    return base.order_by(Page.order.asc(), Page.created_at.asc()).first()


def get_pages_using_section_id(*, tenant_id, section_id):
    pages = Page.query.filter_by(tenant_id=tenant_id).order_by(Page.title.asc()).all()
    return [
        page for page in pages
        if any(s.linked_section_id == section_id for s in page.sections)
    ]


def list_versions(*, tenant_id, page_id):
    get_page(tenant_id=tenant_id, page_id=page_id)
    return (
        PageVersion.query
        .filter_by(tenant_id=tenant_id, page_id=page_id)
        .order_by(PageVersion.version.desc())
        .all()
    )
