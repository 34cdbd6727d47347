from siteforge.errors import NotFound, ValidationError
from siteforge.models.page import PAGE_TYPES, SCROLL_TYPES, Page
from siteforge.utils.dates import parse_datetime

# Writable page attributes accepted from clients
PAGE_FIELDS = (
    "title", "slug", "description", "template", "publish_date",
    "featured_image", "meta_title", "meta_description", "parent_id",
    "order", "page_type", "locale", "scroll_type",
)
STRING_FIELDS = (
    "title", "slug", "description", "template", "featured_image",
    "meta_title", "meta_description", "parent_id", "page_type", "locale", "scroll_type",
)


def clean_page_input(data, *, tenant_id, page_id=None):
    """Validate the page fields present in ``data``; returns only those fields."""
    cleaned = {}

    for field in PAGE_FIELDS:
        if field not in data:
            continue
        value = data[field]

        if field in STRING_FIELDS and value is not None and not isinstance(value, str):
            raise ValidationError(f"{field} must be a string")
        if field in ("title", "slug") and not (value or "").strip():
            raise ValidationError(f"{field} cannot be empty")
        if field == "slug":
            value = value.strip()
        if field == "page_type" and value not in PAGE_TYPES:
            raise ValidationError(f"Invalid page_type: {value}")
        if field == "scroll_type" and value not in SCROLL_TYPES:
            raise ValidationError(f"Invalid scroll_type: {value}")
        if field == "publish_date":
            value = parse_datetime(value, "publish_date")
        if field == "order":
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValidationError("order must be an integer")
        if field == "parent_id" and value:
            if value == page_id:
                raise ValidationError("A page cannot be its own parent")
            if not Page.query.filter_by(tenant_id=tenant_id, id=value).first():
                raise NotFound("Parent page not found")

        cleaned[field] = value

    return cleaned
