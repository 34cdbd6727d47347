from siteforge.application.menus.menus import build_tree
from siteforge.utils.dates import isoformat

HEADER_STYLE_FIELDS = (
    "transparency", "header_size", "menu_alignment", "menu_button_style",
    "mobile_menu_style", "mobile_menu_position", "transparent_header",
    "border_bottom", "advanced_options",
)
FOOTER_STYLE_FIELDS = (
    "transparency", "column_layout", "social_alignment", "border_top",
    "alignment", "padding", "width", "advanced_options",
)


def _style(style, fields):
    if style is None:
        return None
    data = {"id": style.id, "menu_id": style.menu_id}
    data.update({field: getattr(style, field) for field in fields})
    return data


def normalize_header_style(style):
    return _style(style, HEADER_STYLE_FIELDS)


def normalize_footer_style(style):
    return _style(style, FOOTER_STYLE_FIELDS)


def normalize_menu_item(item, include_children=True):
    data = {
        "id": item.id,
        "menu_id": item.menu_id,
        "parent_id": item.parent_id,
        "title": item.title,
        "url": item.url,
        "page_id": item.page_id,
        "page_slug": item.page.slug if item.page else None,
        "target": item.target,
        "icon": item.icon,
        "order": item.order,
    }
    if include_children:
        data["children"] = [normalize_menu_item(child) for child in item.children]
    return data


def normalize_menu(menu):
    return {
        "id": menu.id,
        "name": menu.name,
        "location": menu.location,
        "items": [normalize_menu_item(item) for item in build_tree(menu)],
        "header_style": normalize_header_style(menu.header_style),
        "footer_style": normalize_footer_style(menu.footer_style),
        "created_at": isoformat(menu.created_at),
        "updated_at": isoformat(menu.updated_at),
    }
