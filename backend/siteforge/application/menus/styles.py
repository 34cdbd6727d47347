from siteforge.errors import ValidationError
from siteforge.extensions import db
from siteforge.models.menu import FooterStyle, HeaderStyle
from siteforge.utils.audit import log_action
from siteforge.utils.transaction import transactional
from .menus import get_menu

HEADER_CHOICES = {
    "header_size": ("sm", "md", "lg"),
    "menu_alignment": ("left", "center", "right"),
    "menu_button_style": ("default", "filled", "outline"),
    "mobile_menu_style": ("fullscreen", "dropdown", "sidebar"),
    "mobile_menu_position": ("left", "right"),
}
HEADER_FLAGS = ("transparent_header", "border_bottom")

FOOTER_CHOICES = {
    "column_layout": ("stacked", "grid", "flex"),
    "social_alignment": ("left", "center", "right"),
    "alignment": ("left", "center", "right"),
    "padding": ("small", "medium", "large"),
    "width": ("full", "container", "narrow"),
}
FOOTER_FLAGS = ("border_top",)


def _apply_style(style, data, choices, flags):
    for field, allowed in choices.items():
        if field in data:
            if data[field] not in allowed:
                raise ValidationError(f"Invalid {field}: {data[field]} (expected one of {', '.join(allowed)})")
            setattr(style, field, data[field])

    for field in flags:
        if field in data:
            setattr(style, field, bool(data[field]))

    if "transparency" in data:
        value = data["transparency"]
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 100:
            raise ValidationError("transparency must be an integer between 0 and 100")
        style.transparency = value

    if "advanced_options" in data:
        if data["advanced_options"] is not None and not isinstance(data["advanced_options"], dict):
            raise ValidationError("advanced_options must be an object")
        style.advanced_options = data["advanced_options"]


def _upsert_style(model, attr, *, tenant_id, actor_id, menu_id, data, choices, flags):
    menu = get_menu(tenant_id=tenant_id, menu_id=menu_id)

    with transactional():
        style = getattr(menu, attr)
        if style is None:
            style = model(menu_id=menu.id)
            db.session.add(style)
            setattr(menu, attr, style)

        _apply_style(style, data, choices, flags)
        db.session.flush()

        log_action(
            action=f"menu.{attr}.update",
            entity_type="menu",
            entity_id=menu.id,
            payload={"fields": sorted(data.keys())},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return style


def update_header_style(*, tenant_id, actor_id, menu_id, data):
    return _upsert_style(
        HeaderStyle, "header_style",
        tenant_id=tenant_id, actor_id=actor_id, menu_id=menu_id,
        data=data, choices=HEADER_CHOICES, flags=HEADER_FLAGS,
    )


def update_footer_style(*, tenant_id, actor_id, menu_id, data):
    return _upsert_style(
        FooterStyle, "footer_style",
        tenant_id=tenant_id, actor_id=actor_id, menu_id=menu_id,
        data=data, choices=FOOTER_CHOICES, flags=FOOTER_FLAGS,
    )
