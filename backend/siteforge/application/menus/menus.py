import logging

from siteforge.errors import Conflict, NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.menu import Menu, MenuItem
from siteforge.models.page import Page
from siteforge.utils.audit import log_action
from siteforge.utils.transaction import transactional

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("title", "url", "page_id", "target", "icon")


def list_menus(*, tenant_id):
    return Menu.query.filter_by(tenant_id=tenant_id).order_by(Menu.name.asc()).all()


def get_menu(*, tenant_id, menu_id):
    menu = Menu.query.filter_by(tenant_id=tenant_id, id=menu_id).first()
    if not menu:
        raise NotFound("Menu not found")
    return menu


def menu_by_location(*, tenant_id, location):
    return Menu.query.filter_by(tenant_id=tenant_id, location=location).order_by(Menu.created_at.asc()).first()


def menu_by_name(*, tenant_id, name):
    return Menu.query.filter_by(tenant_id=tenant_id, name=name).first()


def linkable_pages(*, tenant_id):
    return Page.query.filter_by(tenant_id=tenant_id).order_by(Page.title.asc()).all()


def build_tree(menu):
    """Root items with ``children`` already ordered by the relationship."""
    return sorted((item for item in menu.items if item.parent_id is None), key=lambda i: i.order)


def _check_page(tenant_id, page_id):
    if page_id and not Page.query.filter_by(tenant_id=tenant_id, id=page_id).first():
        raise NotFound("Page not found")


def _stage_items(menu, entries, *, tenant_id, parent=None):
    """Create nested items from ``entries`` (each may carry ``children``)."""
    for position, entry in enumerate(entries or []):
        if not entry.get("title"):
            raise ValidationError("Menu item title is required")
        _check_page(tenant_id, entry.get("page_id"))

        item = MenuItem(menu=menu, parent=parent, order=entry.get("order", position))
        for field in ITEM_FIELDS:
            if field in entry:
                setattr(item, field, entry[field])
        db.session.add(item)
        _stage_items(menu, entry.get("children"), tenant_id=tenant_id, parent=item)


def create_menu(*, tenant_id, actor_id, data):
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Menu name is required")

    if menu_by_name(tenant_id=tenant_id, name=name):
        raise Conflict(f"A menu named {name} already exists")

    menu = Menu(tenant_id=tenant_id, name=name, location=data.get("location"))
    logger.debug("Creating menu %s for tenant %s", name, tenant_id)

    with transactional():
        db.session.add(menu)
        _stage_items(menu, data.get("items"), tenant_id=tenant_id)
        db.session.flush()
        log_action(
            action="menu.create",
            entity_type="menu",
            entity_id=menu.id,
            payload={"name": name, "items": len(menu.items)},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return menu


def update_menu(*, tenant_id, actor_id, menu_id, data):
    menu = get_menu(tenant_id=tenant_id, menu_id=menu_id)

    name = data.get("name")
    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("Menu name is required")
        if name != menu.name and menu_by_name(tenant_id=tenant_id, name=name):
            raise Conflict(f"A menu named {name} already exists")

    with transactional():
        if name is not None:
            menu.name = name
        if "location" in data:
            menu.location = data["location"]

        if data.get("items") is not None:
            menu.items.clear()
            db.session.flush()
            _stage_items(menu, data["items"], tenant_id=tenant_id)

        log_action(
            action="menu.update",
            entity_type="menu",
            entity_id=menu.id,
            payload={"fields": sorted(k for k in ("name", "location", "items") if k in data)},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return menu


def delete_menu(*, tenant_id, actor_id, menu_id):
    menu = get_menu(tenant_id=tenant_id, menu_id=menu_id)

    with transactional():
        log_action(
            action="menu.delete",
            entity_type="menu",
            entity_id=menu.id,
            payload={"name": menu.name},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
        db.session.delete(menu)
    return True
