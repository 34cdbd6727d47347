from siteforge.errors import NotFound, ValidationError
from siteforge.extensions import db
from siteforge.models.menu import Menu, MenuItem
from siteforge.models.page import Page
from siteforge.domain.invariants.menu import assert_menu_parent
from siteforge.utils.audit import log_action
from siteforge.utils.order import compact_order, next_order
from siteforge.utils.transaction import transactional
from .menus import ITEM_FIELDS, get_menu


def get_menu_item(*, tenant_id, item_id):
    item = (
        MenuItem.query
        .join(Menu, Menu.id == MenuItem.menu_id)
        .filter(Menu.tenant_id == tenant_id, MenuItem.id == item_id)
        .first()
    )
    if not item:
        raise NotFound("Menu item not found")
    return item


def _siblings(menu, parent_id, exclude=None):
    return [i for i in menu.items if i.parent_id == parent_id and i is not exclude]


def create_menu_item(*, tenant_id, actor_id, data):
    menu = get_menu(tenant_id=tenant_id, menu_id=data.get("menu_id"))

    if not data.get("title"):
        raise ValidationError("Menu item title is required")

    parent = None
    if data.get("parent_id"):
        parent = get_menu_item(tenant_id=tenant_id, item_id=data["parent_id"])

    if data.get("page_id") and not Page.query.filter_by(tenant_id=tenant_id, id=data["page_id"]).first():
        raise NotFound("Page not found")

    item = MenuItem(menu_id=menu.id)
    for field in ITEM_FIELDS:
        if field in data:
            setattr(item, field, data[field])

    with transactional():
        assert_menu_parent(item, parent)
        item.parent_id = parent.id if parent else None
        item.order = data["order"] if data.get("order") is not None else next_order(_siblings(menu, item.parent_id))
        menu.items.append(item)
        db.session.flush()

        log_action(
            action="menu_item.create",
            entity_type="menu_item",
            entity_id=item.id,
            payload={"menu_id": menu.id, "title": item.title},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return item


def update_menu_item(*, tenant_id, actor_id, item_id, data):
    item = get_menu_item(tenant_id=tenant_id, item_id=item_id)

    if "title" in data and not data["title"]:
        raise ValidationError("Menu item title is required")

    if data.get("page_id") and not Page.query.filter_by(tenant_id=tenant_id, id=data["page_id"]).first():
        raise NotFound("Page not found")

    with transactional():
        if "parent_id" in data:
            parent = get_menu_item(tenant_id=tenant_id, item_id=data["parent_id"]) if data["parent_id"] else None
            assert_menu_parent(item, parent)
            if item.parent_id != (parent.id if parent else None):
                item.parent_id = parent.id if parent else None
                item.order = next_order(_siblings(item.menu, item.parent_id, exclude=item))

        for field in ITEM_FIELDS:
            if field in data:
                setattr(item, field, data[field])
        if data.get("order") is not None:
            item.order = data["order"]

        log_action(
            action="menu_item.update",
            entity_type="menu_item",
            entity_id=item.id,
            payload={"fields": sorted(data.keys())},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return item


def delete_menu_item(*, tenant_id, actor_id, item_id):
    """Delete an item together with its descendants."""
    item = get_menu_item(tenant_id=tenant_id, item_id=item_id)
    menu, parent_id = item.menu, item.parent_id

    with transactional():
        log_action(
            action="menu_item.delete",
            entity_type="menu_item",
            entity_id=item.id,
            payload={"menu_id": menu.id},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
        db.session.delete(item)
        db.session.flush()
        db.session.expire(menu, ["items"])
        compact_order(_siblings(menu, parent_id))
    return True


def update_menu_item_order(*, tenant_id, actor_id, item_id, order):
    if not isinstance(order, int) or isinstance(order, bool) or order < 0:
        raise ValidationError("order must be a non-negative integer")

    item = get_menu_item(tenant_id=tenant_id, item_id=item_id)
    with transactional():
        item.order = order
        log_action(
            action="menu_item.reorder",
            entity_type="menu_item",
            entity_id=item.id,
            payload={"order": order},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return item


def update_menu_items_order(*, tenant_id, actor_id, items):
    """Bulk reorder/re-parent ``[{id, order, parent_id?}]``; all ids must share one menu."""
    if not items:
        raise ValidationError("No items provided")

    loaded = [get_menu_item(tenant_id=tenant_id, item_id=entry.get("id")) for entry in items]
    menu_ids = {item.menu_id for item in loaded}
    if len(menu_ids) != 1:
        raise ValidationError("All items must belong to the same menu")

    parents = {}
    for entry in items:
        if entry.get("parent_id"):
            parents[entry["parent_id"]] = get_menu_item(tenant_id=tenant_id, item_id=entry["parent_id"])

    with transactional():
        for item, entry in zip(loaded, items):
            if "parent_id" in entry:
                item.parent = parents.get(entry["parent_id"]) if entry["parent_id"] else None
            item.order = entry.get("order", item.order)

        for item in loaded:
            assert_menu_parent(item, item.parent)

        log_action(
            action="menu_item.bulk_reorder",
            entity_type="menu",
            entity_id=loaded[0].menu_id,
            payload={"count": len(loaded)},
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
    return loaded
