from .exceptions import InvariantViolation


def assert_menu_parent(item, parent):
    """
    A menu item's parent must live in the same menu and may not be the item
    itself or any of its descendants. Any loop in the parent chain is rejected.
    """
    if parent is None:
        return

    if parent.menu_id != item.menu_id:
        raise InvariantViolation("Parent item belongs to a different menu.")

    seen = set()
    node = parent
    while node is not None:
        if node.id == item.id or node.id in seen:
            raise InvariantViolation("A menu item cannot be nested under itself or its descendants.")
        seen.add(node.id)
        node = node.parent
