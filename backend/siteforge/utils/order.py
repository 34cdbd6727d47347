from siteforge.extensions import db


def compact_order(items, order_field="order", start=0):
    """
    Re-assigns sequential order values (start..start+N-1) to ``items``,
    keeping their current relative order. Ties keep their list position.
    """
    ranked = sorted(
        enumerate(items),
        key=lambda pair: (getattr(pair[1], order_field) or 0, pair[0])
    )

    for index, (_, item) in enumerate(ranked, start=start):
        setattr(item, order_field, index)

    db.session.flush()
    return [item for _, item in ranked]


def next_order(items, order_field="order"):
    """Order value for an item appended after ``items``."""
    values = [getattr(item, order_field) for item in items if getattr(item, order_field) is not None]
    return (max(values) + 1) if values else 0
