from .exceptions import InvariantViolation


def assert_section(section):
    if not section.component_type:
        raise InvariantViolation("Section must declare a component type.")

    if section.data is not None and not isinstance(section.data, dict):
        raise InvariantViolation(
            f"Section data must be an object, got {type(section.data).__name__}."
        )


def assert_component_links(links):
    """Component links of a CMS section are ordered 0..n-1."""
    orders = [link.order for link in links]
    if sorted(orders) != list(range(len(orders))):
        raise InvariantViolation(
            f"Component orders are not consecutive starting from 0: {orders}"
        )
