from .section import assert_section
from .exceptions import InvariantViolation


def assert_section_order(sections):
    orders = [section.order for section in sections]
    expected = list(range(len(orders)))

    if sorted(orders) != expected:
        raise InvariantViolation(
            f"Section orders are not consecutive starting from 0: {orders}"
        )


def assert_page(page, publish=False):
    sections = page.sections

    if not page.title or not page.slug:
        raise InvariantViolation("Page requires a title and a slug.")

    if publish and not any(section.is_visible for section in sections):
        raise InvariantViolation("Cannot publish page without visible sections.")

    assert_section_order(sections)

    for section in sections:
        assert_section(section)
