import re
import unicodedata

from siteforge.errors import ValidationError

_NON_WORD = re.compile(r"[^a-z0-9]+")
_SLUG = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


def slugify(value: str) -> str:
    """ "Hello, World!" -> "hello-world" """
    value = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
    return _NON_WORD.sub("-", value.lower()).strip("-")


def checked_slug(slug, fallback=None) -> str:
    """
    Use a client-supplied slug as given, rejecting anything that is not
    lowercase words joined by dashes. Without one, derive it from ``fallback``.
    """
    if slug is None or slug == "":
        return slugify(fallback)
    if not isinstance(slug, str) or not _SLUG.fullmatch(slug):
        raise ValidationError(f'Invalid slug "{slug}": use lowercase letters, digits and dashes')
    return slug


def section_name_from_id(section_id: str) -> str:
    """ "home-hero" -> "Home Hero" """
    return section_id.replace("-", " ").title()
