"""
URL-safe slug segments for the region / city / street-line address hierarchy.
"""
import re

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def slugify_segment(value: str) -> str:
    """
    Turn one address part into a slug segment.

    "San Francisco" -> "san-francisco", "A&W Plaza" -> "aandw-plaza".
    """
    value = value.strip().lower().replace('&', 'and')
    return _NON_ALNUM.sub('-', value).strip('-')
