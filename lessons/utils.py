import re

from django.utils.html import strip_tags

_SCRIPT_PATTERNS = re.compile(r'javascript:|data:text/html|vbscript:|on\w+\s*=', re.IGNORECASE)
_NUMERIC_ENTITIES = re.compile(r'&#x[\da-f]+;|&#\d+;', re.IGNORECASE)


def sanitize_text(value):
    """
    Clean a plain-text form value: drop null bytes, HTML tags, script-like
    attributes and numeric character references, then trim.
    """
    if not value:
        return value
    value = value.replace('\x00', '')
    value = strip_tags(value)
    value = _SCRIPT_PATTERNS.sub('', value)
    value = _NUMERIC_ENTITIES.sub('', value)
    return value.strip()
