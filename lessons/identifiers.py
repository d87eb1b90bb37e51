"""
Lesson URL identity helpers.

Lesson URLs look like ``/lessons/{slug}-{identifier}``. The slug is derived
from the title on every render and carries no meaning; only the trailing
identifier is used to find the lesson. The identifier is the lesson's short
code when it has one, otherwise its UUID.

Links produced by older URL schemes are still accepted by
``extract_identifier``:
    /lessons/uvod-do-historie-k5b8x2p9m1                      (short code)
    /lessons/uvod-38e4b033-467d-4ff9-a28e-d4aadb512f40        (UUID)
    /lessons/lekce-42                                         (numeric id)
    /lessons/k5b8x2p9m1                                       (bare id)
"""
import re
import secrets
import string
import unicodedata

SHORT_CODE_LENGTH = 10
SHORT_CODE_ALPHABET = string.digits + string.ascii_lowercase

LESSONS_COLLECTION = 'lessons'

_COMBINING_MARKS = re.compile('[\u0300-\u036f]')
_DISALLOWED_CHARS = re.compile(r'[^0-9a-z_\s-]')
_WHITESPACE_RUN = re.compile(r'\s+')
_HYPHEN_RUN = re.compile(r'-+')

_SHORT_CODE_RE = re.compile(r'^[a-z0-9]{10}$')
_UUID_RE = re.compile(
    r'^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$',
    re.IGNORECASE,
)

# Evaluated top to bottom, first match wins. Previously published links
# depend on this order.
IDENTIFIER_RULES = (
    ('short_code', re.compile(r'(?:^|-)([a-z0-9]{10})$')),
    ('uuid', re.compile(
        r'([a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12})$',
        re.IGNORECASE,
    )),
    ('numeric', re.compile(r'-(\d+)$')),
)

FALLBACK_RULE = 'fallback'


def generate_short_code():
    """Return a random 10 character code from ``[0-9a-z]``.

    Uses the ``secrets`` CSPRNG; uniqueness is enforced by the database,
    not here.
    """
    return ''.join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH))


def slugify_title(title):
    """
    Turn a lesson title into a URL slug.

    >>> slugify_title('Úvod do historie')
    'uvod-do-historie'
    >>> slugify_title('!!!')
    ''

    Leading and trailing hyphens that were part of the title are kept;
    already slugified input is returned unchanged.
    """
    if not title:
        return ''
    value = unicodedata.normalize('NFD', title.lower())
    value = _COMBINING_MARKS.sub('', value)
    value = _DISALLOWED_CHARS.sub('', value)
    value = value.strip()
    value = _WHITESPACE_RUN.sub('-', value)
    return _HYPHEN_RUN.sub('-', value)


def compose_resource_url(collection, title, identifier, short_code=None):
    """
    Build ``/{collection}/{slug}-{id}``, preferring the short code.

    An empty slug yields ``/{collection}/-{id}``.
    """
    id_to_use = short_code if short_code else identifier
    return f'/{collection}/{slugify_title(title)}-{id_to_use}'


def lesson_url(lesson):
    """Canonical URL of a lesson instance."""
    return compose_resource_url(LESSONS_COLLECTION, lesson.title, lesson.id, lesson.short_id)


def match_rule(name, segment):
    """Apply a single named extraction rule; returns None when it does not match."""
    for rule_name, pattern in IDENTIFIER_RULES:
        if rule_name == name:
            match = pattern.search(segment)
            if not match:
                return None
            if rule_name == 'uuid':
                return match.group(1).lower()
            return match.group(1)
    raise KeyError(name)


def resolve_identifier(segment):
    """Return ``(rule_name, identifier)`` for a URL path segment."""
    segment = segment or ''
    for rule_name, _pattern in IDENTIFIER_RULES:
        identifier = match_rule(rule_name, segment)
        if identifier is not None:
            return rule_name, identifier
    return FALLBACK_RULE, segment


def extract_identifier(segment):
    """
    Recover the lesson identifier from the path segment after ``/lessons/``.

    Never raises. Whether the identifier belongs to an existing lesson is
    for the caller to find out.
    """
    return resolve_identifier(segment)[1]


def is_short_code(value):
    return bool(value) and _SHORT_CODE_RE.match(value) is not None


def is_uuid(value):
    return bool(value) and _UUID_RE.match(str(value)) is not None
