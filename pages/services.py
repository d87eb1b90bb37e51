import copy
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError

from .defaults import PAGE_DEFAULTS
from .models import PageContent

logger = logging.getLogger(__name__)


def cache_key(page_slug):
    return f'page-content-{page_slug}'


def deep_merge_with_defaults(defaults, overrides):
    """
    Merge stored content over defaults.

    Nested dicts are merged key by key; any other override value (lists
    included, and None) replaces the default as a whole.
    """
    result = dict(defaults)
    for key, override in overrides.items():
        default_value = defaults.get(key)
        if isinstance(override, dict) and isinstance(default_value, dict):
            result[key] = deep_merge_with_defaults(default_value, override)
        else:
            result[key] = override
    return result


def fetch_page_content(page_slug):
    """Read page content from the database, falling back to defaults on any failure."""
    defaults = copy.deepcopy(PAGE_DEFAULTS[page_slug])
    try:
        row = PageContent.objects.filter(page_slug=page_slug).only('content').first()
    except DatabaseError as e:
        logger.error(f"Error fetching page content for {page_slug}: {e}")
        return defaults

    if row is None or not isinstance(row.content, dict) or not row.content:
        return defaults
    return deep_merge_with_defaults(defaults, row.content)


def get_page_content(page_slug):
    """Cached page content; the cache entry is dropped whenever an admin saves the page."""
    key = cache_key(page_slug)
    content = cache.get(key)
    if content is None:
        content = fetch_page_content(page_slug)
        cache.set(key, content, settings.PAGE_CONTENT_CACHE_TIMEOUT)
    return content


def invalidate_page_content(page_slug):
    cache.delete(cache_key(page_slug))


def save_page_content(page_slug, content, user=None):
    page, _ = PageContent.objects.update_or_create(
        page_slug=page_slug,
        defaults={'content': content, 'updated_by': user},
    )
    invalidate_page_content(page_slug)
    logger.info(f"Page content saved: {page_slug}")
    return page
