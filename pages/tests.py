from unittest import mock

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from .defaults import PAGE_DEFAULTS
from .models import PageContent
from .services import deep_merge_with_defaults, fetch_page_content, get_page_content, save_page_content

User = get_user_model()


class DeepMergeTest(SimpleTestCase):

    def test_nested_dicts_are_merged(self):
        defaults = {'hero': {'title': 'Default', 'buttonText': 'Go'}, 'ticker': {'text': 'x'}}
        merged = deep_merge_with_defaults(defaults, {'hero': {'title': 'Custom'}})
        self.assertEqual(merged, {'hero': {'title': 'Custom', 'buttonText': 'Go'}, 'ticker': {'text': 'x'}})

    def test_lists_and_scalars_replace(self):
        defaults = {'items': [1, 2, 3], 'title': 'Default', 'hero': {'title': 'x'}}
        merged = deep_merge_with_defaults(defaults, {'items': [], 'title': None, 'hero': 'flat'})
        self.assertEqual(merged, {'items': [], 'title': None, 'hero': 'flat'})

    def test_unknown_keys_are_kept(self):
        self.assertEqual(deep_merge_with_defaults({'a': 1}, {'b': 2}), {'a': 1, 'b': 2})

    def test_defaults_are_not_mutated(self):
        defaults = {'hero': {'title': 'Default'}}
        deep_merge_with_defaults(defaults, {'hero': {'title': 'Custom'}})
        self.assertEqual(defaults, {'hero': {'title': 'Default'}})


class PageContentServiceTest(TestCase):

    def setUp(self):
        cache.clear()

    def test_defaults_without_stored_content(self):
        self.assertEqual(fetch_page_content('homepage'), PAGE_DEFAULTS['homepage'])

    def test_empty_stored_content_uses_defaults(self):
        PageContent.objects.create(page_slug='about', content={})
        self.assertEqual(fetch_page_content('about'), PAGE_DEFAULTS['about'])

    def test_database_error_uses_defaults(self):
        with mock.patch.object(PageContent.objects, 'filter', side_effect=DatabaseError('gone')):
            self.assertEqual(fetch_page_content('terms'), PAGE_DEFAULTS['terms'])

    def test_stored_content_is_merged(self):
        PageContent.objects.create(page_slug='homepage', content={'hero': {'title': 'Nový titulek'}})
        content = fetch_page_content('homepage')
        self.assertEqual(content['hero']['title'], 'Nový titulek')
        self.assertEqual(content['hero']['buttonHref'], PAGE_DEFAULTS['homepage']['hero']['buttonHref'])
        self.assertEqual(content['features'], PAGE_DEFAULTS['homepage']['features'])

    def test_save_invalidates_cache(self):
        self.assertEqual(get_page_content('terms')['sections'], [])
        save_page_content('terms', {'sections': [{'title': 'Úvod'}]})
        self.assertEqual(get_page_content('terms')['sections'], [{'title': 'Úvod'}])


class PageContentAPITestCase(APITestCase):
    """
    Test cases for editable page content
    """

    def setUp(self):
        cache.clear()
        self.admin = User.objects.create_user(username='admin', password='testpass123', is_staff=True)
        self.user = User.objects.create_user(username='teacher', password='testpass123')
        self.url = reverse('pages:page_content', kwargs={'page_slug': 'homepage'})

    def test_get_defaults(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['page_slug'], 'homepage')
        self.assertEqual(response.data['content'], PAGE_DEFAULTS['homepage'])

    def test_unknown_page(self):
        url = reverse('pages:page_content', kwargs={'page_slug': 'contact'})
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.admin)
        response = self.client.put(url, {'content': {}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_put_requires_admin(self):
        response = self.client.put(self.url, {'content': {}}, format='json')
        self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])

        self.client.force_authenticate(user=self.user)
        response = self.client.put(self.url, {'content': {}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_put_and_get(self):
        self.client.get(self.url)

        self.client.force_authenticate(user=self.admin)
        response = self.client.put(self.url, {'content': {'hero': {'title': 'Nový titulek'}}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['content']['hero']['title'], 'Nový titulek')

        page = PageContent.objects.get(page_slug='homepage')
        self.assertEqual(page.updated_by, self.admin)

        self.client.force_authenticate(user=None)
        response = self.client.get(self.url)
        self.assertEqual(response.data['content']['hero']['title'], 'Nový titulek')
        self.assertEqual(response.data['content']['hero']['buttonText'], PAGE_DEFAULTS['homepage']['hero']['buttonText'])

    def test_put_rejects_non_object_content(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.put(self.url, {'content': ['not', 'an', 'object']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(PageContent.objects.exists())
