from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from lessons.services import create_lesson
from .models import FavoriteLesson

User = get_user_model()


class FavoriteLessonModelTest(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='teacher', password='testpass123')
        self.lesson = create_lesson(title="Úvod do historie", published=True)

    def test_toggle(self):
        self.assertTrue(FavoriteLesson.toggle(self.user, self.lesson))
        self.assertTrue(FavoriteLesson.objects.filter(user=self.user, lesson=self.lesson).exists())
        self.assertFalse(FavoriteLesson.toggle(self.user, self.lesson))
        self.assertFalse(FavoriteLesson.objects.filter(user=self.user, lesson=self.lesson).exists())


class FavoriteLessonAPITestCase(APITestCase):
    """
    Test cases for favorite lessons
    """

    def setUp(self):
        self.user = User.objects.create_user(username='teacher', password='testpass123')
        self.other_user = User.objects.create_user(username='other', password='testpass123')
        self.lesson = create_lesson(title="Úvod do historie", published=True)
        self.second_lesson = create_lesson(title="Sametová revoluce", published=True)
        self.draft = create_lesson(title="Rozpracovaná lekce")
        self.client.force_authenticate(user=self.user)

    def detail_url(self, lesson, segment=None):
        return reverse('favorites:favorite_detail', kwargs={'slug_param': segment or lesson.short_id})

    def toggle_url(self, lesson):
        return reverse('favorites:favorite_toggle', kwargs={'slug_param': lesson.short_id})

    def test_requires_login(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('favorites:favorite_list'))
        self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])

    def test_add_and_list(self):
        response = self.client.post(self.detail_url(self.lesson))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['is_favorited'])

        response = self.client.post(self.detail_url(self.lesson))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(FavoriteLesson.objects.filter(user=self.user).count(), 1)

        response = self.client.get(reverse('favorites:favorite_list'))
        self.assertEqual([item['id'] for item in response.data], [str(self.lesson.id)])
        self.assertEqual(response.data[0]['url'], self.lesson.get_absolute_url())

    def test_favorites_are_per_user(self):
        FavoriteLesson.objects.create(user=self.other_user, lesson=self.lesson)
        response = self.client.get(reverse('favorites:favorite_list'))
        self.assertEqual(response.data, [])

        response = self.client.get(self.detail_url(self.lesson))
        self.assertFalse(response.data['is_favorited'])

    def test_any_url_form_addresses_the_lesson(self):
        self.client.post(self.detail_url(self.lesson, f'old-title-{self.lesson.id}'))
        response = self.client.get(self.detail_url(self.lesson, f'uvod-do-historie-{self.lesson.short_id}'))
        self.assertTrue(response.data['is_favorited'])

    def test_remove(self):
        FavoriteLesson.objects.create(user=self.user, lesson=self.lesson)
        response = self.client.delete(self.detail_url(self.lesson))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_favorited'])
        self.assertFalse(FavoriteLesson.objects.filter(user=self.user).exists())

    def test_toggle(self):
        response = self.client.post(self.toggle_url(self.second_lesson))
        self.assertEqual(response.data, {'success': True, 'is_favorited': True})
        response = self.client.post(self.toggle_url(self.second_lesson))
        self.assertEqual(response.data, {'success': True, 'is_favorited': False})

    def test_unpublished_lesson_cannot_be_added(self):
        response = self.client.post(self.detail_url(self.draft))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unknown_lesson(self):
        response = self.client.post(reverse('favorites:favorite_toggle', kwargs={'slug_param': 'lekce-42'}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
