from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from .models import Lesson, LessonMaterial, Tag, UserLessonMaterial, ShortCodeCollisionError
from .services import resolve_lesson, unique_material_title, parse_title_with_index, create_lesson

User = get_user_model()


def detail_url(segment):
    return reverse('lessons:lesson_detail', kwargs={'slug_param': segment})


def legacy_lesson(**fields):
    """A lesson stored before short codes were introduced."""
    lesson = Lesson.objects.create(**fields)
    Lesson.objects.filter(pk=lesson.pk).update(short_id=None)
    lesson.refresh_from_db()
    return lesson


class LessonModelTest(TestCase):
    """Short code assignment and URLs of lessons."""

    def test_short_id_generated_on_create(self):
        lesson = Lesson.objects.create(title="Úvod do historie")
        self.assertRegex(lesson.short_id, r'^[a-z0-9]{10}$')

    def test_absolute_url_uses_short_id(self):
        lesson = Lesson.objects.create(title="Úvod do historie")
        self.assertEqual(lesson.get_absolute_url(), f"/lessons/uvod-do-historie-{lesson.short_id}")
        self.assertEqual(lesson.slug, "uvod-do-historie")

    def test_absolute_url_without_short_id_uses_uuid(self):
        lesson = legacy_lesson(title="Úvod do historie")
        self.assertEqual(lesson.get_absolute_url(), f"/lessons/uvod-do-historie-{lesson.id}")

    def test_title_change_changes_slug_only(self):
        lesson = Lesson.objects.create(title="Old title")
        short_id = lesson.short_id
        lesson.title = "New title"
        lesson.save()
        lesson.refresh_from_db()
        self.assertEqual(lesson.short_id, short_id)
        self.assertEqual(lesson.get_absolute_url(), f"/lessons/new-title-{short_id}")

    def test_explicit_short_id_is_kept(self):
        lesson = Lesson.objects.create(title="Lekce", short_id="k5b8x2p9m1")
        self.assertEqual(lesson.short_id, "k5b8x2p9m1")

    def test_collision_is_retried_with_new_code(self):
        Lesson.objects.create(title="First", short_id="aaaaaaaaaa")
        with mock.patch('lessons.models.generate_short_code', side_effect=["aaaaaaaaaa", "bbbbbbbbbb"]):
            lesson = Lesson.objects.create(title="Second")
        self.assertEqual(lesson.short_id, "bbbbbbbbbb")
        self.assertEqual(Lesson.objects.count(), 2)

    @override_settings(LESSON_SHORT_ID_MAX_ATTEMPTS=3)
    def test_collision_gives_up_after_max_attempts(self):
        Lesson.objects.create(title="First", short_id="aaaaaaaaaa")
        with mock.patch('lessons.models.generate_short_code', return_value="aaaaaaaaaa") as generator:
            with self.assertRaises(ShortCodeCollisionError):
                Lesson.objects.create(title="Second")
        self.assertEqual(generator.call_count, 3)
        self.assertEqual(Lesson.objects.count(), 1)

    def test_assign_short_id_to_legacy_lesson(self):
        lesson = legacy_lesson(title="Legacy")
        self.assertIsNone(lesson.short_id)
        short_id = lesson.assign_short_id()
        lesson.refresh_from_db()
        self.assertEqual(lesson.short_id, short_id)
        self.assertRegex(short_id, r'^[a-z0-9]{10}$')

    def test_ordering_puts_lessons_without_date_last(self):
        undated = Lesson.objects.create(title="Undated")
        older = Lesson.objects.create(title="Older", publication_date="2024-01-01")
        newer = Lesson.objects.create(title="Newer", publication_date="2025-01-01")
        self.assertEqual(list(Lesson.objects.all()), [newer, older, undated])


class ResolveLessonTest(TestCase):
    """Finding lessons from every supported URL form."""

    def setUp(self):
        self.lesson = Lesson.objects.create(title="Úvod do historie", published=True)
        self.legacy = legacy_lesson(title="Stará lekce", published=True)

    def test_canonical_url(self):
        segment = self.lesson.get_absolute_url().rsplit('/', 1)[-1]
        self.assertEqual(resolve_lesson(segment), self.lesson)

    def test_outdated_slug(self):
        self.assertEqual(resolve_lesson(f"some-old-title-{self.lesson.short_id}"), self.lesson)

    def test_bare_short_id(self):
        self.assertEqual(resolve_lesson(self.lesson.short_id), self.lesson)

    def test_uuid_url_of_lesson_with_short_id(self):
        self.assertEqual(resolve_lesson(f"uvod-do-historie-{self.lesson.id}"), self.lesson)

    def test_legacy_lesson_by_uuid(self):
        self.assertEqual(resolve_lesson(f"stara-lekce-{self.legacy.id}"), self.legacy)
        self.assertEqual(resolve_lesson(str(self.legacy.id)), self.legacy)

    def test_uppercase_uuid(self):
        self.assertEqual(resolve_lesson(str(self.legacy.id).upper()), self.legacy)

    def test_unknown_identifiers(self):
        for segment in ["lekce-42", "nothing-here", "", "x-zzzzzzzzzz"]:
            with self.assertRaises(Lesson.DoesNotExist):
                resolve_lesson(segment)

    def test_respects_queryset(self):
        hidden = Lesson.objects.create(title="Hidden", published=False)
        with self.assertRaises(Lesson.DoesNotExist):
            resolve_lesson(hidden.short_id, Lesson.objects.filter(published=True))


class MaterialTitleTest(TestCase):

    def test_parse_title_with_index(self):
        self.assertEqual(parse_title_with_index("Pracovní list (2)"), ("Pracovní list", 2))
        self.assertEqual(parse_title_with_index("Pracovní list"), ("Pracovní list", None))

    def test_unused_title_is_kept(self):
        self.assertEqual(unique_material_title([], "Pracovní list"), "Pracovní list")
        self.assertEqual(unique_material_title(["Pracovní list (1)"], "Pracovní list"), "Pracovní list")
        self.assertEqual(unique_material_title(["Pracovní list"], "Pracovní list (5)"), "Pracovní list (5)")

    def test_duplicate_gets_next_index(self):
        self.assertEqual(unique_material_title(["Pracovní list"], "Pracovní list"), "Pracovní list (1)")
        self.assertEqual(
            unique_material_title(["Pracovní list", "Pracovní list (1)"], "Pracovní list"),
            "Pracovní list (2)"
        )
        self.assertEqual(
            unique_material_title(["Pracovní list", "Pracovní list (4)", "Jiný"], "Pracovní list (4)"),
            "Pracovní list (5)"
        )


class BackfillShortIdsCommandTest(TestCase):

    def test_backfill(self):
        legacy = legacy_lesson(title="Legacy")
        out = StringIO()
        call_command('backfill_short_ids', stdout=out)
        legacy.refresh_from_db()
        self.assertIsNotNone(legacy.short_id)
        self.assertIn('Updated: 1', out.getvalue())

    def test_dry_run(self):
        legacy = legacy_lesson(title="Legacy")
        call_command('backfill_short_ids', '--dry-run', stdout=StringIO())
        legacy.refresh_from_db()
        self.assertIsNone(legacy.short_id)


class LessonAPITestCase(APITestCase):
    """
    Test cases for the lessons API
    """

    def setUp(self):
        self.admin = User.objects.create_user(
            username='admin', email='admin@test.com', password='testpass123', is_staff=True
        )
        self.teacher = User.objects.create_user(
            username='teacher', email='teacher@test.com', password='testpass123'
        )
        self.tag = Tag.objects.create(title="Holocaust")
        self.published = create_lesson(
            title="Úvod do historie", period="1938-1945", published=True, tags=[self.tag]
        )
        self.draft = create_lesson(title="Rozpracovaná lekce", period="1968")

    def test_list_hides_drafts_from_public(self):
        response = self.client.get(reverse('lessons:lesson_list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [str(self.published.id)])
        self.assertEqual(response.data[0]['url'], self.published.get_absolute_url())
        self.assertEqual(response.data[0]['slug'], 'uvod-do-historie')

    def test_list_shows_drafts_to_admin(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('lessons:lesson_list'))
        self.assertEqual(len(response.data), 2)

    def test_list_filters(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('lessons:lesson_list'), {'period': '1968'})
        self.assertEqual([item['id'] for item in response.data], [str(self.draft.id)])

        response = self.client.get(reverse('lessons:lesson_list'), {'tag': str(self.tag.id)})
        self.assertEqual([item['id'] for item in response.data], [str(self.published.id)])

    def test_list_rejects_malformed_tag(self):
        response = self.client.get(reverse('lessons:lesson_list'), {'tag': 'history'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Invalid tag'})

    def test_create_lesson_as_admin(self):
        self.client.force_authenticate(user=self.admin)
        payload = {
            'title': 'Sametová revoluce',
            'description': '<b>Listopad</b> 1989',
            'vimeo_video_url': 'https://vimeo.com/123456',
            'rvp_connection': ['D-9-9-01'],
            'tag_ids': [str(self.tag.id)],
            'published': True,
        }
        response = self.client.post(reverse('lessons:lesson_list'), payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        lesson = Lesson.objects.get(id=response.data['id'])
        self.assertRegex(lesson.short_id, r'^[a-z0-9]{10}$')
        self.assertEqual(lesson.created_by, self.admin)
        self.assertEqual(lesson.description, 'Listopad 1989')
        self.assertEqual(list(lesson.tags.all()), [self.tag])
        self.assertEqual(response.data['url'], f'/lessons/sametova-revoluce-{lesson.short_id}')

    def test_create_lesson_rejects_non_vimeo_url(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse('lessons:lesson_list'),
            {'title': 'Lekce', 'vimeo_video_url': 'https://youtube.com/watch?v=1'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('vimeo_video_url', response.data)

    def test_create_lesson_requires_admin(self):
        response = self.client.post(reverse('lessons:lesson_list'), {'title': 'Lekce'}, format='json')
        self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])

        self.client.force_authenticate(user=self.teacher)
        response = self.client.post(reverse('lessons:lesson_list'), {'title': 'Lekce'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @override_settings(LESSON_SHORT_ID_MAX_ATTEMPTS=1)
    def test_create_lesson_reports_exhausted_short_codes(self):
        self.client.force_authenticate(user=self.admin)
        with mock.patch('lessons.models.generate_short_code', return_value=self.published.short_id):
            response = self.client.post(reverse('lessons:lesson_list'), {'title': 'Lekce'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)

    def test_detail_by_canonical_url(self):
        segment = self.published.get_absolute_url().rsplit('/', 1)[-1]
        response = self.client.get(detail_url(segment))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], str(self.published.id))
        self.assertTrue(response.data['is_canonical'])
        self.assertEqual(response.data['tags'][0]['title'], 'Holocaust')

    def test_detail_by_outdated_url(self):
        response = self.client.get(detail_url(f'old-title-{self.published.short_id}'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_canonical'])
        self.assertEqual(response.data['canonical_url'], self.published.get_absolute_url())

    def test_detail_by_uuid_url(self):
        response = self.client.get(detail_url(f'uvod-do-historie-{self.published.id}'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_canonical'])

    def test_detail_of_draft(self):
        response = self.client.get(detail_url(self.draft.short_id))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.admin)
        response = self.client.get(detail_url(self.draft.short_id))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_detail_unknown(self):
        response = self.client.get(detail_url('lekce-42'))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_lesson(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            detail_url(self.published.short_id), {'title': 'Nový název', 'tag_ids': []}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['url'], f'/lessons/novy-nazev-{self.published.short_id}')
        self.assertEqual(response.data['tags'], [])

    def test_delete_lesson(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(detail_url(self.draft.short_id))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Lesson.objects.filter(id=self.draft.id).exists())

    def test_resolve_endpoint(self):
        segment = f'anything-{self.published.short_id}'
        response = self.client.get(reverse('lessons:resolve_lesson_url', kwargs={'slug_param': segment}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['rule'], 'short_code')
        self.assertEqual(response.data['identifier'], self.published.short_id)
        self.assertEqual(response.data['lesson_id'], str(self.published.id))
        self.assertEqual(response.data['url'], self.published.get_absolute_url())

    def test_resolve_endpoint_without_match(self):
        response = self.client.get(reverse('lessons:resolve_lesson_url', kwargs={'slug_param': 'lekce-42'}))
        self.assertEqual(response.data['rule'], 'numeric')
        self.assertEqual(response.data['identifier'], '42')
        self.assertIsNone(response.data['lesson_id'])

    def test_tags(self):
        response = self.client.get(reverse('lessons:tag_list'))
        self.assertEqual([tag['title'] for tag in response.data], ['Holocaust'])

        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('lessons:tag_list'), {'title': 'Normalizace'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)


class LessonMaterialAPITestCase(APITestCase):

    def setUp(self):
        self.admin = User.objects.create_user(username='admin', password='testpass123', is_staff=True)
        self.teacher = User.objects.create_user(username='teacher', password='testpass123')
        self.other_teacher = User.objects.create_user(username='other', password='testpass123')
        self.lesson = create_lesson(title="Úvod do historie", published=True)
        self.material = LessonMaterial.objects.create(
            lesson=self.lesson, title="Pracovní list", content="<p>Úkol</p>", duration=45
        )

    def materials_url(self):
        return reverse('lessons:lesson_materials', kwargs={'slug_param': self.lesson.short_id})

    def my_materials_url(self):
        return reverse('lessons:my_lesson_materials', kwargs={'slug_param': self.lesson.short_id})

    def test_list_materials(self):
        response = self.client.get(self.materials_url())
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['title'], 'Pracovní list')

    def test_add_material_as_admin(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.materials_url(),
            {'title': 'Metodický list', 'specification': 'high_school', 'duration': 90},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.lesson.materials.count(), 2)

    def test_invalid_duration(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(self.materials_url(), {'title': 'List', 'duration': 60}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_add_material_requires_admin(self):
        self.client.force_authenticate(user=self.teacher)
        response = self.client.post(self.materials_url(), {'title': 'List'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_and_delete_material(self):
        self.client.force_authenticate(user=self.admin)
        url = reverse('lessons:lesson_material_detail', kwargs={
            'slug_param': self.lesson.short_id, 'material_id': self.material.id
        })
        response = self.client.patch(url, {'title': 'Nový list'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['title'], 'Nový list')

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(LessonMaterial.objects.filter(id=self.material.id).exists())

    def test_activities(self):
        self.client.force_authenticate(user=self.admin)
        url = reverse('lessons:lesson_activities', kwargs={'slug_param': self.lesson.short_id})
        response = self.client.post(url, {'title': 'Kahoot kvíz'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get(url)
        self.assertEqual([item['title'] for item in response.data], ['Kahoot kvíz'])

    def test_my_materials_get_unique_titles(self):
        self.client.force_authenticate(user=self.teacher)
        payload = {'title': 'Pracovní list', 'content': '<p>Moje</p>', 'source_material': str(self.material.id)}

        first = self.client.post(self.my_materials_url(), payload, format='json')
        second = self.client.post(self.my_materials_url(), payload, format='json')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(first.data['title'], 'Pracovní list')
        self.assertEqual(second.data['title'], 'Pracovní list (1)')

        response = self.client.get(self.my_materials_url())
        self.assertEqual(len(response.data), 2)

    def test_copy_material_from_source(self):
        self.client.force_authenticate(user=self.teacher)
        payload = {'source_material': str(self.material.id)}

        first = self.client.post(self.my_materials_url(), payload, format='json')
        second = self.client.post(self.my_materials_url(), payload, format='json')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_201_CREATED)
        self.assertEqual(first.data['title'], 'Pracovní list')
        self.assertEqual(second.data['title'], 'Pracovní list (1)')
        self.assertEqual(first.data['content'], '<p>Úkol</p>')
        self.assertEqual(str(first.data['source_material']), str(self.material.id))

    def test_copy_keeps_explicit_title(self):
        self.client.force_authenticate(user=self.teacher)
        response = self.client.post(
            self.my_materials_url(),
            {'source_material': str(self.material.id), 'title': 'Můj list'},
            format='json'
        )
        self.assertEqual(response.data['title'], 'Můj list')
        self.assertEqual(response.data['content'], '<p>Úkol</p>')

    def test_new_material_without_source_needs_title(self):
        self.client.force_authenticate(user=self.teacher)
        response = self.client.post(self.my_materials_url(), {'content': '<p>Moje</p>'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('title', response.data)

    def test_my_materials_require_login(self):
        response = self.client.get(self.my_materials_url())
        self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])

    def test_my_materials_reject_foreign_source(self):
        other_lesson = create_lesson(title="Jiná lekce", published=True)
        foreign = LessonMaterial.objects.create(lesson=other_lesson, title="Cizí")
        self.client.force_authenticate(user=self.teacher)
        response = self.client.post(
            self.my_materials_url(), {'title': 'List', 'source_material': str(foreign.id)}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_my_material_owner_only(self):
        material = UserLessonMaterial.objects.create(user=self.teacher, lesson=self.lesson, title="Moje")
        url = reverse('lessons:my_material_detail', kwargs={'material_id': material.id})

        self.client.force_authenticate(user=self.other_teacher)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.teacher)
        response = self.client.patch(url, {'content': '<p>Upraveno</p>'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['content'], '<p>Upraveno</p>')
