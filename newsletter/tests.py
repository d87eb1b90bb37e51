import uuid
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from .models import NewsletterSubscriber

User = get_user_model()


@override_settings(FRONTEND_URL='https://storyon.test/')
@mock.patch('slack_notifications.send_newsletter_subscription_notification')
class NewsletterAPITestCase(APITestCase):
    """
    Test cases for newsletter subscribe/unsubscribe
    """

    def subscribe(self, email):
        return self.client.post(reverse('newsletter:subscribe'), {'email': email}, format='json')

    def unsubscribe(self, token):
        return self.client.post(reverse('newsletter:unsubscribe'), {'token': token}, format='json')

    def test_subscribe(self, notify):
        response = self.subscribe('  Ucitel@Skola.CZ ')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])

        subscriber = NewsletterSubscriber.objects.get()
        self.assertEqual(subscriber.email, 'ucitel@skola.cz')
        self.assertTrue(subscriber.is_active)
        self.assertEqual(
            response.data['unsubscribe_url'],
            f'https://storyon.test/unsubscribe?token={subscriber.unsubscribe_token}'
        )
        notify.assert_called_once_with(subscriber)

    def test_invalid_email(self, notify):
        for email in ['', 'no-at-sign', 'a@b', 'two words@skola.cz']:
            response = self.subscribe(email)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, email)
            self.assertFalse(response.data['success'])
            self.assertIn('email', response.data['errors'])
        self.assertFalse(NewsletterSubscriber.objects.exists())
        notify.assert_not_called()

    def test_subscribe_twice(self, notify):
        self.subscribe('ucitel@skola.cz')
        response = self.subscribe('UCITEL@skola.cz')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(NewsletterSubscriber.objects.count(), 1)
        self.assertEqual(notify.call_count, 1)

    def test_unsubscribe_and_resubscribe(self, notify):
        subscriber = NewsletterSubscriber.objects.create(email='ucitel@skola.cz')
        token = subscriber.unsubscribe_token

        response = self.unsubscribe(str(token))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True, 'email': 'ucitel@skola.cz'})
        subscriber.refresh_from_db()
        self.assertFalse(subscriber.is_active)
        self.assertIsNotNone(subscriber.unsubscribed_at)

        response = self.subscribe('ucitel@skola.cz')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        subscriber.refresh_from_db()
        self.assertTrue(subscriber.is_active)
        self.assertIsNone(subscriber.unsubscribed_at)
        self.assertEqual(subscriber.unsubscribe_token, token)

    def test_unsubscribe_with_bad_token(self, notify):
        self.assertEqual(self.unsubscribe('not-a-uuid').status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.unsubscribe(str(uuid.uuid4())).status_code, status.HTTP_400_BAD_REQUEST)

    def test_slack_failure_does_not_break_subscription(self, notify):
        notify.side_effect = RuntimeError('slack down')
        response = self.subscribe('ucitel@skola.cz')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(NewsletterSubscriber.objects.exists())


class SubscriberListAPITestCase(APITestCase):

    def setUp(self):
        self.admin = User.objects.create_user(username='admin', password='testpass123', is_staff=True)
        self.user = User.objects.create_user(username='teacher', password='testpass123')
        NewsletterSubscriber.objects.create(email='active@skola.cz')
        NewsletterSubscriber.objects.create(email='gone@skola.cz', is_active=False)

    def test_admin_only(self):
        response = self.client.get(reverse('newsletter:subscriber_list'))
        self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])

        self.client.force_authenticate(user=self.user)
        response = self.client.get(reverse('newsletter:subscriber_list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('newsletter:subscriber_list'))
        self.assertEqual(response.data['count'], 2)

        response = self.client.get(reverse('newsletter:subscriber_list'), {'active': 'true'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['subscribers'][0]['email'], 'active@skola.cz')
