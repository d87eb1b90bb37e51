import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import NewsletterSubscriber
from .serializers import SubscribeSerializer, UnsubscribeSerializer, NewsletterSubscriberSerializer

logger = logging.getLogger(__name__)


def unsubscribe_url(subscriber):
    return f"{settings.FRONTEND_URL.rstrip('/')}/unsubscribe?token={subscriber.unsubscribe_token}"


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
def subscribe(request):
    """
    POST: Subscribe an e-mail address (reactivates a previous subscription)
    """
    serializer = SubscribeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'success': False, 'errors': serializer.errors},
            status=status.HTTP_400_BAD_REQUEST
        )
    email = serializer.validated_data['email']

    try:
        with transaction.atomic():
            subscriber = NewsletterSubscriber.objects.create(email=email)
        created = True
    except IntegrityError:
        subscriber = NewsletterSubscriber.objects.get(email=email)
        subscriber.reactivate()
        created = False
    except Exception as e:
        logger.error(f"Error subscribing to newsletter: {e}", exc_info=True)
        return Response(
            {'success': False, 'error': 'Subscription failed. Please try again.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if created:
        try:
            from slack_notifications import send_newsletter_subscription_notification
            send_newsletter_subscription_notification(subscriber)
        except Exception as e:
            logger.warning(f"Failed to send Slack notification: {e}")

    return Response(
        {'success': True, 'unsubscribe_url': unsubscribe_url(subscriber)},
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
    )


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
def unsubscribe(request):
    """
    POST: Unsubscribe using the token from the e-mail link
    """
    serializer = UnsubscribeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'success': False, 'error': 'Invalid unsubscribe link'},
            status=status.HTTP_400_BAD_REQUEST
        )

    token = serializer.validated_data['token']
    subscriber = NewsletterSubscriber.objects.filter(unsubscribe_token=token).first()
    if subscriber is None:
        logger.warning(f"Unsubscribe with unknown token: {token}")
        return Response(
            {'success': False, 'error': 'Unsubscribe failed. The link may be invalid.'},
            status=status.HTTP_400_BAD_REQUEST
        )

    subscriber.unsubscribe()
    return Response({'success': True, 'email': subscriber.email}, status=status.HTTP_200_OK)


class SubscriberListView(APIView):
    """
    GET: List newsletter subscribers (admin only), optional ?active=true|false
    """
    permission_classes = [permissions.IsAdminUser]

    def get(self, request):
        subscribers = NewsletterSubscriber.objects.all()
        active = request.query_params.get('active')
        if active is not None:
            subscribers = subscribers.filter(is_active=active.lower() in ('1', 'true', 'yes'))

        serializer = NewsletterSubscriberSerializer(subscribers, many=True)
        return Response({
            'count': subscribers.count(),
            'subscribers': serializer.data,
        }, status=status.HTTP_200_OK)
