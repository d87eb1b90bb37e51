"""
Slack notification system for newsletter sign-ups and other events
"""
import logging

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError
from django.conf import settings
from django.utils import timezone
from decouple import config

logger = logging.getLogger(__name__)


class SlackNotificationService:
    """
    Service for sending Slack notifications
    """

    def __init__(self):
        self.client = None
        self.channel = None
        self._initialize_client()

    def _initialize_client(self):
        """Initialize Slack client with bot token"""
        try:
            slack_token = config('SLACK_BOT_TOKEN', default='')
            if not slack_token:
                logger.info("SLACK_BOT_TOKEN not configured, Slack notifications disabled")
                return

            self.client = WebClient(token=slack_token)
            self.channel = config('SLACK_CHANNEL', default='#general')

            # Test the connection
            self.client.auth_test()
            logger.info(f"Slack client initialized successfully. Channel: {self.channel}")

        except SlackApiError as e:
            logger.error(f"Error initializing Slack client: {e.response['error']}")
            self.client = None
        except Exception as e:
            logger.error(f"Unexpected error initializing Slack client: {str(e)}")
            self.client = None

    def is_available(self):
        """Check if Slack notifications are available"""
        return self.client is not None

    def _post(self, text, blocks):
        if not self.is_available():
            logger.debug("Slack notifications not available")
            return False

        try:
            response = self.client.chat_postMessage(
                channel=self.channel,
                text=text,
                blocks=blocks
            )
            logger.info(f"Slack notification sent successfully: {response['ts']}")
            return True

        except SlackApiError as e:
            logger.error(f"Error sending Slack notification: {e.response['error']}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error sending Slack notification: {str(e)}")
            return False

    def send_newsletter_subscription_notification(self, subscriber):
        """
        Send notification for a new newsletter subscriber
        """
        return self._post(
            "New Newsletter Subscriber",
            self._format_subscriber_message(subscriber),
        )

    def _format_subscriber_message(self, subscriber):
        """
        Format newsletter subscriber into Slack message blocks
        """
        return [
            {
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": "📬 New Newsletter Subscriber"
                }
            },
            {
                "type": "section",
                "fields": [
                    {
                        "type": "mrkdwn",
                        "text": f"*Email:*\n{subscriber.email}"
                    },
                    {
                        "type": "mrkdwn",
                        "text": f"*Subscribed:*\n{subscriber.subscribed_at.strftime('%Y-%m-%d %H:%M:%S')} UTC"
                    }
                ]
            },
            {
                "type": "actions",
                "elements": [
                    {
                        "type": "button",
                        "text": {
                            "type": "plain_text",
                            "text": "View in Admin"
                        },
                        "url": f"{settings.ADMIN_URL}/admin/newsletter/newslettersubscriber/{subscriber.id}/change/",
                        "action_id": "view_admin"
                    }
                ]
            }
        ]

    def send_system_notification(self, title, message):
        """
        Send a general system notification
        """
        blocks = [
            {
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": title
                }
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": message
                }
            },
            {
                "type": "context",
                "elements": [
                    {
                        "type": "mrkdwn",
                        "text": f"Time: {timezone.now().strftime('%Y-%m-%d %H:%M:%S')} UTC"
                    }
                ]
            }
        ]
        return self._post(title, blocks)


# Global instance
slack_service = SlackNotificationService()


def send_newsletter_subscription_notification(subscriber):
    """
    Convenience function to send newsletter subscription notification
    """
    return slack_service.send_newsletter_subscription_notification(subscriber)


def send_system_notification(title, message):
    """
    Convenience function to send system notification
    """
    return slack_service.send_system_notification(title, message)
