import os
import uuid
from typing import Protocol

from pushover import Client as PushoverClient, RequestError

from f95metadata.logging_config import logger


class NotificationSink(Protocol):
    def notify(self, key: str, message: str, title: str) -> None: ...


def new_notification_key():
    return str(uuid.uuid4())


class LoggingNotifier:
    """Writes notifications to the log only."""

    def notify(self, key, message, title):
        logger.error(f"NOTIFY [{key}] {title}: {message}")


class PushoverNotifier:
    """Sends notifications through Pushover using the given credentials."""

    def __init__(self, user_key, api_token, client=None):
        self.client = client if client is not None else PushoverClient(user_key, api_token=api_token)

    def notify(self, key, message, title):
        try:
            self.client.send_message(message, title=f"[F95Zone] {title}")
            logger.info(f"Pushover notification sent ({key}): {title}")
        except RequestError as e:
            logger.error(f"Pushover API error for notification {key}: {e}")


def default_notifier():
    """Pushover when PUSHOVER_USER_KEY and PUSHOVER_API_TOKEN are set, log-only otherwise."""
    user_key = os.getenv("PUSHOVER_USER_KEY")
    api_token = os.getenv("PUSHOVER_API_TOKEN")
    if not user_key or not api_token:
        logger.info("Pushover credentials missing. Notifications go to the log only.")
        return LoggingNotifier()
    return PushoverNotifier(user_key, api_token)
