"""Email provider adapter."""

from .notifier import HttpEmailNotifier, MockNotifier, SentEmail, invite_link

__all__ = ["HttpEmailNotifier", "MockNotifier", "SentEmail", "invite_link"]
