"""User-facing notification channel."""

from .channel import NotificationChannel

__all__ = ["NotificationChannel"]
