"""Service layer orchestrating the Jules client and the activity cache."""

from .activity_service import ActivityService

__all__ = ["ActivityService"]
