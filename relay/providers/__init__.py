"""
Upstream and Notification Clients

External service adapters for the relay.
"""

from .base import BaseNotifier, FetchResult, NotificationPayload, Plan, PlanningCenterCredentials
from .ifttt import IftttNotifier
from .planning_center import PlanningCenterClient
from .pushover import PushoverNotifier

__all__ = [
    "BaseNotifier",
    "FetchResult",
    "IftttNotifier",
    "NotificationPayload",
    "Plan",
    "PlanningCenterClient",
    "PlanningCenterCredentials",
    "PushoverNotifier",
]
