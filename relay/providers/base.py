"""Shared models and the base interface for notification providers."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import httpx
from pydantic import BaseModel

T = TypeVar("T")


class FetchResult(BaseModel, Generic[T]):
    """Outcome of an upstream call that is allowed to fail softly.

    Exactly one of ``value`` and ``error`` is meaningful.
    """
    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "FetchResult[T]":
        return cls(error=error)


class Plan(BaseModel):
    """A Planning Center Services plan."""
    id: str
    title: str | None = None
    series_title: str | None = None
    planning_center_url: str | None = None
    service_type_id: str | None = None

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.series_title, self.title) if part)


class PlanningCenterCredentials(BaseModel):
    """Personal access token pair and the person whose schedules qualify a plan."""
    username: str
    password: str
    person_id: str


class NotificationPayload(BaseModel):
    """Condensed outbound message.

    **title**
    text
    *Tapping opens url*
    """
    title: str | None = None
    text: str | None = None
    url: str | None = None


class BaseNotifier(ABC):
    """Abstract base class for outbound alerting services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return provider identifier."""
        pass

    @abstractmethod
    async def send(self, payload: NotificationPayload, **destination: str) -> httpx.Response:
        """Deliver the notification to the destination named by ``destination``."""
        pass
