"""Shared fakes for the relay test suite."""

import json
from dataclasses import dataclass, field
from typing import Callable

import httpx
import pytest

from relay.providers.base import PlanningCenterCredentials

PCO_URL = "https://pco.test/services/v2"


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class FakeTimer:
    due: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Stands in for ``loop.call_later`` with a manually advanced clock."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def armed(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]

    def advance_to(self, when: float) -> None:
        self.now = when
        for timer in sorted(self.armed, key=lambda t: t.due):
            if timer.due <= when:
                timer.cancelled = True
                timer.callback()


def plan_resource(plan_id: str, title: str, series_title: str, service_type_id: str = "7") -> dict:
    return {
        "type": "Plan",
        "id": plan_id,
        "attributes": {
            "title": title,
            "series_title": series_title,
            "planning_center_url": f"https://pco/{plan_id}",
        },
        "relationships": {"service_type": {"data": {"type": "ServiceType", "id": service_type_id}}},
    }


@dataclass
class FakePlanningCenter:
    """In-memory Planning Center Services API served through ``httpx.MockTransport``."""

    plans: dict[str, dict] = field(default_factory=dict)
    # plan id -> schedule records for the requesting person
    schedules: dict[str, list[dict]] = field(default_factory=dict)
    service_types: list[str] = field(default_factory=lambda: ["7"])
    fail_with: Exception | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def add_plan(self, plan_id: str, title: str, series_title: str, scheduled: bool = True,
                 service_type_id: str = "7") -> None:
        self.plans[plan_id] = plan_resource(plan_id, title, series_title, service_type_id)
        self.schedules[plan_id] = [{"type": "Schedule", "id": f"s{plan_id}"}] if scheduled else []

    def calls(self, path_suffix: str) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith(path_suffix))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with

        parts = request.url.path.split("/services/v2/", 1)[1].split("/")

        if parts[0] == "plans" and len(parts) == 2:
            plan = self.plans.get(parts[1])
            if plan is None:
                return httpx.Response(404, json={"errors": [{"status": "404", "title": "Not Found"}]})
            return httpx.Response(200, json={"data": plan})

        if parts[0] == "people" and parts[2] == "schedules":
            plan_id = request.url.params.get("where[plan_id]")
            return httpx.Response(200, json={"data": self.schedules.get(plan_id, [])})

        if parts == ["service_types"]:
            return httpx.Response(200, json={"data": [{"type": "ServiceType", "id": st} for st in self.service_types]})

        if parts[0] == "service_types" and parts[2] == "plans":
            data = [p for p in self.plans.values()
                    if p["relationships"]["service_type"]["data"]["id"] == parts[1]]
            return httpx.Response(200, json={"data": data, "links": {}})

        return httpx.Response(404, json={"errors": [{"title": "Unknown endpoint"}]})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@dataclass
class FakeNotifierEndpoint:
    status_code: int = 200
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text="Congratulations! You've fired the event")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def pco() -> FakePlanningCenter:
    return FakePlanningCenter()


@pytest.fixture
def credentials() -> PlanningCenterCredentials:
    return PlanningCenterCredentials(username="app-id", password="secret", person_id="99")
