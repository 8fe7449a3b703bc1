"""Planning Center Services API client.

Every call returns a ``FetchResult``: network errors, non-2xx statuses and
malformed bodies are reported as failures instead of being raised.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from relay.config import settings
from relay.errors import parse_pco_error

from .base import FetchResult, Plan, PlanningCenterCredentials

logger = logging.getLogger(__name__)


def plan_from_resource(resource: dict) -> Plan:
    """Build a Plan from a JSON:API ``Plan`` resource object."""
    attributes = resource.get("attributes") or {}
    service_type = ((resource.get("relationships") or {}).get("service_type") or {}).get("data") or {}
    return Plan(
        id=str(resource["id"]),
        title=attributes.get("title"),
        series_title=attributes.get("series_title"),
        planning_center_url=attributes.get("planning_center_url"),
        service_type_id=service_type.get("id"),
    )


class PlanningCenterClient:
    """Thin async client for the handful of Services endpoints the relay needs."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.pco_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.upstream_timeout_seconds
        self._transport = transport

    async def _get(self, url: str, credentials: PlanningCenterCredentials, params: dict | None = None) -> FetchResult[Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    url,
                    params=params,
                    auth=(credentials.username, credentials.password),
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.warning(f"Planning Center request to {url} failed: {e!r}")
            return FetchResult.failure(f"request failed: {e!r}")

        if response.status_code != 200:
            message = parse_pco_error(response.text)
            logger.warning(f"Planning Center returned {response.status_code} for {url}: {message}")
            return FetchResult.failure(f"{response.status_code}: {message}")

        try:
            return FetchResult.success(response.json())
        except ValueError as e:
            logger.warning(f"Planning Center returned malformed JSON for {url}: {e}")
            return FetchResult.failure(f"malformed response: {e}")

    async def get_plan(self, plan_id: str, credentials: PlanningCenterCredentials) -> FetchResult[Plan]:
        result = await self._get(f"{self.base_url}/plans/{plan_id}", credentials)
        if not result.ok:
            return FetchResult.failure(result.error)

        try:
            return FetchResult.success(plan_from_resource(result.value["data"]))
        except (KeyError, TypeError, ValidationError) as e:
            logger.warning(f"Unexpected plan body for {plan_id}: {e!r}")
            return FetchResult.failure(f"unexpected plan body: {e!r}")

    async def get_person_schedules(
        self, plan_id: str, credentials: PlanningCenterCredentials
    ) -> FetchResult[list[dict]]:
        """Schedule records tying ``credentials.person_id`` to the plan."""
        result = await self._get(
            f"{self.base_url}/people/{credentials.person_id}/schedules",
            credentials,
            params={"where[plan_id]": plan_id},
        )
        if not result.ok:
            return FetchResult.failure(result.error)

        data = result.value.get("data") if isinstance(result.value, dict) else None
        if not isinstance(data, list):
            return FetchResult.failure("unexpected schedules body")
        return FetchResult.success(data)

    async def _get_collection(self, url: str, credentials: PlanningCenterCredentials) -> FetchResult[list[dict]]:
        """Fetch every page of a collection by following ``links.next``."""
        items: list[dict] = []
        next_url: str | None = url
        params: dict | None = {"per_page": 100}

        while next_url:
            result = await self._get(next_url, credentials, params=params)
            if not result.ok:
                return FetchResult.failure(result.error)

            body = result.value if isinstance(result.value, dict) else {}
            data = body.get("data")
            if not isinstance(data, list):
                return FetchResult.failure(f"unexpected collection body from {next_url}")

            items.extend(data)
            next_url = (body.get("links") or {}).get("next")
            # the next link already carries the paging params
            params = None

        return FetchResult.success(items)

    async def list_service_types(self, credentials: PlanningCenterCredentials) -> FetchResult[list[dict]]:
        return await self._get_collection(f"{self.base_url}/service_types", credentials)

    async def list_plans(
        self, service_type_id: str, credentials: PlanningCenterCredentials
    ) -> FetchResult[list[Plan]]:
        result = await self._get_collection(
            f"{self.base_url}/service_types/{service_type_id}/plans", credentials
        )
        if not result.ok:
            return FetchResult.failure(result.error)

        plans = []
        for resource in result.value:
            try:
                plan = plan_from_resource(resource)
            except (KeyError, TypeError, ValidationError) as e:
                logger.warning(f"Skipping malformed plan in service type {service_type_id}: {e!r}")
                continue
            if plan.service_type_id is None:
                plan.service_type_id = service_type_id
            plans.append(plan)

        return FetchResult.success(plans)
