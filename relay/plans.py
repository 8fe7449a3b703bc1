"""Plan resolution: cache-or-fetch lookup of a plan plus its schedule existence check."""

import asyncio
import logging
from typing import Literal

from relay.cache import PlanCache
from relay.providers.base import FetchResult, Plan, PlanningCenterCredentials
from relay.providers.planning_center import PlanningCenterClient

logger = logging.getLogger(__name__)


class PlanIndex:
    """Every plan of every service type, keyed by plan id.

    Used where plans cannot be fetched directly by id. Rebuilds replace plans
    by id and drop ids that no longer exist upstream. Concurrent rebuilds share
    one in-flight task.
    """

    def __init__(self, client: PlanningCenterClient):
        self.client = client
        self.plans: dict[str, Plan] = {}
        self._rebuilding: asyncio.Task | None = None

    def __len__(self) -> int:
        return len(self.plans)

    def get(self, plan_id: str) -> Plan | None:
        return self.plans.get(plan_id)

    async def rebuild(self, credentials: PlanningCenterCredentials) -> bool:
        if self._rebuilding is None or self._rebuilding.done():
            self._rebuilding = asyncio.ensure_future(self._rebuild(credentials))
        return await asyncio.shield(self._rebuilding)

    async def _rebuild(self, credentials: PlanningCenterCredentials) -> bool:
        logger.info("Rebuilding plan index")
        service_types = await self.client.list_service_types(credentials)
        if not service_types.ok:
            logger.warning(f"Plan index rebuild aborted: {service_types.error}")
            return False

        ids = [str(st["id"]) for st in service_types.value if isinstance(st, dict) and "id" in st]
        results = await asyncio.gather(*(self.client.list_plans(st_id, credentials) for st_id in ids))

        fresh: dict[str, Plan] = {}
        for st_id, result in zip(ids, results):
            if not result.ok:
                logger.warning(f"Plan index rebuild aborted at service type {st_id}: {result.error}")
                return False
            for plan in result.value:
                fresh[plan.id] = plan

        removed = self.plans.keys() - fresh.keys()
        for plan_id in removed:
            del self.plans[plan_id]
        self.plans.update(fresh)

        logger.info(f"Plan index rebuilt: {len(fresh)} plans, {len(removed)} removed")
        return True


class PlanResolver:
    """Resolve a plan id to a Plan the configured person is scheduled on.

    A plan is found only when its detail lookup succeeds and the person has at
    least one schedule record for it. Any failure along the way resolves to
    ``None`` and the cache forgets the attempt.
    """

    def __init__(
        self,
        client: PlanningCenterClient,
        cache: PlanCache[Plan] | None = None,
        lookup: Literal["direct", "index"] = "direct",
        index: PlanIndex | None = None,
    ):
        self.client = client
        self.cache = cache if cache is not None else PlanCache()
        self.lookup = lookup
        self.index = index if index is not None else PlanIndex(client)

    async def resolve(self, plan_id: str, credentials: PlanningCenterCredentials) -> Plan | None:
        return await self.cache.resolve(plan_id, lambda: self._fetch(plan_id, credentials))

    async def _fetch(self, plan_id: str, credentials: PlanningCenterCredentials) -> Plan | None:
        if self.lookup == "index":
            plan_lookup = self._lookup_indexed(plan_id, credentials)
        else:
            plan_lookup = self.client.get_plan(plan_id, credentials)

        plan, schedules = await asyncio.gather(
            plan_lookup,
            self.client.get_person_schedules(plan_id, credentials),
        )

        if not plan.ok:
            logger.info(f"Plan {plan_id} not resolved: {plan.error}")
            return None
        if not schedules.ok:
            logger.info(f"Schedules for plan {plan_id} not resolved: {schedules.error}")
            return None
        if not schedules.value:
            logger.info(f"Person {credentials.person_id} has no schedule on plan {plan_id}")
            return None

        logger.info(f"Resolved plan {plan_id}: {plan.value.display_name}")
        return plan.value

    async def _lookup_indexed(self, plan_id: str, credentials: PlanningCenterCredentials) -> FetchResult[Plan]:
        plan = self.index.get(plan_id)
        if plan is None:
            # One rebuild and one retry, then give up.
            await self.index.rebuild(credentials)
            plan = self.index.get(plan_id)

        if plan is None:
            return FetchResult.failure(f"plan {plan_id} not in index")
        return FetchResult.success(plan)
