from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from relay import __version__
from relay.dependencies import get_resolver
from relay.plans import PlanResolver


router = APIRouter(tags=["health"])

_startup_time = datetime.now(timezone.utc)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float
    plan_lookup: str
    cached_plans: int
    indexed_plans: int


@router.get("/health", response_model=HealthResponse)
async def health_check(resolver: PlanResolver = Depends(get_resolver)):
    uptime = (datetime.now(timezone.utc) - _startup_time).total_seconds()

    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=round(uptime, 2),
        plan_lookup=resolver.lookup,
        cached_plans=len(resolver.cache),
        indexed_plans=len(resolver.index),
    )
