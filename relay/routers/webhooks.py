"""Webhook relay endpoints - Planning Center change notifications to push alerts."""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Json

from relay.config import settings
from relay.debounce import Debouncer
from relay.dependencies import get_ifttt_debouncer, get_pushover_debouncer, get_resolver
from relay.errors import MissingParametersError
from relay.plans import PlanResolver
from relay.providers.base import NotificationPayload, PlanningCenterCredentials

logger = logging.getLogger(__name__)
router = APIRouter()


class WebhookEventAttributes(BaseModel):
    name: str | None = None
    # Planning Center delivers the changed resource as a JSON-encoded string
    payload: Json[dict[str, Any]]


class WebhookEvent(BaseModel):
    id: str | None = None
    attributes: WebhookEventAttributes


class WebhookDelivery(BaseModel):
    data: list[WebhookEvent]

    def plan_id(self) -> str | None:
        """Id of the plan the first event refers to, if any."""
        if not self.data:
            return None

        resource = self.data[0].attributes.payload.get("data") or {}
        plan = ((resource.get("relationships") or {}).get("plan") or {}).get("data") or {}
        if plan.get("id"):
            return str(plan["id"])
        if resource.get("type") == "Plan" and resource.get("id"):
            return str(resource["id"])
        return None


def _require(params: list[tuple[str, str, str | None]]) -> None:
    missing = [(name, label) for name, label, value in params if not value]
    if missing:
        raise MissingParametersError(missing)


async def _relay(
    delivery: WebhookDelivery,
    credentials: PlanningCenterCredentials,
    resolver: PlanResolver,
    debouncer: Debouncer,
    **destination: str,
) -> PlainTextResponse:
    payload = NotificationPayload(title=settings.notification_title)

    plan_id = delivery.plan_id()
    plan = await resolver.resolve(plan_id, credentials) if plan_id else None

    logger.info(f"Plan: {plan}")

    if plan is None:
        return PlainTextResponse("Successfully processed request.")

    payload.text = f"{plan.display_name} was updated. Check it out!"
    payload.url = plan.planning_center_url

    response = await debouncer.send(payload, **destination)
    body = json.dumps(payload.model_dump(exclude_none=True), indent=2)

    if response is None:
        return PlainTextResponse(f"Notification coalesced:\n\n{body}")

    return PlainTextResponse(f"Success:\n\n{body}", status_code=response.status_code)


@router.get("/", response_class=PlainTextResponse)
async def alive():
    return "I’m alive!\n"


@router.post("/", response_class=PlainTextResponse)
async def relay_to_ifttt(
    delivery: WebhookDelivery,
    ifttt_event: str | None = Query(None, alias="ifttt-event"),
    ifttt_key: str | None = Query(None, alias="ifttt-key"),
    username: str | None = Query(None, alias="pco-token-username"),
    password: str | None = Query(None, alias="pco-token-password"),
    person_id: str | None = Query(None, alias="pco-person-id"),
    resolver: PlanResolver = Depends(get_resolver),
    debouncer: Debouncer = Depends(get_ifttt_debouncer),
):
    """Relay a Planning Center webhook delivery to an IFTTT applet."""
    _require([
        ("ifttt-event", "IFTTT event", ifttt_event),
        ("ifttt-key", "IFTTT key", ifttt_key),
        ("pco-token-username", "PCO token username", username),
        ("pco-token-password", "PCO token password", password),
        ("pco-person-id", "PCO person ID", person_id),
    ])

    credentials = PlanningCenterCredentials(username=username, password=password, person_id=person_id)
    return await _relay(delivery, credentials, resolver, debouncer, event=ifttt_event, key=ifttt_key)


@router.post("/pushover", response_class=PlainTextResponse)
async def relay_to_pushover(
    delivery: WebhookDelivery,
    pushover_user: str | None = Query(None, alias="pushover-user"),
    pushover_token: str | None = Query(None, alias="pushover-token"),
    username: str | None = Query(None, alias="pco-token-username"),
    password: str | None = Query(None, alias="pco-token-password"),
    person_id: str | None = Query(None, alias="pco-person-id"),
    resolver: PlanResolver = Depends(get_resolver),
    debouncer: Debouncer = Depends(get_pushover_debouncer),
):
    """Relay a Planning Center webhook delivery to a Pushover user."""
    _require([
        ("pushover-user", "Pushover user key", pushover_user),
        ("pushover-token", "Pushover API token", pushover_token),
        ("pco-token-username", "PCO token username", username),
        ("pco-token-password", "PCO token password", password),
        ("pco-person-id", "PCO person ID", person_id),
    ])

    credentials = PlanningCenterCredentials(username=username, password=password, person_id=person_id)
    return await _relay(delivery, credentials, resolver, debouncer, user=pushover_user, token=pushover_token)
