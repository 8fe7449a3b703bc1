"""Process-wide services, exposed as FastAPI dependencies.

Each getter builds its service lazily on first use. Tests swap them out through
``app.dependency_overrides``.
"""

from relay.cache import PlanCache
from relay.config import settings
from relay.debounce import Debouncer
from relay.plans import PlanResolver
from relay.providers import IftttNotifier, PlanningCenterClient, PushoverNotifier

_resolver: PlanResolver | None = None
_ifttt_debouncer: Debouncer | None = None
_pushover_debouncer: Debouncer | None = None


def get_resolver() -> PlanResolver:
    global _resolver
    if _resolver is None:
        _resolver = PlanResolver(
            PlanningCenterClient(),
            cache=PlanCache(ttl_seconds=settings.plan_cache_ttl_seconds),
            lookup=settings.plan_lookup,
        )
    return _resolver


def get_ifttt_debouncer() -> Debouncer:
    global _ifttt_debouncer
    if _ifttt_debouncer is None:
        _ifttt_debouncer = Debouncer(
            IftttNotifier().send,
            settings.notify_debounce_seconds,
            leading=settings.notify_leading_edge,
        )
    return _ifttt_debouncer


def get_pushover_debouncer() -> Debouncer:
    global _pushover_debouncer
    if _pushover_debouncer is None:
        _pushover_debouncer = Debouncer(
            PushoverNotifier().send,
            settings.notify_debounce_seconds,
            leading=settings.notify_leading_edge,
        )
    return _pushover_debouncer
