"""Product analytics via Mixpanel.

Initializes a Mixpanel client if MIXPANEL_TOKEN is set. Otherwise
every tracking call is then a silent no-op.
"""

import asyncio
import logging
from typing import Any
from uuid import UUID

from mixpanel import Mixpanel, MixpanelException

from app.core.config import settings

logger = logging.getLogger(__name__)


class Analytics:
    """Thin async wrapper around an optional Mixpanel client.

    The SDK does blocking HTTP, so calls are pushed to a worker thread. Delivery
    failures are logged and never surface to the request.
    """

    def __init__(self, client: Mixpanel | None = None) -> None:
        self.client = client

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def track(self, distinct_id: Any, event: str, properties: dict[str, Any] | None = None) -> None:
        if self.client is None:
            return
        props = {k: str(v) if isinstance(v, UUID) else v for k, v in (properties or {}).items()}
        try:
            await asyncio.to_thread(self.client.track, str(distinct_id), event, props)
        except MixpanelException as e:
            logger.warning("Analytics: failed to track %r: %s", event, e)

    async def people_set(self, distinct_id: Any, properties: dict[str, Any]) -> None:
        if self.client is None:
            return
        try:
            await asyncio.to_thread(self.client.people_set, str(distinct_id), properties)
        except MixpanelException as e:
            logger.warning("Analytics: failed to update people properties: %s", e)


def build_analytics() -> Analytics:
    if not settings.mixpanel_token:
        logger.debug("Mixpanel token not configured, analytics disabled")
        return Analytics()
    logger.info("Mixpanel analytics enabled")
    return Analytics(Mixpanel(settings.mixpanel_token))


_analytics = build_analytics()


def get_analytics() -> Analytics:
    """FastAPI dependency. Override in tests to capture events."""
    return _analytics
