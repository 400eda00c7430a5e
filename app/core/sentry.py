"""Error reporting to Sentry, enabled by SENTRY_DSN."""

import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

# Request body keys that carry credentials on /user routes
SCRUBBED_FIELDS = {"password", "token", "newPassword"}


def scrub_event(event: dict, hint: dict | None = None) -> dict:
    """Drop the bearer token and any credential fields before the event leaves."""
    request = event.get("request") or {}
    headers = request.get("headers")
    if isinstance(headers, dict):
        for key in list(headers):
            if key.lower() == "authorization":
                headers[key] = "[Filtered]"
    data = request.get("data")
    if isinstance(data, dict):
        for key in SCRUBBED_FIELDS & data.keys():
            data[key] = "[Filtered]"
    return event


def init_sentry() -> bool:
    if not settings.sentry_dsn:
        logger.debug("SENTRY_DSN empty, error reporting off")
        return False

    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.app_env,
        release=f"linkpage-api@{settings.app_version}",
        traces_sample_rate=0.1 if settings.app_env == "production" else 1.0,
        send_default_pii=False,
        before_send=scrub_event,
        integrations=[FastApiIntegration(transaction_style="endpoint"), SqlalchemyIntegration()],
    )
    logger.info("Sentry reporting to %s environment", settings.app_env)
    return True
