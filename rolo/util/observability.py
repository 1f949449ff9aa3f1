"""Logfire setup for the API process and the maintenance scripts.

Access decisions are logged with ``logfire.info``/``logfire.warn`` and the
mutating operations open spans named ``<service>.<operation>``. Invite tokens
and bearer credentials never leave the process: they are scrubbed from span
attributes and headers are not captured.
"""

from typing import Any

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from rolo.config import Settings

SERVICE_NAME = "rolo-access"
SERVICE_VERSION = "0.1.0"

# Attribute names whose values are redacted in addition to logfire's defaults
SCRUBBED_ATTRIBUTES = ["invite_token", "token", "payment_method_id"]

# Probes would otherwise dominate the trace volume
UNTRACED_URLS = ["/health"]


def _should_send(settings: Settings) -> bool:
    observability = settings.observability
    if observability.send_to_logfire is not None:
        return observability.send_to_logfire
    return bool(observability.logfire_token)


def configure_logfire(settings: Settings, process: str = "api") -> None:
    """Configure Logfire once per process.

    Sends to Logfire cloud when ``OBSERVABILITY__LOGFIRE_TOKEN`` is set, unless
    ``OBSERVABILITY__SEND_TO_LOGFIRE`` says otherwise; console output always.

    Args:
        settings: Application settings
        process: Name of the running process (api, migrations, a job name)
    """
    send_to_logfire = _should_send(settings)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=settings.observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SCRUBBED_ATTRIBUTES),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        process=process,
        environment=settings.environment,
        git_sha=settings.git_sha,
        send_to_logfire=send_to_logfire,
    )


def _request_attributes(request: Any, attributes: dict[str, Any]) -> dict[str, Any]:
    # Query strings carry invite tokens, so only the path is kept
    result = {key: value for key, value in attributes.items() if key != "values"}
    result["path"] = request.url.path
    if request.client:
        result["client_host"] = request.client.host
    return result


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request except health probes, without headers or bodies."""
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        excluded_urls=UNTRACED_URLS,
        request_attributes_mapper=_request_attributes,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace queries, tagging them with the span context as SQL comments."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_httpx() -> None:
    """Trace calls to the identity provider and the email API."""
    logfire.instrument_httpx()
