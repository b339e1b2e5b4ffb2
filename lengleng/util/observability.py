"""Observability configuration using Logfire.

Logfire provides structured logging and tracing on top of OpenTelemetry.

Usage:
    import logfire

    # Structured logging
    logfire.info("Invitation sent", invitation_id=str(invitation.id))

    # Manual spans for critical operations
    with logfire.span("invitation_service.send_invite", sender_id=sender_id):
        ...
"""

import logfire
from sqlalchemy.ext.asyncio import AsyncEngine

from lengleng.config import Settings

SERVICE_NAME = "lengleng-invitations"


def _send_to_logfire(settings: Settings) -> bool:
    # An explicit OBSERVABILITY__SEND_TO_LOGFIRE wins over token presence
    if settings.observability.send_to_logfire is not None:
        return settings.observability.send_to_logfire
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the engine's spans and structured logs.

    Console-only unless OBSERVABILITY__LOGFIRE_TOKEN is set (or sending is
    forced with OBSERVABILITY__SEND_TO_LOGFIRE). Debug mode lowers the
    console threshold to debug.

    Args:
        settings: Application settings
    """
    send_to_logfire = _send_to_logfire(settings)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=settings.observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
            min_log_level="debug" if settings.debug else "info",
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace every query on ``engine``, compare-and-swap updates included."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)
