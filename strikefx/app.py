"""Startup wiring for a host session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from strikefx.engine import AnimationEngine
from strikefx.events import EventBus, NotificationEvent, NotificationLevel
from strikefx.host import EXPECTED_SYSTEM_ID
from strikefx.settings import AnimationSettings

if TYPE_CHECKING:
    from strikefx.host import HostSession, MacroRegistry
    from strikefx.sequencer import RenderBackend

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "strikefx"

RENDERER_MISSING_MESSAGE = (
    "The effect renderer is not active. Attack animations are disabled."
)


def configure_debug_logging(settings: AnimationSettings) -> None:
    """Open the package logger up to DEBUG when ``debugMode`` is on.

    With the setting off the level is left to the host's logging setup.
    """
    if settings.debug_mode:
        logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)


def bootstrap(
    host: HostSession,
    backend: RenderBackend,
    settings: AnimationSettings | None = None,
    macros: MacroRegistry | None = None,
    bus: EventBus | None = None,
) -> AnimationEngine | None:
    """Check capabilities and start an engine subscribed to ``bus``.

    Returns:
        The running engine, or ``None`` if the renderer is missing. In that
        case a permanent error notification is published once and nothing is
        subscribed.
    """
    settings = settings if settings is not None else AnimationSettings()
    bus = bus if bus is not None else EventBus()
    configure_debug_logging(settings)

    if not backend.is_available():
        logger.error("Effect renderer is not active. Animation framework disabled.")
        bus.publish(
            NotificationEvent(
                RENDERER_MISSING_MESSAGE, NotificationLevel.ERROR, permanent=True
            )
        )
        return None

    system_id = host.system_id()
    if system_id != EXPECTED_SYSTEM_ID:
        logger.warning(
            f"Designed for the '{EXPECTED_SYSTEM_ID}' game system, "
            f"running on '{system_id}'"
        )

    engine = AnimationEngine(host, backend, settings, macros, bus)
    engine.subscribe()

    logger.info("Attack animations ready")
    logger.info(f"Animations enabled: {settings.enabled}")
    logger.debug(f"Debug mode: {settings.debug_mode}")
    return engine
