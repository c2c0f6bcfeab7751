"""Event bus connecting the host platform, the engine and the UI.

USE FOR:
- Attack notifications coming in from the host (primary and fallback channel)
- User-facing notifications going out (missing capability, script errors)
- Reporting that an animation was played

DO NOT USE FOR:
- Resolution or playback internals (call the functions directly)
- Anything that needs a return value

Handlers run in subscription order. A failing handler is logged and does not
stop the remaining handlers. Coroutine handlers must be delivered with
``dispatch``; ``publish`` is for plain functions only.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from strikefx.descriptors import AnimationDescriptor
    from strikefx.host import Actor, ChatMessage, ItemRecord, Token
    from strikefx.types import TokenId

logger = logging.getLogger(__name__)


@dataclass
class HostEvent:
    """Base class for all events on the bus."""

    pass


@dataclass
class AttackRolledEvent(HostEvent):
    """Primary channel: the game system reports an attack roll directly.

    Attributes:
        actor: The attacking actor.
        item: The weapon item used, as a raw host record.
        roll_total: Total of the attack roll, if known.
        target: The token the roll was made against, if the system knows it.
    """

    actor: Actor | None
    item: ItemRecord | None
    roll_total: float | None = None
    target: Token | None = None


@dataclass
class ChatMessageEvent(HostEvent):
    """Fallback channel: a chat message was created."""

    message: ChatMessage


class NotificationLevel(Enum):
    """Severity of a user-facing notification."""

    INFO = auto()
    WARNING = auto()
    ERROR = auto()


@dataclass
class NotificationEvent(HostEvent):
    """Request to show a message to the local user."""

    text: str
    level: NotificationLevel = NotificationLevel.INFO
    permanent: bool = False


@dataclass
class AnimationPlayedEvent(HostEvent):
    """An attack animation finished playing against one target."""

    source_token_id: TokenId
    target_token_id: TokenId
    descriptor: AnimationDescriptor
    is_hit: bool


class EventBus:
    """Simple event bus for publish/subscribe pattern."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], Any]]] = {}

    def subscribe(self, event_type: type, handler: Callable[[Any], Any]) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable[[Any], Any]) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: HostEvent) -> None:
        """Deliver an event to plain (non-async) handlers."""
        event_type = type(event)
        # Copy the handler list to allow safe subscribe/unsubscribe during dispatch
        for handler in list(self._handlers.get(event_type, ())):
            try:
                result = handler(event)
            except Exception:
                logger.exception(f"Error handling event {event_type.__name__}")
                continue
            if inspect.iscoroutine(result):
                result.close()
                logger.warning(
                    f"Async handler for {event_type.__name__} was published "
                    "synchronously and skipped; use dispatch()"
                )

    async def dispatch(self, event: HostEvent) -> None:
        """Deliver an event, awaiting handlers that return awaitables."""
        event_type = type(event)
        for handler in list(self._handlers.get(event_type, ())):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"Error handling event {event_type.__name__}")
