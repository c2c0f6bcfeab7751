"""Filtering of incoming attack notifications.

An attack can reach the client twice: once through the game system's attack
hook and once as the chat message the roll produces. The hook is preferred;
the chat message is only used when no hook fired for the same actor and item
shortly before. Of all connected clients, exactly one plays each animation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from strikefx.constants import AnimationConstants as Anim

if TYPE_CHECKING:
    from strikefx.host import Actor, ChatMessage, HostSession
    from strikefx.types import ActorId, Milliseconds
    from strikefx.util.clock import Clock

logger = logging.getLogger(__name__)

ATTACK_ROLL_TYPE = "attack"


class AttackMarker(NamedTuple):
    """The most recent attack handled through the primary channel."""

    actor_id: ActorId
    item_id: str | None
    timestamp: Milliseconds


class DedupWindow:
    """Remembers primary-channel attacks per actor and item for a short window.

    Attacks in a burst each keep their own marker, so a chat message for an
    earlier attack is still recognised after later attacks were recorded.
    """

    def __init__(self, clock: Clock, window_ms: float = Anim.DEDUP_WINDOW_MS) -> None:
        self.clock = clock
        self.window_ms = window_ms
        self.last_handled_attack: AttackMarker | None = None
        self._recent: dict[tuple[ActorId, str | None], Milliseconds] = {}

    def record(self, actor_id: ActorId, item_id: str | None) -> AttackMarker:
        self._prune()
        marker = AttackMarker(actor_id, item_id, self.clock.now_ms())
        self._recent[(actor_id, item_id)] = marker.timestamp
        self.last_handled_attack = marker
        return marker

    def is_duplicate(self, actor_id: ActorId, item_id: str | None) -> bool:
        """Whether the same attack was already handled within the window."""
        self._prune()
        return (actor_id, item_id) in self._recent

    def __len__(self) -> int:
        return len(self._recent)

    def _prune(self) -> None:
        expired = [
            key
            for key, timestamp in self._recent.items()
            if self.clock.elapsed_ms(timestamp) > self.window_ms
        ]
        for key in expired:
            del self._recent[key]


def is_animation_owner(host: HostSession, actor: Actor) -> bool:
    """Whether this client is the one that plays animations for ``actor``.

    The owning player's client animates their own attacks. Attacks by actors
    no player owns (NPCs) are animated by the GM's client.
    """
    if host.controls_actor(actor):
        return True
    return not host.has_player_owner(actor) and host.is_gm()


def is_attack_message(message: ChatMessage, system_id: str) -> bool:
    flags = message.system_flags(system_id) or {}
    if flags.get("rollType") == ATTACK_ROLL_TYPE:
        return True
    return ATTACK_ROLL_TYPE in (message.flavor or "").lower()
