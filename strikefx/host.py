"""Interfaces to the virtual tabletop hosting the session.

The engine never talks to the tabletop directly. Everything it needs - who
owns which actor, which tokens are on the scene, what the local user is
targeting, which optional modules are active - goes through ``HostSession``.
User-authored macros come from a ``MacroRegistry``.

Actors, tokens and chat messages are plain records. Item records are left as
the raw mappings the host delivers, since their shape varies between game
system versions (see ``strikefx.weapons``).
"""

from __future__ import annotations

import abc
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from typing import Any

from strikefx.types import ActorId, PixelPos, TokenId

# The game system whose item and chat-flag layout this package understands.
EXPECTED_SYSTEM_ID = "sfrpg"

# A single item as delivered by the host: {"id", "uuid", "name", "system": {...}}
type ItemRecord = Mapping[str, Any]


@dataclass
class Actor:
    """A character or creature that can make attacks."""

    id: ActorId
    name: str = "Unknown"
    system: Mapping[str, Any] = field(default_factory=dict)
    items: Mapping[str, ItemRecord] = field(default_factory=dict)

    def get_item(self, item_id: str | None) -> ItemRecord | None:
        if not item_id:
            return None
        return self.items.get(item_id)


@dataclass
class Token:
    """An actor's placement on the active scene.

    Attributes:
        id: Host token identifier.
        actor: The actor this token represents, if any.
        x, y: Pixel position of the token's center.
    """

    id: TokenId
    actor: Actor | None = None
    x: float = 0.0
    y: float = 0.0

    @property
    def center(self) -> PixelPos:
        return (self.x, self.y)

    @property
    def actor_id(self) -> ActorId | None:
        return self.actor.id if self.actor is not None else None


@dataclass
class ChatMessage:
    """A chat message as created by the host.

    ``flags`` is namespaced by game system id, e.g.
    ``{"sfrpg": {"rollType": "attack", "itemId": "...", "rollSuccess": True}}``.
    """

    speaker_actor: ActorId | None = None
    speaker_token: TokenId | None = None
    flavor: str = ""
    flags: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def system_flags(self, system_id: str) -> Mapping[str, Any] | None:
        return self.flags.get(system_id)


class HostSession(abc.ABC):
    """Capabilities the host platform provides to this client."""

    @abc.abstractmethod
    def controlled_tokens(self) -> list[Token]:
        """Tokens currently selected/controlled by the local user."""
        ...

    @abc.abstractmethod
    def scene_tokens(self) -> list[Token]:
        """All tokens placed on the active scene."""
        ...

    @abc.abstractmethod
    def user_targets(self) -> list[Token]:
        """Tokens the local user has marked as targets."""
        ...

    @abc.abstractmethod
    def get_actor(self, actor_id: ActorId) -> Actor | None:
        ...

    @abc.abstractmethod
    def controls_actor(self, actor: Actor) -> bool:
        """Whether the local user owns ``actor``."""
        ...

    @abc.abstractmethod
    def has_player_owner(self, actor: Actor) -> bool:
        """Whether any non-GM user owns ``actor``."""
        ...

    @abc.abstractmethod
    def is_gm(self) -> bool:
        """Whether the local client is the authoritative session host."""
        ...

    @abc.abstractmethod
    def is_module_active(self, module_id: str) -> bool:
        ...

    def grid_size(self) -> float | None:
        """Size of one grid cell in pixels, if the scene has a grid."""
        return None

    def system_id(self) -> str:
        return EXPECTED_SYSTEM_ID

    def has_canvas(self) -> bool:
        """Whether a scene with tokens is currently rendered."""
        return True


class Macro(abc.ABC):
    """A user-authored script stored by the host."""

    id: str
    name: str

    @abc.abstractmethod
    def execute(self, scope: Mapping[str, Any]) -> Awaitable[Any] | Any:
        """Run the macro body with ``scope`` injected as readable bindings."""
        ...


class MacroRegistry(abc.ABC):
    """Lookup of user macros."""

    @abc.abstractmethod
    def get(self, macro_id: str) -> Macro | None:
        ...

    @abc.abstractmethod
    def get_by_name(self, name: str) -> Macro | None:
        ...
