from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from strikefx.host import EXPECTED_SYSTEM_ID, Actor, HostSession, Macro, MacroRegistry
from strikefx.host import Token as HostToken
from strikefx.sequencer import RenderBackend
from strikefx.sequencer import Sequence as EffectSequence
from strikefx.types import ActorId, Milliseconds, TokenId
from strikefx.util.clock import Clock


class FakeClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, start: float = 10_000.0) -> None:
        self.now = start

    def now_ms(self) -> Milliseconds:
        return Milliseconds(self.now)

    def elapsed_ms(self, since: Milliseconds) -> Milliseconds:
        return Milliseconds(max(0.0, self.now - since))

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordingBackend(RenderBackend):
    """Renderer that records every sequence it is asked to play."""

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.played: list[EffectSequence] = []

    def is_available(self) -> bool:
        return self.available

    async def play(self, sequence: EffectSequence) -> None:
        self.played.append(sequence)


class DummyHost(HostSession):
    """A lightweight host session with everything settable by tests."""

    def __init__(
        self,
        *,
        actors: Sequence[Actor] = (),
        scene: Sequence[HostToken] = (),
        controlled: Sequence[HostToken] = (),
        targets: Sequence[HostToken] = (),
        owned: Sequence[ActorId] = (),
        player_owned: Sequence[ActorId] = (),
        gm: bool = False,
        active_modules: Sequence[str] = (),
        grid: float | None = 100.0,
        system: str = EXPECTED_SYSTEM_ID,
        canvas: bool = True,
    ) -> None:
        self.actors = {actor.id: actor for actor in actors}
        self.scene = list(scene)
        self.controlled = list(controlled)
        self.targets = list(targets)
        self.owned = set(owned)
        self.player_owned = set(player_owned)
        self.gm = gm
        self.active_modules = set(active_modules)
        self.grid = grid
        self.system = system
        self.canvas = canvas

    def controlled_tokens(self) -> list[HostToken]:
        return list(self.controlled)

    def scene_tokens(self) -> list[HostToken]:
        return list(self.scene)

    def user_targets(self) -> list[HostToken]:
        return list(self.targets)

    def get_actor(self, actor_id: ActorId) -> Actor | None:
        return self.actors.get(actor_id)

    def controls_actor(self, actor: Actor) -> bool:
        return actor.id in self.owned

    def has_player_owner(self, actor: Actor) -> bool:
        return actor.id in self.player_owned

    def is_gm(self) -> bool:
        return self.gm

    def is_module_active(self, module_id: str) -> bool:
        return module_id in self.active_modules

    def grid_size(self) -> float | None:
        return self.grid

    def system_id(self) -> str:
        return self.system

    def has_canvas(self) -> bool:
        return self.canvas


class DummyMacro(Macro):
    def __init__(self, id: str, name: str, body: Any = None) -> None:
        self.id = id
        self.name = name
        self.body = body
        self.calls: list[Mapping[str, Any]] = []

    def execute(self, scope: Mapping[str, Any]) -> Any:
        self.calls.append(scope)
        if self.body is not None:
            return self.body(scope)
        return None


class DummyMacroRegistry(MacroRegistry):
    def __init__(self, macros: Sequence[Macro] = ()) -> None:
        self.macros = list(macros)

    def get(self, macro_id: str) -> Macro | None:
        return next((m for m in self.macros if m.id == macro_id), None)

    def get_by_name(self, name: str) -> Macro | None:
        return next((m for m in self.macros if m.name == name), None)


def make_weapon(
    item_id: str = "item-1",
    name: str = "Azimuth Laser Pistol",
    *,
    category: str | None = "laser",
    weapon_type: str | None = "smallA",
    action_type: str | None = "rwak",
    damage: Any = None,
    uuid: str | None = None,
) -> dict[str, Any]:
    """Build an item record shaped like the game system delivers it."""
    system: dict[str, Any] = {}
    if category is not None:
        system["weaponCategory"] = category
    if weapon_type is not None:
        system["weaponType"] = weapon_type
    if action_type is not None:
        system["actionType"] = action_type
    if damage is not None:
        system["damage"] = {"parts": damage}
    item: dict[str, Any] = {"id": item_id, "name": name, "system": system}
    if uuid is not None:
        item["uuid"] = uuid
    return item


def make_actor(
    actor_id: str = "actor-1",
    name: str = "Navasi",
    items: Sequence[Mapping[str, Any]] = (),
    eac: float | None = None,
    kac: float | None = None,
) -> Actor:
    attributes: dict[str, Any] = {}
    if eac is not None:
        attributes["eac"] = {"value": eac}
    if kac is not None:
        attributes["kac"] = {"value": kac}
    return Actor(
        id=ActorId(actor_id),
        name=name,
        system={"attributes": attributes},
        items={item["id"]: item for item in items},
    )


def make_token(
    token_id: str, actor: Actor | None = None, x: float = 0.0, y: float = 0.0
) -> HostToken:
    return HostToken(id=TokenId(token_id), actor=actor, x=x, y=y)
