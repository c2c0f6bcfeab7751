"""The animation engine: from an attack notification to played effects.

Flow for one attack:

    intake (primary hook or chat fallback)
      -> ownership check, dedup marker
      -> hit/miss and the hit-only policy
      -> source token, throttle, targets
      -> weapon normalization and resolution
      -> playback against each target in turn

All mutable state (throttle timestamps, dedup markers, the script cache and
the random streams) lives on the engine instance. The two ``on_*`` handlers
are what the event bus calls, but they can be invoked directly as well.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from strikefx.animation_map import ASSET_PACK_MODULE_IDS, DEFAULT_TABLES, MappingTables
from strikefx.constants import AnimationConstants as Anim
from strikefx.events import (
    AnimationPlayedEvent,
    AttackRolledEvent,
    ChatMessageEvent,
    EventBus,
)
from strikefx.gate import (
    ThrottleGate,
    determine_hit,
    hit_from_flags,
    should_animate_outcome,
)
from strikefx.intake import DedupWindow, is_animation_owner, is_attack_message
from strikefx.loader import MacroRunner, ScriptLoader
from strikefx.playback import MISS_OFFSET_STREAM, PlaybackComposer, PlaybackRequest
from strikefx.resolver import resolve_animation
from strikefx.sequencer import Sequence, SoundCue, VisualEffect
from strikefx.settings import AnimationSettings
from strikefx.util.clock import Clock
from strikefx.util.rng import RNGProvider
from strikefx.weapons import extract_weapon_info, item_identity

if TYPE_CHECKING:
    from strikefx.descriptors import AnimationDescriptor
    from strikefx.host import Actor, HostSession, ItemRecord, MacroRegistry, Token
    from strikefx.intake import AttackMarker
    from strikefx.sequencer import RenderBackend
    from strikefx.types import RandomSeed
    from strikefx.util.rng import RNG
    from strikefx.weapons import WeaponInfo

logger = logging.getLogger(__name__)


class AnimationEngine:
    """Plays attack animations for the local client."""

    def __init__(
        self,
        host: HostSession,
        backend: RenderBackend,
        settings: AnimationSettings | None = None,
        macros: MacroRegistry | None = None,
        bus: EventBus | None = None,
        clock: Clock | None = None,
        tables: MappingTables = DEFAULT_TABLES,
        loader: ScriptLoader | None = None,
        rng: RNG | None = None,
        seed: RandomSeed = None,
    ) -> None:
        self.host = host
        self.backend = backend
        self.settings = settings if settings is not None else AnimationSettings()
        self.bus = bus if bus is not None else EventBus()
        self.clock = clock if clock is not None else Clock()
        self.tables = tables
        self.loader = loader if loader is not None else ScriptLoader()
        self.rng_provider = RNGProvider(seed)

        self.throttle = ThrottleGate(self.clock)
        self.dedup = DedupWindow(self.clock)
        self.composer = PlaybackComposer(
            backend,
            self.settings,
            self.loader,
            MacroRunner(macros, self.bus),
            self.bus,
            rng if rng is not None else self.rng_provider.get(MISS_OFFSET_STREAM),
        )

    # --- Subscription ---

    def subscribe(self, bus: EventBus | None = None) -> None:
        """Register the attack handlers on ``bus`` (default: the engine's own)."""
        bus = bus if bus is not None else self.bus
        bus.subscribe(AttackRolledEvent, self.on_attack_rolled)
        bus.subscribe(ChatMessageEvent, self.on_chat_message)
        logger.debug("AnimationEngine handlers registered")

    def unsubscribe(self, bus: EventBus | None = None) -> None:
        bus = bus if bus is not None else self.bus
        bus.unsubscribe(AttackRolledEvent, self.on_attack_rolled)
        bus.unsubscribe(ChatMessageEvent, self.on_chat_message)

    @property
    def last_handled_attack(self) -> AttackMarker | None:
        return self.dedup.last_handled_attack

    # --- Event handlers ---

    async def on_attack_rolled(self, event: AttackRolledEvent) -> None:
        """Primary channel: the game system reported an attack roll."""
        try:
            await self._handle_attack_rolled(event)
        except Exception:
            logger.exception("Error handling attack roll")

    async def on_chat_message(self, event: ChatMessageEvent) -> None:
        """Fallback channel: an attack seen only as a chat message."""
        try:
            await self._handle_chat_message(event)
        except Exception:
            logger.exception("Error handling chat message")

    async def _handle_attack_rolled(self, event: AttackRolledEvent) -> None:
        if not self._should_animate() or event.item is None:
            return
        actor = event.actor
        if actor is None or not is_animation_owner(self.host, actor):
            return

        # Recorded before anything is awaited so that the chat message for
        # this same roll already sees it.
        self.dedup.record(actor.id, item_identity(event.item))
        logger.debug(
            f"Attack rolled: {actor.name} with {event.item.get('name', '?')}"
        )

        is_hit = determine_hit(event.roll_total, event.target)
        if not self._outcome_allowed(is_hit):
            return
        await self.play_animation(actor, event.item, is_hit)

    async def _handle_chat_message(self, event: ChatMessageEvent) -> None:
        if not self._should_animate():
            return

        message = event.message
        flags = message.system_flags(self.host.system_id())
        if not flags or not is_attack_message(message, self.host.system_id()):
            return
        if not message.speaker_actor:
            return

        actor = self.host.get_actor(message.speaker_actor)
        item = actor.get_item(flags.get("itemId")) if actor is not None else None
        if actor is None or item is None:
            return

        if self.dedup.is_duplicate(actor.id, item_identity(item)):
            logger.debug("Chat message already handled through the attack hook")
            return
        if not is_animation_owner(self.host, actor):
            return

        logger.debug(f"Chat fallback: {actor.name} with {item.get('name', '?')}")
        is_hit = hit_from_flags(flags)
        if not self._outcome_allowed(is_hit):
            return
        await self.play_animation(actor, item, is_hit)

    # --- Playback ---

    async def play_animation(
        self, actor: Actor, item: ItemRecord, is_hit: bool = True
    ) -> int:
        """Resolve and play the animation for ``item`` against every target.

        Returns:
            The number of targets an animation was played against.
        """
        source = self._get_actor_token(actor)
        if source is None:
            logger.debug(f"No source token found for actor: {actor.name}")
            return 0

        if not self.throttle.allow(source.id):
            return 0

        targets = self._get_targets()
        if not targets:
            logger.debug("No targets selected, skipping animation")
            return 0

        info = extract_weapon_info(item)
        descriptor = self.resolve(info)
        if descriptor is None:
            logger.debug(f"No animation found for weapon: {info.item_name}")
            return 0

        grid_size = self.host.grid_size() or Anim.DEFAULT_GRID_SIZE
        logger.debug(
            f"Playing {descriptor.kind.name} {descriptor.ref} for {info.item_name} "
            f"against {len(targets)} target(s), hit={is_hit}"
        )

        played = 0
        for target in targets:
            request = PlaybackRequest(
                source, target, descriptor, info, is_hit, grid_size
            )
            try:
                if not await self.composer.play(request):
                    continue
            except Exception:
                logger.exception(f"Error playing animation against {target.id}")
                continue
            played += 1
            self.bus.publish(
                AnimationPlayedEvent(source.id, target.id, descriptor, is_hit)
            )
        return played

    async def play_manual(
        self,
        source: Token,
        target: Token,
        animation_path: str,
        scale: float = Anim.DEFAULT_SCALE,
        speed: float = Anim.DEFAULT_SPEED_MS,
        sound: str | None = None,
        volume: float = Anim.MANUAL_SOUND_VOLUME,
    ) -> bool:
        """Play an asset between two tokens, bypassing resolution and settings."""
        if not self.backend.is_available():
            logger.error("Renderer not available, cannot play animation")
            return False

        seq = Sequence(self.backend)
        seq.effect(
            VisualEffect(
                file=animation_path,
                anchor=source.id,
                stretch_to=target.id,
                scale=scale,
                speed=speed,
            )
        )
        if sound:
            seq.sound(SoundCue(sound, volume))
        await seq.play()
        return True

    # --- Resolution ---

    def resolve(self, info: WeaponInfo) -> AnimationDescriptor | None:
        return resolve_animation(
            info,
            self.settings.custom_mappings(),
            self.settings.item_overrides(),
            self.asset_pack_available(),
            self.tables,
        )

    def animation_for_weapon(self, item: ItemRecord) -> AnimationDescriptor | None:
        """The descriptor an attack with ``item`` would currently play."""
        return self.resolve(extract_weapon_info(item))

    def asset_pack_available(self) -> bool:
        return any(self.host.is_module_active(m) for m in ASSET_PACK_MODULE_IDS)

    def clear_script_cache(self) -> None:
        self.loader.clear_cache()
        logger.info("Animation script cache cleared")

    # --- Helpers ---

    def _should_animate(self) -> bool:
        if not self.settings.enabled:
            return False
        if not self.backend.is_available():
            return False
        return self.host.has_canvas()

    def _outcome_allowed(self, is_hit: bool) -> bool:
        allowed = should_animate_outcome(
            is_hit, self.settings.only_on_hit, self.settings.miss_animation
        )
        if not allowed:
            logger.debug("Miss suppressed by the hit-only setting")
        return allowed

    def _get_actor_token(self, actor: Actor) -> Token | None:
        """The actor's token, preferring one the local user controls."""
        for token in self.host.controlled_tokens():
            if token.actor_id == actor.id:
                return token
        for token in self.host.scene_tokens():
            if token.actor_id == actor.id:
                return token
        return None

    def _get_targets(self) -> list[Token]:
        """The user's targets that are actually placed on the scene."""
        on_scene = {token.id for token in self.host.scene_tokens()}
        return [t for t in self.host.user_targets() if t.id in on_scene]
