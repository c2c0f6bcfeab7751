"""Turning a resolved descriptor into a played sequence.

``PlaybackComposer`` applies the global scale/speed multipliers, builds the
``AnimationContext`` and then, depending on the descriptor kind, composes a
direct effect, runs a bundled script or hands over to a user macro.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from strikefx.animations import melee_strike, ranged_shot
from strikefx.constants import AnimationConstants as Anim
from strikefx.context import AnimationContext
from strikefx.descriptors import DescriptorKind
from strikefx.events import NotificationEvent, NotificationLevel
from strikefx.sequencer import Sequence, SoundCue
from strikefx.util.rng import RNGProvider
from strikefx.weapons import get_attack_mode

if TYPE_CHECKING:
    from strikefx.descriptors import AnimationDescriptor
    from strikefx.events import EventBus
    from strikefx.host import Token
    from strikefx.loader import MacroRunner, ScriptLoader
    from strikefx.sequencer import RenderBackend
    from strikefx.settings import AnimationSettings
    from strikefx.types import AttackMode, PixelOffset
    from strikefx.util.rng import RNG
    from strikefx.weapons import WeaponInfo

logger = logging.getLogger(__name__)

MISS_OFFSET_STREAM = "effects.miss_offset"


def final_scale(descriptor: AnimationDescriptor, animation_scale: float) -> float:
    return descriptor.scale * animation_scale


def final_speed(descriptor: AnimationDescriptor, animation_speed: float) -> float:
    """Travel time after the speed multiplier. A faster setting means less time."""
    return descriptor.speed / animation_speed


def calculate_miss_offset(
    source: Token, target: Token, grid_size: float, rng: RNG
) -> PixelOffset:
    """Pixel offset that moves a ranged effect's endpoint off the target.

    The offset is perpendicular to the line of fire, to a random side, and
    between half a grid cell and a full cell long.
    """
    delta = np.subtract(target.center, source.center, dtype=float)
    angle = float(np.arctan2(delta[1], delta[0]))
    side = 1.0 if rng.random() > 0.5 else -1.0
    perpendicular = angle + side * np.pi / 2
    distance = grid_size * rng.uniform(
        Anim.MISS_OFFSET_MIN_CELLS, Anim.MISS_OFFSET_MAX_CELLS
    )
    offset = np.array([np.cos(perpendicular), np.sin(perpendicular)]) * distance
    return (float(offset[0]), float(offset[1]))


@dataclass
class PlaybackRequest:
    """One animation to play from ``source`` to ``target``."""

    source: Token
    target: Token
    descriptor: AnimationDescriptor
    weapon_info: WeaponInfo
    is_hit: bool
    grid_size: float = Anim.DEFAULT_GRID_SIZE


class PlaybackComposer:
    """Plays resolved descriptors through the host's renderer."""

    def __init__(
        self,
        backend: RenderBackend,
        settings: AnimationSettings,
        loader: ScriptLoader,
        macros: MacroRunner,
        bus: EventBus,
        rng: RNG | None = None,
    ) -> None:
        self.backend = backend
        self.settings = settings
        self.loader = loader
        self.macros = macros
        self.bus = bus
        self.rng = rng if rng is not None else RNGProvider().get(MISS_OFFSET_STREAM)

    def new_sequence(self) -> Sequence:
        return Sequence(self.backend)

    def build_context(self, request: PlaybackRequest) -> AnimationContext:
        descriptor = request.descriptor
        mode: AttackMode = descriptor.type or get_attack_mode(request.weapon_info)
        miss_offset = None
        if mode == "ranged" and not request.is_hit:
            miss_offset = calculate_miss_offset(
                request.source, request.target, request.grid_size, self.rng
            )
        return AnimationContext(
            source_token=request.source,
            target_token=request.target,
            is_hit=request.is_hit,
            scale=final_scale(descriptor, self.settings.animation_scale),
            speed=final_speed(descriptor, self.settings.animation_speed),
            attack_mode=mode,
            weapon_info=request.weapon_info,
            sound_enabled=self.settings.sound_enabled,
            sound_volume=self.settings.sound_volume,
            miss_offset=miss_offset,
        )

    async def play(self, request: PlaybackRequest) -> bool:
        """Compose and play one animation.

        Returns:
            True if something was handed to the renderer (or the macro ran).
            Load and execution failures are logged and give False.
        """
        descriptor = request.descriptor
        ctx = self.build_context(request)

        if descriptor.kind is DescriptorKind.MACRO:
            return await self.macros.run(descriptor.ref, ctx, self.new_sequence)

        seq = self.new_sequence()
        if descriptor.kind is DescriptorKind.SCRIPT:
            if not await self._run_script(descriptor.ref, seq, ctx):
                return False
        else:
            compose_effect(seq, ctx, descriptor.ref)

        self._add_sound(seq, ctx, descriptor)
        if seq.is_empty():
            logger.debug(f"Animation {descriptor.ref} produced no effects")
            return False
        await seq.play()
        return True

    async def _run_script(
        self, path: str, seq: Sequence, ctx: AnimationContext
    ) -> bool:
        producer = self.loader.load(path)
        if producer is None:
            logger.warning(f"Animation script not found: {path}")
            return False
        try:
            result = producer(seq, ctx)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(f"Error executing animation script {path}")
            self.bus.publish(
                NotificationEvent(
                    f"Error executing animation script {path}, check logs",
                    NotificationLevel.WARNING,
                )
            )
            return False
        return True

    def _add_sound(
        self, seq: Sequence, ctx: AnimationContext, descriptor: AnimationDescriptor
    ) -> None:
        if not descriptor.sound or not ctx.sound_enabled:
            return
        delay = (
            Anim.MELEE_SOUND_DELAY_MS
            if ctx.attack_mode == "melee"
            else Anim.RANGED_SOUND_DELAY_MS
        )
        seq.sound(SoundCue(descriptor.sound, ctx.sound_volume, delay))


def compose_effect(seq: Sequence, ctx: AnimationContext, file: str) -> None:
    """Add the standard melee or ranged effect for a direct asset."""
    if ctx.attack_mode == "melee":
        melee_strike(seq, ctx, file)
    else:
        ranged_shot(seq, ctx, file)
