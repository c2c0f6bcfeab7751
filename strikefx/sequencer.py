"""Composition of effect sequences and the rendering backend interface.

A ``Sequence`` collects visual effects and sound cues; ``play()`` hands the
finished sequence to the ``RenderBackend`` supplied by the host, which does
the actual drawing and audio. Animation scripts and macros only ever see a
``Sequence``, never the backend.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field

from strikefx.constants import AnimationConstants as Anim
from strikefx.types import Opacity, PixelOffset, TokenId

logger = logging.getLogger(__name__)


@dataclass
class VisualEffect:
    """One visual effect anchored at a token and stretched towards another.

    Attributes:
        file: Asset path or asset-pack database id.
        anchor: Token the effect starts at.
        stretch_to: Token the effect reaches towards.
        scale: Size multiplier.
        speed: Travel time in ms. ``None`` for instantaneous (melee) effects.
        z_index: Draw order relative to other effects.
        opacity: 1.0 for a clean hit, lower for misses.
        random_rotation: Spin the effect randomly (glancing melee miss).
        missed: Ask the renderer to land the effect beside the target.
        miss_offset: Pixel offset for the endpoint of a missed effect.
    """

    file: str
    anchor: TokenId
    stretch_to: TokenId
    scale: float = 1.0
    speed: float | None = None
    z_index: int = Anim.EFFECT_Z_INDEX
    opacity: Opacity = Opacity(1.0)
    random_rotation: bool = False
    missed: bool = False
    miss_offset: PixelOffset | None = None


@dataclass
class SoundCue:
    """A sound played as part of a sequence.

    Attributes:
        file: Sound file path.
        volume: Playback volume, 0.0 to 1.0.
        delay_ms: Delay relative to the start of the sequence.
    """

    file: str
    volume: float = 0.5
    delay_ms: int = 0


class RenderBackend(abc.ABC):
    """The host's effect renderer."""

    @abc.abstractmethod
    def is_available(self) -> bool:
        """Whether the renderer is installed and active."""
        ...

    @abc.abstractmethod
    async def play(self, sequence: Sequence) -> None:
        """Render every effect and sound of ``sequence``."""
        ...


@dataclass
class Sequence:
    """Builder for one animation sequence."""

    backend: RenderBackend
    name: str = "strikefx"
    effects: list[VisualEffect] = field(default_factory=list)
    sounds: list[SoundCue] = field(default_factory=list)

    def effect(self, effect: VisualEffect) -> VisualEffect:
        """Append a visual effect and return it for further adjustment."""
        self.effects.append(effect)
        return effect

    def sound(self, cue: SoundCue) -> SoundCue:
        """Append a sound cue and return it."""
        self.sounds.append(cue)
        return cue

    def is_empty(self) -> bool:
        return not self.effects and not self.sounds

    async def play(self) -> None:
        logger.debug(
            f"Playing sequence '{self.name}': "
            f"{len(self.effects)} effects, {len(self.sounds)} sounds"
        )
        await self.backend.play(self)
