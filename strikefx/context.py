"""The context handed to animation scripts and macros."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from strikefx.host import Token
    from strikefx.sequencer import Sequence
    from strikefx.types import AttackMode, PixelOffset
    from strikefx.weapons import WeaponInfo


@dataclass(frozen=True)
class AnimationContext:
    """
    Everything an animation producer needs to build its effects.

    Attributes:
        source_token: The attacking token.
        target_token: The token being attacked.
        is_hit: Whether the attack hit.
        scale: Final scale, global multiplier already applied.
        speed: Final speed in ms, global multiplier already applied.
        attack_mode: "melee" or "ranged".
        weapon_info: Normalized metadata of the weapon used.
        sound_enabled: Whether sounds should be played.
        sound_volume: Volume for any sounds, 0.0 to 1.0.
        miss_offset: Suggested pixel offset for the endpoint of a ranged miss,
            ``None`` on hits and melee attacks.
    """

    source_token: Token
    target_token: Token
    is_hit: bool
    scale: float
    speed: float
    attack_mode: AttackMode
    weapon_info: WeaponInfo
    sound_enabled: bool
    sound_volume: float
    miss_offset: PixelOffset | None = None

    def as_scope(self, sequence_factory: Callable[[], Sequence]) -> dict[str, Any]:
        """Bindings exposed to a user macro.

        ``Sequence`` is a zero-argument factory returning a fresh sequence
        bound to the active renderer; the macro is responsible for playing it.
        """
        return {
            "source_token": self.source_token,
            "target_token": self.target_token,
            "is_hit": self.is_hit,
            "scale": self.scale,
            "speed": self.speed,
            "attack_mode": self.attack_mode,
            "weapon_info": self.weapon_info,
            "sound_enabled": self.sound_enabled,
            "sound_volume": self.sound_volume,
            "miss_offset": self.miss_offset,
            "Sequence": sequence_factory,
        }


# Signature of an animation script entry point. It adds effects to the given
# sequence; the caller plays it afterwards.
type AnimationProducer = Callable[
    [Sequence, AnimationContext], Awaitable[None] | None
]
