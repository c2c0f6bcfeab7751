"""Animation descriptors: what to play for a weapon.

A descriptor names exactly one animation source, tagged by ``kind``:

- ``MACRO``: a user-authored macro, run with the animation context in scope
- ``SCRIPT``: a bundled producer module under ``strikefx/animations``
- ``DIRECT_ASSET``: an asset path handed straight to the renderer

Descriptors are immutable. Overrides stored by users are plain JSON objects;
``descriptor_from_mapping`` turns one into a descriptor, or ``None`` if it
does not name any animation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from strikefx.constants import AnimationConstants as Anim
from strikefx.types import AttackMode


class DescriptorKind(Enum):
    """Which kind of animation source a descriptor points at."""

    MACRO = "macro"
    SCRIPT = "script"
    DIRECT_ASSET = "animation"


_ATTACK_MODES: frozenset[str] = frozenset({"melee", "ranged"})

# Key checked first wins when a stored entry names more than one source
_SOURCE_PRIORITY = (
    DescriptorKind.MACRO,
    DescriptorKind.SCRIPT,
    DescriptorKind.DIRECT_ASSET,
)


@dataclass(frozen=True)
class AnimationDescriptor:
    """A resolved, playable description of an attack animation.

    Attributes:
        kind: The animation source kind.
        ref: Macro id/name, script path, or asset path depending on ``kind``.
        type: Melee or ranged choreography. ``None`` only on stored overrides
            that never recorded one; the resolver fills it in.
        scale: Base size multiplier, > 0.
        speed: Base travel time in ms for ranged, relative rate for melee, > 0.
        sound: Optional sound file played alongside the effect.
        from_asset_pack: True when synthesized from the community asset pack.
    """

    kind: DescriptorKind
    ref: str
    type: AttackMode | None = None
    scale: float = Anim.DEFAULT_SCALE
    speed: float = Anim.DEFAULT_SPEED_MS
    sound: str | None = None
    from_asset_pack: bool = False

    def __post_init__(self) -> None:
        if not self.ref:
            raise ValueError(f"{self.kind.name} descriptor needs a non-empty ref")
        if self.scale <= 0:
            raise ValueError(f"Descriptor scale must be positive, got {self.scale}")
        if self.speed <= 0:
            raise ValueError(f"Descriptor speed must be positive, got {self.speed}")
        if self.type is not None and self.type not in _ATTACK_MODES:
            raise ValueError(f"Unknown attack mode: {self.type!r}")

    @classmethod
    def script(
        cls, path: str, type: AttackMode, scale: float, speed: float
    ) -> AnimationDescriptor:
        return cls(DescriptorKind.SCRIPT, path, type, scale, speed)

    @classmethod
    def macro(
        cls,
        ref: str,
        type: AttackMode | None = None,
        scale: float = Anim.DEFAULT_SCALE,
        speed: float = Anim.DEFAULT_SPEED_MS,
    ) -> AnimationDescriptor:
        return cls(DescriptorKind.MACRO, ref, type, scale, speed)

    @classmethod
    def asset(
        cls,
        path: str,
        type: AttackMode | None = None,
        scale: float = Anim.DEFAULT_SCALE,
        speed: float = Anim.DEFAULT_SPEED_MS,
        sound: str | None = None,
    ) -> AnimationDescriptor:
        return cls(DescriptorKind.DIRECT_ASSET, path, type, scale, speed, sound)

    def with_type(self, mode: AttackMode) -> AnimationDescriptor:
        """Return this descriptor with ``type`` set, if it had none."""
        if self.type is not None:
            return self
        return replace(self, type=mode)

    def to_mapping(self) -> dict[str, Any]:
        """Serialize to the JSON object shape used by the override stores."""
        data: dict[str, Any] = {
            self.kind.value: self.ref,
            "scale": self.scale,
            "speed": self.speed,
        }
        if self.type is not None:
            data["type"] = self.type
        if self.sound:
            data["sound"] = self.sound
        return data


def descriptor_from_mapping(data: Any) -> AnimationDescriptor | None:
    """Parse a stored override entry.

    The entry names its source with one of the keys ``macro``, ``script`` or
    ``animation`` (checked in that order). Missing or invalid ``scale`` and
    ``speed`` fall back to the defaults.

    Returns:
        The descriptor, or ``None`` if the entry names no animation source.
    """
    if not isinstance(data, Mapping):
        return None

    kind: DescriptorKind | None = None
    ref: str | None = None
    for candidate in _SOURCE_PRIORITY:
        value = data.get(candidate.value)
        if isinstance(value, str) and value.strip():
            kind, ref = candidate, value.strip()
            break
    if kind is None or ref is None:
        return None

    mode = data.get("type")
    sound = data.get("sound")
    return AnimationDescriptor(
        kind=kind,
        ref=ref,
        type=mode if mode in _ATTACK_MODES else None,
        scale=_positive_number(data.get("scale"), Anim.DEFAULT_SCALE),
        speed=_positive_number(data.get("speed"), Anim.DEFAULT_SPEED_MS),
        sound=sound if isinstance(sound, str) and sound else None,
    )


def _positive_number(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    return float(value) if value > 0 else default
