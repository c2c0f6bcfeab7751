"""Hit/miss determination and the per-token playback throttle."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from strikefx.constants import AnimationConstants as Anim

if TYPE_CHECKING:
    from strikefx.host import Token
    from strikefx.types import Milliseconds, TokenId
    from strikefx.util.clock import Clock

logger = logging.getLogger(__name__)

# Defense attributes in the order they are tried: energy armor class first,
# kinetic armor class second.
DEFENSE_ATTRIBUTES: tuple[str, ...] = ("eac", "kac")


def target_defense(target: Token | None) -> float | None:
    """The defense value an attack against ``target`` has to meet."""
    if target is None or target.actor is None:
        return None
    attributes = target.actor.system.get("attributes")
    if not isinstance(attributes, Mapping):
        return None
    for name in DEFENSE_ATTRIBUTES:
        entry = attributes.get(name)
        value = entry.get("value") if isinstance(entry, Mapping) else None
        if _is_number(value):
            return float(value)
    return None


def determine_hit(roll_total: Any, target: Token | None) -> bool:
    """Whether an attack roll hit.

    A hit needs the roll to meet or beat the target's defense. Without a
    numeric roll or a known defense the attack counts as a hit.
    """
    if not _is_number(roll_total):
        return True
    defense = target_defense(target)
    if defense is None:
        return True
    return roll_total >= defense


def hit_from_flags(flags: Mapping[str, Any] | None) -> bool:
    """Hit result recorded on a chat message. Only an explicit False misses."""
    if not flags:
        return True
    return flags.get("rollSuccess") is not False


def should_animate_outcome(
    is_hit: bool, only_on_hit: bool, miss_animation: bool
) -> bool:
    """Apply the hit-only policy.

    With ``only_on_hit`` set a miss is suppressed unless ``miss_animation``
    asks for misses to be shown anyway.
    """
    if is_hit or not only_on_hit:
        return True
    return miss_animation


class ThrottleGate:
    """Drops animations that follow too quickly on one from the same token."""

    def __init__(
        self, clock: Clock, min_interval_ms: float = Anim.THROTTLE_MS
    ) -> None:
        self.clock = clock
        self.min_interval_ms = min_interval_ms
        self._last_anim_time: dict[TokenId, Milliseconds] = {}

    def allow(self, token_id: TokenId) -> bool:
        """Check the interval and, if allowed, record this playback."""
        last = self._last_anim_time.get(token_id)
        if last is not None and self.clock.elapsed_ms(last) < self.min_interval_ms:
            logger.debug(f"Throttled animation for token {token_id}")
            return False
        self._last_anim_time[token_id] = self.clock.now_ms()
        return True

    def reset(self) -> None:
        self._last_anim_time.clear()


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)
