"""Trailing strike for advanced melee weapons."""

from strikefx.animations import melee_strike
from strikefx.context import AnimationContext
from strikefx.sequencer import Sequence


def animate(seq: Sequence, ctx: AnimationContext) -> None:
    melee_strike(seq, ctx, "jb2a.melee_attack.01.trail.04.blue")
