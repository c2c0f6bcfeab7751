"""Golden slash of a solarian weapon crystal."""

from strikefx.animations import melee_strike
from strikefx.context import AnimationContext
from strikefx.sequencer import Sequence


def animate(seq: Sequence, ctx: AnimationContext) -> None:
    melee_strike(seq, ctx, "jb2a.melee_generic.slash.01.yellow")
