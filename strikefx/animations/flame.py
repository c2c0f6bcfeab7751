"""Fire bolt. Misses burn out a little fainter."""

from strikefx.animations import ranged_shot
from strikefx.context import AnimationContext
from strikefx.sequencer import Sequence


def animate(seq: Sequence, ctx: AnimationContext) -> None:
    ranged_shot(seq, ctx, "jb2a.fire_bolt.orange", miss_opacity=0.4)
