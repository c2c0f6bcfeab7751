"""Green disintegration ray."""

from strikefx.animations import ranged_shot
from strikefx.context import AnimationContext
from strikefx.sequencer import Sequence


def animate(seq: Sequence, ctx: AnimationContext) -> None:
    ranged_shot(seq, ctx, "jb2a.disintegrate.green")
