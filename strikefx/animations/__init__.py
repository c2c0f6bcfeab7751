"""Bundled animation scripts.

Each module here is loaded by path through ``strikefx.loader.ScriptLoader``
and exposes an ``animate(seq, ctx)`` entry point. The helpers below hold the
two choreographies every bundled script uses.
"""

from __future__ import annotations

from strikefx.constants import AnimationConstants as Anim
from strikefx.context import AnimationContext
from strikefx.sequencer import Sequence, VisualEffect
from strikefx.types import Opacity


def melee_strike(seq: Sequence, ctx: AnimationContext, file: str) -> VisualEffect:
    """Swing from the attacker onto the target; a miss glances off."""
    effect = seq.effect(
        VisualEffect(
            file=file,
            anchor=ctx.source_token.id,
            stretch_to=ctx.target_token.id,
            scale=ctx.scale,
        )
    )
    if not ctx.is_hit:
        effect.opacity = Opacity(Anim.MELEE_MISS_OPACITY)
        effect.random_rotation = True
    return effect


def ranged_shot(
    seq: Sequence,
    ctx: AnimationContext,
    file: str,
    miss_opacity: float = Anim.RANGED_MISS_OPACITY,
) -> VisualEffect:
    """Fire from the attacker at the target; a miss lands beside it."""
    effect = seq.effect(
        VisualEffect(
            file=file,
            anchor=ctx.source_token.id,
            stretch_to=ctx.target_token.id,
            scale=ctx.scale,
            speed=ctx.speed,
        )
    )
    if not ctx.is_hit:
        effect.opacity = Opacity(miss_opacity)
        effect.missed = True
        effect.miss_offset = ctx.miss_offset
    return effect
