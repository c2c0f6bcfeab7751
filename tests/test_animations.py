"""Tests for the bundled animation producers."""

from __future__ import annotations

import pytest

from strikefx.animations import melee_strike, ranged_shot
from strikefx.context import AnimationContext
from strikefx.loader import ScriptLoader
from strikefx.sequencer import Sequence
from strikefx.types import AttackMode
from strikefx.weapons import WeaponInfo
from tests.helpers import RecordingBackend, make_token

MELEE_SCRIPTS = [
    "animations/basic_melee.py",
    "animations/advanced_melee.py",
    "animations/solarian.py",
]
FAINT_MISS_SCRIPTS = [
    "animations/flame.py",
    "animations/shock.py",
    "animations/sonic.py",
]


def make_context(
    is_hit: bool = True, mode: AttackMode = "ranged", scale: float = 1.0
) -> AnimationContext:
    return AnimationContext(
        source_token=make_token("src"),
        target_token=make_token("dst", x=400.0),
        is_hit=is_hit,
        scale=scale,
        speed=640.0,
        attack_mode=mode,
        weapon_info=WeaponInfo(),
        sound_enabled=True,
        sound_volume=0.5,
        miss_offset=None if is_hit or mode == "melee" else (0.0, 75.0),
    )


def run_script(path: str, ctx: AnimationContext) -> Sequence:
    producer = ScriptLoader().load(path)
    assert producer is not None
    seq = Sequence(RecordingBackend())
    producer(seq, ctx)
    return seq


class TestHelpers:
    def test_melee_strike_hit(self) -> None:
        seq = Sequence(RecordingBackend())

        effect = melee_strike(seq, make_context(mode="melee", scale=1.2), "slash")

        assert seq.effects == [effect]
        assert effect.scale == 1.2
        assert effect.speed is None
        assert effect.opacity == 1.0

    def test_ranged_shot_miss(self) -> None:
        seq = Sequence(RecordingBackend())

        effect = ranged_shot(seq, make_context(is_hit=False), "bolt")

        assert effect.speed == 640.0
        assert effect.missed
        assert effect.opacity == 0.5
        assert effect.miss_offset == (0.0, 75.0)


@pytest.mark.parametrize("path", MELEE_SCRIPTS)
def test_melee_scripts_glance_on_miss(path: str) -> None:
    seq = run_script(path, make_context(is_hit=False, mode="melee"))

    (effect,) = seq.effects
    assert effect.random_rotation
    assert effect.opacity == 0.4
    assert not effect.missed


@pytest.mark.parametrize("path", FAINT_MISS_SCRIPTS)
def test_some_ranged_misses_are_fainter(path: str) -> None:
    seq = run_script(path, make_context(is_hit=False))

    (effect,) = seq.effects
    assert effect.missed
    assert effect.opacity == 0.4


def test_ranged_script_hit_travels_at_context_speed() -> None:
    seq = run_script("animations/sniper.py", make_context())

    (effect,) = seq.effects
    assert effect.file == "jb2a.bullet.Snipe.red"
    assert effect.speed == 640.0
    assert not effect.missed
