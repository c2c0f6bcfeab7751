"""Tests for composing and playing animation sequences."""

from __future__ import annotations

import asyncio
import logging
import math
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from strikefx.descriptors import AnimationDescriptor
from strikefx.events import EventBus, NotificationEvent
from strikefx.loader import MacroRunner, ScriptLoader
from strikefx.playback import (
    PlaybackComposer,
    PlaybackRequest,
    calculate_miss_offset,
    final_scale,
    final_speed,
)
from strikefx.settings import AnimationSettings, MemorySettingsStore
from strikefx.util.rng import RNGProvider
from strikefx.weapons import WeaponInfo
from tests.helpers import (
    DummyMacro,
    DummyMacroRegistry,
    RecordingBackend,
    make_token,
)

SOURCE = make_token("src", x=0.0, y=0.0)
TARGET = make_token("dst", x=500.0, y=0.0)
RANGED = WeaponInfo(weapon_type="longA", action_type="rwak", item_name="Rifle")
MELEE = WeaponInfo(weapon_type="basicM", action_type="mwak", item_name="Knife")


def make_composer(
    backend: RecordingBackend | None = None,
    settings: dict[str, Any] | None = None,
    macros: DummyMacroRegistry | None = None,
    loader: ScriptLoader | None = None,
    bus: EventBus | None = None,
) -> PlaybackComposer:
    bus = bus if bus is not None else EventBus()
    return PlaybackComposer(
        backend if backend is not None else RecordingBackend(),
        AnimationSettings(MemorySettingsStore(settings)),
        loader if loader is not None else ScriptLoader(),
        MacroRunner(macros, bus),
        bus,
        RNGProvider(master_seed=7).get("effects.miss_offset"),
    )


def request(
    descriptor: AnimationDescriptor, info: WeaponInfo = RANGED, is_hit: bool = True
) -> PlaybackRequest:
    return PlaybackRequest(SOURCE, TARGET, descriptor, info, is_hit)


class TestMultipliers:
    def test_scale_multiplies_and_speed_divides(self) -> None:
        descriptor = AnimationDescriptor.asset("x", scale=0.5, speed=800)

        assert final_scale(descriptor, 2.0) == pytest.approx(1.0)
        assert final_speed(descriptor, 2.0) == pytest.approx(400.0)
        assert final_speed(descriptor, 0.25) == pytest.approx(3200.0)


class TestMissOffset:
    def test_offset_is_perpendicular_to_line_of_fire(self) -> None:
        rng = RNGProvider(master_seed=1).get("effects.miss_offset")

        for _ in range(20):
            dx, dy = calculate_miss_offset(SOURCE, TARGET, 100.0, rng)
            # Shooting along +x, so the offset is purely along y
            assert dx == pytest.approx(0.0, abs=1e-9)
            assert 50.0 <= abs(dy) <= 100.0

    def test_offset_length_scales_with_grid(self) -> None:
        rng = RNGProvider(master_seed=2).get("effects.miss_offset")
        source = make_token("a", x=100.0, y=100.0)
        target = make_token("b", x=400.0, y=500.0)

        for _ in range(20):
            dx, dy = calculate_miss_offset(source, target, 140.0, rng)
            assert 70.0 <= math.hypot(dx, dy) <= 140.0
            # Dot product with the line of fire is zero
            assert dx * 300.0 + dy * 400.0 == pytest.approx(0.0, abs=1e-6)

    def test_both_sides_occur(self) -> None:
        rng = RNGProvider(master_seed=3).get("effects.miss_offset")

        sides = {
            calculate_miss_offset(SOURCE, TARGET, 100.0, rng)[1] > 0
            for _ in range(50)
        }

        assert sides == {True, False}


class TestDirectAsset:
    def test_ranged_hit(self) -> None:
        backend = RecordingBackend()
        settings = {"animationScale": 2.0, "animationSpeed": 2.0}
        composer = make_composer(backend, settings)
        descriptor = AnimationDescriptor.asset("jb2a.bullet", "ranged", 0.5, 800)

        assert asyncio.run(composer.play(request(descriptor)))

        (seq,) = backend.played
        (effect,) = seq.effects
        assert effect.file == "jb2a.bullet"
        assert effect.anchor == "src"
        assert effect.stretch_to == "dst"
        assert effect.scale == pytest.approx(1.0)
        assert effect.speed == pytest.approx(400.0)
        assert effect.z_index == 10
        assert effect.opacity == 1.0
        assert not effect.missed
        assert effect.miss_offset is None

    def test_ranged_miss_lands_beside_target(self) -> None:
        backend = RecordingBackend()
        composer = make_composer(backend)
        descriptor = AnimationDescriptor.asset("jb2a.bullet", "ranged")

        asyncio.run(composer.play(request(descriptor, is_hit=False)))

        (effect,) = backend.played[0].effects
        assert effect.missed
        assert effect.opacity == pytest.approx(0.5)
        assert effect.miss_offset is not None
        assert 50.0 <= abs(effect.miss_offset[1]) <= 100.0

    def test_melee_hit_has_no_travel_time(self) -> None:
        backend = RecordingBackend()
        composer = make_composer(backend)
        descriptor = AnimationDescriptor.asset("jb2a.slash", "melee", speed=300)

        asyncio.run(composer.play(request(descriptor, MELEE)))

        (effect,) = backend.played[0].effects
        assert effect.speed is None
        assert not effect.random_rotation

    def test_melee_miss_glances_off(self) -> None:
        backend = RecordingBackend()
        composer = make_composer(backend)
        descriptor = AnimationDescriptor.asset("jb2a.slash", "melee")

        asyncio.run(composer.play(request(descriptor, MELEE, is_hit=False)))

        (effect,) = backend.played[0].effects
        assert effect.opacity == pytest.approx(0.4)
        assert effect.random_rotation
        assert not effect.missed
        assert effect.miss_offset is None

    def test_untyped_descriptor_uses_weapon_attack_mode(self) -> None:
        backend = RecordingBackend()
        composer = make_composer(backend)

        asyncio.run(composer.play(request(AnimationDescriptor.asset("x"), MELEE)))

        assert backend.played[0].effects[0].speed is None


class TestSound:
    @pytest.mark.parametrize(
        ("mode", "info", "delay"), [("melee", MELEE, 100), ("ranged", RANGED, 0)]
    )
    def test_sound_delay_depends_on_mode(
        self, mode: Any, info: WeaponInfo, delay: int
    ) -> None:
        backend = RecordingBackend()
        composer = make_composer(backend, {"soundVolume": 0.8})
        descriptor = AnimationDescriptor.asset("x", mode, sound="hit.ogg")

        asyncio.run(composer.play(request(descriptor, info)))

        (cue,) = backend.played[0].sounds
        assert cue.file == "hit.ogg"
        assert cue.volume == pytest.approx(0.8)
        assert cue.delay_ms == delay

    def test_no_sound_when_disabled(self) -> None:
        backend = RecordingBackend()
        composer = make_composer(backend, {"soundEnabled": False})
        descriptor = AnimationDescriptor.asset("x", "ranged", sound="hit.ogg")

        asyncio.run(composer.play(request(descriptor)))

        assert backend.played[0].sounds == []

    def test_no_sound_without_sound_file(self) -> None:
        backend = RecordingBackend()
        composer = make_composer(backend)

        asyncio.run(composer.play(request(AnimationDescriptor.asset("x", "ranged"))))

        assert backend.played[0].sounds == []


class TestScripts:
    def test_bundled_script_builds_sequence(self) -> None:
        backend = RecordingBackend()
        composer = make_composer(backend)
        descriptor = AnimationDescriptor.script("animations/laser.py", "ranged", 1, 800)

        assert asyncio.run(composer.play(request(descriptor, is_hit=False)))

        (effect,) = backend.played[0].effects
        assert effect.file == "jb2a.lasershot.red"
        assert effect.missed
        assert effect.miss_offset is not None

    def test_async_script_is_awaited(self, tmp_path: Path) -> None:
        (tmp_path / "pulse.py").write_text(
            "from strikefx.sequencer import VisualEffect\n"
            "async def animate(seq, ctx):\n"
            "    seq.effect(VisualEffect('pulse', ctx.source_token.id,"
            " ctx.target_token.id))\n"
        )
        backend = RecordingBackend()
        composer = make_composer(backend, loader=ScriptLoader(tmp_path))
        descriptor = AnimationDescriptor.script("pulse.py", "ranged", 1, 800)

        assert asyncio.run(composer.play(request(descriptor)))
        assert backend.played[0].effects[0].file == "pulse"

    def test_missing_script_plays_nothing(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        backend = RecordingBackend()
        composer = make_composer(backend, loader=ScriptLoader(tmp_path))
        descriptor = AnimationDescriptor.script("ghost.py", "ranged", 1, 800)

        with caplog.at_level(logging.WARNING):
            assert not asyncio.run(composer.play(request(descriptor)))

        assert backend.played == []
        assert "Animation script not found" in caplog.text

    def test_failing_script_is_reported(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / "bad.py").write_text(
            "def animate(seq, ctx):\n    raise RuntimeError('script blew up')\n"
        )
        bus = EventBus()
        notifications: list[NotificationEvent] = []
        bus.subscribe(NotificationEvent, notifications.append)
        backend = RecordingBackend()
        composer = make_composer(backend, loader=ScriptLoader(tmp_path), bus=bus)
        descriptor = AnimationDescriptor.script("bad.py", "ranged", 1, 800)

        with caplog.at_level(logging.ERROR):
            assert not asyncio.run(composer.play(request(descriptor)))

        assert backend.played == []
        assert "script blew up" in caplog.text
        assert len(notifications) == 1

    def test_script_adding_nothing_is_not_played(self, tmp_path: Path) -> None:
        (tmp_path / "empty.py").write_text("def animate(seq, ctx):\n    pass\n")
        backend = RecordingBackend()
        composer = make_composer(backend, loader=ScriptLoader(tmp_path))
        descriptor = AnimationDescriptor.script("empty.py", "ranged", 1, 800)

        assert not asyncio.run(composer.play(request(descriptor)))
        assert backend.played == []


class TestMacros:
    def test_macro_receives_final_values(self) -> None:
        macro = DummyMacro("m1", "Custom")
        composer = make_composer(
            settings={"animationScale": 1.5, "animationSpeed": 0.5},
            macros=DummyMacroRegistry([macro]),
        )
        descriptor = AnimationDescriptor.macro("m1", "ranged", 2.0, 600)

        assert asyncio.run(composer.play(request(descriptor, is_hit=False)))

        scope = macro.calls[0]
        assert scope["scale"] == pytest.approx(3.0)
        assert scope["speed"] == pytest.approx(1200.0)
        assert scope["is_hit"] is False
        assert scope["miss_offset"] is not None

    def test_macro_plays_its_own_sequence(self) -> None:
        backend = RecordingBackend()
        macro = DummyMacro("m1", "Custom", MagicMock(return_value=None))
        composer = make_composer(backend, macros=DummyMacroRegistry([macro]))

        asyncio.run(composer.play(request(AnimationDescriptor.macro("m1"))))

        # Nothing is played on the macro's behalf
        assert backend.played == []
        macro.body.assert_called_once()
