from __future__ import annotations

from pathlib import Path

import pytest

from strikefx.animation_map import (
    ASSET_PACK_FALLBACKS,
    CATEGORY_ANIMATIONS,
    DEFAULT_TABLES,
    WEAPON_TYPE_ANIMATIONS,
)
from strikefx.descriptors import DescriptorKind
from strikefx.loader import PACKAGE_ROOT, ScriptLoader


def test_every_table_entry_is_a_typed_script() -> None:
    for table in (
        DEFAULT_TABLES.categories,
        DEFAULT_TABLES.weapon_types,
        DEFAULT_TABLES.damage_types,
    ):
        for descriptor in table.values():
            assert descriptor.kind is DescriptorKind.SCRIPT
            assert descriptor.type in ("melee", "ranged")


@pytest.mark.parametrize("path", sorted(DEFAULT_TABLES.script_paths()))
def test_every_referenced_script_is_bundled_and_loadable(path: str) -> None:
    assert (PACKAGE_ROOT / path).is_file()
    assert ScriptLoader().load(path) is not None


def test_every_category_and_weapon_type_has_an_asset_pack_entry() -> None:
    for key in (*CATEGORY_ANIMATIONS, *WEAPON_TYPE_ANIMATIONS):
        assert key in ASSET_PACK_FALLBACKS


def test_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        table = CATEGORY_ANIMATIONS
        table["laser"] = table["plasma"]  # type: ignore[index]


def test_script_paths_are_relative() -> None:
    assert all(not Path(p).is_absolute() for p in DEFAULT_TABLES.script_paths())
