"""Extraction of weapon metadata from host item records.

Item records come straight from the host and have changed shape across game
system versions. ``extract_weapon_info`` flattens whatever it is given into a
``WeaponInfo`` and never raises, so resolution always has something to work
with, even if every field is empty.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from strikefx.types import AttackMode

logger = logging.getLogger(__name__)

UNKNOWN_ITEM_NAME = "Unknown"

# Action types whose attacks are made in melee
MELEE_ACTION_TYPES = frozenset({"mwak", "msak"})
# Weapon types that are always swung rather than fired
MELEE_WEAPON_TYPES = frozenset({"basicM", "advancedM"})


@dataclass(frozen=True)
class WeaponInfo:
    """Canonical weapon metadata used for animation lookup.

    Attributes:
        weapon_category: Energy/special category, e.g. "laser", "plasma".
        weapon_type: Physical weapon class, e.g. "basicM", "longA", "heavy".
        action_type: Attack action, e.g. "rwak", "mwak", "rsak", "msak".
        primary_damage_type: Damage type of the first damage part.
        item_id: Stable item identifier, used for per-item overrides.
        item_name: Display name.
    """

    weapon_category: str | None = None
    weapon_type: str | None = None
    action_type: str | None = None
    primary_damage_type: str | None = None
    item_id: str | None = None
    item_name: str = UNKNOWN_ITEM_NAME


def extract_weapon_info(item: Any) -> WeaponInfo:
    """Build a ``WeaponInfo`` from a host item record.

    Args:
        item: The item record (a mapping with ``name``, ``uuid``/``id`` and a
            ``system`` sub-mapping), or ``None``.

    Returns:
        A fully populated ``WeaponInfo``. Fields the record does not provide
        are ``None`` and a missing name becomes ``"Unknown"``.
    """
    if not isinstance(item, Mapping):
        return WeaponInfo()

    name = _string_or_none(item.get("name")) or UNKNOWN_ITEM_NAME
    system = item.get("system")
    if not isinstance(system, Mapping):
        return WeaponInfo(item_name=name)

    return WeaponInfo(
        weapon_category=_string_or_none(system.get("weaponCategory")),
        weapon_type=_string_or_none(system.get("weaponType")),
        action_type=_string_or_none(system.get("actionType")),
        primary_damage_type=_primary_damage_type(system.get("damage")),
        item_id=item_identity(item),
        item_name=name,
    )


def item_identity(item: Any) -> str | None:
    """The most stable identifier an item record carries (uuid, then id)."""
    if not isinstance(item, Mapping):
        return None
    return _string_or_none(item.get("uuid")) or _string_or_none(item.get("id"))


def get_attack_mode(info: WeaponInfo) -> AttackMode:
    """Decide whether a weapon attacks in melee or at range."""
    if info.action_type in MELEE_ACTION_TYPES:
        return "melee"
    if info.weapon_type in MELEE_WEAPON_TYPES:
        return "melee"
    return "ranged"


def _primary_damage_type(damage: Any) -> str | None:
    if not isinstance(damage, Mapping):
        return None
    parts = damage.get("parts")
    if not isinstance(parts, Sequence) or isinstance(parts, str) or not parts:
        return None
    return _damage_type_of_part(parts[0])


def _damage_type_of_part(part: Any) -> str | None:
    # Three encodings have been used for a damage part over time:
    #   ["1d6", "fire"]                      formula/type pair
    #   {"formula": "1d6", "types": {...}}   flag map, first true flag wins
    #   "fire"                               bare type string
    if isinstance(part, str):
        return part
    if isinstance(part, Mapping):
        types = part.get("types")
        if not isinstance(types, Mapping):
            return None
        for damage_type, active in types.items():
            if active is True:
                return _string_or_none(damage_type)
        return None
    if isinstance(part, Sequence) and len(part) >= 2:
        return _string_or_none(part[1])
    return None


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None
