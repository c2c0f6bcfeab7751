"""Default mapping from weapon properties to animation scripts.

Three tables map a weapon's category, physical type and damage type to a
bundled animation script. A fourth maps the same names to asset ids from the
community asset pack, used only when the pack is installed and no script
matched. See ``strikefx.resolver`` for the order the tables are consulted in.

Script paths are relative to the package root, e.g. ``animations/laser.py``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from strikefx.descriptors import AnimationDescriptor

_script = AnimationDescriptor.script

# Sentinel category the game system gives to weapons with no special category.
UNCATEGORIZED = "uncategorized"

# Module ids under which the community asset pack may be installed.
ASSET_PACK_MODULE_IDS: tuple[str, ...] = ("jb2a_patreon", "JB2A_DnD5e")

# Keyed by the item's weaponCategory (energy/special type of ranged weapons).
CATEGORY_ANIMATIONS: Mapping[str, AnimationDescriptor] = MappingProxyType(
    {
        "laser": _script("animations/laser.py", "ranged", 1.0, 800),
        "plasma": _script("animations/plasma.py", "ranged", 1.0, 1000),
        "projectile": _script("animations/projectile.py", "ranged", 0.6, 500),
        "flame": _script("animations/flame.py", "ranged", 1.2, 900),
        "cryo": _script("animations/cryo.py", "ranged", 1.0, 900),
        "shock": _script("animations/shock.py", "ranged", 1.0, 400),
        "sonic": _script("animations/sonic.py", "ranged", 1.2, 700),
        "disintegrator": _script("animations/disintegrator.py", "ranged", 1.0, 600),
        "disruption": _script("animations/disruption.py", "ranged", 1.0, 800),
        UNCATEGORIZED: _script("animations/generic.py", "ranged", 0.8, 800),
    }
)

# Keyed by the item's weaponType (physical weapon class).
# This is the main table for melee weapons.
WEAPON_TYPE_ANIMATIONS: Mapping[str, AnimationDescriptor] = MappingProxyType(
    {
        # Melee
        "basicM": _script("animations/basic_melee.py", "melee", 1.0, 300),
        "advancedM": _script("animations/advanced_melee.py", "melee", 1.2, 300),
        "solarian": _script("animations/solarian.py", "melee", 1.2, 400),
        # Ranged
        "smallA": _script("animations/small_arms.py", "ranged", 0.5, 500),
        "longA": _script("animations/longarms.py", "ranged", 0.7, 400),
        "heavy": _script("animations/heavy.py", "ranged", 1.0, 600),
        "sniper": _script("animations/sniper.py", "ranged", 0.5, 300),
        "grenade": _script("animations/grenade.py", "ranged", 0.8, 1200),
        "special": _script("animations/generic.py", "ranged", 0.8, 800),
    }
)

# Keyed by the type of the first damage part. Last resort before the asset pack.
DAMAGE_TYPE_ANIMATIONS: Mapping[str, AnimationDescriptor] = MappingProxyType(
    {
        "fire": _script("animations/flame.py", "ranged", 1.0, 900),
        "cold": _script("animations/cryo.py", "ranged", 1.0, 900),
        "electricity": _script("animations/shock.py", "ranged", 1.0, 400),
        "acid": _script("animations/generic.py", "ranged", 0.8, 1000),
        "sonic": _script("animations/sonic.py", "ranged", 1.2, 700),
        "bludgeoning": _script("animations/basic_melee.py", "melee", 1.0, 300),
        "piercing": _script("animations/basic_melee.py", "melee", 0.8, 300),
        "slashing": _script("animations/basic_melee.py", "melee", 1.0, 300),
    }
)

# Asset-pack database ids, keyed by category, weapon type or damage type.
ASSET_PACK_FALLBACKS: Mapping[str, str] = MappingProxyType(
    {
        # Categories
        "laser": "jb2a.laser_beam.01.red",
        "plasma": "jb2a.energy_beam.normal.bluepink",
        "projectile": "jb2a.bullet.01.orange",
        "flame": "jb2a.fire_bolt.orange",
        "cryo": "jb2a.ray_of_frost.blue",
        "shock": "jb2a.chain_lightning.primary.blue",
        "sonic": "jb2a.thunderwave.center.blue",
        "disintegrator": "jb2a.disintegrate.green",
        "disruption": "jb2a.eldritch_blast.purple",
        UNCATEGORIZED: "jb2a.magic_missile.purple",
        # Weapon types
        "basicM": "jb2a.melee_generic.slash.01.orange",
        "advancedM": "jb2a.melee_generic.slash.02.orange",
        "smallA": "jb2a.bullet.01.orange",
        "longA": "jb2a.bullet.02.orange",
        "heavy": "jb2a.bullet.02.orange",
        "sniper": "jb2a.bullet.01.orange",
        "grenade": "jb2a.throwable.throw.boulder.01",
        "special": "jb2a.magic_missile.purple",
        "solarian": "jb2a.melee_generic.slash.01.yellow",
        # Damage types ("sonic" is already taken by the category above)
        "fire": "jb2a.fire_bolt.orange",
        "cold": "jb2a.ray_of_frost.blue",
        "electricity": "jb2a.chain_lightning.primary.blue",
        "acid": "jb2a.magic_missile.green",
        "bludgeoning": "jb2a.melee_generic.slash.01.orange",
        "piercing": "jb2a.melee_generic.slash.01.orange",
        "slashing": "jb2a.melee_generic.slash.01.orange",
    }
)


@dataclass(frozen=True)
class MappingTables:
    """The set of lookup tables the resolver consults."""

    categories: Mapping[str, AnimationDescriptor] = field(
        default_factory=lambda: CATEGORY_ANIMATIONS
    )
    weapon_types: Mapping[str, AnimationDescriptor] = field(
        default_factory=lambda: WEAPON_TYPE_ANIMATIONS
    )
    damage_types: Mapping[str, AnimationDescriptor] = field(
        default_factory=lambda: DAMAGE_TYPE_ANIMATIONS
    )
    asset_pack: Mapping[str, str] = field(default_factory=lambda: ASSET_PACK_FALLBACKS)

    def script_paths(self) -> set[str]:
        """Every script path referenced by the descriptor tables."""
        tables = (self.categories, self.weapon_types, self.damage_types)
        return {desc.ref for table in tables for desc in table.values()}


DEFAULT_TABLES = MappingTables()
