"""Resolution of weapon metadata to an animation descriptor.

The lookup is an ordered chain; the first tier that produces a descriptor
wins and later tiers are never consulted or merged in:

    1.  Per-item override                 keyed by item id
    2.  Custom mapping                    keyed by category, then "type_<weaponType>"
    3.  Default category script           skipped for "uncategorized"
    4.  Default weapon-type script        main tier for melee weapons
    4b. "uncategorized" category script   only when 3 was skipped and 4 missed
    5.  Damage-type script
    6.  Community asset-pack fallback     only when the pack is active
    7.  Nothing (None)

All lookups are exact, case-sensitive dictionary lookups. ``None`` is a
normal result meaning "nothing to play".
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import NamedTuple

from strikefx.animation_map import DEFAULT_TABLES, UNCATEGORIZED, MappingTables
from strikefx.constants import AnimationConstants as Anim
from strikefx.descriptors import AnimationDescriptor, DescriptorKind
from strikefx.weapons import WeaponInfo, get_attack_mode

logger = logging.getLogger(__name__)

# Custom mapping keys for weapon types carry this prefix so that they cannot
# collide with category keys.
WEAPON_TYPE_KEY_PREFIX = "type_"


class ResolutionTier(Enum):
    """The tier of the chain a descriptor was found in."""

    ITEM_OVERRIDE = "1"
    CUSTOM_MAPPING = "2"
    CATEGORY = "3"
    WEAPON_TYPE = "4"
    UNCATEGORIZED = "4b"
    DAMAGE_TYPE = "5"
    ASSET_PACK = "6"


class Resolution(NamedTuple):
    descriptor: AnimationDescriptor
    tier: ResolutionTier


def weapon_type_key(weapon_type: str) -> str:
    """Custom mapping key for a weapon type."""
    return f"{WEAPON_TYPE_KEY_PREFIX}{weapon_type}"


def resolve_animation(
    info: WeaponInfo,
    custom_mappings: Mapping[str, AnimationDescriptor],
    item_overrides: Mapping[str, AnimationDescriptor],
    asset_pack_available: bool,
    tables: MappingTables = DEFAULT_TABLES,
) -> AnimationDescriptor | None:
    """Find the descriptor to play for a weapon, or ``None``.

    Args:
        info: Normalized weapon metadata.
        custom_mappings: User mappings keyed by category or ``type_<weaponType>``.
        item_overrides: User overrides keyed by item id.
        asset_pack_available: Whether the community asset pack is active.
        tables: Built-in lookup tables.

    Returns:
        The first matching descriptor, with its attack mode filled in.
    """
    resolution = resolve_tier(
        info, custom_mappings, item_overrides, asset_pack_available, tables
    )
    return resolution.descriptor if resolution is not None else None


def resolve_tier(
    info: WeaponInfo,
    custom_mappings: Mapping[str, AnimationDescriptor],
    item_overrides: Mapping[str, AnimationDescriptor],
    asset_pack_available: bool,
    tables: MappingTables = DEFAULT_TABLES,
) -> Resolution | None:
    """Like ``resolve_animation`` but also reports which tier matched."""
    logger.debug(f"Resolving animation for: {info.item_name} {info}")
    mode = get_attack_mode(info)

    # 1. Per-item override
    if info.item_id and info.item_id in item_overrides:
        logger.debug(f"-> Using per-item override for {info.item_id}")
        return Resolution(
            item_overrides[info.item_id].with_type(mode), ResolutionTier.ITEM_OVERRIDE
        )

    # 2. Custom mapping, category first, then the weapon type entry
    if info.weapon_category and info.weapon_category in custom_mappings:
        logger.debug(f"-> Using custom mapping for category: {info.weapon_category}")
        return Resolution(
            custom_mappings[info.weapon_category].with_type(mode),
            ResolutionTier.CUSTOM_MAPPING,
        )
    if info.weapon_type and weapon_type_key(info.weapon_type) in custom_mappings:
        logger.debug(f"-> Using custom mapping for weapon type: {info.weapon_type}")
        return Resolution(
            custom_mappings[weapon_type_key(info.weapon_type)].with_type(mode),
            ResolutionTier.CUSTOM_MAPPING,
        )

    # 3. Default category script. "uncategorized" is held back so that a
    # generic melee item (basicM, uncategorized) reaches the weapon type tier.
    if (
        info.weapon_category
        and info.weapon_category != UNCATEGORIZED
        and info.weapon_category in tables.categories
    ):
        logger.debug(f"-> Using default category script: {info.weapon_category}")
        return Resolution(
            tables.categories[info.weapon_category], ResolutionTier.CATEGORY
        )

    # 4. Default weapon type script
    if info.weapon_type and info.weapon_type in tables.weapon_types:
        logger.debug(f"-> Using weapon type script: {info.weapon_type}")
        return Resolution(
            tables.weapon_types[info.weapon_type], ResolutionTier.WEAPON_TYPE
        )

    # 4b. The held-back "uncategorized" entry
    if info.weapon_category == UNCATEGORIZED and UNCATEGORIZED in tables.categories:
        logger.debug("-> Using uncategorized fallback script")
        return Resolution(
            tables.categories[UNCATEGORIZED], ResolutionTier.UNCATEGORIZED
        )

    # 5. Damage type script
    if info.primary_damage_type and info.primary_damage_type in tables.damage_types:
        logger.debug(f"-> Using damage type script: {info.primary_damage_type}")
        return Resolution(
            tables.damage_types[info.primary_damage_type], ResolutionTier.DAMAGE_TYPE
        )

    # 6. Community asset pack
    if asset_pack_available:
        descriptor = _asset_pack_descriptor(info, tables)
        if descriptor is not None:
            logger.debug(f"-> Using asset pack fallback: {descriptor.ref}")
            return Resolution(descriptor, ResolutionTier.ASSET_PACK)

    # 7. Nothing to play
    logger.debug(f"-> No animation found for: {info.item_name}")
    return None


def _asset_pack_descriptor(
    info: WeaponInfo, tables: MappingTables
) -> AnimationDescriptor | None:
    # Only the first field that is set is looked up; a category with no
    # asset entry does not fall back to the weapon type.
    key = next(
        (
            value
            for value in (
                info.weapon_category,
                info.weapon_type,
                info.primary_damage_type,
            )
            if value is not None
        ),
        None,
    )
    asset_id = tables.asset_pack.get(key) if key else None
    if not asset_id:
        return None

    mode = get_attack_mode(info)
    speed = (
        Anim.ASSET_PACK_MELEE_SPEED_MS
        if mode == "melee"
        else Anim.ASSET_PACK_RANGED_SPEED_MS
    )
    return AnimationDescriptor(
        kind=DescriptorKind.DIRECT_ASSET,
        ref=asset_id,
        type=mode,
        scale=1.0,
        speed=speed,
        from_asset_pack=True,
    )
