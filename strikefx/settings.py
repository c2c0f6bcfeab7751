"""Client settings: defaults, typed access and the override stores.

The host persists settings as a flat key/value store. ``AnimationSettings``
reads it with typed, range-checked accessors; a value of the wrong type falls
back to the default and numbers are clamped into their range.

The two override stores (``customMappings`` and ``itemOverrides``) are
persisted as JSON strings. Reading them never raises: unparsable JSON is
logged and treated as empty, and entries that name no animation are skipped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, NamedTuple, Protocol

from strikefx.constants import AnimationConstants as Anim
from strikefx.descriptors import AnimationDescriptor, descriptor_from_mapping
from strikefx.types import FloatRange
from strikefx.weapons import MELEE_ACTION_TYPES, extract_weapon_info

logger = logging.getLogger(__name__)


class SettingsStore(Protocol):
    """Key/value persistence provided by the host."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemorySettingsStore:
    """Dict-backed store for tests and hosts without persistence."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def get(self, key: str) -> Any:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value


class SettingSpec(NamedTuple):
    key: str
    default: Any
    value_range: FloatRange | None = None


ENABLED = SettingSpec("enabled", True)
ONLY_ON_HIT = SettingSpec("onlyOnHit", False)
MISS_ANIMATION = SettingSpec("missAnimation", True)
ANIMATION_SCALE = SettingSpec("animationScale", 1.0, (0.1, 3.0))
ANIMATION_SPEED = SettingSpec("animationSpeed", 1.0, (0.25, 3.0))
SOUND_ENABLED = SettingSpec("soundEnabled", True)
SOUND_VOLUME = SettingSpec("soundVolume", 0.5, (0.0, 1.0))
DEBUG_MODE = SettingSpec("debugMode", False)
CUSTOM_MAPPINGS = SettingSpec("customMappings", "{}")
ITEM_OVERRIDES = SettingSpec("itemOverrides", "{}")

SETTING_SPECS: tuple[SettingSpec, ...] = (
    ENABLED,
    ONLY_ON_HIT,
    MISS_ANIMATION,
    ANIMATION_SCALE,
    ANIMATION_SPEED,
    SOUND_ENABLED,
    SOUND_VOLUME,
    DEBUG_MODE,
    CUSTOM_MAPPINGS,
    ITEM_OVERRIDES,
)


class AnimationSettings:
    """Typed view over a ``SettingsStore``."""

    def __init__(self, store: SettingsStore | None = None) -> None:
        self.store: SettingsStore = (
            store if store is not None else MemorySettingsStore()
        )

    # --- Scalars ---

    @property
    def enabled(self) -> bool:
        return self._bool(ENABLED)

    @property
    def only_on_hit(self) -> bool:
        return self._bool(ONLY_ON_HIT)

    @property
    def miss_animation(self) -> bool:
        return self._bool(MISS_ANIMATION)

    @property
    def animation_scale(self) -> float:
        return self._number(ANIMATION_SCALE)

    @property
    def animation_speed(self) -> float:
        return self._number(ANIMATION_SPEED)

    @property
    def sound_enabled(self) -> bool:
        return self._bool(SOUND_ENABLED)

    @property
    def sound_volume(self) -> float:
        return self._number(SOUND_VOLUME)

    @property
    def debug_mode(self) -> bool:
        return self._bool(DEBUG_MODE)

    # --- Override stores ---

    def custom_mappings(self) -> dict[str, AnimationDescriptor]:
        return _parse_descriptors(self._raw_json(CUSTOM_MAPPINGS))

    def item_overrides(self) -> dict[str, AnimationDescriptor]:
        return _parse_descriptors(self._raw_json(ITEM_OVERRIDES))

    def raw_custom_mappings(self) -> dict[str, Any]:
        """The stored mapping entries as plain JSON objects."""
        return self._raw_json(CUSTOM_MAPPINGS)

    def raw_item_overrides(self) -> dict[str, Any]:
        return self._raw_json(ITEM_OVERRIDES)

    # --- Internals ---

    def _bool(self, spec: SettingSpec) -> bool:
        value = self.store.get(spec.key)
        return value if isinstance(value, bool) else spec.default

    def _number(self, spec: SettingSpec) -> float:
        value = self.store.get(spec.key)
        if isinstance(value, bool) or not isinstance(value, int | float):
            return spec.default
        if spec.value_range is not None:
            low, high = spec.value_range
            return max(low, min(high, float(value)))
        return float(value)

    def _raw_json(self, spec: SettingSpec) -> dict[str, Any]:
        raw = self.store.get(spec.key)
        if raw is None or raw == "":
            return {}
        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unparsable '{spec.key}' setting: {e}")
            return {}
        if not isinstance(data, Mapping):
            logger.warning(f"Ignoring '{spec.key}' setting: not a JSON object")
            return {}
        return dict(data)


def _parse_descriptors(entries: Mapping[str, Any]) -> dict[str, AnimationDescriptor]:
    descriptors: dict[str, AnimationDescriptor] = {}
    for key, entry in entries.items():
        descriptor = descriptor_from_mapping(entry)
        if descriptor is None:
            logger.debug(f"Skipping override '{key}': names no animation")
            continue
        descriptors[key] = descriptor
    return descriptors


# =============================================================================
# OVERRIDE EDITING
# =============================================================================


def save_item_override(
    settings: AnimationSettings,
    item: Mapping[str, Any],
    macro: str,
    scale: float = Anim.DEFAULT_SCALE,
    speed: float = Anim.DEFAULT_SPEED_MS,
) -> bool:
    """Point a single item at a user macro.

    An empty ``macro`` clears the item's override instead.

    Returns:
        True if an override was saved, False if it was cleared.
    """
    info = extract_weapon_info(item)
    if not info.item_id:
        raise ValueError(f"Item '{info.item_name}' has no id to key an override by")

    macro = macro.strip()
    if not macro:
        clear_item_override(settings, info.item_id)
        return False

    overrides = settings.raw_item_overrides()
    overrides[info.item_id] = {
        "macro": macro,
        "scale": scale,
        "speed": speed,
        "type": "melee" if info.action_type in MELEE_ACTION_TYPES else "ranged",
        "itemName": info.item_name,
    }
    settings.store.set(ITEM_OVERRIDES.key, json.dumps(overrides))
    logger.info(f"Animation override saved for {info.item_name}")
    return True


def clear_item_override(settings: AnimationSettings, item_id: str) -> None:
    overrides = settings.raw_item_overrides()
    if overrides.pop(item_id, None) is None:
        return
    settings.store.set(ITEM_OVERRIDES.key, json.dumps(overrides))
    logger.info(f"Animation override cleared for {item_id}")


def save_custom_mapping(
    settings: AnimationSettings,
    key: str,
    animation: str,
    sound: str = "",
    scale: float = Anim.DEFAULT_SCALE,
    speed: float = Anim.DEFAULT_SPEED_MS,
) -> None:
    """Map a category (or ``type_<weaponType>``) to an asset path.

    An empty ``animation`` removes the mapping.
    """
    mappings = settings.raw_custom_mappings()
    if animation.strip():
        mappings[key] = {
            "animation": animation.strip(),
            "sound": sound,
            "scale": scale,
            "speed": speed,
        }
    else:
        mappings.pop(key, None)
    settings.store.set(CUSTOM_MAPPINGS.key, json.dumps(mappings))


def reset_custom_mappings(settings: AnimationSettings) -> None:
    settings.store.set(CUSTOM_MAPPINGS.key, CUSTOM_MAPPINGS.default)
    logger.info("Custom animation mappings reset to defaults")
