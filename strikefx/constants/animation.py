"""Constants for attack animation timing and presentation."""


class AnimationConstants:
    """Constants for attack animation timing and presentation."""

    # --- Event intake ---
    # Minimum gap between two animations from the same attacking token.
    THROTTLE_MS = 200
    # A fallback chat event this soon after a primary attack event for the
    # same actor/item is treated as the same physical attack.
    DEDUP_WINDOW_MS = 2000

    # --- Descriptor defaults ---
    DEFAULT_SCALE = 1.0
    DEFAULT_SPEED_MS = 800  # Projectile travel time

    # Speeds for descriptors synthesized from the community asset pack
    ASSET_PACK_MELEE_SPEED_MS = 300
    ASSET_PACK_RANGED_SPEED_MS = 800

    # --- Composition ---
    EFFECT_Z_INDEX = 10
    MELEE_MISS_OPACITY = 0.4
    RANGED_MISS_OPACITY = 0.5

    # Sound lands on the impact for melee, with the shot for ranged
    MELEE_SOUND_DELAY_MS = 100
    RANGED_SOUND_DELAY_MS = 0

    # Miss displacement, in grid cells, perpendicular to the line of fire
    MISS_OFFSET_MIN_CELLS = 0.5
    MISS_OFFSET_MAX_CELLS = 1.0

    # Used when the host cannot report its grid size
    DEFAULT_GRID_SIZE = 100

    # --- Defaults for manual playback ---
    MANUAL_SOUND_VOLUME = 0.5
