from __future__ import annotations

from typing import Literal, NewType

# =============================================================================
# HOST IDENTIFIERS
# =============================================================================

# Identifiers handed to us by the host platform. They are opaque strings and
# are only ever compared for equality.
ActorId = NewType("ActorId", str)
TokenId = NewType("TokenId", str)

# =============================================================================
# SPATIAL TYPES
# =============================================================================

# Pixel coordinates on the scene canvas
type PixelCoord = int | float  # Example: px_x=123.5
type PixelPos = tuple[PixelCoord, PixelCoord]  # Example: (123.5, 456.7)

# Offset applied to an effect endpoint, in pixels
type PixelOffset = tuple[float, float]

# =============================================================================
# TIME-RELATED TYPES
# =============================================================================

# Wall-clock milliseconds from a monotonic source. Only differences matter.
Milliseconds = NewType("Milliseconds", float)

# =============================================================================
# ANIMATION TYPES
# =============================================================================

# How an effect travels between attacker and target.
type AttackMode = Literal["melee", "ranged"]

# Represents the opacity level for an effect, from 0.0 (invisible) to 1.0.
Opacity = NewType("Opacity", float)

# =============================================================================
# UTILITY TYPES
# =============================================================================

# Generic min/max float range (e.g., setting bounds)
type FloatRange = tuple[float, float]

# Random seed for deterministic effect variation.
type RandomSeed = int | str | None
