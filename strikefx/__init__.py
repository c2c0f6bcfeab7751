"""Weapon attack animations for tabletop sessions.

Listens for attack events, works out which weapon was used, and plays a
matching visual/audio effect from attacker to target.
"""

__version__ = "0.3.0"
