from .animation import AnimationConstants

__all__ = ["AnimationConstants"]
