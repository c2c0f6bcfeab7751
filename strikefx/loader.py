"""Loading of script descriptors and execution of macro descriptors.

Script modules are imported straight from their file path and cached by that
path for the lifetime of the engine. A failed import is cached as ``None`` so
that a broken script is not retried on every attack; ``clear_cache()`` forces
a reload after the file has been fixed.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from strikefx.events import EventBus, NotificationEvent, NotificationLevel
from strikefx.util.caching import ResourceCache

if TYPE_CHECKING:
    from collections.abc import Callable

    from strikefx.context import AnimationContext, AnimationProducer
    from strikefx.host import Macro, MacroRegistry
    from strikefx.sequencer import Sequence

logger = logging.getLogger(__name__)

# Scripts are resolved relative to the package directory.
PACKAGE_ROOT = Path(__file__).resolve().parent

# Names tried, in order, for a script's entry point.
ENTRY_POINTS: tuple[str, ...] = ("animate", "execute")


class ScriptLoader:
    """Imports animation scripts by path and caches the entry point."""

    def __init__(self, root: Path | str = PACKAGE_ROOT) -> None:
        self.root = Path(root)
        self._cache: ResourceCache[str, AnimationProducer | None] = ResourceCache(
            "AnimationScripts", max_size=None
        )

    def normalize(self, path: str) -> str:
        """Absolute form of ``path``, which is taken relative to the root."""
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        return str(candidate.resolve())

    def load(self, path: str) -> AnimationProducer | None:
        """Return the script's producer, or ``None`` if it cannot be loaded."""
        key = self.normalize(path)
        if key in self._cache:
            return self._cache.get(key)

        producer = self._import(key)
        self._cache.store(key, producer)
        return producer

    def clear_cache(self) -> None:
        logger.debug(f"Clearing {self._cache!r}")
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def _import(self, path: str) -> AnimationProducer | None:
        file = Path(path)
        if not file.is_file():
            logger.debug(f"Animation script not found: {path}")
            return None

        module_name = f"strikefx_script_{file.stem}"
        spec = importlib.util.spec_from_file_location(module_name, file)
        if spec is None or spec.loader is None:
            logger.debug(f"Cannot build an import spec for {path}")
            return None

        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            logger.debug(f"Failed to load animation script {path}: {e}")
            return None

        for name in ENTRY_POINTS:
            entry = getattr(module, name, None)
            if callable(entry):
                logger.debug(f"Loaded animation script {path} ({name})")
                return entry

        logger.debug(f"Animation script {path} has no animate() or execute()")
        return None


class MacroRunner:
    """Runs user macros with the animation context bound in their scope."""

    def __init__(self, registry: MacroRegistry | None, bus: EventBus) -> None:
        self.registry = registry
        self.bus = bus

    def find(self, ref: str) -> Macro | None:
        """Look a macro up by id, then by name."""
        if self.registry is None:
            return None
        return self.registry.get(ref) or self.registry.get_by_name(ref)

    async def run(
        self,
        ref: str,
        ctx: AnimationContext,
        sequence_factory: Callable[[], Sequence],
    ) -> bool:
        """Execute the macro ``ref``.

        Returns:
            True if the macro ran to completion. A missing macro or one that
            raised gives False; neither is propagated.
        """
        macro = self.find(ref)
        if macro is None:
            logger.warning(f"Animation macro not found: {ref}")
            return False

        try:
            result = macro.execute(ctx.as_scope(sequence_factory))
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(f"Error executing animation macro '{macro.name}'")
            self.bus.publish(
                NotificationEvent(
                    f"Error executing animation macro '{macro.name}', check logs",
                    NotificationLevel.WARNING,
                )
            )
            return False
        return True
