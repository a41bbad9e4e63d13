"""Named-event broadcasting for diagnostics and change notifications."""

from collections import defaultdict
from collections.abc import Callable
from typing import Any

from ..vars_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.CSS)

MISSING_LAYER_PALETTE_REFS = "missingLayerPaletteRefs"
CSS_VARS_UPDATED = "cssVarsUpdated"

Listener = Callable[[dict[str, Any]], None]


class EventBus:
    """Synchronous publish/subscribe keyed by event name.

    A failing listener is logged and skipped; it never aborts the emitter
    or the remaining listeners.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, name: str, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners[name].append(listener)
        return lambda: self.unsubscribe(name, listener)

    def unsubscribe(self, name: str, listener: Listener) -> None:
        if listener in self._listeners.get(name, []):
            self._listeners[name].remove(listener)

    def emit(self, name: str, detail: dict[str, Any] | None = None) -> int:
        """Deliver ``detail`` to every listener of ``name``.

        Returns:
            Number of listeners that ran without raising.
        """
        delivered = 0
        for listener in list(self._listeners.get(name, [])):
            try:
                listener(dict(detail or {}))
                delivered += 1
            except Exception as e:
                logger.warning(f"Listener for {name} failed: {e}", exc_info=True)
        return delivered
