"""One editable surface wired to its own history engine and normalizer."""

from __future__ import annotations

from typing import Callable, Optional

from edit_history.history import (
    HISTORY_CHANGED,
    HistoryBus,
    HistoryEngine,
    HistorySnapshot,
)
from edit_history.normalizer import Normalizer
from edit_history.runtime import telemetry
from edit_history.surface import TextSurface


class EditorSession:
    """Owns the engine/normalizer pair for a single surface.

    Surfaces that accept listeners (anything with an ``attach`` method, such
    as :class:`~edit_history.surface.TextBuffer`) are subscribed to the
    normalizer automatically; other hosts forward notifications to
    :attr:`normalizer` themselves.
    """

    def __init__(
        self,
        surface: TextSurface,
        *,
        name: str = "default",
        bus: Optional[HistoryBus] = None,
    ) -> None:
        self.name = name
        self.surface = surface
        self.engine = HistoryEngine(
            surface, bus=bus, logger_name=f"edit_history.history.{name}"
        )
        self.normalizer = Normalizer(
            surface, self.engine, logger_name=f"edit_history.normalizer.{name}"
        )
        attach = getattr(surface, "attach", None)
        if callable(attach):
            attach(self.normalizer)
        telemetry.record_event("session.open", data={"session": name})

    @property
    def bus(self) -> HistoryBus:
        return self.engine.bus

    def undo(self) -> int:
        return self.engine.undo()

    def redo(self) -> int:
        return self.engine.redo()

    def snapshot(self) -> HistorySnapshot:
        return self.engine.snapshot()

    def subscribe(self, callback: Callable[[HistorySnapshot], None]) -> None:
        self.engine.bus.subscribe(HISTORY_CHANGED, callback)

    def close(self) -> None:
        detach = getattr(self.surface, "detach", None)
        if callable(detach):
            detach(self.normalizer)
        self.normalizer.close()


__all__ = ["EditorSession"]
