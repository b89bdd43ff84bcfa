"""Textual integration: shortcut dispatch and history panel updates."""

from .controller import (
    HistoryKeymap,
    HistoryPanelHooks,
    TextualHistoryAdapter,
    normalize_key,
)

__all__ = [
    "HistoryKeymap",
    "HistoryPanelHooks",
    "TextualHistoryAdapter",
    "normalize_key",
]
