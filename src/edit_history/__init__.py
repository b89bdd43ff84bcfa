"""Application-controlled undo/redo history for editable text surfaces."""

__all__ = [
    "adapters",
    "history",
    "normalizer",
    "runtime",
    "session",
    "surface",
]

__version__ = "0.1.0"
