"""Shadow state the normalizer keeps about the surface.

The surface only reports what it looks like after a change, so the
normalizer remembers what it looked like before: the selected text, the
text a composition is replacing, and the last value it accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from edit_history.surface import Selection


@dataclass(slots=True)
class SelectionShadow:
    """Text selected at the last selection change or pre-delete hook."""

    text: str = ""

    def observe(self, text: str, selection: Selection) -> None:
        start, end = selection
        self.text = text[start:end]

    def widen(self, text: str, selection: Selection, *, backward: bool) -> None:
        start, end = selection
        if start == end:
            if backward:
                start = max(0, start - 1)
            else:
                end = min(len(text), end + 1)
        self.text = text[start:end]


@dataclass(slots=True)
class CompositionShadow:
    """One IME session, rebuilt at every composition start."""

    active: bool = False
    prior_text: str = ""
    range_start: int = 0
    range_end: int = 0

    def begin(self, prior_text: str, selection: Selection) -> None:
        self.active = True
        self.prior_text = prior_text
        self.range_start, self.range_end = selection

    def track(self, end: int) -> None:
        self.range_end = end

    def reset(self) -> None:
        self.active = False
        self.prior_text = ""
        self.range_start = 0
        self.range_end = 0


@dataclass(slots=True)
class NormalizerState:
    selection: SelectionShadow = field(default_factory=SelectionShadow)
    composition: CompositionShadow = field(default_factory=CompositionShadow)
    last_value: str = ""
    drag_pending: bool = False
