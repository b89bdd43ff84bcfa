"""TextSurface implementation backed by a Textual ``TextArea``."""

from __future__ import annotations

try:  # pragma: no cover - imported only when the demo is run
    from textual.widgets import TextArea
    from textual.widgets.text_area import Selection as AreaSelection
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use edit_history.adapters.textual.surface"
    ) from exc

from edit_history.surface import (
    Selection,
    SelectionPolicy,
    ensure_range,
    place_selection,
)

from .locations import location_to_offset, offset_to_location


class TextAreaSurface:
    """Exposes a ``TextArea`` through character offsets."""

    def __init__(self, text_area: TextArea) -> None:
        self.text_area = text_area

    def get_text(self) -> str:
        return self.text_area.text

    def get_selection(self) -> Selection:
        text = self.text_area.text
        start, end = self.text_area.selection
        offsets = sorted(
            (location_to_offset(text, start), location_to_offset(text, end))
        )
        return (offsets[0], offsets[1])

    def replace_range(
        self, text: str, start: int, end: int, mode: SelectionPolicy
    ) -> None:
        current = self.text_area.text
        ensure_range(current, start, end)
        self.text_area.replace(
            text,
            offset_to_location(current, start),
            offset_to_location(current, end),
            maintain_selection_offset=False,
        )
        updated = self.text_area.text
        sel_start, sel_end = place_selection(start, len(text), mode)
        self.text_area.selection = AreaSelection(
            offset_to_location(updated, sel_start),
            offset_to_location(updated, sel_end),
        )


__all__ = ["TextAreaSurface"]
