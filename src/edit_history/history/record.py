"""Reversible description of one text mutation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from edit_history.surface import SelectionPolicy


@dataclass(frozen=True, slots=True)
class EditRecord:
    """What it takes to reverse one mutation.

    ``replacement_text`` currently occupies ``[range_start, range_end)``;
    reversing the mutation puts ``prior_text`` back in its place and positions
    the selection per ``selection_policy``. ``chains_to_next`` makes the
    record undo (or redo) together with the next record on the same stack.

    ``inverse_source`` is only set on redo-side records and points at the
    exact record whose undo produced them.
    """

    replacement_text: str
    range_start: int
    range_end: int
    prior_text: str
    selection_policy: SelectionPolicy
    chains_to_next: bool = False
    inverse_source: Optional["EditRecord"] = field(
        default=None, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.range_start < 0:
            raise ValueError(f"range_start must be >= 0, got {self.range_start}")
        if self.range_end - self.range_start != len(self.replacement_text):
            raise ValueError(
                "range must exactly bound replacement_text: "
                f"[{self.range_start}, {self.range_end}) vs "
                f"{len(self.replacement_text)} characters"
            )

    @property
    def is_insertion(self) -> bool:
        return not self.prior_text

    @property
    def is_deletion(self) -> bool:
        return not self.replacement_text

    def inverted(self, *, chains_to_next: bool = False) -> "EditRecord":
        """Return the record that reverses undoing ``self``.

        After ``self`` is undone, ``prior_text`` sits at ``range_start``; the
        inverse describes swapping ``replacement_text`` back in.
        """

        return EditRecord(
            replacement_text=self.prior_text,
            range_start=self.range_start,
            range_end=self.range_start + len(self.prior_text),
            prior_text=self.replacement_text,
            selection_policy=self.selection_policy,
            chains_to_next=chains_to_next,
            inverse_source=self,
        )

    def describe(self) -> str:
        line = (
            f"({self.range_start}-{self.range_end}) "
            f"value: {self.replacement_text}, before: {self.prior_text}"
        )
        return f"{line} +" if self.chains_to_next else line


__all__ = ["EditRecord"]
