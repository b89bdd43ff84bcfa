"""Shortcut dispatch and history-panel updates for Textual hosts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

from edit_history.history import HistorySnapshot
from edit_history.session import EditorSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def normalize_key(key: str) -> str:
    """Canonical ``mod+mod+key`` token with sorted, lower-cased modifiers."""

    parts = [part.strip().lower() for part in key.split("+") if part.strip()]
    if not parts:
        raise ValueError("key cannot be empty")
    *modifiers, name = parts
    ordered = sorted(dict.fromkeys(modifiers))
    return "+".join([*ordered, name])


@dataclass(slots=True)
class HistoryPanelHooks:
    """Callbacks the adapter uses to render history in the host UI."""

    update_history: Callable[[Sequence[str], Sequence[str]], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


@dataclass(frozen=True, slots=True)
class HistoryKeymap:
    """Key tokens that trigger undo and redo instead of native history."""

    undo: Tuple[str, ...] = ("ctrl+z",)
    redo: Tuple[str, ...] = ("ctrl+y", "ctrl+shift+z")

    def resolve(self, key: str) -> Optional[str]:
        token = normalize_key(key)
        if token in {normalize_key(candidate) for candidate in self.undo}:
            return "undo"
        if token in {normalize_key(candidate) for candidate in self.redo}:
            return "redo"
        return None


class TextualHistoryAdapter:
    """Bridges an :class:`EditorSession` to Textual widgets.

    Undo/redo shortcuts are consumed here so the host's own history never
    runs; every history change re-renders both stacks through the hooks.
    """

    def __init__(
        self,
        session: EditorSession,
        hooks: HistoryPanelHooks,
        *,
        keymap: Optional[HistoryKeymap] = None,
    ) -> None:
        self.session = session
        self.hooks = hooks
        self.keymap = keymap or HistoryKeymap()
        self._commands: Dict[str, Callable[[], int]] = {
            "undo": self.session.undo,
            "redo": self.session.redo,
        }
        session.subscribe(self._on_history_change)
        self._render(session.snapshot())

    def handle_shortcut(self, key: str, *, modifiers: Iterable[str] = ()) -> bool:
        """Run the command bound to ``key``; return whether it was consumed."""

        token = "+".join([*modifiers, key]) if modifiers else key
        command = self.keymap.resolve(token)
        if command is None:
            return False
        self.run(command, key=normalize_key(token))
        return True

    def run(self, command: str, *, key: Optional[str] = None) -> int:
        """Execute ``"undo"`` or ``"redo"``; returns the records replayed."""

        try:
            handler = self._commands[command]
        except KeyError as exc:
            raise ValueError(f"Unknown history command '{command}'") from exc
        steps = handler()
        self._log_state(f"{command} ->", key=key, steps=steps)
        if not steps:
            self.hooks.update_status(f"nothing to {command}")
        return steps

    def _on_history_change(self, snapshot: HistorySnapshot) -> None:
        self._render(snapshot)
        if snapshot.record is not None:
            self._log_state(
                f"{snapshot.reason} <-",
                record=snapshot.record.describe(),
            )

    def _render(self, snapshot: HistorySnapshot) -> None:
        self.hooks.update_history(snapshot.undo_lines(), snapshot.redo_lines())
        self.hooks.update_status(
            f"undo {len(snapshot.undo)} | redo {len(snapshot.redo)}"
        )

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        engine = self.session.engine
        return {
            "session": self.session.name,
            "selection": self.session.surface.get_selection(),
            "undo_depth": len(engine.undo_stack),
            "redo_depth": len(engine.redo_stack),
        }


__all__ = [
    "HistoryKeymap",
    "HistoryPanelHooks",
    "TextualHistoryAdapter",
    "normalize_key",
]
