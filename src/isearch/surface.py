"""Capabilities a text widget must offer to host incremental search"""

from typing import Callable, Optional, Protocol

import regex as re

from isearch.utilities import IndexRowCol


class TextSource(Protocol):
    """Read-only access to the text being searched."""

    def start(self) -> IndexRowCol:
        """Return index of start of text."""

    def end(self) -> IndexRowCol:
        """Return index of end of text (excluding Tk's trailing newline)."""

    def get(self, index1: str, index2: str) -> str:
        """Return text between two string indexes."""


class KeyboardHandlerLike(Protocol):
    """What a surface needs to know about a keyboard handler to install it."""

    bindtag: str

    def sequences(self) -> list[str]:
        """Return the Tk event sequences the handler responds to."""

    def handle(self, sequence: str, event: object) -> Optional[str]:
        """Run the command bound to `sequence`."""


class EditingSurface(TextSource, Protocol):
    """Host text widget as seen by the incremental search controller.

    Attributes:
        status_sink: Callable that displays status text, or None if the host
            has nowhere to show it.
        isearch_highlight_style: True if the host should draw search matches
            in the incremental search style.
    """

    status_sink: Optional[Callable[[str], None]]
    isearch_highlight_style: bool

    def get_insert_index(self) -> IndexRowCol:
        """Return index of the insert cursor."""

    def set_insert_index(self, insert_pos: IndexRowCol) -> None:
        """Move the insert cursor."""

    def selection_is_empty(self) -> bool:
        """Return True if no text is selected."""

    def clear_selection(self) -> None:
        """Clear any current text selection."""

    def mark_active(self) -> bool:
        """Return True if the user is deliberately extending a selection."""

    def highlight(self, pattern: Optional[re.Pattern]) -> None:
        """Set (or clear if None) the pattern whose matches are highlighted."""

    def update_highlights(self) -> None:
        """Force the search highlights to be redrawn."""

    def push_keyboard_handler(self, handler: KeyboardHandlerLike) -> None:
        """Install handler so it receives keystrokes before all others."""

    def pop_keyboard_handler(self, handler: KeyboardHandlerLike) -> None:
        """Remove a previously installed handler."""
