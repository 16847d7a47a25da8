"""Tk Text widget that can host incremental search"""

from enum import StrEnum, auto
import logging
import tkinter as tk
from typing import Any, Callable, Optional

import regex as re

from isearch.finder import find_all
from isearch.surface import KeyboardHandlerLike
from isearch.utilities import IndexRange, IndexRowCol

logger = logging.getLogger(__package__)


class HighlightTag(StrEnum):
    """Highlight tags used for search matches."""

    SEARCH = auto()
    ISEARCH = auto()


class MainText(tk.Text):
    """Text widget implementing the editing surface needed by incremental search.

    Attributes:
        status_sink: Function to display status text, or None.
        mark_mode: True while the user is deliberately extending a selection.
        search_pattern: Pattern whose matches are highlighted, or None.
        keyboard_handlers: Installed keyboard handlers, most recent last.
    """

    def __init__(self, parent: tk.Misc, **kwargs: Any) -> None:
        super().__init__(parent, **kwargs)
        self.status_sink: Optional[Callable[[str], None]] = None
        self.mark_mode = False
        self.search_pattern: Optional[re.Pattern] = None
        self.keyboard_handlers: list[KeyboardHandlerLike] = []
        self._isearch_highlight_style = False
        self.tag_configure(HighlightTag.SEARCH, background="#a08dfc")
        self.tag_configure(HighlightTag.ISEARCH, background="orange")
        # Selection should show on top of search highlights
        self.tag_raise("sel")

    @property
    def isearch_highlight_style(self) -> bool:
        """True to highlight matches in the incremental search style."""
        return self._isearch_highlight_style

    @isearch_highlight_style.setter
    def isearch_highlight_style(self, value: bool) -> None:
        self._isearch_highlight_style = value
        self.update_highlights()

    def start(self) -> IndexRowCol:
        """Return IndexRowCol of start of text."""
        return IndexRowCol(1, 0)

    def end(self) -> IndexRowCol:
        """Return IndexRowCol of end of text, not including Tk's final newline."""
        return IndexRowCol(self.index(tk.END + "-1c"))

    def get_text(self) -> str:
        """Return all the text in the widget."""
        return self.get("1.0", tk.END + "-1c")

    def set_text(self, text: str) -> None:
        """Replace all the text in the widget, leaving cursor at the start."""
        self.delete("1.0", tk.END)
        self.insert("1.0", text)
        self.set_insert_index(self.start(), focus=False)

    def get_insert_index(self) -> IndexRowCol:
        """Return index of the insert cursor as IndexRowCol object."""
        return IndexRowCol(self.index(tk.INSERT))

    def set_insert_index(self, insert_pos: IndexRowCol, focus: bool = True) -> None:
        """Set the position of the insert cursor, and make sure it is visible.

        Args:
            insert_pos: Location to position insert cursor.
            focus: Optional, False means focus will not be forced to this widget.
        """
        self.mark_set(tk.INSERT, insert_pos.index())
        self.see(tk.INSERT)
        if focus:
            self.focus_set()

    def selected_ranges(self) -> list[IndexRange]:
        """Get the ranges of text marked with the `sel` tag."""
        ranges = self.tag_ranges("sel")
        return [IndexRange(ranges[i], ranges[i + 1]) for i in range(0, len(ranges), 2)]

    def selection_is_empty(self) -> bool:
        """Return True if no text is selected."""
        return not self.tag_ranges("sel")

    def clear_selection(self) -> None:
        """Clear any current text selection."""
        self.tag_remove("sel", "1.0", tk.END)

    def do_select(self, sel_range: IndexRange) -> None:
        """Select the given range of text.

        Args:
            sel_range: IndexRange containing start and end of text to be selected."""
        self.clear_selection()
        self.tag_add("sel", sel_range.start.index(), sel_range.end.index())

    def mark_active(self) -> bool:
        """Return True if the user is deliberately extending a selection."""
        return self.mark_mode

    def highlight(self, pattern: Optional[re.Pattern]) -> None:
        """Set pattern to highlight; takes effect at next `update_highlights`.

        Args:
            pattern: Compiled forward pattern, or None to remove highlights.
        """
        self.search_pattern = pattern

    def update_highlights(self) -> None:
        """Remove search highlights and redraw them for current pattern."""
        for tag in HighlightTag:
            self.tag_remove(tag, "1.0", tk.END)
        if self.search_pattern is None:
            return
        tag = HighlightTag.ISEARCH if self.isearch_highlight_style else HighlightTag.SEARCH
        for match_range in find_all(self.search_pattern, self.get_text(), self.start()):
            self.tag_add(tag, match_range.start.index(), match_range.end.index())

    def push_keyboard_handler(self, handler: KeyboardHandlerLike) -> None:
        """Install keyboard handler ahead of all existing bindings.

        Args:
            handler: Handler whose bindtag is placed first in widget's bindtags.
        """
        for sequence in handler.sequences():
            self.bind_class(
                handler.bindtag,
                sequence,
                lambda evt, seq=sequence: handler.handle(seq, evt),  # type: ignore[misc]
            )
        tags = tuple(tag for tag in self.bindtags() if tag != handler.bindtag)
        self.bindtags((handler.bindtag,) + tags)
        self.keyboard_handlers.append(handler)

    def pop_keyboard_handler(self, handler: KeyboardHandlerLike) -> None:
        """Remove keyboard handler, if installed.

        Args:
            handler: Handler previously installed with `push_keyboard_handler`.
        """
        if handler not in self.keyboard_handlers:
            logger.debug(f"Keyboard handler {handler.bindtag} not installed")
            return
        self.keyboard_handlers.remove(handler)
        self.bindtags(tuple(tag for tag in self.bindtags() if tag != handler.bindtag))
        for sequence in handler.sequences():
            self.unbind_class(handler.bindtag, sequence)
