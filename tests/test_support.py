"""Support classes for testing."""

from typing import Any, Optional

import regex as re

from isearch.finder import find_all
from isearch.utilities import IndexRange, IndexRowCol, rowcol_after


class BufferSurface:
    """Editing surface holding its text in a string, so tests need no display.

    Attributes:
        text: The buffer contents.
        insert: Insert cursor position.
        selection: Selected range, or None.
        statuses: Every status message emitted, in order.
        redraws: Number of times highlights have been redrawn.
        highlighted: Ranges highlighted at the most recent redraw.
    """

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.insert = IndexRowCol(1, 0)
        self.selection: Optional[IndexRange] = None
        self.mark_mode = False
        self.pattern: Optional[re.Pattern] = None
        self.highlighted: list[IndexRange] = []
        self.redraws = 0
        self.handlers: list[Any] = []
        self.statuses: list[str] = []
        self.status_sink: Optional[Any] = self.statuses.append
        self.isearch_highlight_style = False

    def pos(self, offset: int) -> IndexRowCol:
        """Return index of character offset into the text."""
        return rowcol_after(self.start(), self.text[:offset])

    def offset(self, rowcol: IndexRowCol) -> int:
        """Return character offset into the text of index."""
        lines = self.text.split("\n")
        return sum(len(line) + 1 for line in lines[: rowcol.row - 1]) + rowcol.col

    @property
    def status(self) -> str:
        """Most recent status message."""
        return self.statuses[-1]

    def start(self) -> IndexRowCol:
        return IndexRowCol(1, 0)

    def end(self) -> IndexRowCol:
        return self.pos(len(self.text))

    def get(self, index1: str, index2: str) -> str:
        return self.text[self.offset(IndexRowCol(index1)) : self.offset(IndexRowCol(index2))]

    def get_insert_index(self) -> IndexRowCol:
        return self.insert

    def set_insert_index(self, insert_pos: IndexRowCol) -> None:
        self.insert = insert_pos

    def selection_is_empty(self) -> bool:
        return self.selection is None or self.selection.is_empty()

    def clear_selection(self) -> None:
        self.selection = None

    def mark_active(self) -> bool:
        return self.mark_mode

    def highlight(self, pattern: Optional[re.Pattern]) -> None:
        self.pattern = pattern

    def update_highlights(self) -> None:
        self.redraws += 1
        if self.pattern is None:
            self.highlighted = []
        else:
            self.highlighted = find_all(self.pattern, self.text, self.start())

    def push_keyboard_handler(self, handler: Any) -> None:
        self.handlers.append(handler)

    def pop_keyboard_handler(self, handler: Any) -> None:
        self.handlers.remove(handler)


def offset_range(surface: BufferSurface, start: int, end: int) -> IndexRange:
    """Return range between two character offsets."""
    return IndexRange(surface.pos(start), surface.pos(end))
