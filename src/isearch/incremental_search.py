"""Incremental (type-ahead) search.

When incremental search is activated, keystrokes into the text widget are
used to compose a search string. Immediately after every keystroke the
search is updated: matches of the string so far are highlighted and the
insert cursor is moved to the next match.
"""

from dataclasses import dataclass
import logging
from typing import Callable, Optional

from isearch.finder import MatchFinder, RegexMatchFinder, SearchOptions
from isearch.keyboard import IncrementalSearchKeyboardHandler
from isearch.surface import EditingSurface
from isearch.utilities import IndexRange, IndexRowCol

logger = logging.getLogger(__package__)


@dataclass
class SearchSession:
    """State of one incremental search, from activation to deactivation.

    Attributes:
        surface: Text widget being searched.
        start_pos: Insert cursor position when search was activated.
        anchor: Point from which the next search begins.
        needle: Search string typed so far.
        backwards: True if searching backwards.
    """

    surface: EditingSurface
    start_pos: IndexRowCol
    anchor: IndexRowCol
    needle: str = ""
    backwards: bool = False


class IncrementalSearch:
    """Controller that re-runs the search each time the search string changes.

    Attributes:
        finder: Executes each individual search.
        options: Wrap/skip-current settings, fixed for the life of the controller.
        session: Current search state, None when not active.
        prev_needle: Search string in use before the most recent reset.
        keyboard_handler: Overlay installed on the surface while active.
    """

    def __init__(self, finder: Optional[MatchFinder] = None) -> None:
        if finder is None:
            finder = RegexMatchFinder(nocase=True)
        self.finder: MatchFinder = finder
        self.options = SearchOptions(wrap=False, skip_current=False)
        self.session: Optional[SearchSession] = None
        self.prev_needle = ""
        self.keyboard_handler = IncrementalSearchKeyboardHandler(self)

    @property
    def active(self) -> bool:
        """True if incremental search is in progress."""
        return self.session is not None

    def activate(self, surface: EditingSurface, backwards: bool) -> None:
        """Begin incremental search from the insert cursor.

        If a search is already in progress, it is confirmed first, so that
        only one keyboard handler is ever installed.

        Args:
            surface: Text widget to search.
            backwards: True to search backwards.
        """
        if self.session is not None:
            logger.debug("Incremental search re-activated while active")
            self.deactivate(reset=False)
        insert_pos = surface.get_insert_index()
        self.session = SearchSession(
            surface=surface,
            start_pos=insert_pos,
            anchor=insert_pos,
            backwards=backwards,
        )
        surface.push_keyboard_handler(self.keyboard_handler)
        # A stale selection would otherwise be extended by cursor moves
        if not surface.selection_is_empty() and not surface.mark_active():
            surface.clear_selection()
        self.message(self._status_text())

    def deactivate(self, reset: bool) -> None:
        """End incremental search.

        Args:
            reset: True to abort and return cursor to where search started;
                False to confirm, leaving cursor at the last match.
        """
        if self.session is None:
            return
        surface = self.session.surface
        self.cancel_search(reset)
        surface.pop_keyboard_handler(self.keyboard_handler)
        self.message("")
        self.session = None

    def cancel_search(self, reset: bool) -> Optional[IndexRange]:
        """Clear the search string and highlights.

        Args:
            reset: True to return cursor and anchor to where search started.

        Returns:
            Zero-length range at the anchor, or None if not active.
        """
        session = self.session
        if session is None:
            return None
        self.prev_needle = session.needle
        session.needle = ""
        if reset:
            session.surface.set_insert_index(session.start_pos)
            session.anchor = session.start_pos
        session.surface.highlight(None)
        # Redraw even if nothing changed: a failed search may have left stale highlights
        session.surface.update_highlights()
        return IndexRange(session.anchor, session.anchor)

    def add_char(self, char: str) -> Optional[IndexRange]:
        """Add character to end of search string and search again."""
        return self.highlight_and_find(False, lambda needle: needle + char)

    def remove_char(self) -> Optional[IndexRange]:
        """Remove last character of search string and search again."""
        return self.highlight_and_find(False, lambda needle: needle[:-1])

    def next(
        self, backwards: bool = False, use_current_or_prev_search: bool = False
    ) -> Optional[IndexRange]:
        """Find the next occurrence of the search string.

        Args:
            backwards: True to search backwards.
            use_current_or_prev_search: True to reuse the previous search
                string if the current one is empty.
        """
        session = self.session
        if session is None:
            return None
        session.backwards = backwards
        session.anchor = session.surface.get_insert_index()

        def update_needle(needle: str) -> str:
            if use_current_or_prev_search and not needle:
                return self.prev_needle
            return needle

        return self.highlight_and_find(True, update_needle)

    def highlight_and_find(
        self, move_to_next: bool, update_needle: Callable[[str], str]
    ) -> Optional[IndexRange]:
        """Update search string, then find & highlight from the anchor.

        A failed search changes nothing but the search string and the status.

        Args:
            move_to_next: True to advance the anchor to the match, so a
                subsequent search finds the following occurrence.
            update_needle: Function returning new search string given current one.

        Returns:
            Range of the match, oriented so its end is where the cursor lands;
            zero-length range at the anchor if the search string is now empty;
            None if not found or not active.
        """
        session = self.session
        if session is None:
            return None
        needle = update_needle(session.needle)
        if not needle:
            return self.cancel_search(reset=True)
        session.needle = needle

        surface = session.surface
        found = self.finder.find(
            surface, needle, session.anchor, session.backwards, self.options
        )
        if found is not None:
            # Cursor lands at the end nearest the direction of travel
            if session.backwards:
                found = found.reversed()
            surface.set_insert_index(found.end)
            if move_to_next:
                session.anchor = found.end
            # Highlight after cursor move, so selection works properly
            surface.highlight(self.finder.compile(needle))
            surface.update_highlights()
        logger.debug(f"isearch {needle!r} from {session.anchor.index()}: {found}")

        self.message(self._status_text(found is None))
        return found

    def message(self, msg: str) -> None:
        """Display message in the surface's status area, or log it if none."""
        sink = self.session.surface.status_sink if self.session is not None else None
        if sink is not None:
            sink(msg)
        elif msg:
            logger.info(msg)

    def _status_text(self, not_found: bool = False) -> str:
        """Return status text describing the current search."""
        assert self.session is not None
        msg = "reverse-" if self.session.backwards else ""
        msg += f"isearch: {self.session.needle}"
        if not_found:
            msg += " (not found)"
        return msg
