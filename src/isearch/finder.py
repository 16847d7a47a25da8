"""Find a single match of a search string in a text surface"""

from dataclasses import dataclass
import logging
from typing import Optional, Protocol

import regex as re

from isearch.surface import TextSource
from isearch.utilities import IndexRange, IndexRowCol, rowcol_after

logger = logging.getLogger(__package__)


@dataclass(frozen=True)
class SearchOptions:
    """Options passed unchanged to the match finder.

    Attributes:
        wrap: True to wrap search round end (or start) of text.
        skip_current: True to ignore a zero-length match at the start point,
            so repeated searches for e.g. "x*" do not get stuck.
    """

    wrap: bool = False
    skip_current: bool = False


class MatchFinder(Protocol):
    """Stateless executor of a single search."""

    def compile(self, needle: str) -> re.Pattern:
        """Return the compiled pattern used to highlight matches of `needle`."""

    def find(
        self,
        source: TextSource,
        needle: str,
        start: IndexRowCol,
        backwards: bool,
        options: SearchOptions,
    ) -> Optional[IndexRange]:
        """Return the first match found from `start`, or None."""


class RegexMatchFinder:
    """Match finder that slurps text from the surface and searches it
    with the `regex` module, which can search in reverse.

    Attributes:
        nocase: True to ignore case.
        regexp: True if needles are regexes; False for exact string match.
    """

    def __init__(self, nocase: bool = False, regexp: bool = False) -> None:
        self.nocase = nocase
        self.regexp = regexp

    def compile(self, needle: str, backwards: bool = False) -> re.Pattern:
        """Compile needle according to the finder's settings.

        Raises `re.error` if the needle is a bad regex.

        Args:
            needle: String/regex to be searched for.
            backwards: True to compile for searching backwards.
        """
        search_string = needle if self.regexp else re.escape(needle)
        # Preferable to use flags rather than prepending "(?i)", so that
        # any error reported is about the regex the user typed.
        flags = 0
        if backwards:
            flags |= re.REVERSE
        if self.nocase:
            flags |= re.IGNORECASE
        return re.compile(search_string, flags=flags)

    def find(
        self,
        source: TextSource,
        needle: str,
        start: IndexRowCol,
        backwards: bool,
        options: SearchOptions,
    ) -> Optional[IndexRange]:
        """Find occurrence of needle, searching from start point.

        Args:
            source: Text to search.
            needle: String/regex to be searched for.
            start: Start point for search.
            backwards: True to search backwards through text.
            options: Wrap and skip-current settings.

        Returns:
            Range from start to end of match (in text order), or None if no match
            or the needle is not a valid regex.
        """
        try:
            pattern = self.compile(needle, backwards=backwards)
        except re.error as exc:
            logger.debug(f"Bad regex {needle!r}: {exc}")
            return None

        # Search first chunk from start point to beg/end of text
        if backwards:
            chunk_range = IndexRange(source.start(), start)
        else:
            chunk_range = IndexRange(start, source.end())
        match = self._find_in_chunk(
            source, pattern, chunk_range, backwards, options.skip_current
        )

        # If not found, and we're wrapping, search the other part of the text
        if match is None and options.wrap:
            if backwards:
                chunk_range = IndexRange(start, source.end())
            else:
                chunk_range = IndexRange(source.start(), start)
            match = self._find_in_chunk(
                source, pattern, chunk_range, backwards, skip_current=False
            )
        return match

    def _find_in_chunk(
        self,
        source: TextSource,
        pattern: re.Pattern,
        chunk_range: IndexRange,
        backwards: bool,
        skip_current: bool,
    ) -> Optional[IndexRange]:
        """Find first (or last if backwards) match within one chunk of text."""
        slurp_text = source.get(chunk_range.start.index(), chunk_range.end.index())
        match = pattern.search(slurp_text)
        if match is not None and skip_current and not match[0]:
            # The start point is the beginning of the chunk when going forwards,
            # and the end of the chunk when going backwards.
            if backwards and match.start() == len(slurp_text):
                match = (
                    pattern.search(slurp_text, 0, len(slurp_text) - 1)
                    if slurp_text
                    else None
                )
            elif not backwards and match.start() == 0:
                match = pattern.search(slurp_text, 1) if slurp_text else None
        if match is None:
            return None
        match_start = rowcol_after(chunk_range.start, slurp_text[: match.start()])
        return IndexRange(match_start, rowcol_after(match_start, match[0]))


def find_next_match(
    finder: MatchFinder,
    source: TextSource,
    needle: str,
    start: IndexRowCol,
    backwards: bool,
) -> Optional[IndexRange]:
    """Find the match a repeated "find next" should move to, wrapping.

    After a match is found, the insert cursor is placed at its end (or its
    start if searching backwards), so searching again from the cursor finds
    the following match, even when the two are adjacent.

    Args:
        finder: Match finder to use.
        source: Text to search.
        needle: String/regex to be searched for.
        start: Insert cursor position.
        backwards: True to search backwards through text.
    """
    return finder.find(
        source, needle, start, backwards, SearchOptions(wrap=True, skip_current=True)
    )


def find_all(
    pattern: re.Pattern, slurp_text: str, slurp_start: IndexRowCol
) -> list[IndexRange]:
    """Find all non-empty matches of pattern in slurped text.

    Args:
        pattern: Compiled forward pattern.
        slurp_text: Text to search.
        slurp_start: Index in the surface of the start of `slurp_text`.

    Returns:
        List of ranges, in text order.
    """
    ranges = []
    last_offset = 0
    last_rowcol = slurp_start
    for match in pattern.finditer(slurp_text):
        if not match[0]:
            continue
        match_start = rowcol_after(last_rowcol, slurp_text[last_offset : match.start()])
        match_end = rowcol_after(match_start, match[0])
        ranges.append(IndexRange(match_start, match_end))
        last_offset = match.end()
        last_rowcol = match_end
    return ranges
