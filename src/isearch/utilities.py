"""Handy utility functions"""

import json
import logging
import os.path
import platform
from typing import Any, Optional

logger = logging.getLogger(__package__)

# Flag so application code can detect if within a pytest run - only use if really needed
_CALLED_FROM_TEST = False

# Event keysym names as keys, display names as values
SUPPORTED_SHORTCUT_KEYS = {
    "Return": "Enter",
    "Escape": "Esc",
    "BackSpace": "Backspace",
}


#
# Functions to check which OS is being used
def is_mac() -> bool:
    """Return true if running on Mac"""
    return _is_system("Darwin")


def is_windows() -> bool:
    """Return true if running on Windows"""
    return _is_system("Windows")


def is_x11() -> bool:
    """Return true if running on Linux"""
    return _is_system("Linux")


def _is_system(system: str) -> bool:
    """Return true if running on given system

    Args:
        system: Name of system to check against
    """
    my_system = platform.system()
    assert my_system in ("Darwin", "Linux", "Windows")
    return my_system == system


def is_test(value: Optional[bool] = None) -> bool:
    """Return whether running under test, optionally setting the flag first.

    Args:
        value: If given, set the flag to this value.
    """
    global _CALLED_FROM_TEST
    if value is not None:
        _CALLED_FROM_TEST = value
    return _CALLED_FROM_TEST


def load_dict_from_json(filename: str) -> Optional[dict[str, Any]]:
    """If file exists, attempt to load into dict.

    Args:
        filename: Name of JSON file to load.

    Returns:
        Dictionary if loaded successfully, or None.
    """
    if os.path.isfile(filename):
        with open(filename, "r", encoding="utf-8") as fp:
            try:
                return json.load(fp)
            except json.decoder.JSONDecodeError as exc:
                logger.error(
                    f"Unable to load {filename} -- not valid JSON format\n" + str(exc)
                )
    return None


class IndexRowCol:
    """Class to store/manipulate Tk Text indexes.

    Rows count from 1, columns from 0, as in Tk.

    Attributes:
        row: Row or line number.
        col: Column number.
    """

    row: int
    col: int

    def __init__(self, index_or_row: str | int, col: Optional[int] = None) -> None:
        """Construct index either from string or two ints.

        Args:
            index_or_row: Either int row, or string index such as "3.14"
            col: Optional column - needed if index_or_row is an int
        """
        if not isinstance(index_or_row, int):
            # Tcl_Obj indexes returned by Tk can be cast to string
            index_or_row = str(index_or_row)
        if isinstance(index_or_row, str):
            assert col is None
            rr, cc = index_or_row.split(".", 1)
            self.row = int(rr)
            self.col = int(cc)
        else:
            assert isinstance(col, int)
            self.row = index_or_row
            self.col = col

    def index(self) -> str:
        """Return string index from object's row/col attributes."""
        return f"{self.row}.{self.col}"

    def rowcol(self) -> tuple[int, int]:
        """Return row, col tuple."""
        return self.row, self.col

    def __eq__(self, other: object) -> bool:
        """Override equality test to check row and col."""
        if not isinstance(other, IndexRowCol):
            return NotImplemented
        return (self.row, self.col) == (other.row, other.col)

    def __lt__(self, other: "IndexRowCol") -> bool:
        """Order indexes by row, then column."""
        return (self.row, self.col) < (other.row, other.col)

    def __le__(self, other: "IndexRowCol") -> bool:
        return (self.row, self.col) <= (other.row, other.col)

    def __repr__(self) -> str:
        return f"IndexRowCol({self.index()!r})"


class IndexRange:
    """Class to store/manipulate a Text range defined by two indexes.

    The range is directional: `start` may be after `end`, e.g. for a match
    found by a backwards search whose endpoints have been swapped.

    Attributes:
        start: Start index.
        end: End index.
    """

    def __init__(
        self,
        start: str | IndexRowCol,
        end: str | IndexRowCol,
    ) -> None:
        """Initialize IndexRange with two strings or IndexRowCol objects.

        Args:
            start: Index of start of range - either string or IndexRowCol
            end: Index of end of range - either string or IndexRowCol
        """
        self.start = start if isinstance(start, IndexRowCol) else IndexRowCol(start)
        self.end = end if isinstance(end, IndexRowCol) else IndexRowCol(end)

    def reversed(self) -> "IndexRange":
        """Return a new range with start and end swapped."""
        return IndexRange(self.end, self.start)

    def is_empty(self) -> bool:
        """Return True if the range has zero length."""
        return self.start == self.end

    def __eq__(self, other: object) -> bool:
        """Override equality test to check start and end of range."""
        if not isinstance(other, IndexRange):
            return NotImplemented
        return (self.start, self.end) == (other.start, other.end)

    def __repr__(self) -> str:
        return f"IndexRange({self.start.index()!r}, {self.end.index()!r})"


def rowcol_after(start: IndexRowCol, text: str) -> IndexRowCol:
    """Return the index reached by advancing over `text` from `start`.

    Args:
        start: Index at which `text` begins.
        text: Text to step over.
    """
    newlines = text.count("\n")
    if newlines == 0:
        return IndexRowCol(start.row, start.col + len(text))
    return IndexRowCol(start.row + newlines, len(text) - text.rfind("\n") - 1)


def process_accel(accel: str) -> tuple[str, str]:
    """Convert accelerator string, e.g. "Ctrl+X" to appropriate keyevent
    string for platform, e.g. "Control-X".

    "Cmd/Ctrl" means use ``Cmd`` key on Mac; ``Ctrl`` key on Windows/Linux.

    Args:
        accel: Accelerator string.

    Returns:
        Tuple containing accelerator string and key event string suitable
        for current platform.
    """
    if is_mac():
        accel = accel.replace("/Ctrl", "")
    else:
        accel = accel.replace("Cmd/", "")
    keyevent = accel.replace("Ctrl+", "Control-")
    keyevent = keyevent.replace("Shift+", "Shift-")
    if is_mac():
        keyevent = keyevent.replace("Cmd+", "Command-")
        keyevent = keyevent.replace("Option+", "Option-")
        keyevent = keyevent.replace("Alt+", "Option-")
    else:
        keyevent = keyevent.replace("Alt+", "Alt-")
    accel = accel.replace("Key-", "")
    # More friendly names for display
    for key, display in SUPPORTED_SHORTCUT_KEYS.items():
        accel = accel.replace(key, display)
    return (accel, f"<{keyevent}>")
