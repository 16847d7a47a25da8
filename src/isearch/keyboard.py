"""Keyboard handlers that can be stacked on a text surface"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol, runtime_checkable

from isearch.surface import EditingSurface
from isearch.utilities import process_accel

if TYPE_CHECKING:
    from isearch.incremental_search import IncrementalSearch

logger = logging.getLogger(__package__)

KeyCommand = Callable[[Any], Optional[str]]

# Tk event state bits for Control, Mod1 (Alt/Cmd) and Windows Alt
MODIFIER_MASK = 0x0004 | 0x0008 | 0x20000
# Windows reports AltGr as Control+Alt
ALTGR_STATE = 0x0004 | 0x20000
MODIFIER_KEYSYMS = {
    "Shift_L",
    "Shift_R",
    "Control_L",
    "Control_R",
    "Alt_L",
    "Alt_R",
    "Meta_L",
    "Meta_R",
    "Super_L",
    "Super_R",
    "Caps_Lock",
    "Num_Lock",
}
ANY_KEY = "<Key>"


class KeyboardHandler:
    """A table of key bindings that a surface installs under its own bindtag.

    The command for a sequence may be changed while the handler is installed,
    since the surface dispatches each event back through `handle`.

    Attributes:
        bindtag: Tk bindtag under which the surface installs the handler.
        commands: Command to run for each Tk event sequence.
    """

    def __init__(self, bindtag: str) -> None:
        self.bindtag = bindtag
        self.commands: dict[str, KeyCommand] = {}

    def bind_key(self, accel: str, command: KeyCommand) -> None:
        """Bind accelerator, e.g. "Cmd/Ctrl+s", to a command.

        Args:
            accel: Accelerator string, converted for current platform.
            command: Called with the Tk event; return "break" to stop other handlers.
        """
        _, sequence = process_accel(accel)
        self.commands[sequence] = command

    def sequences(self) -> list[str]:
        """Return the Tk event sequences the handler responds to."""
        return list(self.commands)

    def handle(self, sequence: str, event: Any) -> Optional[str]:
        """Run the command bound to `sequence`, if any."""
        try:
            command = self.commands[sequence]
        except KeyError:
            return None
        return command(event)


@runtime_checkable
class SupportsIncrementalSearchToggle(Protocol):
    """Keyboard handler whose bindings depend on whether incremental search is used."""

    def set_mode(self, enabled: bool) -> None:
        """Switch bindings between incremental and plain search."""


def set_incremental_search(handlers: list[Any], enabled: bool) -> None:
    """Enable/disable incremental search in all handlers that support it.

    Args:
        handlers: Installed keyboard handlers.
        enabled: True to use incremental search.
    """
    for handler in handlers:
        if isinstance(handler, SupportsIncrementalSearchToggle):
            handler.set_mode(enabled)


class IncrementalSearchKeyboardHandler(KeyboardHandler):
    """Overlay that turns keystrokes into incremental search actions while active."""

    def __init__(self, isearch: "IncrementalSearch") -> None:
        super().__init__("ISearchOverlay")
        self.isearch = isearch
        self.bind_key("Cmd/Ctrl+s", lambda _e: self._next(backwards=False))
        self.bind_key("Cmd/Ctrl+r", lambda _e: self._next(backwards=True))
        self.bind_key("BackSpace", lambda _e: self._remove_char())
        self.bind_key("Return", lambda _e: self._deactivate(reset=False))
        self.bind_key("Escape", lambda _e: self._deactivate(reset=True))
        self.bind_key("Ctrl+g", lambda _e: self._deactivate(reset=True))
        self.commands[ANY_KEY] = self.key_pressed

    def key_pressed(self, event: Any) -> Optional[str]:
        """Handle a key with no specific binding.

        Printable characters extend the search string. Modifier keys on their
        own are ignored. Anything else confirms the search and is passed on.
        """
        if event.keysym in MODIFIER_KEYSYMS:
            return None
        modifiers = event.state & MODIFIER_MASK
        if event.char and event.char.isprintable() and modifiers in (0, ALTGR_STATE):
            self.isearch.add_char(event.char)
            return "break"
        logger.debug(f"isearch confirmed by {event.keysym}")
        self.isearch.deactivate(reset=False)
        return None

    def _next(self, backwards: bool) -> str:
        self.isearch.next(backwards=backwards, use_current_or_prev_search=True)
        return "break"

    def _remove_char(self) -> str:
        self.isearch.remove_char()
        return "break"

    def _deactivate(self, reset: bool) -> str:
        self.isearch.deactivate(reset)
        return "break"


class DefaultKeymap(KeyboardHandler):
    """The host's normal search keys, Cmd/Ctrl+S and Cmd/Ctrl+R.

    With incremental search enabled, they start forward and reverse incremental
    search; otherwise they repeat the previous search without incremental search.

    Attributes:
        uses_incremental_search: Current mode.
    """

    def __init__(
        self,
        isearch: "IncrementalSearch",
        surface: EditingSurface,
        find_next: Callable[[bool], None],
    ) -> None:
        """Initialize keymap.

        Args:
            isearch: Controller to activate.
            surface: Text widget to activate it on.
            find_next: Plain search, called with True to search backwards.
        """
        super().__init__("ISearchKeymap")
        self.isearch = isearch
        self.surface = surface
        self.find_next = find_next
        self.uses_incremental_search = False
        self.bind_key("Cmd/Ctrl+s", lambda _e: self.search(backwards=False))
        self.bind_key("Cmd/Ctrl+r", lambda _e: self.search(backwards=True))

    def set_mode(self, enabled: bool) -> None:
        """Switch search keys between incremental and plain search."""
        if self.uses_incremental_search == enabled:
            return
        self.uses_incremental_search = enabled
        logger.debug(f"Incremental search {'enabled' if enabled else 'disabled'}")

    def search(self, backwards: bool) -> str:
        """Start incremental search, or repeat plain search, depending on mode."""
        if self.uses_incremental_search:
            self.isearch.activate(self.surface, backwards)
        else:
            self.find_next(backwards)
        return "break"
