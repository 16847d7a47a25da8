"""Test keyboard handlers"""

from types import SimpleNamespace
from typing import Any

from isearch.incremental_search import IncrementalSearch
from isearch.keyboard import (
    ANY_KEY,
    DefaultKeymap,
    KeyboardHandler,
    SupportsIncrementalSearchToggle,
    set_incremental_search,
)
from isearch.utilities import process_accel

from test_support import BufferSurface


def key_event(keysym: str, char: str = "", state: int = 0) -> Any:
    """Return object with the attributes of a Tk key event."""
    return SimpleNamespace(keysym=keysym, char=char, state=state)


def press(handler: KeyboardHandler, accel: str, event: Any = None) -> Any:
    """Send key to handler as Tk would, given platform accelerator."""
    _, sequence = process_accel(accel)
    return handler.handle(sequence, event or key_event(accel))


def test_overlay_typing(isearch: IncrementalSearch, abc_surface: BufferSurface) -> None:
    """Test printable keys, backspace and return"""
    sf = abc_surface
    overlay = isearch.keyboard_handler
    isearch.activate(sf, backwards=False)
    assert overlay.handle(ANY_KEY, key_event("b", "b")) == "break"
    assert overlay.handle(ANY_KEY, key_event("c", "c")) == "break"
    assert sf.status == "isearch: bc"
    assert press(overlay, "BackSpace") == "break"
    assert sf.status == "isearch: b"
    # Shift on its own neither types nor confirms
    assert overlay.handle(ANY_KEY, key_event("Shift_L")) is None
    assert isearch.active
    assert press(overlay, "Return") == "break"
    assert not isearch.active
    assert sf.insert == sf.pos(2)


def test_overlay_repeat_and_abort(
    isearch: IncrementalSearch, abc_surface: BufferSurface
) -> None:
    """Test repeat keys reuse previous search, and escape aborts"""
    sf = abc_surface
    overlay = isearch.keyboard_handler
    isearch.prev_needle = "ab"
    isearch.activate(sf, backwards=False)
    assert press(overlay, "Cmd/Ctrl+s") == "break"
    assert sf.insert == sf.pos(2)
    assert press(overlay, "Cmd/Ctrl+s") == "break"
    assert sf.insert == sf.pos(5)
    assert press(overlay, "Cmd/Ctrl+r") == "break"
    assert sf.insert == sf.pos(3)
    assert sf.status == "reverse-isearch: ab"
    assert press(overlay, "Escape") == "break"
    assert sf.insert == sf.pos(0)
    assert not isearch.active

    isearch.activate(sf, backwards=False)
    press(overlay, "Ctrl+g")
    assert not isearch.active


def test_overlay_other_key_confirms(
    isearch: IncrementalSearch, abc_surface: BufferSurface
) -> None:
    """Test unbound keys confirm the search and pass through to the host"""
    sf = abc_surface
    overlay = isearch.keyboard_handler
    isearch.activate(sf, backwards=False)
    overlay.handle(ANY_KEY, key_event("c", "c"))
    # Control-x is not for the search string
    assert overlay.handle(ANY_KEY, key_event("x", "\x18", state=0x4)) is None
    assert not isearch.active
    assert sf.insert == sf.pos(3)

    isearch.activate(sf, backwards=False)
    assert overlay.handle(ANY_KEY, key_event("Right")) is None
    assert not isearch.active


def test_overlay_altgr_character(isearch: IncrementalSearch) -> None:
    """Test characters typed with AltGr on Windows extend the search string"""
    sf = BufferSurface("cost 5€ 5@")
    overlay = isearch.keyboard_handler
    isearch.activate(sf, backwards=False)
    overlay.handle(ANY_KEY, key_event("5", "5"))
    assert overlay.handle(ANY_KEY, key_event("EuroSign", "€", state=0x20004)) == "break"
    assert isearch.active
    assert sf.status == "isearch: 5€"
    assert sf.insert == sf.pos(7)
    # Ctrl+Alt with an unprintable character is still a command
    assert overlay.handle(ANY_KEY, key_event("q", "\x11", state=0x20004)) is None
    assert not isearch.active


def test_default_keymap_modes(
    isearch: IncrementalSearch, abc_surface: BufferSurface
) -> None:
    """Test search keys start incremental search only when enabled"""
    plain_searches: list[bool] = []
    keymap = DefaultKeymap(isearch, abc_surface, plain_searches.append)
    assert isinstance(keymap, SupportsIncrementalSearchToggle)

    assert press(keymap, "Cmd/Ctrl+s") == "break"
    assert press(keymap, "Cmd/Ctrl+r") == "break"
    assert plain_searches == [False, True]
    assert not isearch.active

    keymap.set_mode(True)
    keymap.set_mode(True)
    assert press(keymap, "Cmd/Ctrl+r") == "break"
    assert isearch.active
    assert abc_surface.status == "reverse-isearch: "
    assert plain_searches == [False, True]


def test_set_incremental_search(isearch: IncrementalSearch) -> None:
    """Test only handlers supporting the toggle are switched"""
    keymap = DefaultKeymap(isearch, BufferSurface(), lambda _bw: None)
    other = KeyboardHandler("Other")
    assert not isinstance(other, SupportsIncrementalSearchToggle)
    set_incremental_search([other, keymap, isearch.keyboard_handler], True)
    assert keymap.uses_incremental_search
    set_incremental_search([keymap], False)
    assert not keymap.uses_incremental_search


def test_unbound_sequence() -> None:
    """Test handler ignores sequences it doesn't know"""
    handler = KeyboardHandler("Test")
    handler.bind_key("Ctrl+t", lambda _e: "break")
    assert handler.sequences() == ["<Control-t>"]
    assert handler.handle("<Control-t>", None) == "break"
    assert handler.handle("<Control-u>", None) is None
