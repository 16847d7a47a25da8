"""Configure pytest."""

import tkinter as tk
from typing import Generator

import pytest

from isearch.application import ISearchApp
from isearch.incremental_search import IncrementalSearch
from isearch.preferences import preferences

from test_support import BufferSurface


@pytest.fixture
def isearch() -> IncrementalSearch:
    """Controller using the default literal, case-insensitive finder."""
    return IncrementalSearch()


@pytest.fixture
def abc_surface() -> BufferSurface:
    """Surface containing a repeating string."""
    return BufferSurface("abcabcabc")


@pytest.fixture
def isearch_app() -> Generator[ISearchApp, None, None]:
    """Start app in "test" mode, skipping if there is no display."""
    try:
        app = ISearchApp(args=["--nohome"])  # Force command line args
    except tk.TclError as exc:
        pytest.skip(f"Tk unavailable: {exc}")
    yield app  # Don't enter event loop
    app.root.destroy()  # Cleanup after test
    preferences.persistent_vars.clear()
