#!/usr/bin/env python
"""isearch - a text viewer demonstrating incremental search"""

import argparse
import logging
from importlib.metadata import version
import sys
import tkinter as tk
from tkinter import ttk
import traceback
from types import TracebackType
from typing import Optional

from isearch.finder import RegexMatchFinder, find_next_match
from isearch.incremental_search import IncrementalSearch
from isearch.keyboard import DefaultKeymap, set_incremental_search
from isearch.maintext import MainText
from isearch.preferences import preferences, PrefKey, PersistentBoolean
from isearch.utilities import is_test, process_accel

logger = logging.getLogger(__package__)

MESSAGE_FORMAT = "%(asctime)s: %(levelname)s - %(message)s"
DEBUG_FORMAT = "%(asctime)s: %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


class Root(tk.Tk):
    """Tk root window that logs callback exceptions."""

    def report_callback_exception(
        self, exc: type[BaseException], val: BaseException, tb: TracebackType | None
    ) -> None:
        """Override tkinter exception reporting rather just
        writing it to stderr.
        """
        err = "Tkinter Exception\n" + "".join(traceback.format_exception(exc, val, tb))
        logger.error(err)


class ISearchApp:
    """Top level application: a text widget, a status bar and a Search menu."""

    def __init__(self, args: Optional[list[str]] = None) -> None:
        """Initialize application.

        Creates windows and sets default preferences."""

        self.parse_args(args)

        if self.args.version:
            print(version("isearch"))
            sys.exit(0)

        self.logging_init()
        logger.info("isearch started")

        self.initialize_preferences()

        self.root = Root()
        self.root.title("isearch")
        self.root.geometry(preferences.get(PrefKey.ROOT_GEOMETRY))
        self.root.rowconfigure(0, weight=1)
        self.root.columnconfigure(0, weight=1)

        self.maintext = MainText(self.root, wrap=tk.NONE, undo=True)
        self.maintext.grid(row=0, column=0, sticky="NSEW")
        self.statusbar = ttk.Label(self.root, relief=tk.SUNKEN, padding=(5, 1))
        self.statusbar.grid(row=1, column=0, sticky="NSEW")
        self.maintext.status_sink = self.set_status

        self.finder = RegexMatchFinder(
            nocase=not preferences.get(PrefKey.ISEARCH_MATCH_CASE),
            regexp=preferences.get(PrefKey.ISEARCH_REGEX),
        )
        self.isearch = IncrementalSearch(self.finder)
        self.keymap = DefaultKeymap(self.isearch, self.maintext, self.find_next)
        self.maintext.push_keyboard_handler(self.keymap)

        self.init_menus()
        self.initialize_callbacks()
        preferences.run_callbacks()

        self.load_file_if_given()
        self.maintext.focus_set()

    def parse_args(self, args: Optional[list[str]] = None) -> None:
        """Parse command line args"""
        if args is None:
            args = sys.argv[1:]
        else:
            is_test(True)
        parser = argparse.ArgumentParser(
            prog="isearch", description="Text viewer with incremental search"
        )
        parser.add_argument(
            "filename", nargs="?", help="Optional name of file to be loaded"
        )
        parser.add_argument(
            "-d",
            "--debug",
            action="store_true",
            help="Run in debug mode",
        )
        parser.add_argument(
            "--nohome",
            action="store_true",
            help="Do not load or save the Preferences file",
        )
        parser.add_argument(
            "--version",
            action="store_true",
            help="Display the version of isearch",
        )
        self.args = parser.parse_args(args)

    def logging_init(self) -> None:
        """Set up console logger."""
        if self.args.debug:
            log_level = logging.DEBUG
            console_log_level = logging.DEBUG
            formatter = logging.Formatter(DEBUG_FORMAT, "%H:%M:%S")
        else:
            log_level = logging.INFO
            console_log_level = logging.WARNING
            formatter = logging.Formatter(MESSAGE_FORMAT, "%H:%M:%S")
        logger.setLevel(log_level)
        # Don't add another handler each time app is created during testing
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    def initialize_preferences(self) -> None:
        """Set default preferences and load settings from the prefs file."""
        preferences.set_default(PrefKey.INCREMENTAL_SEARCH, True)
        preferences.set_default(PrefKey.ISEARCH_MATCH_CASE, False)
        preferences.set_default(PrefKey.ISEARCH_REGEX, False)
        preferences.set_default(PrefKey.ROOT_GEOMETRY, "800x400")
        preferences.set_permanent(not self.args.nohome)
        preferences.load()

    def initialize_callbacks(self) -> None:
        """Set callbacks for prefs that need a side effect when changed."""
        preferences.set_callback(
            PrefKey.INCREMENTAL_SEARCH, self.incremental_search_callback
        )

        def match_case_callback(value: bool) -> None:
            self.finder.nocase = not value

        def regex_callback(value: bool) -> None:
            self.finder.regexp = value

        preferences.set_callback(PrefKey.ISEARCH_MATCH_CASE, match_case_callback)
        preferences.set_callback(PrefKey.ISEARCH_REGEX, regex_callback)

    def incremental_search_callback(self, value: bool) -> None:
        """Switch search keys and highlight style when the pref changes.

        Args:
            value: True if incremental search is to be used.
        """
        set_incremental_search(self.maintext.keyboard_handlers, value)
        self.maintext.isearch_highlight_style = value

    def init_menus(self) -> None:
        """Create the Search menu."""
        menubar = tk.Menu(self.root)
        self.root.config(menu=menubar)
        search_menu = tk.Menu(menubar, tearoff=0)
        menubar.add_cascade(label="Search", menu=search_menu)
        for label, accel, backwards in (
            ("Search", "Cmd/Ctrl+s", False),
            ("Search Backwards", "Cmd/Ctrl+r", True),
        ):
            accel_str, _ = process_accel(accel)
            search_menu.add_command(
                label=label,
                accelerator=accel_str,
                command=lambda bw=backwards: self.keymap.search(bw),  # type: ignore[misc]
            )
        search_menu.add_separator()
        for label, key in (
            ("Incremental Search", PrefKey.INCREMENTAL_SEARCH),
            ("Match Case", PrefKey.ISEARCH_MATCH_CASE),
            ("Regex", PrefKey.ISEARCH_REGEX),
        ):
            search_menu.add_checkbutton(label=label, variable=PersistentBoolean(key))

    def set_status(self, message: str) -> None:
        """Display message in status bar."""
        self.statusbar["text"] = message

    def find_next(self, backwards: bool = False) -> None:
        """Find next occurrence of most recent incremental search string,
        wrapping round the text. Select it if found.

        Args:
            backwards: True to search backwards.
        """
        needle = self.isearch.prev_needle
        if not needle:
            self.root.bell()
            return
        start = self.maintext.get_insert_index()
        match = find_next_match(self.finder, self.maintext, needle, start, backwards)
        if match is None:
            self.set_status(f"{needle} (not found)")
            self.root.bell()
            return
        self.maintext.set_insert_index(match.start if backwards else match.end)
        self.maintext.do_select(match)
        self.set_status(needle)

    def load_file_if_given(self) -> None:
        """If filename given on command line, load the file."""
        if not self.args.filename:
            return
        try:
            with open(self.args.filename, "r", encoding="utf-8") as fp:
                self.maintext.set_text(fp.read())
        except OSError as exc:
            logger.error(f"Unable to load {self.args.filename}: {exc}")
            return
        self.root.title(f"isearch - {self.args.filename}")

    def run(self) -> None:
        """Enter the Tk main loop."""
        self.root.mainloop()


def main() -> None:
    """Main application function."""
    ISearchApp().run()


if __name__ == "__main__":
    main()
