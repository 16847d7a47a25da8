"""Handle preferences"""

import copy
from enum import StrEnum, auto
import json
import logging
import os
import tkinter as tk
from typing import Any, Callable, Optional

from isearch.utilities import is_x11, is_windows, is_test, load_dict_from_json

logger = logging.getLogger(__package__)


class PrefKey(StrEnum):
    """Enum class to store preferences keys."""

    INCREMENTAL_SEARCH = auto()
    ISEARCH_MATCH_CASE = auto()
    ISEARCH_REGEX = auto()
    ROOT_GEOMETRY = auto()


class Preferences:
    """Handle setting/getting/saving/loading/defaulting preferences.

    Call `set_default` to define each preference, and optionally
    `set_callback`, e.g. if loading or setting a pref requires a UI change.
    Once UI is initially ready, call `run_callbacks` to deal with all
    required side effects from loading the prefs file.

    Attributes:
        dict: dictionary of values for prefs.
        defaults: dictionary of values for defaults.
        callbacks: dictionary of callbacks - called after all prefs have been
          loaded and UI is ready, and each time the pref is changed.
        persistent_vars: dictionary of Persistent variables, set whenever
          the pref is set.
        prefsdir: directory containing user prefs file
    """

    def __init__(self) -> None:
        """Initialize preferences class."""
        self.dict: dict[PrefKey, Any] = {}
        self.defaults: dict[PrefKey, Any] = {}
        self.callbacks: dict[PrefKey, Callable[[Any], None]] = {}
        self.persistent_vars: dict[PrefKey, list[tk.Variable]] = {}
        self.permanent = False
        self.prefsdir = ""
        self.prefsfile = ""

    def get(self, key: PrefKey) -> Any:
        """Get preference value using key.

        Args:
            key: Name of preference.

        Returns:
            Preferences value; default for ``key`` if no preference set;
            ``None`` if no default for ``key``.
        """
        return copy.deepcopy(self.dict.get(key, self.defaults.get(key)))

    def set(self, key: PrefKey, value: Any) -> None:
        """Set preference value and save to file if value has changed.

        If key has an associated callback, call it.

        Args:
            key: Name of preference.
            value: Value for preference.
        """
        if self.get(key) == value:
            return
        self.dict[key] = copy.deepcopy(value)
        self.save()
        if key in self.callbacks:
            self.callbacks[key](value)
        for var in self.persistent_vars.get(key, []):
            var.set(value)

    def set_default(self, key: PrefKey, default: Any) -> None:
        """Set default preference value.

        Args:
            key: Name of preference.
            default: Default value for preference.
        """
        self.defaults[key] = default

    def set_callback(self, key: PrefKey, callback: Callable[[Any], None]) -> None:
        """Add a callback for preference. Callback will be run when all
          prefs are loaded and UI is ready, and whenever the pref changes.

        Args:
            key: Name of preference.
            callback: Function to call if side effect required.
        """
        self.callbacks[key] = callback

    def link_persistent_var(self, key: PrefKey, var: tk.Variable) -> None:
        """Link a persistent variable to a preference. Variable will be set
        whenever the preference gets set.

        Args:
            key: Name of preference.
            var: Persistent variable to link to preference.
        """
        self.persistent_vars.setdefault(key, []).append(var)

    def set_permanent(self, permanent: bool) -> None:
        """Set whether prefs should be loaded from and saved to Prefs file.

        Args:
            permanent: True if Prefs file should be used.
        """
        self.permanent = permanent

    def save(self) -> None:
        """Save preferences dictionary to JSON file."""
        if not self.permanent:
            return
        try:
            os.makedirs(self.prefsdir, exist_ok=True)
        except OSError:
            logger.error(f"Unable to create {self.prefsdir}")
            return
        try:
            with open(self.prefsfile, "w", encoding="utf-8") as fp:
                json.dump(self.dict, fp, indent=2, ensure_ascii=False)
        except OSError:
            logger.error(f"Unable to save preferences to {self.prefsfile}")

    def load(self, prefs_basefile: Optional[str] = None) -> None:
        """Load dictionary from JSON file, and use PrefKeys
        to store values in preferences dictionary."""
        if is_x11():
            self.prefsdir = os.path.join(os.path.expanduser("~"), ".isearchprefs")
        elif is_windows():
            self.prefsdir = os.path.join(os.path.expanduser("~"), "ISearchPrefs")
        else:
            self.prefsdir = os.path.join(
                os.path.expanduser("~"), "Documents", "ISearchPrefs"
            )
        # If testing, use a test prefs file so tests and normal running do not interact
        if is_test():
            prefs_name = "ISearchPrefs_test.json"
        elif prefs_basefile is None:
            prefs_name = "ISearchPrefs.json"
        else:
            prefs_name = f"{prefs_basefile}.json"
        self.prefsfile = os.path.join(self.prefsdir, prefs_name)

        if not self.permanent:
            return

        if loaded_dict := load_dict_from_json(self.prefsfile):
            for key, value in loaded_dict.items():
                try:
                    self.dict[PrefKey(key)] = value
                except ValueError:
                    logger.debug(f"'{key}' is not a valid PrefKey - ignored")

    def run_callbacks(self) -> None:
        """Run all defined callbacks, passing value as argument.

        Should be called after prefs are loaded and UI is ready"""
        for key, callback in self.callbacks.items():
            callback(self.get(key))


class PersistentBoolean(tk.BooleanVar):
    """Tk boolean variable whose value is stored in user prefs file.

    Note that, like all prefs, the default value must be set before use.
    """

    def __init__(self, pref_key: PrefKey) -> None:
        """Initialize persistent boolean.

        Args:
            pref_key: Preferences key associated with the variable.
        """
        super().__init__(value=preferences.get(pref_key))
        self.pref_key = pref_key
        self.trace_add("write", lambda *_args: preferences.set(pref_key, self.get()))
        preferences.link_persistent_var(pref_key, self)


preferences = Preferences()
