#!/usr/bin/env python3

"""
Keypad State

Holds the 16-key hexadecimal keypad in two forms: whether each key is
currently held, and whether it has been released since the host last cleared
the release signals.

The host (via an input plugin) is the only writer.  The CPU only ever reads
from here, so a key wait never consumes or alters a key event itself.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_KEYS


class KeypadError(Exception):
    pass


class Keypad:
    def __init__(self):
        self.held = [False] * NUM_KEYS
        self.released = [False] * NUM_KEYS

    def _check_key(self, key):
        if not 0 <= key < NUM_KEYS:
            raise KeypadError("Key 0x{:x} is not on the keypad".format(key))

    def set_held(self, key, held=True):
        self._check_key(key)
        self.held[key] = bool(held)

    def set_released(self, key, released=True):
        self._check_key(key)
        self.released[key] = bool(released)

    def is_key_down(self, key):
        # Programs can ask about any register value, so anything off the keypad is simply not held
        if not 0 <= key < NUM_KEYS:
            return False

        return self.held[key]

    def get_released(self):
        for key in range(NUM_KEYS):
            if self.released[key]:
                return key

        return None

    def clear_released(self):
        for key in range(NUM_KEYS):
            self.released[key] = False

    def clear(self):
        for key in range(NUM_KEYS):
            self.held[key] = False
            self.released[key] = False
