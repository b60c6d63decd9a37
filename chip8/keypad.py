"""Hex keypad input.

The keypad remembers a single key: the most recent press that no opcode has
consumed yet. A new press replaces it.
"""

import logging
from typing import Optional

from .constants import NUM_KEYS, KEY_BINDINGS, KEYBOARD_MAP

logger = logging.getLogger(__name__)


class Chip8Keypad:

    def __init__(self):
        self.last_pressed: Optional[int] = None

    def press(self, key_code: int):
        """Record key_code (0x0-0xF) as the outstanding key press"""
        if not 0 <= key_code < NUM_KEYS:
            raise ValueError(f"Key code must be 0x0-0xF, got {key_code!r}")
        self.last_pressed = key_code
        logger.debug("Key %X pressed", key_code)

    def take(self) -> Optional[int]:
        """Return the outstanding key press and forget it"""
        key, self.last_pressed = self.last_pressed, None
        return key

    def was_pressed(self, key_code: int) -> bool:
        return self.last_pressed is not None and self.last_pressed == key_code

    def any_pressed(self) -> bool:
        return self.last_pressed is not None

    def clear(self):
        self.last_pressed = None

    @staticmethod
    def key_for_host(host_key: str) -> Optional[int]:
        """CHIP-8 key bound to a host key name, if any"""
        return KEYBOARD_MAP.get(host_key.lower())

    @staticmethod
    def host_key_for(key_code: int) -> str:
        return KEY_BINDINGS[key_code]

    def press_host_key(self, host_key: str) -> bool:
        """Press the CHIP-8 key bound to host_key; False if it is unbound"""
        key_code = self.key_for_host(host_key)
        if key_code is None:
            return False
        self.press(key_code)
        return True
