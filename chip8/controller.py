"""Game controller input via pygame joysticks."""

import logging
from typing import Callable, Optional

import pygame

logger = logging.getLogger(__name__)


class Chip8Controller:
    """Maps joystick buttons and the D-pad onto CHIP-8 key presses.

    Polled from the host loop with ``poll()``; every key press goes through
    ``on_key`` (normally ``Chip8Keypad.press``).
    """

    # Controller button mappings for PS5/Atari style
    BUTTON_SQUARE = 0
    BUTTON_CIRCLE = 1
    BUTTON_CROSS = 2
    BUTTON_TRIANGLE = 3
    BUTTON_L1 = 4
    BUTTON_R1 = 5
    BUTTON_L2 = 6
    BUTTON_R2 = 7
    BUTTON_SHARE = 8
    BUTTON_OPTIONS = 9

    # D-Pad (as hat)
    HAT_UP = (0, 1)
    HAT_DOWN = (0, -1)
    HAT_LEFT = (-1, 0)
    HAT_RIGHT = (1, 0)

    BUTTON_TO_KEY = {
        BUTTON_CROSS: 0x5,
        BUTTON_CIRCLE: 0x6,
        BUTTON_SQUARE: 0x4,
        BUTTON_TRIANGLE: 0x1,
        BUTTON_L1: 0x7,
        BUTTON_R1: 0x9,
        BUTTON_L2: 0xA,
        BUTTON_R2: 0xB,
    }

    # D-pad to CHIP-8 keys (2=up, 8=down, 4=left, 6=right)
    HAT_TO_KEY = {
        HAT_UP: 0x2,
        HAT_DOWN: 0x8,
        HAT_LEFT: 0x4,
        HAT_RIGHT: 0x6,
    }

    def __init__(self, on_key: Callable[[int], None]):
        self.on_key = on_key
        self.joystick = None
        self.connected = False
        self.connection_type = "None"

        # Special action callbacks
        self.on_reset: Optional[Callable[[], None]] = None
        self.on_pause_toggle: Optional[Callable[[], None]] = None

    def start(self):
        """Initialise pygame's joystick subsystem"""
        pygame.init()
        pygame.joystick.init()
        logger.debug("Controller support started")

    def stop(self):
        if self.joystick is not None:
            self.joystick.quit()
        self.joystick = None
        self.connected = False
        pygame.joystick.quit()

    def poll(self):
        """Check the connection and dispatch pending joystick events"""
        self._check_connection()
        if not self.connected:
            return
        for event in pygame.event.get((pygame.JOYBUTTONDOWN, pygame.JOYHATMOTION)):
            if event.type == pygame.JOYBUTTONDOWN:
                self.handle_button(event.button)
            else:
                self.handle_hat(event.value)

    def _check_connection(self):
        """Check for controller connection/disconnection"""
        pygame.event.pump()
        joystick_count = pygame.joystick.get_count()

        if joystick_count > 0 and not self.connected:
            # Connect to first available controller
            self.joystick = pygame.joystick.Joystick(0)
            self.joystick.init()
            self.connected = True

            # Determine connection type (heuristic)
            name = self.joystick.get_name().lower()
            if "wireless" in name or "bluetooth" in name or "dualsense" in name:
                self.connection_type = "Bluetooth"
            else:
                self.connection_type = "USB"
            logger.info("Controller connected: %s (%s)", self.joystick.get_name(), self.connection_type)

        elif joystick_count == 0 and self.connected:
            self.connected = False
            self.connection_type = "None"
            self.joystick = None
            logger.info("Controller disconnected")

    def handle_button(self, button: int):
        """Handle button press"""
        if button == self.BUTTON_OPTIONS:
            if self.on_pause_toggle:
                self.on_pause_toggle()
        elif button == self.BUTTON_SHARE:
            if self.on_reset:
                self.on_reset()
        elif button in self.BUTTON_TO_KEY:
            self.on_key(self.BUTTON_TO_KEY[button])

    def handle_hat(self, value: tuple):
        """Handle D-pad input; releases are ignored"""
        key = self.HAT_TO_KEY.get(tuple(value))
        if key is not None:
            self.on_key(key)
