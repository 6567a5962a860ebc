"""
Keypad and Key-Wait Latch for CHIP-8 Emulator
=============================================

The CHIP-8 keypad has 16 keys, 0x0-0xF, traditionally laid out as:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

Each key line is a simple pressed/released boolean. The driver is
responsible for translating host keyboard events into key indices
(see keymap.py) and calling key_down()/key_up().

Key-wait state machine (instruction FX0A):

    RUNNING --await_key(X)--> AWAITING_KEY(X)
    AWAITING_KEY(X) --key press k (0 <= k <= 0xF)--> RUNNING, VX := k

While awaiting a key the CPU's step() does nothing. Key presses and
releases always update the key lines, whatever the state; the wait
mechanism only observes presses.
"""

import logging
from enum import Enum, auto
from typing import List, Optional

from .constants import MAX_KEY, NUM_KEYS

logger = logging.getLogger(__name__)


class KeyWaitState(Enum):
    """Execution state as seen by the key-wait latch."""
    RUNNING = auto()       # Instructions execute normally
    AWAITING_KEY = auto()  # step() is a no-op until a key is pressed


class Keypad:
    """
    16-key input matrix with the FX0A wait latch.

    Example:
        >>> kp = Keypad()
        >>> kp.await_key(3)
        >>> kp.waiting
        True
        >>> kp.key_down(0xA)
        True
        >>> kp.notify_key_press(0xA)
        3
        >>> kp.waiting
        False
    """

    def __init__(self):
        self._keys = [False] * NUM_KEYS
        self._state = KeyWaitState.RUNNING
        self._target_register = 0

    # =========================================================================
    # Key Lines
    # =========================================================================

    @staticmethod
    def is_valid_key(index: int) -> bool:
        """Check that index names one of the 16 keys."""
        return 0 <= index <= MAX_KEY

    def key_down(self, index: int) -> bool:
        """
        Press a key.

        Args:
            index: Key index 0x0-0xF

        Returns:
            True if the key line was updated, False for an invalid index
        """
        if not self.is_valid_key(index):
            logger.warning(f"Ignoring press of invalid key index {index}")
            return False
        self._keys[index] = True
        return True

    def key_up(self, index: int) -> bool:
        """
        Release a key.

        Args:
            index: Key index 0x0-0xF

        Returns:
            True if the key line was updated, False for an invalid index
        """
        if not self.is_valid_key(index):
            logger.warning(f"Ignoring release of invalid key index {index}")
            return False
        self._keys[index] = False
        return True

    def is_pressed(self, index: int) -> bool:
        """Check if a key is currently held down."""
        return self.is_valid_key(index) and self._keys[index]

    def pressed_keys(self) -> List[int]:
        """Indices of all keys currently held down."""
        return [i for i, down in enumerate(self._keys) if down]

    def clear(self) -> None:
        """Release all keys."""
        self._keys = [False] * NUM_KEYS

    # =========================================================================
    # Key-Wait Latch
    # =========================================================================

    @property
    def state(self) -> KeyWaitState:
        """Current latch state."""
        return self._state

    @property
    def waiting(self) -> bool:
        """True while execution is suspended awaiting a key."""
        return self._state == KeyWaitState.AWAITING_KEY

    @property
    def target_register(self) -> int:
        """Register that will receive the next key (meaningful while waiting)."""
        return self._target_register

    def await_key(self, register: int) -> None:
        """
        Suspend execution until a key is pressed.

        Args:
            register: Index of the register that receives the key
        """
        self._target_register = register & 0xF
        self._state = KeyWaitState.AWAITING_KEY

    def notify_key_press(self, index: int) -> Optional[int]:
        """
        Offer a key press to the wait latch.

        Args:
            index: Key index that was pressed

        Returns:
            The target register if the press ended a wait, None otherwise
        """
        if self._state != KeyWaitState.AWAITING_KEY or not self.is_valid_key(index):
            return None
        self._state = KeyWaitState.RUNNING
        return self._target_register

    def reset(self) -> None:
        """Release all keys and leave the wait state."""
        self.clear()
        self._state = KeyWaitState.RUNNING
        self._target_register = 0
