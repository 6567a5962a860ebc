"""
Host Keyboard Layout for CHIP-8 Emulator
========================================

Translates host key names into CHIP-8 key indices. The default layout
puts the 4x4 hex keypad on the left-hand block of a QWERTY keyboard:

    Host keys          CHIP-8 keys
    1 2 3 4            1 2 3 C
    Q W E R     ->     4 5 6 D
    A S D F            7 8 9 E
    Z X C V            A 0 B F

Key names are matched case-insensitively.
"""

from typing import Dict, Mapping, Optional, Union

from ..errors import ConfigurationError
from .constants import MAX_KEY

DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


def resolve_key(key: Union[str, int], keymap: Optional[Mapping[str, int]] = None) -> Optional[int]:
    """
    Translate a host key into a CHIP-8 key index.

    Args:
        key: Host key name, or a key index which passes through unchanged
        keymap: Name to index table (DEFAULT_KEYMAP if None)

    Returns:
        Key index 0x0-0xF, or None if the key is not mapped

    Example:
        >>> resolve_key("q")
        4
        >>> resolve_key(0xB)
        11
        >>> resolve_key("P") is None
        True
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if 0 <= key <= MAX_KEY else None

    table = DEFAULT_KEYMAP if keymap is None else keymap
    key_upper = key.upper()
    for name, index in table.items():
        if name.upper() == key_upper:
            return index
    return None


def validate_keymap(keymap: Mapping[str, int]) -> None:
    """
    Check that every entry targets a real key.

    Raises:
        ConfigurationError: If a name is empty or an index is outside 0x0-0xF
    """
    for name, index in keymap.items():
        if not name:
            raise ConfigurationError("Keymap contains an empty key name")
        if not isinstance(index, int) or not 0 <= index <= MAX_KEY:
            raise ConfigurationError(
                f"Keymap entry {name!r} targets invalid key index {index!r}"
            )
