"""
Maps a memorable word onto the address alphabet so it can be used as a
vanity prefix, e.g. "cafe" stays "cafe" and "Bad" becomes "8ad".
"""

import logging

from .errors import InvalidCharacter

logger = logging.getLogger(__name__)

# Lowercase letters that look like nothing in [0-9a-f]
UNREPLACEABLE_CHARS = frozenset("kmnpuvwxy")

# Deliberately asymmetric: 'A' -> 4 while 'a' stays 'a'
SUBSTITUTIONS = {
    "A": "4",
    "B": "8",
    "D": "0",
    "E": "3",
    "a": "a",
    "b": "b",
    "c": "c",
    "d": "d",
    "e": "e",
    "f": "f",
    "g": "9",
    "h": "4",
    "i": "1",
    "j": "7",
    "l": "7",
    "o": "0",
    "q": "9",
    "r": "2",
    "s": "5",
    "t": "7",
    "z": "2",
}

HEX_DIGITS = frozenset("0123456789abcdef")


def _substitute(ch: str) -> str:
    if ch in SUBSTITUTIONS:
        return SUBSTITUTIONS[ch]
    if ch in HEX_DIGITS:
        return ch
    # 'C' and 'F' are plain hex; addresses are compared lowercase
    if ch in "CF":
        return ch.lower()
    raise InvalidCharacter(ch)


def canonicalize(text: str) -> str:
    """
    Turn an arbitrary prefix into a lowercase hex prefix of the same length.
    Raises InvalidCharacter for reserved characters (k, m, n, p, u, v, w, x, y)
    and for anything else that cannot be mapped to a hex digit.
    """
    for ch in text:
        if ch in UNREPLACEABLE_CHARS:
            raise InvalidCharacter(ch, "reserved")
    canonical = "".join(_substitute(ch) for ch in text)
    if canonical != text:
        logger.debug("Prefix %r canonicalized to %r", text, canonical)
    return canonical
