"""Exceptions raised by vanity_eth."""


class VanityError(Exception):
    """Base class for all vanity_eth errors."""


class InvalidPrefix(VanityError, ValueError):
    """Prefix can never match an address."""


class InvalidCharacter(InvalidPrefix):
    """Prefix contains a character with no hex equivalent."""

    def __init__(self, character: str, reason: str = "has no hex equivalent"):
        self.character = character
        super().__init__(f"Prefix contains an irreplaceable character: {character!r} ({reason})")


class DecryptionError(VanityError, ValueError):
    """Ciphertext is malformed or was encrypted with another key."""


class GenerationFailure(VanityError, RuntimeError):
    """The keypair generation primitive failed inside a worker."""
